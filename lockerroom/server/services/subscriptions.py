"""
Subscription Service.

Bookkeeping for school subscriptions: renewals, enrollment-limit changes
and billing-frequency changes. Every change appends a
``SchoolPaymentRecord`` so the history can be audited and reported on.

Expiry arithmetic:
- the base date is the current expiry when it is still in the future, otherwise now
- ``monthly`` adds one calendar month, clamped to the end of the target month
- ``annual`` adds one calendar year (Feb 29 becomes Feb 28)
- ``one-time`` never expires
"""

from __future__ import annotations

import calendar
from datetime import datetime, timedelta
from decimal import Decimal, InvalidOperation
from typing import Dict, List, Optional

from lockerroom.core.database.base import utc_now
from lockerroom.core.database.entities.schools import School, SchoolPaymentRecord
from lockerroom.core.database.entities.users import User
from lockerroom.core.database.repositories import SqlRepoBundle
from lockerroom.core.errors import DomainValidationError, NotFoundError
from lockerroom.core.logging_config import get_logger
from lockerroom.core.models.domain.enums import NotificationType, PaymentFrequency, PaymentType
from lockerroom.core.models.domain.roles import Role
from lockerroom.core.monitoring import log_domain_event
from lockerroom.server.core.config import settings
from lockerroom.server.services import notifications
from lockerroom.server.services.auth import ensure_roles

logger = get_logger(__name__)


def validate_frequency(frequency: str) -> PaymentFrequency:
    try:
        return PaymentFrequency(frequency)
    except ValueError as e:
        allowed = ", ".join(f.value for f in PaymentFrequency)
        raise DomainValidationError(f"Payment frequency must be one of: {allowed}") from e


def _to_amount(amount: Decimal | float | int | str) -> Decimal:
    try:
        return Decimal(str(amount)).quantize(Decimal("0.01"))
    except InvalidOperation as e:
        raise DomainValidationError("Payment amount must be a number") from e


def add_months(value: datetime, months: int) -> datetime:
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def compute_expiry(
    current_expiry: Optional[datetime], frequency: PaymentFrequency | str, now: Optional[datetime] = None
) -> Optional[datetime]:
    """
    Compute the new subscription expiry after a payment.

    Args:
        current_expiry: The school's current expiry, if any.
        frequency: Billing cadence of the payment.
        now: Reference time (defaults to current UTC time).

    Returns:
        The new expiry, or None for one-time payments.
    """
    frequency = PaymentFrequency(frequency)
    if frequency is PaymentFrequency.one_time:
        return None
    now = now or utc_now()
    base = current_expiry if current_expiry is not None and current_expiry > now else now
    if frequency is PaymentFrequency.monthly:
        return add_months(base, 1)
    return add_months(base, 12)


async def _get_school(repos: SqlRepoBundle, school_id: str) -> School:
    school = await repos.schools.get_by_id(school_id)
    if school is None:
        raise NotFoundError("School", school_id)
    return school


async def renew_subscription(
    repos: SqlRepoBundle,
    admin: User,
    school_id: str,
    *,
    amount: Decimal | float | str,
    frequency: str,
    notes: Optional[str] = None,
    now: Optional[datetime] = None,
) -> School:
    """
    Record a subscription payment and extend the school's expiry.

    The first payment of a school is recorded as ``initial``, later ones as ``renewal``.

    Raises:
        DomainValidationError: If the amount is not positive or the frequency unknown.
    """
    ensure_roles(admin, Role.system_admin, Role.finance)
    school = await _get_school(repos, school_id)
    value = _to_amount(amount)
    if value <= 0:
        raise DomainValidationError("Payment amount must be greater than zero")
    cadence = validate_frequency(frequency)
    now = now or utc_now()

    is_first = school.last_payment_date is None and not await repos.payment_records.has_records(school.id)
    school.payment_amount = value
    school.payment_frequency = cadence.value
    school.subscription_expires_at = compute_expiry(school.subscription_expires_at, cadence, now)
    school.last_payment_date = now
    school.is_active = True
    repos.session.add(school)

    record = SchoolPaymentRecord(
        school_id=school.id,
        payment_amount=value,
        payment_frequency=cadence.value,
        payment_type=(PaymentType.initial if is_first else PaymentType.renewal).value,
        notes=notes,
        recorded_by=admin.id,
        recorded_at=now,
        subscription_expires_at=school.subscription_expires_at,
    )
    await repos.payment_records.create(record)
    await repos.session.refresh(school)
    log_domain_event(
        "school.subscription_renewed",
        {"school_id": school.id, "amount": str(value), "frequency": cadence.value, "type": record.payment_type},
    )
    return school


async def change_student_limit(
    repos: SqlRepoBundle,
    admin: User,
    school_id: str,
    *,
    new_limit: int,
    amount: Decimal | float | str = 0,
    notes: Optional[str] = None,
) -> School:
    """
    Change a school's enrollment limit.

    Raises:
        DomainValidationError: If the new limit is below the number of enrolled students.
    """
    ensure_roles(admin, Role.system_admin)
    school = await _get_school(repos, school_id)
    if new_limit < 1:
        raise DomainValidationError("Student limit must be at least 1")
    enrolled = await repos.students.count_for_school(school.id)
    if new_limit < enrolled:
        raise DomainValidationError(
            f"Student limit cannot be lower than the {enrolled} students currently enrolled"
        )
    before = school.max_students
    if new_limit == before:
        return school

    school.max_students = new_limit
    repos.session.add(school)
    payment_type = PaymentType.student_limit_increase if new_limit > before else PaymentType.student_limit_decrease
    await repos.payment_records.create(
        SchoolPaymentRecord(
            school_id=school.id,
            payment_amount=_to_amount(amount),
            payment_frequency=school.payment_frequency,
            payment_type=payment_type.value,
            student_limit_before=before,
            student_limit_after=new_limit,
            notes=notes,
            recorded_by=admin.id,
            subscription_expires_at=school.subscription_expires_at,
        )
    )
    await repos.session.refresh(school)
    logger.info(f"School {school.id} student limit {before} -> {new_limit}")
    return school


async def change_frequency(
    repos: SqlRepoBundle,
    admin: User,
    school_id: str,
    *,
    frequency: str,
    amount: Optional[Decimal | float | str] = None,
    notes: Optional[str] = None,
) -> School:
    ensure_roles(admin, Role.system_admin)
    school = await _get_school(repos, school_id)
    cadence = validate_frequency(frequency)
    old = school.payment_frequency
    if cadence.value == old and amount is None:
        return school

    school.payment_frequency = cadence.value
    if amount is not None:
        school.payment_amount = _to_amount(amount)
    if cadence is PaymentFrequency.one_time:
        school.subscription_expires_at = None
    repos.session.add(school)
    await repos.payment_records.create(
        SchoolPaymentRecord(
            school_id=school.id,
            payment_amount=school.payment_amount,
            payment_frequency=cadence.value,
            payment_type=PaymentType.frequency_change.value,
            old_frequency=old,
            new_frequency=cadence.value,
            notes=notes,
            recorded_by=admin.id,
            subscription_expires_at=school.subscription_expires_at,
        )
    )
    await repos.session.refresh(school)
    logger.info(f"School {school.id} billing frequency {old} -> {cadence.value}")
    return school


async def list_payment_records(
    repos: SqlRepoBundle,
    user: User,
    *,
    school_id: Optional[str] = None,
    payment_type: Optional[str] = None,
    limit: Optional[int] = None,
    offset: Optional[int] = None,
) -> List[SchoolPaymentRecord]:
    ensure_roles(user, Role.system_admin, Role.finance)
    if payment_type is not None:
        try:
            PaymentType(payment_type)
        except ValueError as e:
            raise DomainValidationError(f"Unknown payment type '{payment_type}'") from e
    return await repos.payment_records.list_records(
        school_id=school_id, payment_type=payment_type, limit=limit, offset=offset
    )


async def expiring_subscriptions(
    repos: SqlRepoBundle, within_days: Optional[int] = None, now: Optional[datetime] = None
) -> List[School]:
    """Active schools whose subscription ends within ``within_days`` (default from settings)."""
    now = now or utc_now()
    days = settings.payments.expiry_warning_days if within_days is None else within_days
    return await repos.schools.list_expiring(now, now + timedelta(days=days))


async def notify_expiring_subscriptions(
    repos: SqlRepoBundle, within_days: Optional[int] = None, now: Optional[datetime] = None
) -> Dict[str, int]:
    """
    Warn school admins whose subscription is about to end.

    Returns:
        ``{"schools": n, "notifications": m}``
    """
    now = now or utc_now()
    schools = await expiring_subscriptions(repos, within_days, now)
    sent = 0
    for school in schools:
        days_left = max(0, (school.subscription_expires_at - now).days)
        created = await notifications.notify_roles(
            repos,
            [Role.school_admin],
            NotificationType.subscription_expiring,
            "Subscription expiring soon",
            f"The subscription for {school.name} expires in {days_left} day(s)",
            school_id=school.id,
            entity_type="school",
            entity_id=school.id,
            metadata={"days_left": days_left, "expires_at": school.subscription_expires_at.isoformat()},
        )
        sent += len(created)
    logger.info(f"Subscription expiry check: {len(schools)} schools, {sent} notifications")
    return {"schools": len(schools), "notifications": sent}
