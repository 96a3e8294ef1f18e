"""
XEN Watch Service.

Paid scout reviews of student highlight videos. A submission walks the
lifecycle defined in :mod:`lockerroom.core.models.domain.submission_status`;
every status change goes through :func:`_transition`, which rejects moves
the lifecycle does not allow.

Review policy:
- a scout admin assigns one ``xen_scout`` to a paid submission
- the assigned scout and scout admins may leave reviews (one per scout, upserted)
- a submitted review from the assigned scout marks the submission ``reviewed``
- a scout admin consolidates submitted reviews into the final feedback
"""

from __future__ import annotations

import math
import uuid
from typing import Any, Dict, List, Optional

from lockerroom.core.database.base import utc_now
from lockerroom.core.database.entities.users import User
from lockerroom.core.database.entities.xen_watch import (
    PaymentTransaction,
    XenWatchFeedback,
    XenWatchReview,
    XenWatchSubmission,
)
from lockerroom.core.database.repositories import SqlRepoBundle
from lockerroom.core.errors import ConflictError, DomainValidationError, NotFoundError, PermissionDeniedError
from lockerroom.core.logging_config import get_logger
from lockerroom.core.models.domain.enums import NotificationType, TransactionStatus
from lockerroom.core.models.domain.roles import Role, is_scout_role, is_system_admin
from lockerroom.core.models.domain.submission_status import (
    REVIEWABLE_STATUSES,
    SubmissionStatus,
    ensure_transition,
    status_display,
)
from lockerroom.core.models.io.xen_watch import SubmissionCreate
from lockerroom.core.monitoring import log_domain_event
from lockerroom.server.core.config import settings
from lockerroom.server.services import notifications, system_settings
from lockerroom.server.services.auth import ensure_roles

logger = get_logger(__name__)

DEFAULT_FEEDBACK_MESSAGE = "No detailed feedback provided by scouts."
FEEDBACK_SEPARATOR = " | "
MOCK_PROVIDER = "mock"
QUEUE_STATUSES = (SubmissionStatus.paid, SubmissionStatus.assigned, SubmissionStatus.in_review)
ADMIN_ROLES = (Role.scout_admin, Role.finance, Role.support)


def serialize_submission(submission: XenWatchSubmission) -> Dict[str, Any]:
    data = submission.model_dump()
    data["display"] = status_display(submission.status)._asdict()
    return data


def consolidate_reviews(reviews: List[XenWatchReview]) -> tuple[int, str]:
    """
    Combine submitted reviews into a final rating and message.

    The rating is the mean rounded half up; the message joins the non-empty
    comments with ``" | "``.

    Raises:
        DomainValidationError: If no review was submitted.
    """
    submitted = [r for r in reviews if r.is_submitted]
    if not submitted:
        raise DomainValidationError("At least one submitted review is required")
    mean = sum(r.rating for r in submitted) / len(submitted)
    final_rating = math.floor(mean + 0.5)
    comments = [r.comment.strip() for r in submitted if r.comment and r.comment.strip()]
    return final_rating, FEEDBACK_SEPARATOR.join(comments) or DEFAULT_FEEDBACK_MESSAGE


def _transition(submission: XenWatchSubmission, target: SubmissionStatus, actor: User) -> None:
    current = submission.status
    submission.status = ensure_transition(current, target).value
    log_domain_event(
        "xen_watch.transition",
        {"submission_id": submission.id, "from": current, "to": submission.status, "actor_id": actor.id},
    )


async def _get(repos: SqlRepoBundle, submission_id: str) -> XenWatchSubmission:
    submission = await repos.submissions.get_by_id(submission_id)
    if submission is None:
        raise NotFoundError("Submission", submission_id)
    return submission


def _is_reviewer_admin(user: User) -> bool:
    return is_system_admin(user.role) or user.role == Role.scout_admin.value


async def create_submission(repos: SqlRepoBundle, student: User, data: SubmissionCreate) -> XenWatchSubmission:
    """
    Open a review request in ``pending_payment``.

    The price comes from the ``xen_watch_price_cents`` system setting,
    falling back to the configured default.
    """
    ensure_roles(student, Role.student)
    if data.post_id is not None:
        post = await repos.posts.get_by_id(data.post_id)
        if post is None:
            raise NotFoundError("Post", data.post_id)
        if post.author_id != student.id:
            raise PermissionDeniedError("You can only submit your own posts")

    price = await system_settings.get_int(
        repos, system_settings.XEN_WATCH_PRICE_KEY, settings.payments.xen_watch_price_cents
    )
    submission = await repos.submissions.create(
        XenWatchSubmission(
            student_id=student.id,
            school_id=student.school_id,
            post_id=data.post_id,
            media_url=data.media_url.strip(),
            caption=data.caption,
            amount_cents=price,
            currency=settings.payments.currency,
            status=SubmissionStatus.pending_payment.value,
        )
    )
    logger.info(f"XEN Watch submission {submission.id} created by {student.id} ({price} cents)")
    return submission


async def pay(repos: SqlRepoBundle, student: User, submission_id: str) -> XenWatchSubmission:
    """
    Pay for a submission through the mock provider.

    Records a completed payment transaction, moves the submission to ``paid``
    and notifies the student, the scouts and finance.
    """
    submission = await _get(repos, submission_id)
    if submission.student_id != student.id:
        raise PermissionDeniedError("You can only pay for your own submissions")
    _transition(submission, SubmissionStatus.paid, student)

    transaction = PaymentTransaction(
        user_id=student.id,
        type="xen_watch",
        amount_cents=submission.amount_cents,
        currency=submission.currency,
        status=TransactionStatus.completed.value,
        provider=MOCK_PROVIDER,
        provider_transaction_id=f"{MOCK_PROVIDER}_{uuid.uuid4().hex}",
        meta={"submission_id": submission.id},
    )
    repos.session.add(transaction)
    submission.payment_provider = MOCK_PROVIDER
    submission.payment_intent_id = transaction.provider_transaction_id
    submission.paid_at = utc_now()
    submission = await repos.submissions.update(submission)

    amount = f"{submission.amount_cents / 100:.2f} {submission.currency}"
    await notifications.notify(
        repos,
        student.id,
        NotificationType.submission_received,
        "Submission received",
        "Your video was received and will be reviewed by our scouts",
        entity_type="xen_watch_submission",
        entity_id=submission.id,
    )
    await notifications.notify_roles(
        repos,
        [Role.xen_scout, Role.scout_admin],
        NotificationType.submission_created,
        "New XEN Watch submission",
        f"{student.name} submitted a video for review",
        entity_type="xen_watch_submission",
        entity_id=submission.id,
        related_user_id=student.id,
    )
    await notifications.notify_roles(
        repos,
        [Role.finance, Role.system_admin],
        NotificationType.xen_watch_payment,
        "XEN Watch payment",
        f"Payment of {amount} received from {student.name}",
        entity_type="payment_transaction",
        entity_id=transaction.id,
        related_user_id=student.id,
        metadata={"amount_cents": submission.amount_cents, "currency": submission.currency},
    )
    log_domain_event("xen_watch.payment", {"submission_id": submission.id, "amount_cents": submission.amount_cents})
    return submission


async def assign(repos: SqlRepoBundle, admin: User, submission_id: str, scout_id: str) -> XenWatchSubmission:
    ensure_roles(admin, Role.scout_admin)
    submission = await _get(repos, submission_id)
    scout = await repos.users.get_by_id(scout_id)
    if scout is None:
        raise NotFoundError("Scout", scout_id)
    if not is_scout_role(scout.role) or scout.is_frozen:
        raise DomainValidationError("Submissions can only be assigned to active scouts")
    _transition(submission, SubmissionStatus.assigned, admin)
    submission.selected_scout_id = scout.id
    submission = await repos.submissions.update(submission)
    await notifications.notify(
        repos,
        scout.id,
        NotificationType.submission_created,
        "Submission assigned",
        "A XEN Watch submission was assigned to you for review",
        entity_type="xen_watch_submission",
        entity_id=submission.id,
        related_user_id=admin.id,
    )
    return submission


async def start_review(repos: SqlRepoBundle, scout: User, submission_id: str) -> XenWatchSubmission:
    submission = await _get(repos, submission_id)
    if submission.selected_scout_id != scout.id and not _is_reviewer_admin(scout):
        raise PermissionDeniedError("This submission is not assigned to you")
    _transition(submission, SubmissionStatus.in_review, scout)
    return await repos.submissions.update(submission)


async def submit_review(
    repos: SqlRepoBundle,
    scout: User,
    submission_id: str,
    *,
    rating: int,
    comment: Optional[str] = None,
    is_submitted: bool = True,
) -> XenWatchReview:
    """
    Create or update the scout's review of a submission.

    Reviewing an ``assigned`` submission starts the review. A submitted review
    from the assigned scout moves the submission to ``reviewed``.

    Raises:
        DomainValidationError: If the rating is outside 1-5.
        ConflictError: If the submission is not open for review.
    """
    ensure_roles(scout, Role.xen_scout, Role.scout_admin)
    if isinstance(rating, bool) or not isinstance(rating, int) or not 1 <= rating <= 5:
        raise DomainValidationError("Rating must be a whole number between 1 and 5")
    submission = await _get(repos, submission_id)
    if submission.selected_scout_id != scout.id and not _is_reviewer_admin(scout):
        raise PermissionDeniedError("This submission is not assigned to you")
    if SubmissionStatus(submission.status) not in REVIEWABLE_STATUSES:
        raise ConflictError(f"Submission is not open for review (status '{submission.status}')")

    if submission.status == SubmissionStatus.assigned.value:
        _transition(submission, SubmissionStatus.in_review, scout)

    review = await repos.reviews.get_pair(submission.id, scout.id)
    if review is None:
        review = XenWatchReview(submission_id=submission.id, scout_id=scout.id, rating=rating)
    review.rating = rating
    review.comment = comment
    review.is_submitted = is_submitted
    review.updated_at = utc_now()
    repos.session.add(review)

    if is_submitted and submission.selected_scout_id == scout.id:
        _transition(submission, SubmissionStatus.reviewed, scout)
    repos.session.add(submission)
    await repos.session.commit()
    await repos.session.refresh(review)

    if is_submitted:
        await notifications.notify_roles(
            repos,
            [Role.scout_admin],
            NotificationType.review_submitted,
            "Review submitted",
            f"{scout.name} submitted a {rating}-star review",
            entity_type="xen_watch_submission",
            entity_id=submission.id,
            related_user_id=scout.id,
            exclude_user_id=scout.id,
        )
    return review


async def send_feedback(
    repos: SqlRepoBundle, admin: User, submission_id: str, message: Optional[str] = None
) -> XenWatchFeedback:
    """
    Send the consolidated feedback to the student.

    A submission still ``in_review`` is marked ``reviewed`` first.

    Raises:
        DomainValidationError: If no review has been submitted.
        InvalidTransitionError: If the submission cannot receive feedback.
    """
    ensure_roles(admin, Role.scout_admin)
    submission = await _get(repos, submission_id)
    reviews = await repos.reviews.list_for_submission(submission.id, submitted_only=True)
    final_rating, combined = consolidate_reviews(reviews)

    if submission.status == SubmissionStatus.in_review.value:
        _transition(submission, SubmissionStatus.reviewed, admin)
    _transition(submission, SubmissionStatus.feedback_sent, admin)

    feedback = XenWatchFeedback(
        submission_id=submission.id,
        admin_user_id=admin.id,
        final_rating=final_rating,
        message=(message or "").strip() or combined,
    )
    repos.session.add(submission)
    feedback = await repos.feedback.create(feedback)

    await notifications.notify(
        repos,
        submission.student_id,
        NotificationType.submission_feedback_ready,
        "Your feedback is ready",
        f"Scouts rated your video {final_rating}/5",
        entity_type="xen_watch_submission",
        entity_id=submission.id,
        related_user_id=admin.id,
        metadata={"final_rating": final_rating},
    )
    await notifications.notify_many(
        repos,
        [r.scout_id for r in reviews],
        NotificationType.submission_finalized,
        "Submission finalized",
        "Feedback for a submission you reviewed was sent to the student",
        entity_type="xen_watch_submission",
        entity_id=submission.id,
        exclude_user_id=admin.id,
    )
    logger.info(f"Feedback sent for submission {submission.id} (rating {final_rating}, {len(reviews)} reviews)")
    return feedback


async def cancel(repos: SqlRepoBundle, user: User, submission_id: str) -> XenWatchSubmission:
    submission = await _get(repos, submission_id)
    if submission.student_id != user.id and not _is_reviewer_admin(user):
        raise PermissionDeniedError("You cannot cancel this submission")
    _transition(submission, SubmissionStatus.canceled, user)
    return await repos.submissions.update(submission)


async def refund(repos: SqlRepoBundle, admin: User, submission_id: str) -> XenWatchSubmission:
    ensure_roles(admin, Role.finance)
    submission = await _get(repos, submission_id)
    _transition(submission, SubmissionStatus.refunded, admin)
    if submission.payment_intent_id:
        transaction = await repos.transactions.get_by_provider_id(submission.payment_intent_id)
        if transaction is not None:
            transaction.status = TransactionStatus.refunded.value
            repos.session.add(transaction)
    submission = await repos.submissions.update(submission)
    log_domain_event("xen_watch.refund", {"submission_id": submission.id, "amount_cents": submission.amount_cents})
    return submission


async def my_submissions(repos: SqlRepoBundle, student: User) -> List[XenWatchSubmission]:
    return await repos.submissions.list_submissions(student_id=student.id)


async def get_submission(repos: SqlRepoBundle, user: User, submission_id: str) -> Dict[str, Any]:
    """
    Submission with its reviews and feedback, as visible to ``user``.

    Students see their own submissions and the final feedback but not the
    individual scout reviews.
    """
    submission = await _get(repos, submission_id)
    is_owner = submission.student_id == user.id
    is_scout = is_scout_role(user.role)
    is_admin = is_system_admin(user.role) or user.role in {r.value for r in ADMIN_ROLES}
    if not (is_owner or is_scout or is_admin):
        raise NotFoundError("Submission", submission_id)

    reviews = []
    if is_scout or is_admin:
        reviews = await repos.reviews.list_for_submission(submission.id)
    feedback = await repos.feedback.get_by_submission(submission.id)
    return {"submission": serialize_submission(submission), "reviews": reviews, "feedback": feedback}


async def review_queue(repos: SqlRepoBundle, scout: User) -> List[XenWatchSubmission]:
    ensure_roles(scout, Role.xen_scout, Role.scout_admin)
    if _is_reviewer_admin(scout):
        return await repos.submissions.list_submissions(statuses=[s.value for s in QUEUE_STATUSES])
    return await repos.submissions.list_submissions(
        selected_scout_id=scout.id,
        statuses=[s.value for s in REVIEWABLE_STATUSES],
    )


async def admin_list(
    repos: SqlRepoBundle, admin: User, status: Optional[str] = None, limit: Optional[int] = None, offset: Optional[int] = None
) -> List[XenWatchSubmission]:
    ensure_roles(admin, *ADMIN_ROLES)
    statuses = None
    if status is not None:
        try:
            statuses = [SubmissionStatus(status).value]
        except ValueError as e:
            raise DomainValidationError(f"Unknown submission status '{status}'") from e
    return await repos.submissions.list_submissions(statuses=statuses, limit=limit, offset=offset)


async def final_feedback(repos: SqlRepoBundle, student: User, submission_id: str) -> XenWatchFeedback:
    submission = await _get(repos, submission_id)
    if submission.student_id != student.id and not is_system_admin(student.role):
        raise NotFoundError("Submission", submission_id)
    feedback = await repos.feedback.get_by_submission(submission.id)
    if feedback is None:
        raise NotFoundError("Feedback for submission", submission_id)
    return feedback


async def analytics(repos: SqlRepoBundle, admin: User) -> Dict[str, Any]:
    ensure_roles(admin, Role.scout_admin, Role.finance, Role.analyst)
    by_status = {s.value: 0 for s in SubmissionStatus}
    by_status.update(await repos.submissions.count_by_status())
    average = await repos.feedback.average_final_rating()
    return {
        "total_submissions": sum(by_status.values()),
        "by_status": by_status,
        "revenue_cents": await repos.transactions.sum_completed_cents("xen_watch"),
        "average_final_rating": round(average, 2) if average is not None else None,
    }
