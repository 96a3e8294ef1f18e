"""
Evaluation Forms Service.

Scout admins design evaluation form templates out of typed fields and
publish them; scouts fill published forms in about students.

Template lifecycle: ``draft -> active -> archived``. Drafts and active
forms can be edited; replacing the fields of an active form bumps its
``version``. Fields cannot be replaced once submissions reference them.

Responses are keyed by field id and stored JSON-encoded, one row per
field.
"""

from __future__ import annotations

import json
from datetime import date
from typing import Any, Dict, Iterable, List, Optional

from lockerroom.core.database.base import utc_now
from lockerroom.core.database.entities.evaluation_forms import (
    EvaluationFormField,
    EvaluationFormTemplate,
    EvaluationSubmission,
    EvaluationSubmissionResponse,
)
from lockerroom.core.database.entities.users import User
from lockerroom.core.database.repositories import SqlRepoBundle
from lockerroom.core.errors import ConflictError, DomainValidationError, NotFoundError, PermissionDeniedError
from lockerroom.core.logging_config import get_logger
from lockerroom.core.models.domain.enums import EvaluationStatus, FieldType, FormStatus, NotificationType
from lockerroom.core.models.domain.roles import Role, is_system_admin
from lockerroom.core.models.io.evaluation_forms import (
    EvaluationCreate,
    EvaluationUpdate,
    FieldCreate,
    TemplateCreate,
    TemplateUpdate,
)
from lockerroom.server.services import notifications
from lockerroom.server.services.auth import ensure_roles

logger = get_logger(__name__)

CHOICE_TYPES = {FieldType.multiple_choice.value, FieldType.dropdown.value}


# =====================================================================
# Response validation
# =====================================================================


def is_empty_response(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, dict)):
        return len(value) == 0
    return False


def _as_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return None
    return None


def validate_response(field: EvaluationFormField, value: Any) -> None:
    """
    Check a non-empty response against its field type and rules.

    Raises:
        DomainValidationError: If the value does not fit the field.
    """
    rules = field.validation_rules or {}
    label = field.label
    kind = field.field_type

    if kind in (FieldType.short_text.value, FieldType.paragraph.value):
        if not isinstance(value, str):
            raise DomainValidationError(f"'{label}' must be text")
        if "min_length" in rules and len(value.strip()) < int(rules["min_length"]):
            raise DomainValidationError(f"'{label}' must be at least {rules['min_length']} characters")
        if "max_length" in rules and len(value) > int(rules["max_length"]):
            raise DomainValidationError(f"'{label}' must be at most {rules['max_length']} characters")

    elif kind == FieldType.star_rating.value:
        number = _as_number(value)
        if number is None or not number.is_integer() or not 1 <= number <= 5:
            raise DomainValidationError(f"'{label}' must be a rating between 1 and 5")

    elif kind == FieldType.number.value:
        number = _as_number(value)
        if number is None:
            raise DomainValidationError(f"'{label}' must be a number")
        if "min" in rules and number < float(rules["min"]):
            raise DomainValidationError(f"'{label}' must be at least {rules['min']}")
        if "max" in rules and number > float(rules["max"]):
            raise DomainValidationError(f"'{label}' must be at most {rules['max']}")

    elif kind in CHOICE_TYPES:
        if value not in (field.options or []):
            raise DomainValidationError(f"'{label}' must be one of the listed options")

    elif kind == FieldType.multiple_selection.value:
        if not isinstance(value, list) or any(v not in (field.options or []) for v in value):
            raise DomainValidationError(f"'{label}' must be a selection of the listed options")

    elif kind == FieldType.date.value:
        try:
            date.fromisoformat(str(value))
        except ValueError as e:
            raise DomainValidationError(f"'{label}' must be an ISO date (YYYY-MM-DD)") from e


def validate_responses(
    fields: Iterable[EvaluationFormField], responses: Dict[str, Any], enforce_required: bool
) -> Dict[str, Any]:
    """
    Validate responses against a form's fields.

    Unknown field ids are rejected. Empty values are dropped; when
    ``enforce_required`` is set every required field needs a value.

    Returns:
        The non-empty responses keyed by field id.
    """
    by_id = {f.id: f for f in fields}
    unknown = set(responses) - set(by_id)
    if unknown:
        raise DomainValidationError(f"Unknown form fields: {', '.join(sorted(unknown))}")

    cleaned: Dict[str, Any] = {}
    for field_id, field in by_id.items():
        value = responses.get(field_id)
        if is_empty_response(value):
            if enforce_required and field.required:
                raise DomainValidationError(f"'{field.label}' is required")
            continue
        validate_response(field, value)
        cleaned[field_id] = value
    return cleaned


def _validate_field_definition(data: FieldCreate) -> None:
    try:
        kind = FieldType(data.field_type)
    except ValueError as e:
        raise DomainValidationError(f"Unknown field type '{data.field_type}'") from e
    if kind.value in CHOICE_TYPES or kind is FieldType.multiple_selection:
        options = [o for o in (data.options or []) if o and o.strip()]
        if not options:
            raise DomainValidationError(f"'{data.label}' needs at least one option")


# =====================================================================
# Templates
# =====================================================================


def _ensure_form_admin(user: User) -> None:
    ensure_roles(user, Role.scout_admin)


async def _get_template(repos: SqlRepoBundle, template_id: str) -> EvaluationFormTemplate:
    template = await repos.form_templates.get_by_id(template_id)
    if template is None:
        raise NotFoundError("Evaluation form", template_id)
    return template


async def _replace_fields(repos: SqlRepoBundle, template_id: str, fields: List[FieldCreate]) -> None:
    for data in fields:
        _validate_field_definition(data)
    await repos.form_fields.delete_for_template(template_id)
    for index, data in enumerate(fields):
        repos.session.add(
            EvaluationFormField(
                form_template_id=template_id,
                field_type=data.field_type,
                label=data.label.strip(),
                placeholder=data.placeholder,
                help_text=data.help_text,
                required=data.required,
                order_index=data.order_index if data.order_index is not None else index,
                options=data.options,
                validation_rules=data.validation_rules,
            )
        )


async def template_with_fields(repos: SqlRepoBundle, template: EvaluationFormTemplate) -> Dict[str, Any]:
    data = template.model_dump()
    data["fields"] = await repos.form_fields.list_for_template(template.id)
    return data


async def create_template(repos: SqlRepoBundle, admin: User, data: TemplateCreate) -> Dict[str, Any]:
    _ensure_form_admin(admin)
    template = EvaluationFormTemplate(
        name=data.name.strip(), description=data.description, created_by=admin.id, status=FormStatus.draft.value
    )
    repos.session.add(template)
    await repos.session.flush()
    await _replace_fields(repos, template.id, data.fields)
    await repos.session.commit()
    await repos.session.refresh(template)
    logger.info(f"Evaluation form {template.id} created with {len(data.fields)} fields")
    return await template_with_fields(repos, template)


async def update_template(repos: SqlRepoBundle, admin: User, template_id: str, data: TemplateUpdate) -> Dict[str, Any]:
    _ensure_form_admin(admin)
    template = await _get_template(repos, template_id)
    if template.status == FormStatus.archived.value:
        raise ConflictError("Archived forms cannot be edited")

    if data.name is not None:
        template.name = data.name.strip()
    if "description" in data.model_fields_set:
        template.description = data.description
    if data.fields is not None:
        if await repos.evaluations.count_for_template(template.id) > 0:
            raise ConflictError("Fields cannot be replaced once evaluations exist")
        await _replace_fields(repos, template.id, data.fields)
        if template.status == FormStatus.active.value:
            template.version += 1

    template.updated_at = utc_now()
    repos.session.add(template)
    await repos.session.commit()
    await repos.session.refresh(template)
    return await template_with_fields(repos, template)


async def publish_template(repos: SqlRepoBundle, admin: User, template_id: str) -> Dict[str, Any]:
    _ensure_form_admin(admin)
    template = await _get_template(repos, template_id)
    if template.status != FormStatus.draft.value:
        raise ConflictError(f"Only draft forms can be published (status '{template.status}')")
    if not await repos.form_fields.list_for_template(template.id):
        raise DomainValidationError("A form needs at least one field before publishing")

    template.status = FormStatus.active.value
    template.published_at = utc_now()
    template = await repos.form_templates.update(template)
    await notifications.notify_roles(
        repos,
        [Role.xen_scout, Role.scout_admin],
        NotificationType.form_created,
        "New evaluation form",
        f"'{template.name}' is available for evaluations",
        entity_type="evaluation_form",
        entity_id=template.id,
        related_user_id=admin.id,
        exclude_user_id=admin.id,
    )
    return await template_with_fields(repos, template)


async def archive_template(repos: SqlRepoBundle, admin: User, template_id: str) -> Dict[str, Any]:
    _ensure_form_admin(admin)
    template = await _get_template(repos, template_id)
    if template.status != FormStatus.active.value:
        raise ConflictError(f"Only active forms can be archived (status '{template.status}')")
    template.status = FormStatus.archived.value
    template = await repos.form_templates.update(template)
    return await template_with_fields(repos, template)


async def delete_template(repos: SqlRepoBundle, admin: User, template_id: str) -> None:
    _ensure_form_admin(admin)
    template = await _get_template(repos, template_id)
    if await repos.evaluations.count_for_template(template.id) > 0:
        raise ConflictError("Forms with evaluations cannot be deleted; archive it instead")
    await repos.form_fields.delete_for_template(template.id)
    await repos.session.delete(template)
    await repos.session.commit()


async def list_templates(repos: SqlRepoBundle, user: User, status: Optional[str] = None) -> List[Dict[str, Any]]:
    """Admins see every form; scouts only see active ones."""
    ensure_roles(user, Role.xen_scout, Role.scout_admin)
    if user.role == Role.xen_scout.value:
        status = FormStatus.active.value
    elif status is not None:
        try:
            status = FormStatus(status).value
        except ValueError as e:
            raise DomainValidationError(f"Unknown form status '{status}'") from e
    templates = await repos.form_templates.list_templates(status)
    return [await template_with_fields(repos, t) for t in templates]


async def get_template(repos: SqlRepoBundle, user: User, template_id: str) -> Dict[str, Any]:
    ensure_roles(user, Role.xen_scout, Role.scout_admin)
    template = await _get_template(repos, template_id)
    if user.role == Role.xen_scout.value and template.status != FormStatus.active.value:
        raise NotFoundError("Evaluation form", template_id)
    return await template_with_fields(repos, template)


async def template_stats(repos: SqlRepoBundle, admin: User, template_id: str) -> Dict[str, Any]:
    """Submission counts and the average of each star rating field over submitted evaluations."""
    _ensure_form_admin(admin)
    template = await _get_template(repos, template_id)
    averages: Dict[str, Optional[float]] = {}
    for field in await repos.form_fields.list_for_template(template.id):
        if field.field_type != FieldType.star_rating.value:
            continue
        responses = await repos.evaluation_responses.list_for_field(field.id)
        values = [v for v in (_as_number(json.loads(r.response_value)) for r in responses) if v is not None]
        averages[field.id] = round(sum(values) / len(values), 2) if values else None
    return {
        "template_id": template.id,
        "submission_count": await repos.evaluations.count_for_template(template.id),
        "submitted_count": await repos.evaluations.count_for_template(template.id, EvaluationStatus.submitted.value),
        "rating_averages": averages,
    }


# =====================================================================
# Evaluations
# =====================================================================


def _parse_status(status: str) -> EvaluationStatus:
    try:
        return EvaluationStatus(status)
    except ValueError as e:
        raise DomainValidationError(f"Unknown evaluation status '{status}'") from e


async def evaluation_with_responses(repos: SqlRepoBundle, evaluation: EvaluationSubmission) -> Dict[str, Any]:
    data = evaluation.model_dump()
    data["responses"] = {
        r.field_id: json.loads(r.response_value)
        for r in await repos.evaluation_responses.list_for_submission(evaluation.id)
    }
    return data


async def _snapshot_student(repos: SqlRepoBundle, evaluation: EvaluationSubmission, student_id: Optional[str]) -> None:
    if student_id is None:
        evaluation.student_id = None
        return
    student = await repos.students.get_by_id(student_id)
    if student is None:
        raise NotFoundError("Student", student_id)
    evaluation.student_id = student.id
    evaluation.student_name = student.name
    evaluation.student_sport = student.sport
    evaluation.student_position = student.position
    evaluation.student_school_id = student.school_id


async def _write_responses(repos: SqlRepoBundle, evaluation_id: str, responses: Dict[str, Any]) -> None:
    await repos.evaluation_responses.delete_for_submission(evaluation_id)
    await repos.session.flush()
    for field_id, value in responses.items():
        repos.session.add(
            EvaluationSubmissionResponse(
                submission_id=evaluation_id, field_id=field_id, response_value=json.dumps(value)
            )
        )


async def _notify_submitted(repos: SqlRepoBundle, scout: User, evaluation: EvaluationSubmission) -> None:
    subject = evaluation.student_name or "a student"
    await notifications.notify_roles(
        repos,
        [Role.scout_admin],
        NotificationType.form_submitted,
        "Evaluation submitted",
        f"{scout.name} submitted an evaluation for {subject}",
        entity_type="evaluation_submission",
        entity_id=evaluation.id,
        related_user_id=scout.id,
        exclude_user_id=scout.id,
    )


async def create_evaluation(repos: SqlRepoBundle, scout: User, data: EvaluationCreate) -> Dict[str, Any]:
    """
    Fill in an active form.

    Submitted evaluations must answer every required field; drafts may be
    partial. Every provided value is validated against its field type.
    """
    ensure_roles(scout, Role.xen_scout, Role.scout_admin)
    status = _parse_status(data.status)
    template = await _get_template(repos, data.form_template_id)
    if template.status != FormStatus.active.value:
        raise ConflictError("Evaluations can only be filled in on active forms")

    fields = await repos.form_fields.list_for_template(template.id)
    responses = validate_responses(fields, data.responses, enforce_required=status is EvaluationStatus.submitted)

    evaluation = EvaluationSubmission(form_template_id=template.id, submitted_by=scout.id, status=status.value)
    await _snapshot_student(repos, evaluation, data.student_id)
    if status is EvaluationStatus.submitted:
        evaluation.submitted_at = utc_now()
    repos.session.add(evaluation)
    await repos.session.flush()
    await _write_responses(repos, evaluation.id, responses)
    await repos.session.commit()
    await repos.session.refresh(evaluation)

    if status is EvaluationStatus.submitted:
        await _notify_submitted(repos, scout, evaluation)
    return await evaluation_with_responses(repos, evaluation)


async def _get_own_draft(repos: SqlRepoBundle, scout: User, evaluation_id: str) -> EvaluationSubmission:
    evaluation = await repos.evaluations.get_by_id(evaluation_id)
    if evaluation is None:
        raise NotFoundError("Evaluation", evaluation_id)
    if evaluation.submitted_by != scout.id and not is_system_admin(scout.role):
        raise PermissionDeniedError("You can only change your own evaluations")
    if evaluation.status != EvaluationStatus.draft.value:
        raise ConflictError("Submitted evaluations cannot be changed")
    return evaluation


async def update_evaluation(
    repos: SqlRepoBundle, scout: User, evaluation_id: str, data: EvaluationUpdate
) -> Dict[str, Any]:
    evaluation = await _get_own_draft(repos, scout, evaluation_id)
    status = _parse_status(data.status) if data.status is not None else EvaluationStatus.draft
    template = await _get_template(repos, evaluation.form_template_id)
    if status is EvaluationStatus.submitted and template.status != FormStatus.active.value:
        raise ConflictError("Evaluations can only be submitted on active forms")

    if data.responses is not None:
        responses = data.responses
    else:
        responses = (await evaluation_with_responses(repos, evaluation))["responses"]
    fields = await repos.form_fields.list_for_template(template.id)
    responses = validate_responses(fields, responses, enforce_required=status is EvaluationStatus.submitted)

    if "student_id" in data.model_fields_set:
        await _snapshot_student(repos, evaluation, data.student_id)
    evaluation.status = status.value
    if status is EvaluationStatus.submitted:
        evaluation.submitted_at = utc_now()
    evaluation.updated_at = utc_now()
    repos.session.add(evaluation)
    await _write_responses(repos, evaluation.id, responses)
    await repos.session.commit()
    await repos.session.refresh(evaluation)

    if status is EvaluationStatus.submitted:
        await _notify_submitted(repos, scout, evaluation)
    return await evaluation_with_responses(repos, evaluation)


async def delete_evaluation(repos: SqlRepoBundle, scout: User, evaluation_id: str) -> None:
    evaluation = await _get_own_draft(repos, scout, evaluation_id)
    await repos.evaluation_responses.delete_for_submission(evaluation.id)
    await repos.session.delete(evaluation)
    await repos.session.commit()


async def get_evaluation(repos: SqlRepoBundle, user: User, evaluation_id: str) -> Dict[str, Any]:
    ensure_roles(user, Role.xen_scout, Role.scout_admin)
    evaluation = await repos.evaluations.get_by_id(evaluation_id)
    if evaluation is None or (user.role == Role.xen_scout.value and evaluation.submitted_by != user.id):
        raise NotFoundError("Evaluation", evaluation_id)
    return await evaluation_with_responses(repos, evaluation)


async def list_evaluations(
    repos: SqlRepoBundle, user: User, form_template_id: Optional[str] = None, status: Optional[str] = None
) -> List[Dict[str, Any]]:
    """Scouts list their own evaluations; admins list everyone's."""
    ensure_roles(user, Role.xen_scout, Role.scout_admin)
    submitted_by = user.id if user.role == Role.xen_scout.value else None
    if status is not None:
        status = _parse_status(status).value
    evaluations = await repos.evaluations.list_submissions(
        form_template_id=form_template_id, submitted_by=submitted_by, status=status
    )
    return [await evaluation_with_responses(repos, e) for e in evaluations]
