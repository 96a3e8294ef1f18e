"""Domain enums and rules shared by services and API models."""

from .enums import (
    AnnouncementScope,
    ApplicationStatus,
    BannerCategory,
    BannerTarget,
    EvaluationStatus,
    FieldType,
    FormStatus,
    MediaType,
    NotificationType,
    PaymentFrequency,
    PaymentType,
    PostStatus,
    PostType,
    TransactionStatus,
    WarningLevel,
)
from .roles import (
    ROLE_HIERARCHY,
    Role,
    has_role_permission,
    is_scout_role,
    is_staff_role,
    is_system_admin,
    role_display_name,
)
from .submission_status import (
    ALLOWED_TRANSITIONS,
    STATUS_DISPLAY,
    SubmissionStatus,
    can_transition,
    ensure_transition,
    status_display,
)

__all__ = [
    "ALLOWED_TRANSITIONS",
    "AnnouncementScope",
    "ApplicationStatus",
    "BannerCategory",
    "BannerTarget",
    "EvaluationStatus",
    "FieldType",
    "FormStatus",
    "MediaType",
    "NotificationType",
    "PaymentFrequency",
    "PaymentType",
    "PostStatus",
    "PostType",
    "ROLE_HIERARCHY",
    "Role",
    "STATUS_DISPLAY",
    "SubmissionStatus",
    "TransactionStatus",
    "WarningLevel",
    "can_transition",
    "ensure_transition",
    "has_role_permission",
    "is_scout_role",
    "is_staff_role",
    "is_system_admin",
    "role_display_name",
    "status_display",
]
