"""Domain enums for LockerRoom models."""

from __future__ import annotations

from enum import Enum


class PaymentFrequency(str, Enum):
    """Billing cadence of a school subscription."""

    monthly = "monthly"
    annual = "annual"
    one_time = "one-time"


class PaymentType(str, Enum):
    """Kind of entry in a school's payment history."""

    initial = "initial"
    renewal = "renewal"
    student_limit_increase = "student_limit_increase"
    student_limit_decrease = "student_limit_decrease"
    frequency_change = "frequency_change"


class WarningLevel(str, Enum):
    """How close a school is to its enrollment limit."""

    none = "none"
    approaching = "approaching"  # utilization >= 80%
    at_limit = "at_limit"  # utilization >= 100%


class PostStatus(str, Enum):
    ready = "ready"
    processing = "processing"
    failed = "failed"


class PostType(str, Enum):
    post = "post"
    announcement = "announcement"


class MediaType(str, Enum):
    image = "image"
    video = "video"


class AnnouncementScope(str, Enum):
    school = "school"
    global_ = "global"
    staff = "staff"


class ApplicationStatus(str, Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"


class BannerCategory(str, Enum):
    info = "info"
    warning = "warning"
    success = "success"
    error = "error"
    announcement = "announcement"


class BannerTarget(str, Enum):
    """Audiences a banner can target.

    ``xen_watch`` is a virtual audience meaning students and viewers.
    """

    scout_admin = "scout_admin"
    school_admin = "school_admin"
    xen_scout = "xen_scout"
    xen_watch = "xen_watch"
    student = "student"
    viewer = "viewer"


class TransactionStatus(str, Enum):
    pending = "pending"
    completed = "completed"
    failed = "failed"
    refunded = "refunded"


class FormStatus(str, Enum):
    draft = "draft"
    active = "active"
    archived = "archived"


class FieldType(str, Enum):
    short_text = "short_text"
    paragraph = "paragraph"
    star_rating = "star_rating"
    multiple_choice = "multiple_choice"
    multiple_selection = "multiple_selection"
    number = "number"
    date = "date"
    dropdown = "dropdown"


class EvaluationStatus(str, Enum):
    draft = "draft"
    submitted = "submitted"


class NotificationType(str, Enum):
    """Notification kinds understood by the client."""

    following_posted = "following_posted"
    new_follower = "new_follower"
    post_liked = "post_liked"
    post_commented = "post_commented"
    school_created = "school_created"
    school_admin_created = "school_admin_created"
    scout_created = "scout_created"
    submission_received = "submission_received"
    submission_created = "submission_created"
    review_submitted = "review_submitted"
    submission_feedback_ready = "submission_feedback_ready"
    submission_finalized = "submission_finalized"
    xen_watch_payment = "xen_watch_payment"
    subscription_expiring = "subscription_expiring"
    form_created = "form_created"
    form_submitted = "form_submitted"
    announcement = "announcement"
