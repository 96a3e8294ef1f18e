"""
XEN Watch submission lifecycle.

A submission moves forward through
``pending_payment -> paid -> assigned -> in_review -> reviewed -> feedback_sent``.
``canceled`` and ``refunded`` are absorbing: once reached, nothing moves.
"""

from __future__ import annotations

from enum import Enum
from typing import NamedTuple, Union

from lockerroom.core.errors import InvalidTransitionError


class SubmissionStatus(str, Enum):
    """Lifecycle status of a XEN Watch submission."""

    pending_payment = "pending_payment"
    paid = "paid"
    assigned = "assigned"
    in_review = "in_review"
    reviewed = "reviewed"
    feedback_sent = "feedback_sent"
    canceled = "canceled"
    refunded = "refunded"


ALLOWED_TRANSITIONS: dict[SubmissionStatus, frozenset[SubmissionStatus]] = {
    SubmissionStatus.pending_payment: frozenset({SubmissionStatus.paid, SubmissionStatus.canceled}),
    SubmissionStatus.paid: frozenset(
        {SubmissionStatus.assigned, SubmissionStatus.canceled, SubmissionStatus.refunded}
    ),
    SubmissionStatus.assigned: frozenset(
        {SubmissionStatus.in_review, SubmissionStatus.canceled, SubmissionStatus.refunded}
    ),
    SubmissionStatus.in_review: frozenset({SubmissionStatus.reviewed, SubmissionStatus.refunded}),
    SubmissionStatus.reviewed: frozenset({SubmissionStatus.feedback_sent, SubmissionStatus.refunded}),
    SubmissionStatus.feedback_sent: frozenset(),
    SubmissionStatus.canceled: frozenset(),
    SubmissionStatus.refunded: frozenset(),
}

TERMINAL_STATUSES = frozenset(status for status, targets in ALLOWED_TRANSITIONS.items() if not targets)

# Statuses a scout can act on
REVIEWABLE_STATUSES = frozenset({SubmissionStatus.assigned, SubmissionStatus.in_review})


class StatusDisplay(NamedTuple):
    label: str
    color: str
    icon: str


STATUS_DISPLAY: dict[SubmissionStatus, StatusDisplay] = {
    SubmissionStatus.pending_payment: StatusDisplay("Payment Pending", "yellow", "dollar-sign"),
    SubmissionStatus.paid: StatusDisplay("Paid", "blue", "check-circle"),
    SubmissionStatus.assigned: StatusDisplay("Assigned to Scout", "purple", "users"),
    SubmissionStatus.in_review: StatusDisplay("Under Review", "orange", "clock"),
    SubmissionStatus.reviewed: StatusDisplay("Reviewed", "green", "check-circle"),
    SubmissionStatus.feedback_sent: StatusDisplay("Feedback Sent", "emerald", "message-circle"),
    SubmissionStatus.canceled: StatusDisplay("Canceled", "red", "clock"),
    SubmissionStatus.refunded: StatusDisplay("Refunded", "gray", "dollar-sign"),
}


def can_transition(current: Union[SubmissionStatus, str], target: Union[SubmissionStatus, str]) -> bool:
    return SubmissionStatus(target) in ALLOWED_TRANSITIONS[SubmissionStatus(current)]


def ensure_transition(
    current: Union[SubmissionStatus, str], target: Union[SubmissionStatus, str]
) -> SubmissionStatus:
    """
    Validate a lifecycle move.

    Args:
        current: Status the submission is in.
        target: Status it should move to.

    Returns:
        The target status.

    Raises:
        InvalidTransitionError: If the move is not allowed from ``current``.
    """
    if not can_transition(current, target):
        raise InvalidTransitionError(SubmissionStatus(current).value, SubmissionStatus(target).value)
    return SubmissionStatus(target)


def status_display(status: Union[SubmissionStatus, str]) -> StatusDisplay:
    return STATUS_DISPLAY[SubmissionStatus(status)]
