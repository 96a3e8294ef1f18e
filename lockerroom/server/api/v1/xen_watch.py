"""
XEN Watch Endpoints.

Paid scout reviews of student highlight videos.

Workflow:
1. A student creates a submission and pays for it (mock provider).
2. A scout admin assigns a scout.
3. Scouts review and rate the video.
4. A scout admin sends the consolidated feedback to the student.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from fastapi import APIRouter, Query, status

from lockerroom.core.database.entities.xen_watch import XenWatchFeedback, XenWatchReview
from lockerroom.core.models.domain.submission_status import STATUS_DISPLAY
from lockerroom.core.models.io.xen_watch import (
    AssignRequest,
    FeedbackCreate,
    FeedbackRead,
    ReviewCreate,
    ReviewRead,
    StatusBadge,
    SubmissionCreate,
    SubmissionDetail,
    SubmissionRead,
    XenWatchAnalytics,
)
from lockerroom.server.services import xen_watch as xen_watch_service
from lockerroom.server.services.deps import CurrentUserDep, ReposDep

router = APIRouter(tags=["xen-watch"])


@router.get(
    "/statuses",
    response_model=Dict[str, StatusBadge],
    summary="Get Status Badges",
    description="Display label, colour and icon for every submission status.",
)
async def get_statuses():
    return {s.value: display._asdict() for s, display in STATUS_DISPLAY.items()}


@router.post(
    "/submissions",
    response_model=SubmissionRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Submission",
    description="Request a scout review of a video. The submission waits in `pending_payment` until paid.",
    responses={
        201: {"description": "Submission created"},
        403: {"description": "Caller is not a student, or the post belongs to someone else"},
    },
)
async def create_submission(body: SubmissionCreate, user: CurrentUserDep, repos: ReposDep):
    submission = await xen_watch_service.create_submission(repos, user, body)
    return xen_watch_service.serialize_submission(submission)


@router.get("/submissions/mine", response_model=List[SubmissionRead], summary="List My Submissions")
async def my_submissions(user: CurrentUserDep, repos: ReposDep):
    return [xen_watch_service.serialize_submission(s) for s in await xen_watch_service.my_submissions(repos, user)]


@router.get("/queue", response_model=List[SubmissionRead], summary="Get Review Queue")
async def review_queue(user: CurrentUserDep, repos: ReposDep):
    """
    Submissions waiting for the caller.

    Scouts see what is assigned to them; scout admins see everything paid,
    assigned or in review.
    """
    return [xen_watch_service.serialize_submission(s) for s in await xen_watch_service.review_queue(repos, user)]


@router.get("/admin/submissions", response_model=List[SubmissionRead], summary="List All Submissions")
async def admin_list(
    user: CurrentUserDep,
    repos: ReposDep,
    status: Optional[str] = None,
    limit: Optional[int] = Query(None, ge=1),
    offset: Optional[int] = Query(None, ge=0),
):
    submissions = await xen_watch_service.admin_list(repos, user, status=status, limit=limit, offset=offset)
    return [xen_watch_service.serialize_submission(s) for s in submissions]


@router.get("/analytics", response_model=XenWatchAnalytics, summary="Get XEN Watch Analytics")
async def analytics(user: CurrentUserDep, repos: ReposDep):
    return await xen_watch_service.analytics(repos, user)


@router.get(
    "/submissions/{submission_id}",
    response_model=SubmissionDetail,
    summary="Get Submission",
    responses={404: {"description": "Submission not found or not visible to the caller"}},
)
async def get_submission(submission_id: str, user: CurrentUserDep, repos: ReposDep):
    return await xen_watch_service.get_submission(repos, user, submission_id)


@router.post(
    "/submissions/{submission_id}/pay",
    response_model=SubmissionRead,
    summary="Pay for Submission",
    description="Complete payment through the mock provider and move the submission to `paid`.",
    responses={409: {"description": "Submission is not awaiting payment"}},
)
async def pay(submission_id: str, user: CurrentUserDep, repos: ReposDep):
    return xen_watch_service.serialize_submission(await xen_watch_service.pay(repos, user, submission_id))


@router.post("/submissions/{submission_id}/assign", response_model=SubmissionRead, summary="Assign Scout")
async def assign(submission_id: str, body: AssignRequest, user: CurrentUserDep, repos: ReposDep):
    submission = await xen_watch_service.assign(repos, user, submission_id, body.scout_id)
    return xen_watch_service.serialize_submission(submission)


@router.post("/submissions/{submission_id}/start-review", response_model=SubmissionRead, summary="Start Review")
async def start_review(submission_id: str, user: CurrentUserDep, repos: ReposDep):
    return xen_watch_service.serialize_submission(await xen_watch_service.start_review(repos, user, submission_id))


@router.post(
    "/submissions/{submission_id}/reviews",
    response_model=ReviewRead,
    summary="Submit Review",
    description=(
        "Create or update the caller's review. Set `is_submitted=false` to keep a draft. "
        "A submitted review from the assigned scout marks the submission `reviewed`."
    ),
    responses={
        400: {"description": "Rating outside 1-5"},
        409: {"description": "Submission is not open for review"},
    },
)
async def submit_review(
    submission_id: str, body: ReviewCreate, user: CurrentUserDep, repos: ReposDep
) -> XenWatchReview:
    return await xen_watch_service.submit_review(
        repos, user, submission_id, rating=body.rating, comment=body.comment, is_submitted=body.is_submitted
    )


@router.post(
    "/submissions/{submission_id}/feedback",
    response_model=FeedbackRead,
    status_code=status.HTTP_201_CREATED,
    summary="Send Feedback",
    description=(
        "Send the final feedback to the student. The rating is the rounded mean of submitted reviews; "
        "without a message the review comments are combined."
    ),
    responses={
        400: {"description": "No submitted review yet"},
        409: {"description": "Submission cannot receive feedback in its current status"},
    },
)
async def send_feedback(
    submission_id: str, user: CurrentUserDep, repos: ReposDep, body: Optional[FeedbackCreate] = None
) -> XenWatchFeedback:
    return await xen_watch_service.send_feedback(repos, user, submission_id, body.message if body else None)


@router.get("/submissions/{submission_id}/feedback", response_model=FeedbackRead, summary="Get Feedback")
async def get_feedback(submission_id: str, user: CurrentUserDep, repos: ReposDep) -> XenWatchFeedback:
    return await xen_watch_service.final_feedback(repos, user, submission_id)


@router.post("/submissions/{submission_id}/cancel", response_model=SubmissionRead, summary="Cancel Submission")
async def cancel(submission_id: str, user: CurrentUserDep, repos: ReposDep):
    return xen_watch_service.serialize_submission(await xen_watch_service.cancel(repos, user, submission_id))


@router.post("/submissions/{submission_id}/refund", response_model=SubmissionRead, summary="Refund Submission")
async def refund(submission_id: str, user: CurrentUserDep, repos: ReposDep):
    return xen_watch_service.serialize_submission(await xen_watch_service.refund(repos, user, submission_id))
