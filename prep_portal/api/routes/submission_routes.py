"""
Submission Routes

POST /submissions - Propose content for a company (any logged-in user)
"""

from fastapi import APIRouter, Depends

from prep_portal.api.deps import get_submission_service
from prep_portal.core.auth import CurrentUser, get_current_user
from prep_portal.services.mongo_service import serialize_doc
from prep_portal.services.submission_service import SubmissionService
from prep_portal.schemas.schemas import SubmissionCreate

router = APIRouter(prefix="/submissions", tags=["Submissions"])

SUBMISSION_RECEIVED = "Submission received and pending placement."


@router.post("", status_code=201)
async def create_submission(
    data: SubmissionCreate,
    user: CurrentUser = Depends(get_current_user),
    submissions: SubmissionService = Depends(get_submission_service),
):
    """Queue content for admin review. The company is checked at approval time."""
    submission = submissions.create(
        data.companyId, data.type, data.content,
        submitter=user.as_submitter(), is_anonymous=data.isAnonymous,
    )
    return {"message": SUBMISSION_RECEIVED, "submission": serialize_doc(submission)}
