"""
Admin Routes (admin only)

GET /admin/submissions - Moderation queue (?status=pending|approved)
POST /admin/submissions/{id}/approve - Merge submission into its company
DELETE /admin/submissions/{id}/reject - Delete submission
GET /admin/companies - Companies by status (default pending)
PUT /admin/companies/{id} - Edit a company
POST /admin/companies/{id}/approve - Publish a company and notify users
DELETE /admin/companies/{id}/reject - Delete a company
GET /admin/stats - Dashboard counts
GET /admin/stats/users - Total users
"""

import logging

from fastapi import APIRouter, BackgroundTasks, Depends, Query
from typing import List, Optional

from prep_portal.api.deps import (
    get_company_service, get_fanout, get_moderation_merger,
    get_submission_service, get_user_service,
)
from prep_portal.core.auth import require_admin
from prep_portal.services.company_service import CompanyService
from prep_portal.services.moderation import ModerationMerger
from prep_portal.services.mongo_service import serialize_doc, serialize_docs
from prep_portal.services.notification_service import NotificationFanout
from prep_portal.services.submission_service import SubmissionService
from prep_portal.services.user_service import UserService
from prep_portal.schemas.schemas import (
    AdminStatsResponse, CompanyMessageResponse, CompanyStatus, CompanyUpdate,
    MessageResponse, SubmissionResponse, SubmissionStatus,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Admin"], dependencies=[Depends(require_admin)])


# ============================================================
# SUBMISSIONS
# ============================================================

@router.get("/submissions", response_model=List[SubmissionResponse])
async def list_submissions(
    status: Optional[SubmissionStatus] = Query(None),
    submissions: SubmissionService = Depends(get_submission_service),
):
    """All submissions, newest first, with the target company's name."""
    return serialize_docs(submissions.list(status.value if status else None))


@router.post("/submissions/{submission_id}/approve")
async def approve_submission(
    submission_id: str,
    background_tasks: BackgroundTasks,
    merger: ModerationMerger = Depends(get_moderation_merger),
    fanout: NotificationFanout = Depends(get_fanout),
):
    """Merge the submission into its company; the submission is kept as approved."""
    result = merger.approve(submission_id)
    if result.company.get("status") == CompanyStatus.approved.value:
        background_tasks.add_task(fanout.fan_out, result.company)
    return {
        "message": "Submission approved and company updated successfully",
        "outcome": result.outcome,
        "field": result.field,
        "company": serialize_doc(result.company),
    }


@router.delete("/submissions/{submission_id}/reject", response_model=MessageResponse)
async def reject_submission(
    submission_id: str,
    merger: ModerationMerger = Depends(get_moderation_merger),
):
    merger.reject(submission_id)
    return MessageResponse(message="Submission rejected and deleted successfully")


# ============================================================
# COMPANIES
# ============================================================

@router.get("/companies")
async def list_companies_by_status(
    status: CompanyStatus = Query(CompanyStatus.pending),
    companies: CompanyService = Depends(get_company_service),
):
    return serialize_docs(companies.list_by_status(status.value))


@router.put("/companies/{company_id}", response_model=CompanyMessageResponse)
async def update_company(
    company_id: str,
    data: CompanyUpdate,
    background_tasks: BackgroundTasks,
    companies: CompanyService = Depends(get_company_service),
    fanout: NotificationFanout = Depends(get_fanout),
):
    """Edit any company field; the full save pipeline runs."""
    company = companies.update(company_id, data.model_dump())
    if company.get("status") == CompanyStatus.approved.value:
        background_tasks.add_task(fanout.fan_out, company)
    return {"message": "Company updated successfully", "company": serialize_doc(company)}


@router.post("/companies/{company_id}/approve", response_model=CompanyMessageResponse)
async def approve_company(
    company_id: str,
    background_tasks: BackgroundTasks,
    companies: CompanyService = Depends(get_company_service),
    fanout: NotificationFanout = Depends(get_fanout),
):
    """Publish the company. Users are notified once, after the response."""
    company, already = companies.approve(company_id)
    background_tasks.add_task(fanout.fan_out, company)
    message = "Company already approved" if already else "Company approved successfully"
    return {"message": message, "company": serialize_doc(company)}


@router.delete("/companies/{company_id}/reject", response_model=MessageResponse)
async def reject_company(
    company_id: str,
    companies: CompanyService = Depends(get_company_service),
):
    companies.reject(company_id)
    return MessageResponse(message="Company rejected and deleted successfully")


# ============================================================
# STATS
# ============================================================

@router.get("/stats", response_model=AdminStatsResponse)
async def dashboard_stats(
    companies: CompanyService = Depends(get_company_service),
    submissions: SubmissionService = Depends(get_submission_service),
    users: UserService = Depends(get_user_service),
):
    company_counts = companies.stats()
    return AdminStatsResponse(
        totalUsers=users.count(),
        totalSubmissions=submissions.count(),
        totalCompanies=company_counts["approved"],
        pendingCompanies=company_counts["pending"],
    )


@router.get("/stats/users")
async def user_stats(users: UserService = Depends(get_user_service)):
    return {"totalUsers": users.count()}
