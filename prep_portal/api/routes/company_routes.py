"""
Company Routes

POST /companies - Submit a company for review
GET /companies - List approved companies
GET /companies/{id} - Approved company details (+ signed video URL)
POST /companies/{id}/helpful - Mark as helpful (once per user)
POST /companies/{id}/rate-difficulty - Rate interview difficulty 1-5
"""

from fastapi import APIRouter, Depends, Query
from typing import Optional

from prep_portal.api.deps import get_company_service, get_storage_service
from prep_portal.core.auth import CurrentUser, get_current_user
from prep_portal.services.company_service import CompanyService
from prep_portal.services.mongo_service import serialize_doc, serialize_docs
from prep_portal.services.storage_service import StorageService
from prep_portal.schemas.schemas import CompanyCreate, RatingRequest

router = APIRouter(prefix="/companies", tags=["Companies"])

COMPANY_SUBMITTED = "Company submitted for review!"


@router.post("", status_code=201)
async def submit_company(
    data: CompanyCreate,
    user: CurrentUser = Depends(get_current_user),
    companies: CompanyService = Depends(get_company_service),
):
    """Create a pending company. Admin approval makes it public."""
    company = companies.create(data.model_dump(exclude_none=True), user.as_submitter())
    return {"message": COMPANY_SUBMITTED, "company": serialize_doc(company)}


@router.get("")
async def list_companies(
    type: Optional[str] = Query(None, description="Company type, e.g. FTE"),
    business_model: Optional[str] = Query(None),
    limit: int = Query(0, ge=0, le=200),
    offset: int = Query(0, ge=0),
    companies: CompanyService = Depends(get_company_service),
):
    """List approved companies (summary fields only)."""
    return serialize_docs(companies.list_approved(type, business_model, limit, offset))


@router.get("/{company_id}")
async def get_company(
    company_id: str,
    user: CurrentUser = Depends(get_current_user),
    companies: CompanyService = Depends(get_company_service),
    storage: StorageService = Depends(get_storage_service),
):
    """Full approved company document with a time-limited video URL."""
    company = serialize_doc(companies.get_approved(company_id))
    company["videoUrl"] = storage.signed_url(company.get("videoKey"))
    return company


@router.post("/{company_id}/helpful")
async def mark_helpful(
    company_id: str,
    user: CurrentUser = Depends(get_current_user),
    companies: CompanyService = Depends(get_company_service),
):
    """Upvote a company. A second vote by the same user is rejected."""
    count = companies.upvote(company_id, user.email)
    return {"message": "Marked as helpful", "helpfulCount": count}


@router.post("/{company_id}/rate-difficulty")
async def rate_difficulty(
    company_id: str,
    data: RatingRequest,
    user: CurrentUser = Depends(get_current_user),
    companies: CompanyService = Depends(get_company_service),
):
    """Add a difficulty rating and return the updated average."""
    result = companies.rate_difficulty(company_id, data.rating)
    return {
        "message": "Rating submitted",
        "interview_difficulty_level": result["interview_difficulty_level"],
        "difficulty_rating_count": result["difficulty_rating_count"],
    }
