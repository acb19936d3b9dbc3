"""
Comment Routes

GET /companies/{id}/comments - Comments on a company, newest first
POST /companies/{id}/comments - Add a comment (any logged-in user)
DELETE /comments/{id} - Delete a comment (author or admin)
"""

from fastapi import APIRouter, Depends
from typing import List

from prep_portal.api.deps import get_comment_service
from prep_portal.core.auth import CurrentUser, get_current_user
from prep_portal.services.comment_service import CommentService
from prep_portal.services.mongo_service import serialize_doc, serialize_docs
from prep_portal.schemas.schemas import CommentCreate, CommentResponse, MessageResponse

router = APIRouter(tags=["Comments"])


@router.get("/companies/{company_id}/comments", response_model=List[CommentResponse])
async def list_comments(
    company_id: str,
    comments: CommentService = Depends(get_comment_service),
):
    return serialize_docs(comments.list_for_company(company_id))


@router.post("/companies/{company_id}/comments", status_code=201, response_model=CommentResponse)
async def create_comment(
    company_id: str,
    data: CommentCreate,
    user: CurrentUser = Depends(get_current_user),
    comments: CommentService = Depends(get_comment_service),
):
    comment = comments.create(company_id, user.id, user.username or user.email, data.comment)
    return serialize_doc(comment)


@router.delete("/comments/{comment_id}", response_model=MessageResponse)
async def delete_comment(
    comment_id: str,
    user: CurrentUser = Depends(get_current_user),
    comments: CommentService = Depends(get_comment_service),
):
    comments.delete(comment_id, user.id, is_admin=user.is_admin)
    return MessageResponse(message="Comment deleted successfully")
