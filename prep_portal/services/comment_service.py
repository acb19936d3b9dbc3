"""
Comment Service - per-company discussion threads.

Any logged-in user may comment on a company that exists. A comment can be
deleted by its author or by an admin.
"""

import logging
from typing import Any, Dict, List

from pymongo import DESCENDING
from pymongo.collection import Collection
from pymongo.database import Database

from prep_portal.core.errors import AuthorizationError, NotFoundError, ValidationError
from prep_portal.db.mongodb import COLLECTIONS, get_collection
from prep_portal.services import sanitizer
from prep_portal.services.company_service import CompanyService
from prep_portal.services.mongo_service import parse_object_id, utcnow

logger = logging.getLogger(__name__)

MAX_COMMENT = 2000


class CommentService:

    def __init__(self, db: Database = None, companies: CompanyService = None):
        self.collection: Collection = get_collection(COLLECTIONS["comments"], db)
        self.companies = companies or CompanyService(db)

    def list_for_company(self, company_id: str) -> List[Dict[str, Any]]:
        """Newest first. Unknown company -> NotFoundError."""
        company = self.companies.get(company_id)
        return list(self.collection.find({"companyId": company["_id"]}).sort("createdAt", DESCENDING))

    def create(self, company_id: str, user_id: str, username: str, text: Any) -> Dict[str, Any]:
        comment = sanitizer.sanitize(text)
        if not comment:
            raise ValidationError({"comment": "Comment text is required"})
        if len(comment) > MAX_COMMENT:
            raise ValidationError({"comment": f"Comment cannot exceed {MAX_COMMENT} characters"})
        company = self.companies.get(company_id)

        now = utcnow()
        doc = {
            "companyId": company["_id"],
            "userId": user_id,
            "username": username or "Anonymous",
            "comment": comment,
            "createdAt": now,
            "updatedAt": now,
        }
        doc["_id"] = self.collection.insert_one(doc).inserted_id
        logger.info("Comment %s on company %s by %s", doc["_id"], company["_id"], user_id)
        return doc

    def delete(self, comment_id: str, user_id: str, is_admin: bool = False) -> None:
        oid = parse_object_id(comment_id)
        comment = self.collection.find_one({"_id": oid}) if oid else None
        if not comment:
            raise NotFoundError("Comment not found")
        if comment.get("userId") != user_id and not is_admin:
            raise AuthorizationError("You can only delete your own comments")
        self.collection.delete_one({"_id": oid})
        logger.info("Comment %s deleted by %s", comment_id, user_id)
