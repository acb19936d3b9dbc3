"""
Submission Service - student-proposed content waiting for moderation.

A submission targets one company and one content type. Its content is a
plain string, or for online questions a JSON string {question, solution}.
The referenced company only has to exist when the submission is approved.
"""

import logging
from typing import Any, Dict, List, Optional

from pymongo import DESCENDING
from pymongo.collection import Collection
from pymongo.database import Database

from prep_portal.core.errors import NotFoundError, ValidationError
from prep_portal.db.mongodb import COLLECTIONS, get_collection
from prep_portal.schemas.schemas import SubmissionStatus, SubmissionType
from prep_portal.services.company_service import CompanyService
from prep_portal.services.mongo_service import parse_object_id, utcnow

logger = logging.getLogger(__name__)

SUBMISSION_TYPES = [t.value for t in SubmissionType]


class SubmissionService:
    """
    Handles the moderation queue.
    Approved submissions are kept for auditing; rejected ones are deleted.
    """

    def __init__(self, db: Database = None, companies: CompanyService = None):
        self.collection: Collection = get_collection(COLLECTIONS["submissions"], db)
        self.companies = companies

    def create(self, company_id: Any, submission_type: Any, content: Any,
               submitter: Dict[str, Optional[str]], is_anonymous: bool = False) -> Dict[str, Any]:
        """
        Insert a pending submission.

        Raises ValidationError listing every bad field.
        """
        errors = {}
        company_oid = parse_object_id(company_id)
        if company_oid is None:
            errors["companyId"] = "Invalid company id"
        if submission_type not in SUBMISSION_TYPES:
            errors["type"] = f"Type must be one of: {', '.join(SUBMISSION_TYPES)}"
        if not isinstance(content, str) or not content.strip():
            errors["content"] = "Content is required"
        if not submitter.get("name") or not submitter.get("email"):
            errors["submittedBy"] = "Submitter name and email are required"
        if errors:
            raise ValidationError(errors)

        doc = {
            "companyId": company_oid,
            "type": submission_type,
            "content": content,
            "submittedBy": {"name": submitter["name"], "email": submitter["email"]},
            "isAnonymous": bool(is_anonymous),
            "status": SubmissionStatus.pending.value,
            "submittedAt": utcnow(),
            "approvedAt": None,
        }
        result = self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        logger.info("Submission %s (%s) received for company %s", doc["_id"], submission_type, company_oid)
        return doc

    def get(self, submission_id: Any) -> Dict[str, Any]:
        oid = parse_object_id(submission_id)
        doc = self.collection.find_one({"_id": oid}) if oid else None
        if not doc:
            raise NotFoundError("Submission not found")
        return doc

    def list(self, status: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        Newest first, optionally filtered by status. Each row gets
        `companyName` (None when the company is gone).
        """
        query = {"status": status} if status else {}
        submissions = list(self.collection.find(query).sort("submittedAt", DESCENDING))
        if self.companies is not None:
            names = self.companies.names_by_id({s["companyId"] for s in submissions})
            for submission in submissions:
                submission["companyName"] = names.get(submission["companyId"])
        return submissions

    def mark_approved(self, submission_id: Any) -> None:
        self.collection.update_one(
            {"_id": parse_object_id(submission_id)},
            {"$set": {"status": SubmissionStatus.approved.value, "approvedAt": utcnow()}},
        )

    def reject(self, submission_id: Any) -> None:
        """Rejection is a hard delete."""
        oid = parse_object_id(submission_id)
        result = self.collection.delete_one({"_id": oid}) if oid else None
        if result is None or result.deleted_count == 0:
            raise NotFoundError("Submission not found")
        logger.info("Submission %s rejected and deleted", submission_id)

    def count(self) -> int:
        return self.collection.count_documents({})
