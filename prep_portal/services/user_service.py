"""
User Service - users known to the portal.

Identity comes from the external provider; a user record is created the
first time an identity is seen so that notification fan-out can reach it.
"""

import logging
from typing import Any, Dict, List, Tuple

from pymongo.collection import Collection
from pymongo.database import Database

from prep_portal.core.config import Settings, get_settings
from prep_portal.db.mongodb import COLLECTIONS, get_collection
from prep_portal.services.mongo_service import utcnow

logger = logging.getLogger(__name__)

ADMIN_ROLE = "admin"


class UserService:

    def __init__(self, db: Database = None, settings: Settings = None):
        self.collection: Collection = get_collection(COLLECTIONS["users"], db)
        self.settings = settings or get_settings()

    def ensure(self, user_id: str, email: str, username: str) -> Tuple[Dict[str, Any], bool]:
        """
        Upsert the user by provider id.
        Returns (user_doc, created).
        """
        result = self.collection.update_one(
            {"userId": user_id},
            {
                "$set": {"email": email, "username": username},
                "$setOnInsert": {"userId": user_id, "createdAt": utcnow()},
            },
            upsert=True,
        )
        created = result.upserted_id is not None
        if created:
            logger.info("New user %s (%s)", user_id, email)
        return self.collection.find_one({"userId": user_id}), created

    def is_admin(self, user: Dict[str, Any]) -> bool:
        """Role flag on the record, or email on the configured allow-list."""
        if user.get("role") == ADMIN_ROLE:
            return True
        email = (user.get("email") or "").strip().lower()
        return bool(email) and email in self.settings.admin_email_list

    def all_user_ids(self) -> List[str]:
        return [doc["userId"] for doc in self.collection.find({}, {"userId": 1}) if doc.get("userId")]

    def count(self) -> int:
        return self.collection.count_documents({})
