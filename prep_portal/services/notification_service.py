"""
Notification Service - per-user inbox and new-company fan-out.

Fan-out is an explicit post-save step: whoever saved an approved company
calls NotificationFanout.fan_out() afterwards (usually as a background
task). It creates one notification per user, at most once per company.
"""

import logging
from typing import Any, Dict, List

from pymongo import DESCENDING
from pymongo.collection import Collection
from pymongo.database import Database

from prep_portal.core.config import Settings, get_settings
from prep_portal.core.errors import NotFoundError
from prep_portal.db.mongodb import COLLECTIONS, get_collection
from prep_portal.schemas.schemas import CompanyStatus, NotificationType
from prep_portal.services.mongo_service import parse_object_id, utcnow
from prep_portal.services.user_service import UserService

logger = logging.getLogger(__name__)

NEW_COMPANY_TITLE = "New Company Added"
NEW_COMPANY_MESSAGE = "{name} has been added to the placement portal. Check it out!"


class NotificationService:
    """
    A user only ever reads or changes their own notifications; anything
    else looks like a missing notification.
    """

    def __init__(self, db: Database = None, settings: Settings = None):
        self.collection: Collection = get_collection(COLLECTIONS["notifications"], db)
        self.settings = settings or get_settings()

    def list_for_user(self, user_id: str) -> List[Dict[str, Any]]:
        cursor = (self.collection.find({"userId": user_id})
                  .sort("createdAt", DESCENDING)
                  .limit(self.settings.notification_list_limit))
        return list(cursor)

    def unread_count(self, user_id: str) -> int:
        return self.collection.count_documents({"userId": user_id, "isSeen": False})

    def _own(self, notification_id: str, user_id: str) -> Dict[str, Any]:
        oid = parse_object_id(notification_id)
        if oid is None:
            raise NotFoundError("Notification not found")
        return {"_id": oid, "userId": user_id}

    def mark_seen(self, notification_id: str, user_id: str) -> Dict[str, Any]:
        query = self._own(notification_id, user_id)
        result = self.collection.update_one(query, {"$set": {"isSeen": True}})
        if result.matched_count == 0:
            raise NotFoundError("Notification not found")
        return self.collection.find_one(query)

    def mark_all_seen(self, user_id: str) -> int:
        result = self.collection.update_many({"userId": user_id, "isSeen": False}, {"$set": {"isSeen": True}})
        return result.modified_count

    def delete(self, notification_id: str, user_id: str) -> None:
        result = self.collection.delete_one(self._own(notification_id, user_id))
        if result.deleted_count == 0:
            raise NotFoundError("Notification not found")

    def clear(self, user_id: str) -> int:
        return self.collection.delete_many({"userId": user_id}).deleted_count

    def exists_for_company(self, company_id: Any, notification_type: str) -> bool:
        return self.collection.find_one({"companyId": company_id, "type": notification_type}) is not None

    def insert_many(self, docs: List[Dict[str, Any]]) -> int:
        if not docs:
            return 0
        return len(self.collection.insert_many(docs).inserted_ids)


class NotificationFanout:
    """Builds the new-company batch. Never raises."""

    def __init__(self, notifications: NotificationService, users: UserService):
        self.notifications = notifications
        self.users = users

    def build(self, company: Dict[str, Any], user_ids: List[str]) -> List[Dict[str, Any]]:
        now = utcnow()
        name = company.get("name") or "A new company"
        return [
            {
                "userId": user_id,
                "type": NotificationType.new_company.value,
                "title": NEW_COMPANY_TITLE,
                "message": NEW_COMPANY_MESSAGE.format(name=name),
                "companyId": company["_id"],
                "isSeen": False,
                "createdAt": now,
            }
            for user_id in user_ids
        ]

    def fan_out(self, company: Dict[str, Any]) -> int:
        """
        Notify every user about an approved company.
        Returns how many notifications were created (0 when skipped or failed).
        """
        try:
            if company.get("status") != CompanyStatus.approved.value:
                return 0
            company_id = company["_id"]
            if self.notifications.exists_for_company(company_id, NotificationType.new_company.value):
                logger.info("Company %s already announced; fan-out skipped", company_id)
                return 0
            created = self.notifications.insert_many(self.build(company, self.users.all_user_ids()))
            logger.info("Company %s announced to %d users", company_id, created)
            return created
        except Exception:
            logger.exception("Notification fan-out failed for company %s", company.get("_id"))
            return 0
