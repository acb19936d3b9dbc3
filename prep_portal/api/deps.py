"""
Service providers for route injection.

Routes get their services through Depends(); tests override
get_database to point everything at a throwaway database.
"""

from fastapi import Depends
from pymongo.database import Database

from prep_portal.core.config import Settings, get_settings
from prep_portal.db.mongodb import get_mongo_db
from prep_portal.services.comment_service import CommentService
from prep_portal.services.company_service import CompanyService
from prep_portal.services.moderation import ModerationMerger
from prep_portal.services.notification_service import NotificationFanout, NotificationService
from prep_portal.services.storage_service import StorageService
from prep_portal.services.submission_service import SubmissionService
from prep_portal.services.user_service import UserService
from prep_portal.services.webhook_service import WebhookService


def get_database() -> Database:
    return get_mongo_db()


def get_company_service(db: Database = Depends(get_database),
                        settings: Settings = Depends(get_settings)) -> CompanyService:
    return CompanyService(db, settings)


def get_submission_service(db: Database = Depends(get_database),
                           companies: CompanyService = Depends(get_company_service)) -> SubmissionService:
    return SubmissionService(db, companies)


def get_comment_service(db: Database = Depends(get_database),
                        companies: CompanyService = Depends(get_company_service)) -> CommentService:
    return CommentService(db, companies)


def get_user_service(db: Database = Depends(get_database),
                     settings: Settings = Depends(get_settings)) -> UserService:
    return UserService(db, settings)


def get_notification_service(db: Database = Depends(get_database),
                             settings: Settings = Depends(get_settings)) -> NotificationService:
    return NotificationService(db, settings)


def get_fanout(notifications: NotificationService = Depends(get_notification_service),
               users: UserService = Depends(get_user_service)) -> NotificationFanout:
    return NotificationFanout(notifications, users)


def get_moderation_merger(companies: CompanyService = Depends(get_company_service),
                          submissions: SubmissionService = Depends(get_submission_service)) -> ModerationMerger:
    return ModerationMerger(companies, submissions)


def get_storage_service(settings: Settings = Depends(get_settings)) -> StorageService:
    return StorageService(settings)


def get_webhook_service(settings: Settings = Depends(get_settings)) -> WebhookService:
    return WebhookService(settings)
