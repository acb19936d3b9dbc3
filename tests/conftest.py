"""
Shared fixtures.

mongomock stands in for the MongoDB server; every test gets a fresh
database. The API client runs against the same database through a
dependency override.
"""

import mongomock
import pytest
from fastapi.testclient import TestClient

from prep_portal.api.deps import get_database
from prep_portal.core.auth import create_access_token
from prep_portal.core.config import Settings, get_settings
from prep_portal.main import app
from prep_portal.services.comment_service import CommentService
from prep_portal.services.company_service import CompanyService
from prep_portal.services.moderation import ModerationMerger
from prep_portal.services.notification_service import NotificationFanout, NotificationService
from prep_portal.services.submission_service import SubmissionService
from prep_portal.services.user_service import UserService

ADMIN_EMAIL = "admin@example.com"


@pytest.fixture
def db():
    return mongomock.MongoClient()["placement_prep_test"]


@pytest.fixture
def settings():
    return Settings(admin_emails=ADMIN_EMAIL, welcome_webhook_url="", bucket_name="")


@pytest.fixture
def companies(db, settings):
    return CompanyService(db, settings)


@pytest.fixture
def submissions(db, companies):
    return SubmissionService(db, companies)


@pytest.fixture
def users(db, settings):
    return UserService(db, settings)


@pytest.fixture
def notifications(db, settings):
    return NotificationService(db, settings)


@pytest.fixture
def fanout(notifications, users):
    return NotificationFanout(notifications, users)


@pytest.fixture
def merger(companies, submissions):
    return ModerationMerger(companies, submissions)


@pytest.fixture
def comments(db, companies):
    return CommentService(db, companies)


@pytest.fixture
def submitter():
    return {"name": "test_user", "email": "test@example.com"}


@pytest.fixture
def make_company(companies):
    """Insert a company through the save pipeline and return it."""

    def _make(**fields):
        doc = {"name": "Google Inc.", "type": "FTE", "business_model": "B2C",
               "eligibility": "CS/IT students", "status": "approved"}
        doc.update(fields)
        return companies.save(doc)

    return _make


@pytest.fixture
def client(db, settings):
    app.dependency_overrides[get_database] = lambda: db
    app.dependency_overrides[get_settings] = lambda: settings
    with_client = TestClient(app)
    yield with_client
    app.dependency_overrides.clear()


def auth_headers(user_id: str, email: str, username: str) -> dict:
    token = create_access_token({"sub": user_id, "email": email, "username": username})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_headers():
    return auth_headers


@pytest.fixture
def student_headers():
    return auth_headers("student-1", "student@example.com", "student")


@pytest.fixture
def admin_headers():
    return auth_headers("admin-1", ADMIN_EMAIL, "admin")
