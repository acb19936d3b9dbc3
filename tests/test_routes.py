"""HTTP surface: auth, status codes and end-to-end flows."""

import json

import httpx
import pytest
from bson import ObjectId

from prep_portal.api.deps import get_webhook_service
from prep_portal.core.config import Settings
from prep_portal.main import app
from prep_portal.services.webhook_service import WebhookService


@pytest.fixture
def approved_company(make_company):
    return make_company(name="Acme", roles=[{"roleName": "SDE", "ctc": {"base": 10, "bonus": 2}}])


# ============================================================
# AUTH
# ============================================================

def test_missing_token_is_401(client):
    response = client.post("/api/submissions", json={})
    assert response.status_code == 401
    assert response.json() == {"error": "You must log in!"}


def test_bad_token_is_401(client):
    response = client.get("/api/notifications", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


def test_admin_routes_reject_students(client, student_headers):
    response = client.get("/api/admin/submissions", headers=student_headers)
    assert response.status_code == 403
    assert response.json() == {"error": "Access denied. Admin only."}


def test_admin_by_role(client, db, make_headers):
    db["users"].insert_one({"userId": "boss", "email": "boss@example.com", "role": "admin"})
    response = client.get("/api/admin/stats", headers=make_headers("boss", "boss@example.com", "boss"))
    assert response.status_code == 200


def test_welcome_webhook_sent_for_new_user_only(client, settings, student_headers):
    received = []

    def handler(request):
        received.append(json.loads(request.content))
        return httpx.Response(200)

    hooked = Settings(welcome_webhook_url="https://hooks.example.com/welcome")
    app.dependency_overrides[get_webhook_service] = lambda: WebhookService(hooked, httpx.MockTransport(handler))

    client.get("/api/notifications", headers=student_headers)
    client.get("/api/notifications", headers=student_headers)

    assert received == [{"email": "student@example.com", "username": "student"}]


# ============================================================
# SUBMISSIONS
# ============================================================

def test_create_submission(client, student_headers, approved_company):
    response = client.post("/api/submissions", headers=student_headers, json={
        "companyId": str(approved_company["_id"]),
        "type": "mustDoTopics",
        "content": "Graphs",
    })
    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Submission received and pending placement."
    assert body["submission"]["status"] == "pending"
    assert body["submission"]["submittedBy"] == {"name": "student", "email": "student@example.com"}


def test_create_submission_field_errors(client, student_headers):
    response = client.post("/api/submissions", headers=student_headers, json={
        "companyId": "not-an-id",
        "type": "gossip",
        "content": "   ",
    })
    assert response.status_code == 400
    details = response.json()["details"]
    assert set(details) == {"companyId", "type", "content"}


def test_create_submission_missing_body_fields(client, student_headers):
    response = client.post("/api/submissions", headers=student_headers, json={"type": "mustDoTopics"})
    assert response.status_code == 400
    assert "companyId" in response.json()["details"]


def test_moderation_flow(client, db, student_headers, admin_headers, approved_company):
    company_id = str(approved_company["_id"])
    created = client.post("/api/submissions", headers=student_headers, json={
        "companyId": company_id,
        "type": "onlineQuestions",
        "content": json.dumps({"question": "Reverse a list", "solution": "use slicing"}),
    }).json()["submission"]

    queue = client.get("/api/admin/submissions?status=pending", headers=admin_headers).json()
    assert [s["_id"] for s in queue] == [created["_id"]]
    assert queue[0]["companyName"] == "Acme"

    response = client.post(f"/api/admin/submissions/{created['_id']}/approve", headers=admin_headers)
    assert response.status_code == 200
    body = response.json()
    assert body["outcome"] == "added"
    assert body["company"]["onlineQuestions"] == ["Reverse a list"]
    assert body["company"]["onlineQuestions_solution"] == ["use slicing"]

    again = client.post(f"/api/admin/submissions/{created['_id']}/approve", headers=admin_headers)
    assert again.status_code == 400

    approved = client.get("/api/admin/submissions?status=approved", headers=admin_headers).json()
    assert len(approved) == 1


def test_reject_submission(client, student_headers, admin_headers, approved_company):
    created = client.post("/api/submissions", headers=student_headers, json={
        "companyId": str(approved_company["_id"]), "type": "mustDoTopics", "content": "DP",
    }).json()["submission"]
    response = client.delete(f"/api/admin/submissions/{created['_id']}/reject", headers=admin_headers)
    assert response.status_code == 200
    missing = client.delete(f"/api/admin/submissions/{created['_id']}/reject", headers=admin_headers)
    assert missing.status_code == 404


def test_approve_unknown_submission(client, admin_headers):
    response = client.post(f"/api/admin/submissions/{ObjectId()}/approve", headers=admin_headers)
    assert response.status_code == 404
    assert response.json() == {"error": "Submission not found"}


# ============================================================
# COMPANIES
# ============================================================

def test_company_submission_and_approval_notifies_users(client, student_headers, admin_headers):
    response = client.post("/api/companies", headers=student_headers, json={
        "name": "Initech",
        "type": "FTE",
        "roles": [{"roleName": "SDE", "ctc": {"base": 10, "bonus": 2, "stock": "negotiable"}}],
    })
    assert response.status_code == 201
    company = response.json()["company"]
    assert company["status"] == "pending"
    assert company["roles"][0]["ctc"]["total"] == 12
    assert company["roles"][0]["finalPayAnnual"] == "10"

    # not public until approved
    assert client.get("/api/companies").json() == []
    pending = client.get("/api/admin/companies", headers=admin_headers).json()
    assert [c["name"] for c in pending] == ["Initech"]

    approved = client.post(f"/api/admin/companies/{company['_id']}/approve", headers=admin_headers)
    assert approved.json()["message"] == "Company approved successfully"
    repeat = client.post(f"/api/admin/companies/{company['_id']}/approve", headers=admin_headers)
    assert repeat.json()["message"] == "Company already approved"

    inbox = client.get("/api/notifications", headers=student_headers).json()
    assert len(inbox) == 1
    assert inbox[0]["companyId"] == company["_id"]
    assert client.get("/api/notifications/unread/count", headers=student_headers).json() == {"count": 1}

    client.put("/api/notifications/mark-all-seen", headers=student_headers)
    assert client.get("/api/notifications/unread/count", headers=student_headers).json() == {"count": 0}

    listed = client.get("/api/companies").json()
    assert [c["name"] for c in listed] == ["Initech"]


def test_company_submission_validation(client, student_headers):
    response = client.post("/api/companies", headers=student_headers, json={"name": "X", "type": "FTE"})
    assert response.status_code == 400
    assert "name" in response.json()["details"]


def test_company_with_unreadable_compensation_is_accepted(client, student_headers):
    response = client.post("/api/companies", headers=student_headers, json={
        "name": "Hooli",
        "type": "FTE",
        "roles": [{"roleName": "SDE", "ctc": {"base": 10, "bonus": None}},
                  {"roleName": "Intern", "ctc": None}],
    })
    assert response.status_code == 201
    roles = response.json()["company"]["roles"]
    assert roles[0]["ctc"]["total"] == 10
    assert roles[0]["finalPayAnnual"] == "10"
    assert roles[1]["ctc"] == {"total": 0}


def test_get_company_details(client, student_headers, approved_company):
    response = client.get(f"/api/companies/{approved_company['_id']}", headers=student_headers)
    assert response.status_code == 200
    body = response.json()
    assert body["name"] == "Acme"
    assert body["videoUrl"] is None


def test_get_pending_company_is_404(client, student_headers, make_company):
    company = make_company(status="pending")
    response = client.get(f"/api/companies/{company['_id']}", headers=student_headers)
    assert response.status_code == 404


def test_helpful_vote(client, student_headers, approved_company):
    url = f"/api/companies/{approved_company['_id']}/helpful"
    first = client.post(url, headers=student_headers)
    assert first.json() == {"message": "Marked as helpful", "helpfulCount": 1}
    second = client.post(url, headers=student_headers)
    assert second.status_code == 400
    assert second.json() == {"error": "You have already marked this company as helpful"}


def test_rate_difficulty(client, student_headers, approved_company):
    url = f"/api/companies/{approved_company['_id']}/rate-difficulty"
    for rating in (1, 3, 5):
        response = client.post(url, headers=student_headers, json={"rating": rating})
    assert response.json()["interview_difficulty_level"] == 3.0
    assert response.json()["difficulty_rating_count"] == 3

    bad = client.post(url, headers=student_headers, json={"rating": 6})
    assert bad.status_code == 400
    assert "rating" in bad.json()["details"]


def test_admin_update_company(client, admin_headers, approved_company):
    response = client.put(f"/api/admin/companies/{approved_company['_id']}", headers=admin_headers,
                          json={"eligibility": "<i>All</i> branches", "helpfulCount": 50})
    assert response.status_code == 200
    assert response.json()["success"] is True
    company = response.json()["company"]
    assert company["eligibility"] == "All branches"
    assert company.get("helpfulCount", 0) == 0


def test_admin_reject_company(client, admin_headers, make_company):
    company = make_company(status="pending")
    response = client.delete(f"/api/admin/companies/{company['_id']}/reject", headers=admin_headers)
    assert response.status_code == 200
    missing = client.delete(f"/api/admin/companies/{company['_id']}/reject", headers=admin_headers)
    assert missing.status_code == 404


def test_admin_stats(client, admin_headers, student_headers, approved_company, make_company):
    make_company(name="Later", status="pending")
    client.post("/api/submissions", headers=student_headers, json={
        "companyId": str(approved_company["_id"]), "type": "mustDoTopics", "content": "DP",
    })
    stats = client.get("/api/admin/stats", headers=admin_headers).json()
    assert stats == {"totalUsers": 2, "totalSubmissions": 1, "totalCompanies": 1, "pendingCompanies": 1}
    assert client.get("/api/admin/stats/users", headers=admin_headers).json() == {"totalUsers": 2}


# ============================================================
# NOTIFICATIONS
# ============================================================

def test_notification_ownership(client, db, student_headers, admin_headers, approved_company):
    client.get("/api/notifications", headers=student_headers)
    client.post(f"/api/admin/companies/{approved_company['_id']}/approve", headers=admin_headers)

    mine = client.get("/api/notifications", headers=student_headers).json()
    theirs = client.get("/api/notifications", headers=admin_headers).json()
    assert len(mine) == len(theirs) == 1

    stolen = client.put(f"/api/notifications/{theirs[0]['_id']}/seen", headers=student_headers)
    assert stolen.status_code == 404

    seen = client.put(f"/api/notifications/{mine[0]['_id']}/seen", headers=student_headers)
    assert seen.json()["notification"]["isSeen"] is True

    deleted = client.delete(f"/api/notifications/{mine[0]['_id']}", headers=student_headers)
    assert deleted.status_code == 200
    cleared = client.delete("/api/notifications", headers=admin_headers)
    assert cleared.json()["deletedCount"] == 1
