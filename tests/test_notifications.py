"""Notification inbox and new-company fan-out."""

import pytest
from bson import ObjectId

from prep_portal.core.errors import NotFoundError
from prep_portal.services.notification_service import NEW_COMPANY_TITLE


@pytest.fixture
def three_users(users):
    for n in range(3):
        users.ensure(f"user-{n}", f"user{n}@example.com", f"user{n}")
    return ["user-0", "user-1", "user-2"]


# ============================================================
# FAN-OUT
# ============================================================

def test_fan_out_notifies_every_user(make_company, fanout, notifications, three_users):
    company = make_company(name="Acme")
    assert fanout.fan_out(company) == 3
    inbox = notifications.list_for_user("user-1")
    assert len(inbox) == 1
    assert inbox[0]["title"] == NEW_COMPANY_TITLE
    assert inbox[0]["message"] == "Acme has been added to the placement portal. Check it out!"
    assert inbox[0]["companyId"] == company["_id"]
    assert inbox[0]["isSeen"] is False


def test_fan_out_happens_once_per_company(make_company, fanout, notifications, three_users):
    company = make_company()
    fanout.fan_out(company)
    assert fanout.fan_out(company) == 0
    assert notifications.collection.count_documents({"companyId": company["_id"]}) == 3


def test_fan_out_skips_pending_company(make_company, fanout, notifications, three_users):
    company = make_company(status="pending")
    assert fanout.fan_out(company) == 0
    assert notifications.collection.count_documents({}) == 0


def test_fan_out_with_no_users(make_company, fanout):
    assert fanout.fan_out(make_company()) == 0


def test_fan_out_failure_is_swallowed(make_company, fanout, monkeypatch, three_users):
    company = make_company()

    def boom(*args, **kwargs):
        raise RuntimeError("database went away")

    monkeypatch.setattr(fanout.notifications, "insert_many", boom)
    assert fanout.fan_out(company) == 0


# ============================================================
# INBOX
# ============================================================

@pytest.fixture
def announced(make_company, fanout, three_users):
    for name in ("Acme", "Globex"):
        fanout.fan_out(make_company(name=name))


def test_unread_count_and_mark_all(notifications, announced):
    assert notifications.unread_count("user-0") == 2
    assert notifications.mark_all_seen("user-0") == 2
    assert notifications.unread_count("user-0") == 0
    assert notifications.unread_count("user-1") == 2


def test_mark_seen_own_notification(notifications, announced):
    notification = notifications.list_for_user("user-0")[0]
    updated = notifications.mark_seen(str(notification["_id"]), "user-0")
    assert updated["isSeen"] is True
    assert notifications.unread_count("user-0") == 1


def test_other_users_notification_is_not_found(notifications, announced):
    notification = notifications.list_for_user("user-0")[0]
    with pytest.raises(NotFoundError):
        notifications.mark_seen(str(notification["_id"]), "user-1")
    with pytest.raises(NotFoundError):
        notifications.delete(str(notification["_id"]), "user-1")


def test_bad_notification_id(notifications):
    with pytest.raises(NotFoundError):
        notifications.mark_seen("nope", "user-0")
    with pytest.raises(NotFoundError):
        notifications.delete(str(ObjectId()), "user-0")


def test_delete_and_clear(notifications, announced):
    notification = notifications.list_for_user("user-2")[0]
    notifications.delete(str(notification["_id"]), "user-2")
    assert len(notifications.list_for_user("user-2")) == 1
    assert notifications.clear("user-2") == 1
    assert notifications.list_for_user("user-2") == []
    assert len(notifications.list_for_user("user-0")) == 2


def test_list_is_limited(notifications, settings, make_company, fanout, three_users):
    settings.notification_list_limit = 2
    for name in ("Aa", "Bb", "Cc"):
        fanout.fan_out(make_company(name=name))
    assert len(notifications.list_for_user("user-0")) == 2


# ============================================================
# USERS
# ============================================================

def test_ensure_creates_once(users):
    _, created = users.ensure("u1", "u1@example.com", "u1")
    assert created is True
    user, created = users.ensure("u1", "u1@example.com", "renamed")
    assert created is False
    assert user["username"] == "renamed"
    assert users.count() == 1


def test_is_admin_by_role_or_allow_list(users, db):
    db["users"].insert_one({"userId": "r", "email": "r@example.com", "role": "admin"})
    assert users.is_admin(db["users"].find_one({"userId": "r"}))
    assert users.is_admin({"email": "Admin@Example.com"})
    assert not users.is_admin({"email": "student@example.com"})
