"""
Shared MongoDB helpers for the document services.

Collections in this database:
1. companies      - Company records (roles, compensation, interview content)
2. submissions    - Student-proposed content waiting for moderation
3. notifications  - Per-user notification inbox
4. users          - Users seen through the identity provider
"""

from datetime import datetime, timezone
from typing import Any, Optional

from bson import ObjectId
from bson.errors import InvalidId


# ============================================================
# HELPER: Convert ObjectId to string for JSON serialization
# ============================================================

def serialize_value(value: Any) -> Any:
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, dict):
        return {k: serialize_value(v) for k, v in value.items()}
    if isinstance(value, list):
        return [serialize_value(v) for v in value]
    return value


def serialize_doc(doc: dict) -> Optional[dict]:
    """Convert MongoDB document to JSON-serializable dict."""
    if doc is None:
        return None
    return serialize_value(doc)


def serialize_docs(docs: list) -> list:
    """Convert list of MongoDB documents to JSON-serializable list."""
    return [serialize_doc(doc) for doc in docs]


# ============================================================
# HELPER: ids and timestamps
# ============================================================

def parse_object_id(value: Any) -> Optional[ObjectId]:
    """ObjectId for a valid 24-hex id (or an ObjectId), else None."""
    if isinstance(value, ObjectId):
        return value
    if not isinstance(value, str) or not ObjectId.is_valid(value):
        return None
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
