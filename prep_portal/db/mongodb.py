"""
MongoDB Connection Utility

MongoDB stores:
- Company records (schema-flexible: roles, compensation maps, content arrays)
- Pending/approved content submissions
- Per-user notifications
- Users seen through the identity provider
- Per-company discussion comments

WHY MongoDB for these?
- Schema-flexible: compensation keys and content fields vary per company
- Document-oriented: a company and all of its interview content live together
- No joins needed: every merge is a read-modify-write of one document
"""
import logging

from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.database import Database
from pymongo.collection import Collection
from prep_portal.core.config import get_settings

logger = logging.getLogger(__name__)

# Global client (connection pooling handled internally by pymongo)
_client: MongoClient = None
_db: Database = None


def get_mongo_client() -> MongoClient:
    """Get or create MongoDB client (singleton pattern)"""
    global _client
    if _client is None:
        _client = MongoClient(get_settings().mongodb_uri)
    return _client


def get_mongo_db() -> Database:
    """Get the portal database"""
    global _db
    if _db is None:
        client = get_mongo_client()
        _db = client[get_settings().mongodb_db]
    return _db


def get_collection(name: str, db: Database = None) -> Collection:
    """Get a specific collection, from `db` if given."""
    db = db if db is not None else get_mongo_db()
    return db[name]


def test_mongo_connection() -> bool:
    """
    Test if MongoDB is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        client = get_mongo_client()
        # ping command checks connection
        client.admin.command('ping')
        return True
    except Exception as e:
        logger.warning("MongoDB connection failed: %s", e)
        return False


# Collection name constants (avoid typos)
COLLECTIONS = {
    "companies": "companies",
    "submissions": "submissions",
    "notifications": "notifications",
    "users": "users",
    "comments": "comments",
}


def init_mongo_indexes(db: Database = None):
    """
    Create indexes for better query performance.
    Call this once during app startup.
    """
    db = db if db is not None else get_mongo_db()

    db[COLLECTIONS["companies"]].create_index("status")

    # Admin queue: filter by status, newest first
    db[COLLECTIONS["submissions"]].create_index([
        ("status", ASCENDING),
        ("submittedAt", DESCENDING)
    ])
    db[COLLECTIONS["submissions"]].create_index("companyId")

    notifications = db[COLLECTIONS["notifications"]]
    notifications.create_index([("userId", ASCENDING), ("isSeen", ASCENDING)])
    notifications.create_index([("userId", ASCENDING), ("createdAt", DESCENDING)])
    # Fan-out guard lookup
    notifications.create_index([("companyId", ASCENDING), ("type", ASCENDING)])

    db[COLLECTIONS["users"]].create_index("userId", unique=True)

    comments = db[COLLECTIONS["comments"]]
    comments.create_index([("companyId", ASCENDING), ("createdAt", DESCENDING)])
    comments.create_index("userId")

    logger.info("MongoDB indexes created")
