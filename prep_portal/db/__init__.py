"""
Database module - MongoDB connection.
"""
from prep_portal.db.mongodb import get_mongo_db, test_mongo_connection, COLLECTIONS

__all__ = [
    "get_mongo_db",
    "test_mongo_connection",
    "COLLECTIONS"
]
