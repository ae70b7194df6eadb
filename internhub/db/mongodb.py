"""
MongoDB Connection Utility

MongoDB stores:
- Company documents, each embedding its internships
- Users allowed to publish internships

WHY embed internships?
- An internship never exists without its company
- A company and its postings are read together
- Saving the company document updates its internships atomically
"""
import logging

from pymongo import ASCENDING, GEOSPHERE, MongoClient
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import PyMongoError

from internhub.core.config import get_settings

logger = logging.getLogger(__name__)

# Global client (connection pooling handled internally by pymongo)
_client: MongoClient = None
_db: Database = None


def get_mongo_client() -> MongoClient:
    """Get or create MongoDB client (singleton pattern)"""
    global _client
    if _client is None:
        _client = MongoClient(get_settings().mongodb_uri, tz_aware=True)
    return _client


def get_mongo_db() -> Database:
    """Get the application database"""
    global _db
    if _db is None:
        client = get_mongo_client()
        _db = client[get_settings().mongodb_db]
    return _db


def get_collection(name: str) -> Collection:
    """
    Get a specific collection.
    Collections we'll use:
    - companies: company documents with embedded internships
    - users: registered accounts
    """
    db = get_mongo_db()
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
    except PyMongoError as e:
        logger.warning("MongoDB connection failed: %s", e)
        return False


def close_mongo_client() -> None:
    global _client, _db
    if _client is not None:
        _client.close()
    _client = None
    _db = None


# Collection name constants (avoid typos)
COLLECTIONS = {
    "companies": "companies",
    "users": "users",
}


def init_mongo_indexes():
    """
    Create indexes for better query performance.
    Call this once during app startup.
    """
    db = get_mongo_db()
    companies = db[COLLECTIONS["companies"]]

    # Company name is the business key
    companies.create_index("companyName", unique=True)

    # Owner lookup by embedded internship id
    companies.create_index("internships._id")

    # Radius search
    companies.create_index([("internships.geoPosition", GEOSPHERE)])

    db[COLLECTIONS["users"]].create_index([("email", ASCENDING)], unique=True)

    logger.info("MongoDB indexes created successfully")
