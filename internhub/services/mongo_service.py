"""
MongoDB Service - storage operations for the document collections.

Collections in this database:
1. companies - one document per company, internships embedded in
               the "internships" array
2. users     - accounts allowed to sign in

Internships are only ever written through their company: load the company,
change the embedded array, save the whole document. Saves are optimistic:
the stored "revision" must still match the one that was read.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Iterable, List, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo.collection import Collection

from internhub.core.errors import Conflict
from internhub.db.mongodb import COLLECTIONS, get_collection
from internhub.services.geo import RadiusQuery
from internhub.services.mongo_query import to_mongo
from internhub.services.query_filter import QuerySpec

logger = logging.getLogger(__name__)


# ============================================================
# HELPER: Convert ObjectId to string for JSON serialization
# ============================================================

def serialize_doc(doc: Any) -> Any:
    """Convert a MongoDB document (nested ObjectIds included) to JSON-serializable form."""
    if doc is None:
        return None
    if isinstance(doc, ObjectId):
        return str(doc)
    if isinstance(doc, dict):
        return {key: serialize_doc(value) for key, value in doc.items()}
    if isinstance(doc, list):
        return [serialize_doc(item) for item in doc]
    return doc


def serialize_docs(docs: Iterable[dict]) -> list:
    """Convert list of MongoDB documents to JSON-serializable list."""
    return [serialize_doc(doc) for doc in docs]


def public_company(doc: dict) -> dict:
    """Serialize a company for API output; the revision counter stays internal."""
    data = serialize_doc(doc)
    data.pop("revision", None)
    return data


def parse_object_id(value: Any) -> Optional[ObjectId]:
    """Parse an id from a URL; None when it cannot be an ObjectId."""
    if isinstance(value, ObjectId):
        return value
    if value is None:
        return None
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# Flatten companies into their internships, tagging each with its owner
UNWIND_INTERNSHIPS = [
    {"$unwind": "$internships"},
    {"$replaceRoot": {"newRoot": {"$mergeObjects": [
        "$internships",
        {"companyName": "$companyName", "companyId": "$_id"},
    ]}}},
]


# ============================================================
# COMPANIES COLLECTION
# ============================================================

class CompanyRepository:
    """
    Handles company documents and their embedded internships.
    """

    def __init__(self, collection: Collection = None):
        self.collection: Collection = collection if collection is not None else get_collection(COLLECTIONS["companies"])

    # ---------- Companies ----------

    def list_companies(self, spec: QuerySpec) -> List[dict]:
        query = to_mongo(spec)
        cursor = self.collection.find(query.filter, query.projection)
        if query.sort:
            cursor = cursor.sort(query.sort)
        return list(cursor.skip(query.skip).limit(query.limit))

    def get_company(self, company_id: Any) -> Optional[dict]:
        oid = parse_object_id(company_id)
        if oid is None:
            return None
        return self.collection.find_one({"_id": oid})

    def find_company_by_name(self, company_name: str) -> Optional[dict]:
        return self.collection.find_one({"companyName": company_name})

    def insert_company(self, company: dict) -> dict:
        doc = dict(company)
        doc.setdefault("internships", [])
        doc.setdefault("createdAt", utcnow())
        doc["revision"] = 0
        result = self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        logger.info("Created company %s (%s)", doc.get("companyName"), result.inserted_id)
        return doc

    def save_company(self, company: dict) -> dict:
        """
        Replace the stored company if nobody saved it since it was read.

        Raises:
            Conflict: the stored revision moved on (or the company is gone)
        """
        if "revision" in company:
            revision_filter = company["revision"]
            next_revision = company["revision"] + 1
        else:
            revision_filter = {"$exists": False}
            next_revision = 1

        doc = dict(company, revision=next_revision)
        result = self.collection.replace_one(
            {"_id": company["_id"], "revision": revision_filter},
            doc,
        )
        if result.matched_count == 0:
            logger.warning("Stale save rejected for company %s", company["_id"])
            raise Conflict(f"Company {company['_id']} was modified concurrently, retry the request")
        return doc

    def delete_company(self, company_id: Any) -> bool:
        oid = parse_object_id(company_id)
        if oid is None:
            return False
        result = self.collection.delete_one({"_id": oid})
        return result.deleted_count > 0

    # ---------- Internships ----------

    def find_companies_with_internship(self, internship_id: ObjectId) -> Iterable[dict]:
        """Companies embedding the given internship id, in stored order."""
        return self.collection.find({"internships._id": internship_id})

    def list_internships(self, spec: QuerySpec) -> List[dict]:
        pipeline = UNWIND_INTERNSHIPS + to_mongo(spec).pipeline_stages()
        return list(self.collection.aggregate(pipeline))

    def internships_within(self, radius_query: RadiusQuery) -> List[dict]:
        pipeline = UNWIND_INTERNSHIPS + [
            {"$match": {"geoPosition": {"$geoWithin": {
                "$centerSphere": [radius_query.center, radius_query.radius]
            }}}},
        ]
        return list(self.collection.aggregate(pipeline))


# ============================================================
# USERS COLLECTION
# ============================================================

class UserRepository:
    """
    Handles user accounts. Password hashes never leave this class
    except through get_by_email (needed for login).
    """

    def __init__(self, collection: Collection = None):
        self.collection: Collection = collection if collection is not None else get_collection(COLLECTIONS["users"])

    def create(self, name: str, email: str, password_hash: str, role: str) -> dict:
        doc = {
            "name": name,
            "email": email.lower(),
            "password": password_hash,
            "role": role,
            "createdAt": utcnow(),
        }
        result = self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        return doc

    def get_by_id(self, user_id: Any) -> Optional[dict]:
        oid = parse_object_id(user_id)
        if oid is None:
            return None
        return self.collection.find_one({"_id": oid}, {"password": 0})

    def get_by_email(self, email: str) -> Optional[dict]:
        return self.collection.find_one({"email": email.lower()})


# ============================================================
# FASTAPI DEPENDENCIES
# ============================================================

def get_company_repository() -> CompanyRepository:
    return CompanyRepository()


def get_user_repository() -> UserRepository:
    return UserRepository()
