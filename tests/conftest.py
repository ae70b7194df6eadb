"""Pytest configuration and fixtures."""

import copy
import math
from datetime import datetime, timedelta, timezone

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from internhub.core.auth import get_current_user
from internhub.core.config import Settings
from internhub.core.errors import Conflict
from internhub.main import app
from internhub.services.geocoder import GeoCandidate, get_geocoder
from internhub.services.mongo_service import (
    get_company_repository, get_user_repository, parse_object_id
)

BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


# ============================================================
# IN-MEMORY COLLABORATORS
# ============================================================

def _matches(doc, condition):
    value = doc.get(condition.field)
    op = condition.operator.value
    expected = condition.value
    if op == "eq":
        return value == expected or (isinstance(value, list) and expected in value)
    if op == "ne":
        return value != expected
    if op == "in":
        if isinstance(value, list):
            return any(v in expected for v in value)
        return value in expected
    if value is None:
        return False
    return {
        "gt": lambda: value > expected,
        "gte": lambda: value >= expected,
        "lt": lambda: value < expected,
        "lte": lambda: value <= expected,
    }[op]()


def _apply(docs, spec):
    result = [d for d in docs if all(_matches(d, c) for c in spec.conditions)]
    for key in reversed(spec.sort):
        result.sort(key=lambda d: d.get(key.field), reverse=key.direction.value == "desc")
    result = result[spec.skip:spec.skip + spec.limit]
    if spec.select:
        result = [{k: v for k, v in d.items() if k in spec.select or k == "_id"} for d in result]
    return result


def _angular_distance(lng1, lat1, lng2, lat2):
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dphi = phi2 - phi1
    dlmb = math.radians(lng2 - lng1)
    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlmb / 2) ** 2
    return 2 * math.asin(math.sqrt(a))


class FakeCompanyRepository:
    """Stores deep copies, like a database would."""

    def __init__(self, companies=()):
        self._companies = [copy.deepcopy(c) for c in companies]
        self.saves = 0

    def all(self):
        return copy.deepcopy(self._companies)

    def _flatten(self):
        for company in self._companies:
            for internship in company.get("internships", []):
                yield dict(copy.deepcopy(internship),
                           companyName=company["companyName"], companyId=company["_id"])

    def list_companies(self, spec):
        return copy.deepcopy(_apply(self._companies, spec))

    def get_company(self, company_id):
        oid = parse_object_id(company_id)
        for company in self._companies:
            if company["_id"] == oid:
                return copy.deepcopy(company)
        return None

    def find_company_by_name(self, company_name):
        for company in self._companies:
            if company["companyName"] == company_name:
                return copy.deepcopy(company)
        return None

    def insert_company(self, company):
        doc = dict(company, _id=ObjectId(), revision=0)
        doc.setdefault("internships", [])
        doc.setdefault("createdAt", BASE_TIME)
        self._companies.append(copy.deepcopy(doc))
        return doc

    def save_company(self, company):
        for index, stored in enumerate(self._companies):
            if stored["_id"] == company["_id"]:
                if stored.get("revision", 0) != company.get("revision", 0):
                    raise Conflict("stale")
                doc = dict(company, revision=company.get("revision", 0) + 1)
                self._companies[index] = copy.deepcopy(doc)
                self.saves += 1
                return doc
        raise Conflict("gone")

    def delete_company(self, company_id):
        oid = parse_object_id(company_id)
        before = len(self._companies)
        self._companies = [c for c in self._companies if c["_id"] != oid]
        return len(self._companies) < before

    def find_companies_with_internship(self, internship_id):
        return [
            copy.deepcopy(c) for c in self._companies
            if any(i["_id"] == internship_id for i in c.get("internships", []))
        ]

    def list_internships(self, spec):
        return _apply(list(self._flatten()), spec)

    def internships_within(self, radius_query):
        found = []
        for internship in self._flatten():
            point = internship.get("geoPosition")
            if not point:
                continue
            lng, lat = point["coordinates"]
            if _angular_distance(radius_query.longitude, radius_query.latitude, lng, lat) <= radius_query.radius:
                found.append(internship)
        return found


class FakeUserRepository:

    def __init__(self):
        self.users = []

    def create(self, name, email, password_hash, role):
        doc = {"_id": ObjectId(), "name": name, "email": email.lower(),
               "password": password_hash, "role": role, "createdAt": BASE_TIME}
        self.users.append(doc)
        return dict(doc)

    def get_by_id(self, user_id):
        oid = parse_object_id(user_id)
        for user in self.users:
            if user["_id"] == oid:
                return {k: v for k, v in user.items() if k != "password"}
        return None

    def get_by_email(self, email):
        for user in self.users:
            if user["email"] == email.lower():
                return dict(user)
        return None


class FakeGeocoder:

    def __init__(self, known=None):
        self.known = known or {}
        self.calls = []

    def geocode(self, address):
        self.calls.append(address)
        return list(self.known.get(address, []))


# ============================================================
# SAMPLE DATA
# ============================================================

BOSTON = GeoCandidate(latitude=42.3601, longitude=-71.0589, formatted_address="Boston, MA, US")
CAMBRIDGE = GeoCandidate(latitude=42.3736, longitude=-71.1097, formatted_address="Cambridge, MA, US")
NEW_YORK = GeoCandidate(latitude=40.7128, longitude=-74.0060, formatted_address="New York, NY, US")


def _internship(job_id, title, created_offset, **fields):
    doc = {
        "_id": ObjectId(),
        "jobId": job_id,
        "title": title,
        "isRemote": False,
        "skills": [],
        "createdAt": BASE_TIME + timedelta(days=created_offset),
    }
    doc.update(fields)
    return doc


@pytest.fixture
def companies():
    acme = {
        "_id": ObjectId(),
        "companyName": "Acme",
        "industry": "Manufacturing",
        "createdAt": BASE_TIME,
        "revision": 0,
        "internships": [
            _internship("A-1", "Backend Intern", 1, minSalary=40, maxSalary=60,
                        skills=["Python", "SQL"], address="Boston",
                        geoPosition=BOSTON.to_point()),
            _internship("A-2", "Data Intern", 2, minSalary=55, maxSalary=80,
                        skills=["SQL"], address="Cambridge",
                        geoPosition=CAMBRIDGE.to_point()),
        ],
    }
    globex = {
        "_id": ObjectId(),
        "companyName": "Globex",
        "industry": "Software",
        "createdAt": BASE_TIME + timedelta(days=1),
        "revision": 0,
        "internships": [
            _internship("A-1", "Frontend Intern", 3, minSalary=70, maxSalary=90,
                        skills=["JavaScript"], address="New York",
                        geoPosition=NEW_YORK.to_point()),
        ],
    }
    return [acme, globex]


@pytest.fixture
def settings():
    return Settings(earth_radius_mi=3963.2, earth_radius_km=6378.1, geocode_on_save=True)


@pytest.fixture
def company_repo(companies):
    return FakeCompanyRepository(companies)


@pytest.fixture
def user_repo():
    return FakeUserRepository()


@pytest.fixture
def geocoder():
    return FakeGeocoder({"Boston": [BOSTON], "Cambridge": [CAMBRIDGE], "New York": [NEW_YORK]})


@pytest.fixture
def publisher():
    return {"user_id": str(ObjectId()), "name": "Pat", "email": "pat@example.com", "role": "publisher"}


@pytest.fixture
def client(company_repo, user_repo, geocoder, publisher):
    """Test client with fake storage and geocoder, signed in as a publisher."""
    app.dependency_overrides[get_company_repository] = lambda: company_repo
    app.dependency_overrides[get_user_repository] = lambda: user_repo
    app.dependency_overrides[get_geocoder] = lambda: geocoder
    app.dependency_overrides[get_current_user] = lambda: publisher
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def anonymous_client(company_repo, user_repo, geocoder):
    """Test client with fake storage and no signed-in user."""
    app.dependency_overrides[get_company_repository] = lambda: company_repo
    app.dependency_overrides[get_user_repository] = lambda: user_repo
    app.dependency_overrides[get_geocoder] = lambda: geocoder
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
