"""
Internship Service - internships embedded in company documents.

An internship is addressed by its own id, but stored inside its company.
Every read resolves the owner first (find_owner); every write changes the
company's "internships" array and saves the company as a whole.
"""

import logging
from typing import Any, Iterable, List, Mapping, NamedTuple, Optional

from bson import ObjectId

from internhub.core.config import Settings, get_settings
from internhub.core.errors import AddressNotFound, Forbidden, InvalidQuery, NotFound
from internhub.services.geo import compute_radius
from internhub.services.mongo_service import CompanyRepository, parse_object_id, utcnow
from internhub.services.query_filter import ResourceKind, translate

logger = logging.getLogger(__name__)


class LookupResult(NamedTuple):
    company: dict
    internship: dict


def find_owner(companies: Iterable[dict], internship_id: Any) -> Optional[LookupResult]:
    """
    Find the company embedding an internship.

    Companies are scanned in the order given; the first embedded internship
    whose id matches wins. Nothing is modified.

    Returns:
        LookupResult(company, internship), or None when no company has it
    """
    target = str(internship_id)
    for company in companies:
        for internship in company.get("internships") or []:
            if str(internship.get("_id")) == target:
                return LookupResult(company, internship)
    return None


class InternshipService:

    def __init__(self, companies: CompanyRepository, geocoder=None, settings: Settings = None):
        self.companies = companies
        self.geocoder = geocoder
        self.settings = settings or get_settings()

    # ---------- Lookup ----------

    def locate(self, internship_id: Any) -> Optional[LookupResult]:
        oid = parse_object_id(internship_id)
        if oid is None:
            return None
        return find_owner(self.companies.find_companies_with_internship(oid), oid)

    def _require(self, internship_id: Any) -> LookupResult:
        result = self.locate(internship_id)
        if result is None:
            raise NotFound(f"Internship id {internship_id} doesn't exist")
        return result

    # ---------- Queries ----------

    def list_internships(self, raw_params: Mapping) -> List[dict]:
        spec = translate(raw_params, ResourceKind.internships)
        return self.companies.list_internships(spec)

    def get_internship(self, internship_id: Any) -> dict:
        return self._require(internship_id).internship

    def internships_in_radius(self, address: str, distance: Any, unit: str) -> List[dict]:
        query = compute_radius(address, distance, unit, self.geocoder, self.settings)
        logger.info("Radius search around (%s, %s), radius %.6f rad",
                    query.longitude, query.latitude, query.radius)
        return self.companies.internships_within(query)

    # ---------- Mutations ----------

    def create_internship(self, company_name: str, payload: dict) -> dict:
        """
        Append a new internship to the named company.

        Raises:
            Forbidden: no company with that name
        """
        company = self.companies.find_company_by_name(company_name)
        if company is None:
            raise Forbidden("Company doesn't exist")

        internship = dict(payload)
        internship["_id"] = ObjectId()
        internship.setdefault("createdAt", utcnow())
        self._position(internship)

        company["internships"] = list(company.get("internships") or []) + [internship]
        self.companies.save_company(company)
        logger.info("Added internship %s (job %s) to %s",
                    internship["_id"], internship.get("jobId"), company_name)
        return internship

    def update_internship(self, internship_id: Any, patch: dict) -> dict:
        """Merge a field patch into the internship and save its company."""
        company, internship = self._require(internship_id)

        updated = dict(internship)
        updated.update(patch)
        updated["_id"] = internship["_id"]
        min_salary, max_salary = updated.get("minSalary"), updated.get("maxSalary")
        if min_salary is not None and max_salary is not None and max_salary < min_salary:
            raise InvalidQuery("maxSalary must not be lower than minSalary")
        if ("address" in patch and "geoPosition" not in patch
                and patch["address"] != internship.get("address")):
            updated.pop("geoPosition", None)
            self._position(updated)

        company["internships"] = [
            updated if item.get("_id") == internship["_id"] else item
            for item in company["internships"]
        ]
        self.companies.save_company(company)
        return updated

    def delete_internship(self, internship_id: Any) -> None:
        company, internship = self._require(internship_id)
        company["internships"] = [
            item for item in company["internships"] if item.get("_id") != internship["_id"]
        ]
        self.companies.save_company(company)
        logger.info("Removed internship %s from %s", internship["_id"], company.get("companyName"))

    # ---------- Helpers ----------

    def _position(self, internship: dict) -> None:
        """Geocode the address into geoPosition unless a position is given."""
        if internship.get("geoPosition") or not internship.get("address"):
            return
        if not self.settings.geocode_on_save or self.geocoder is None:
            return
        candidates = self.geocoder.geocode(internship["address"])
        if not candidates:
            raise AddressNotFound(f"Address '{internship['address']}' could not be located")
        internship["geoPosition"] = candidates[0].to_point()
