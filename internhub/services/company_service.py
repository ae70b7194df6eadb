"""
Company Service - CRUD for company documents.
"""

import logging
from typing import Any, List, Mapping

from internhub.core.errors import ErrorResponse, NotFound
from internhub.services.mongo_service import CompanyRepository
from internhub.services.query_filter import ResourceKind, translate

logger = logging.getLogger(__name__)


class CompanyService:

    def __init__(self, companies: CompanyRepository):
        self.companies = companies

    def list_companies(self, raw_params: Mapping) -> List[dict]:
        spec = translate(raw_params, ResourceKind.companies)
        return self.companies.list_companies(spec)

    def get_company(self, company_id: Any) -> dict:
        company = self.companies.get_company(company_id)
        if company is None:
            raise NotFound(f"Company id {company_id} doesn't exist")
        return company

    def create_company(self, payload: dict) -> dict:
        if self.companies.find_company_by_name(payload["companyName"]) is not None:
            raise ErrorResponse(f"Company '{payload['companyName']}' already exists", 400)
        return self.companies.insert_company(payload)

    def update_company(self, company_id: Any, patch: dict) -> dict:
        """Merge top-level fields. Internships are managed through their own routes."""
        company = self.get_company(company_id)
        new_name = patch.get("companyName")
        if new_name and new_name != company.get("companyName"):
            if self.companies.find_company_by_name(new_name) is not None:
                raise ErrorResponse(f"Company '{new_name}' already exists", 400)
        company.update(patch)
        return self.companies.save_company(company)

    def delete_company(self, company_id: Any) -> None:
        """Deleting a company deletes the internships it embeds."""
        if not self.companies.delete_company(company_id):
            raise NotFound(f"Company id {company_id} doesn't exist")
        logger.info("Deleted company %s", company_id)
