"""
FastAPI dependency providers wiring services to their collaborators.
"""

from typing import Dict, List, Union

from fastapi import Depends, Request

from internhub.core.config import Settings, get_settings
from internhub.services.company_service import CompanyService
from internhub.services.geocoder import Geocoder, get_geocoder
from internhub.services.internship_service import InternshipService
from internhub.services.mongo_service import CompanyRepository, get_company_repository


def get_internship_service(
    companies: CompanyRepository = Depends(get_company_repository),
    geocoder: Geocoder = Depends(get_geocoder),
    settings: Settings = Depends(get_settings),
) -> InternshipService:
    return InternshipService(companies, geocoder, settings)


def get_company_service(
    companies: CompanyRepository = Depends(get_company_repository),
) -> CompanyService:
    return CompanyService(companies)


def raw_query_params(request: Request) -> Dict[str, Union[str, List[str]]]:
    """Query string as key -> value, or key -> list of values when a key repeats."""
    params = {}
    for key in request.query_params.keys():
        values = request.query_params.getlist(key)
        params[key] = values[0] if len(values) == 1 else values
    return params
