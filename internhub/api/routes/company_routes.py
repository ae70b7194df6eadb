"""
Company Routes

GET /companies - List companies with filters, select, sort, pagination
GET /companies/{id} - Get one company with its internships
POST /companies - Create company (publisher/admin)
PUT /companies/{id} - Update company fields (publisher/admin)
DELETE /companies/{id} - Delete company and its internships (publisher/admin)
"""

from fastapi import APIRouter, Depends

from internhub.api.deps import get_company_service, raw_query_params
from internhub.api.responses import collection, success
from internhub.core.auth import authorize
from internhub.core.errors import InvalidQuery
from internhub.schemas.schemas import CompanyCreate, CompanyUpdate
from internhub.services.company_service import CompanyService
from internhub.services.mongo_service import public_company

router = APIRouter(prefix="/companies", tags=["Companies"])

publishers = authorize("publisher", "admin")


@router.get("")
async def list_companies(
    params: dict = Depends(raw_query_params),
    service: CompanyService = Depends(get_company_service),
):
    """List companies. Same query language as /internships."""
    return collection([public_company(c) for c in service.list_companies(params)])


@router.get("/{company_id}")
async def get_company(company_id: str, service: CompanyService = Depends(get_company_service)):
    return success(public_company(service.get_company(company_id)))


@router.post("", status_code=201)
async def create_company(
    data: CompanyCreate,
    user: dict = Depends(publishers),
    service: CompanyService = Depends(get_company_service),
):
    """Create a company. companyName must be unique."""
    return success(public_company(service.create_company(data.to_document())))


@router.put("/{company_id}")
async def update_company(
    company_id: str,
    data: CompanyUpdate,
    user: dict = Depends(publishers),
    service: CompanyService = Depends(get_company_service),
):
    patch = data.to_document(partial=True)
    if not patch:
        raise InvalidQuery("No fields to update")
    return success(public_company(service.update_company(company_id, patch)))


@router.delete("/{company_id}")
async def delete_company(
    company_id: str,
    user: dict = Depends(publishers),
    service: CompanyService = Depends(get_company_service),
):
    service.delete_company(company_id)
    return success({})
