"""
Internship Routes

GET /internships - List internships with filters, select, sort, pagination
GET /internships/radius/{address}/{distance}/{unit} - Internships near an address
GET /internships/{id} - Get one internship
POST /internships - Add an internship to a company (publisher/admin)
PUT /internships/{id} - Patch an internship (publisher/admin)
DELETE /internships/{id} - Remove an internship (publisher/admin)
"""

from fastapi import APIRouter, Depends

from internhub.api.deps import get_internship_service, raw_query_params
from internhub.api.responses import collection, success
from internhub.core.auth import authorize, get_current_user
from internhub.core.errors import InvalidQuery
from internhub.schemas.schemas import InternshipCreate, InternshipUpdate
from internhub.services.internship_service import InternshipService
from internhub.services.mongo_service import serialize_doc, serialize_docs

router = APIRouter(prefix="/internships", tags=["Internships"])

publishers = authorize("publisher", "admin")


@router.get("")
async def list_internships(
    params: dict = Depends(raw_query_params),
    service: InternshipService = Depends(get_internship_service),
):
    """
    List internships across all companies.

    Filters: ?minSalary=50, ?durationWeeks[lte]=12, ?skills[in]=Python,SQL
    Controls: ?select=title,minSalary&sort=-minSalary&page=1&limit=25
    """
    return collection(serialize_docs(service.list_internships(params)))


@router.get("/radius/{address}/{distance}/{unit}")
async def internships_in_radius(
    address: str,
    distance: str,
    unit: str,
    user: dict = Depends(get_current_user),
    service: InternshipService = Depends(get_internship_service),
):
    """Internships within `distance` (mi or km) of `address`."""
    return collection(serialize_docs(service.internships_in_radius(address, distance, unit)))


@router.get("/{internship_id}")
async def get_internship(internship_id: str, service: InternshipService = Depends(get_internship_service)):
    """Get a single internship by id."""
    return success(serialize_doc(service.get_internship(internship_id)))


@router.post("", status_code=201)
async def create_internship(
    data: InternshipCreate,
    user: dict = Depends(publishers),
    service: InternshipService = Depends(get_internship_service),
):
    """Add an internship to an existing company. Unknown company -> 403."""
    internship = service.create_internship(data.company_name, data.internship.to_document())
    return success(serialize_doc(internship))


@router.put("/{internship_id}")
async def update_internship(
    internship_id: str,
    data: InternshipUpdate,
    user: dict = Depends(publishers),
    service: InternshipService = Depends(get_internship_service),
):
    """Merge the given fields into the internship."""
    patch = data.to_document(partial=True)
    if not patch:
        raise InvalidQuery("No fields to update")
    return success(serialize_doc(service.update_internship(internship_id, patch)))


@router.delete("/{internship_id}")
async def delete_internship(
    internship_id: str,
    user: dict = Depends(publishers),
    service: InternshipService = Depends(get_internship_service),
):
    """Remove the internship from its company."""
    service.delete_internship(internship_id)
    return success({})
