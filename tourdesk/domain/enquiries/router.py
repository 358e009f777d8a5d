"""Enquiry router - FastAPI endpoints for enquiry forms"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import require_roles
from ...database import get_db
from ...models import EnquiryStatus, User, UserRole
from ...responses import success_response
from ...shared.schemas import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from .schemas import EnquiryCreate, EnquiryResponse, EnquiryStatusUpdate, EnquiryUpdate
from .service import EnquiryService

router = APIRouter(prefix="/enquiries", tags=["Enquiries"])

ENQUIRY_ROLES = (UserRole.ADMIN, UserRole.STAFF)


def get_enquiry_service(db: Session = Depends(get_db)) -> EnquiryService:
    """Dependency injection for EnquiryService"""
    return EnquiryService(db)


@router.post("")
async def create_enquiry(
    data: EnquiryCreate,
    current_user: User = Depends(require_roles(*ENQUIRY_ROLES)),
    service: EnquiryService = Depends(get_enquiry_service),
):
    enquiry = service.create_enquiry(data, current_user)
    return success_response("Enquiry created successfully", EnquiryResponse.model_validate(enquiry), 201)


@router.get("")
async def list_enquiries(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    status: Optional[EnquiryStatus] = Query(None),
    search: Optional[str] = Query(None),
    current_user: User = Depends(require_roles(*ENQUIRY_ROLES)),
    service: EnquiryService = Depends(get_enquiry_service),
):
    result = service.list_enquiries(current_user, page, limit, status.value if status else None, search)
    return success_response("Enquiries retrieved successfully", result)


@router.get("/stats")
async def get_enquiry_stats(
    current_user: User = Depends(require_roles(*ENQUIRY_ROLES)),
    service: EnquiryService = Depends(get_enquiry_service),
):
    return success_response("Enquiry statistics retrieved successfully", service.get_stats())


@router.get("/{enquiry_id}")
async def get_enquiry(
    enquiry_id: str,
    current_user: User = Depends(require_roles(*ENQUIRY_ROLES)),
    service: EnquiryService = Depends(get_enquiry_service),
):
    enquiry = service.get_enquiry(enquiry_id)
    return success_response("Enquiry retrieved successfully", EnquiryResponse.model_validate(enquiry))


@router.put("/{enquiry_id}")
async def update_enquiry(
    enquiry_id: str,
    data: EnquiryUpdate,
    current_user: User = Depends(require_roles(*ENQUIRY_ROLES)),
    service: EnquiryService = Depends(get_enquiry_service),
):
    enquiry = service.update_enquiry(enquiry_id, data)
    return success_response("Enquiry updated successfully", EnquiryResponse.model_validate(enquiry))


@router.patch("/{enquiry_id}/status")
async def update_enquiry_status(
    enquiry_id: str,
    data: EnquiryStatusUpdate,
    current_user: User = Depends(require_roles(*ENQUIRY_ROLES)),
    service: EnquiryService = Depends(get_enquiry_service),
):
    enquiry = service.update_status(enquiry_id, data.status, current_user)
    return success_response("Enquiry status updated successfully", EnquiryResponse.model_validate(enquiry))


@router.delete("/{enquiry_id}")
async def delete_enquiry(
    enquiry_id: str,
    current_user: User = Depends(require_roles(UserRole.ADMIN)),
    service: EnquiryService = Depends(get_enquiry_service),
):
    service.delete_enquiry(enquiry_id)
    return success_response("Enquiry deleted successfully")
