"""Tour package router - FastAPI endpoints for tour packages"""

from typing import Literal, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session

from ...auth import STAFF_ROLES, require_roles
from ...database import get_db
from ...models import User
from ...responses import success_response
from ...shared.schemas import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from ...shared.validators import parse_form
from ...uploads import present_files
from .schemas import (
    BulkDeletePackagesRequest,
    TourPackageCreate,
    TourPackageFilters,
    TourPackageResponse,
    TourPackageUpdate,
)
from .service import TourPackageService

router = APIRouter(prefix="/tour-packages", tags=["Tour Packages"])


def get_tour_package_service(db: Session = Depends(get_db)) -> TourPackageService:
    """Dependency injection for TourPackageService"""
    return TourPackageService(db)


@router.post("")
async def create_tour_package(
    package_name: Optional[str] = Form(None, alias="packageName"),
    tour_price: Optional[str] = Form(None, alias="tourPrice"),
    total_seat: Optional[str] = Form(None, alias="totalSeat"),
    desc: Optional[str] = Form(None),
    extra: Optional[str] = Form(None),
    cover_photo: Optional[UploadFile] = File(None, alias="coverPhoto"),
    current_user: User = Depends(require_roles(*STAFF_ROLES)),
    service: TourPackageService = Depends(get_tour_package_service),
):
    data = parse_form(
        TourPackageCreate,
        {"packageName": package_name, "tourPrice": tour_price, "totalSeat": total_seat, "desc": desc, "extra": extra},
    )
    package = await service.create_package(data, present_files([cover_photo]), current_user)
    return success_response("Tour package created successfully", TourPackageResponse.model_validate(package), 201)


@router.get("")
async def list_tour_packages(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    search: Optional[str] = Query(None),
    package_name: Optional[str] = Query(None, alias="packageName"),
    min_price: Optional[float] = Query(None, alias="minPrice", ge=0),
    max_price: Optional[float] = Query(None, alias="maxPrice", ge=0),
    min_seats: Optional[int] = Query(None, alias="minSeats", ge=0),
    max_seats: Optional[int] = Query(None, alias="maxSeats", ge=0),
    sort_by: Literal["packageName", "tourPrice", "totalSeat", "createdAt"] = Query("createdAt", alias="sortBy"),
    sort_order: Literal["asc", "desc"] = Query("desc", alias="sortOrder"),
    current_user: User = Depends(require_roles(*STAFF_ROLES)),
    service: TourPackageService = Depends(get_tour_package_service),
):
    filters = TourPackageFilters(
        search=search,
        package_name=package_name,
        min_price=min_price,
        max_price=max_price,
        min_seats=min_seats,
        max_seats=max_seats,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return success_response("Tour packages retrieved successfully", service.list_packages(filters, page, limit))


@router.get("/stats")
async def get_tour_package_stats(
    current_user: User = Depends(require_roles(*STAFF_ROLES)),
    service: TourPackageService = Depends(get_tour_package_service),
):
    return success_response("Tour package statistics retrieved successfully", service.get_stats())


@router.post("/bulk-delete")
async def bulk_delete_tour_packages(
    data: BulkDeletePackagesRequest,
    current_user: User = Depends(require_roles(*STAFF_ROLES)),
    service: TourPackageService = Depends(get_tour_package_service),
):
    result = service.bulk_delete(data.package_ids)
    return success_response(f"Successfully deleted {result['deletedCount']} tour package(s)", result)


@router.get("/{package_id}")
async def get_tour_package(
    package_id: str,
    current_user: User = Depends(require_roles(*STAFF_ROLES)),
    service: TourPackageService = Depends(get_tour_package_service),
):
    package = service.get_package(package_id)
    return success_response("Tour package retrieved successfully", TourPackageResponse.model_validate(package))


@router.put("/{package_id}")
async def update_tour_package(
    package_id: str,
    package_name: Optional[str] = Form(None, alias="packageName"),
    tour_price: Optional[str] = Form(None, alias="tourPrice"),
    total_seat: Optional[str] = Form(None, alias="totalSeat"),
    desc: Optional[str] = Form(None),
    extra: Optional[str] = Form(None),
    cover_photo: Optional[UploadFile] = File(None, alias="coverPhoto"),
    current_user: User = Depends(require_roles(*STAFF_ROLES)),
    service: TourPackageService = Depends(get_tour_package_service),
):
    data = parse_form(
        TourPackageUpdate,
        {"packageName": package_name, "tourPrice": tour_price, "totalSeat": total_seat, "desc": desc, "extra": extra},
    )
    package = await service.update_package(package_id, data, present_files([cover_photo]))
    return success_response("Tour package updated successfully", TourPackageResponse.model_validate(package))


@router.delete("/{package_id}")
async def delete_tour_package(
    package_id: str,
    current_user: User = Depends(require_roles(*STAFF_ROLES)),
    service: TourPackageService = Depends(get_tour_package_service),
):
    service.delete_package(package_id)
    return success_response("Tour package deleted successfully")


@router.get("/{package_id}/cover-photo")
async def download_cover_photo(
    package_id: str,
    current_user: User = Depends(require_roles(*STAFF_ROLES)),
    service: TourPackageService = Depends(get_tour_package_service),
):
    file_path, download_name = service.get_cover_photo(package_id)
    return FileResponse(file_path, filename=download_name)
