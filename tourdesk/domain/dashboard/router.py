"""Dashboard router - read-only statistics"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import STAFF_ROLES, require_roles
from ...database import get_db
from ...models import User
from ...responses import success_response
from .service import DashboardService

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


def get_dashboard_service(db: Session = Depends(get_db)) -> DashboardService:
    """Dependency injection for DashboardService"""
    return DashboardService(db)


@router.get("/overview")
async def get_overview(
    current_user: User = Depends(require_roles(*STAFF_ROLES)),
    service: DashboardService = Depends(get_dashboard_service),
):
    return success_response("Dashboard overview retrieved successfully", service.get_overview())


@router.get("/recent-bookings")
async def get_recent_bookings(
    limit: int = Query(10, ge=1, le=100),
    current_user: User = Depends(require_roles(*STAFF_ROLES)),
    service: DashboardService = Depends(get_dashboard_service),
):
    return success_response("Recent bookings retrieved successfully", service.get_recent_bookings(limit))


@router.get("/revenue-trends")
async def get_revenue_trends(
    months: int = Query(6, ge=1, le=36),
    current_user: User = Depends(require_roles(*STAFF_ROLES)),
    service: DashboardService = Depends(get_dashboard_service),
):
    return success_response("Revenue trends retrieved successfully", service.get_revenue_trends(months))


@router.get("/popular-packages")
async def get_popular_packages(
    limit: int = Query(5, ge=1, le=50),
    current_user: User = Depends(require_roles(*STAFF_ROLES)),
    service: DashboardService = Depends(get_dashboard_service),
):
    return success_response("Popular packages retrieved successfully", service.get_popular_packages(limit))
