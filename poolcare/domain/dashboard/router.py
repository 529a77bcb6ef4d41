"""Dashboard router"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import CurrentUser, require_management
from ...database import get_db
from .schemas import DashboardResponse
from .service import DashboardService

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


def get_dashboard_service(db: Session = Depends(get_db)) -> DashboardService:
    """Dependency injection for DashboardService"""
    return DashboardService(db)


@router.get("", response_model=DashboardResponse)
async def get_dashboard(
    current_user: CurrentUser = Depends(require_management),
    service: DashboardService = Depends(get_dashboard_service),
):
    """Today's metrics, appointments and cleaners on duty"""
    return service.get_dashboard()


__all__ = ["router"]
