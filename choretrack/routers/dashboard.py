"""API router for the dashboard view."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from choretrack.database import get_db
from choretrack.schemas.dashboard import DashboardResponse
from choretrack.services.dashboard_service import DashboardService

router = APIRouter()


@router.get("/", response_model=DashboardResponse)
def get_dashboard(
    db: Session = Depends(get_db),
) -> DashboardResponse:
    """Current periods, active tasks grouped by frequency and completion counters."""
    return DashboardService.build(db)
