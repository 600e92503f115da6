"""API router for areas."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from choretrack.database import get_db
from choretrack.schemas.area import AreaCreate, AreaResponse, AreaUpdate
from choretrack.services.area_service import AreaService

router = APIRouter()


@router.post("/", response_model=AreaResponse, status_code=status.HTTP_201_CREATED)
def create_area(
    area: AreaCreate,
    db: Session = Depends(get_db),
) -> AreaResponse:
    """Create a new area."""
    created_area = AreaService.create_area(db, area)
    return AreaResponse.model_validate(created_area)


@router.get("/", response_model=list[AreaResponse])
def get_areas(
    db: Session = Depends(get_db),
) -> list[AreaResponse]:
    """Get all areas."""
    areas = AreaService.get_all_areas(db)
    return [AreaResponse.model_validate(area) for area in areas]


@router.get("/{area_id}", response_model=AreaResponse)
def get_area(
    area_id: int,
    db: Session = Depends(get_db),
) -> AreaResponse:
    """Get a specific area by ID."""
    area = AreaService.get_area(db, area_id)
    if not area:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Area with id {area_id} not found",
        )
    return AreaResponse.model_validate(area)


@router.put("/{area_id}", response_model=AreaResponse)
def update_area(
    area_id: int,
    area_update: AreaUpdate,
    db: Session = Depends(get_db),
) -> AreaResponse:
    """Update an area."""
    updated_area = AreaService.update_area(db, area_id, area_update)
    if not updated_area:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Area with id {area_id} not found",
        )
    return AreaResponse.model_validate(updated_area)


@router.delete("/{area_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_area(
    area_id: int,
    db: Session = Depends(get_db),
) -> None:
    """Delete an area; its tasks are kept without an area."""
    success = AreaService.delete_area(db, area_id)
    if not success:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Area with id {area_id} not found",
        )
