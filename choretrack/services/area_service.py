"""Service for area business logic."""

import logging
from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

from choretrack.models.area import Area
from choretrack.models.task import Task

if TYPE_CHECKING:
    from choretrack.schemas.area import AreaCreate, AreaUpdate

logger = logging.getLogger("choretrack.areas")


class AreaService:
    """Service for managing areas."""

    @staticmethod
    def create_area(db: Session, area_data: "AreaCreate") -> Area:
        """Create a new area."""
        area = Area(**area_data.model_dump())
        db.add(area)
        db.commit()
        db.refresh(area)
        logger.info("Area created: id=%s name=%r", area.id, area.name)
        return area

    @staticmethod
    def get_area(db: Session, area_id: int) -> Area | None:
        """Get an area by ID."""
        return db.query(Area).filter(Area.id == area_id).first()

    @staticmethod
    def get_all_areas(db: Session) -> list[Area]:
        """Get all areas ordered by name."""
        return db.query(Area).order_by(Area.name, Area.id).all()

    @staticmethod
    def update_area(db: Session, area_id: int, area_data: "AreaUpdate") -> Area | None:
        """Update an area."""
        area = db.query(Area).filter(Area.id == area_id).first()
        if not area:
            return None

        for key, value in area_data.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(area, key, value)

        db.commit()
        db.refresh(area)
        return area

    @staticmethod
    def delete_area(db: Session, area_id: int) -> bool:
        """Delete an area, detaching its tasks first."""
        area = db.query(Area).filter(Area.id == area_id).first()
        if not area:
            return False

        detached = (
            db.query(Task)
            .filter(Task.area_id == area_id)
            .update({Task.area_id: None}, synchronize_session="fetch")
        )
        db.delete(area)
        db.commit()
        logger.info("Area deleted: id=%s, detached %s task(s)", area_id, detached)
        return True
