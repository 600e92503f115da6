"""Area model: a room or zone of the house that groups tasks."""

from typing import TYPE_CHECKING

from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.orm import relationship

from choretrack.database import Base
from choretrack.services.time_manager import get_current_time

if TYPE_CHECKING:
    from choretrack.models.task import Task

DEFAULT_AREA_COLOR = "#3B82F6"


class Area(Base):
    """Model for task areas."""

    __tablename__ = "areas"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(50), nullable=False, index=True)
    color = Column(String(7), nullable=False, default=DEFAULT_AREA_COLOR)
    created_at = Column(DateTime, default=get_current_time, nullable=False)

    # Tasks are detached (area_id = NULL) by AreaService before the area is removed
    tasks = relationship("Task", back_populates="area")

    def __repr__(self) -> str:
        """String representation of Area."""
        return f"<Area(id={self.id}, name='{self.name}')>"
