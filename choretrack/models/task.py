"""Task model for periodic household chores."""

from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Column, DateTime, Enum as SQLEnum, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.types import TypeDecorator

from choretrack.database import Base
from choretrack.services.time_manager import get_current_time
from choretrack.utils.period_utils import Frequency, parse_months_array, serialize_months

if TYPE_CHECKING:
    from choretrack.models.area import Area
    from choretrack.models.completion import Completion


class MonthsArray(TypeDecorator):
    """Month numbers stored as JSON text, loaded as a sorted tuple of ints.

    Parsing happens once when the row is loaded; malformed stored text raises
    MonthsArrayParseError instead of producing a partial list.
    """

    impl = Text
    cache_ok = True

    def process_bind_param(self, value, dialect):
        months = parse_months_array(value)
        if not months:
            return None
        return serialize_months(months)

    def process_result_value(self, value, dialect):
        return parse_months_array(value)


class Task(Base):
    """Model for recurring chores."""

    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False, index=True)
    description = Column(Text, nullable=True)
    frequency = Column(SQLEnum(Frequency), nullable=False, index=True)
    area_id = Column(Integer, ForeignKey("areas.id", ondelete="SET NULL"), nullable=True, index=True)
    start_date = Column(DateTime, nullable=False)
    week_of_month = Column(Integer, nullable=True)  # 1-4, MONTHLY only
    months_array = Column(MonthsArray, nullable=True)  # QUARTERLY/BIANNUAL/ANNUAL
    active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=get_current_time, nullable=False)
    updated_at = Column(DateTime, default=get_current_time, onupdate=get_current_time, nullable=False)

    # Relationships
    area = relationship("Area", back_populates="tasks")
    completions = relationship(
        "Completion",
        back_populates="task",
        cascade="all, delete-orphan",
        order_by="Completion.completed_at.desc()",
    )

    def __repr__(self) -> str:
        """String representation of Task."""
        return f"<Task(id={self.id}, name='{self.name}', frequency={self.frequency})>"
