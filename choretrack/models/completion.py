"""Completion model: a task done within one period."""

from typing import TYPE_CHECKING

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from choretrack.database import Base
from choretrack.services.time_manager import get_current_time

if TYPE_CHECKING:
    from choretrack.models.task import Task


class Completion(Base):
    """Model for task completions.

    `period` holds the period key ("2024-W03", "2024-Q1", ...). Rows from past
    periods are kept; they simply stop matching the current key.
    """

    __tablename__ = "completions"
    __table_args__ = (
        UniqueConstraint("task_id", "period", name="uq_completions_task_period"),
    )

    id = Column(Integer, primary_key=True, index=True)
    task_id = Column(Integer, ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True)
    completed_at = Column(DateTime, default=get_current_time, nullable=False)
    period = Column(String(16), nullable=False, index=True)

    task = relationship("Task", back_populates="completions")

    def __repr__(self) -> str:
        """String representation of Completion."""
        return f"<Completion(id={self.id}, task_id={self.task_id}, period='{self.period}')>"
