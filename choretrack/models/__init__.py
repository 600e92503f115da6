"""Database models."""

from choretrack.models.area import Area
from choretrack.models.completion import Completion
from choretrack.models.task import Task

__all__ = ["Area", "Completion", "Task"]
