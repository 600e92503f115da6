"""Unit tests for AreaService."""

from collections.abc import Generator
from datetime import datetime
from typing import TYPE_CHECKING

import pytest

from choretrack.database import Base
from choretrack.models.area import DEFAULT_AREA_COLOR
from choretrack.models.task import Task
from choretrack.schemas.area import AreaCreate, AreaUpdate
from choretrack.schemas.task import TaskCreate
from choretrack.services.area_service import AreaService
from choretrack.services.task_service import TaskService
from choretrack.utils.period_utils import Frequency
from tests.utils import create_sqlite_engine, session_scope

if TYPE_CHECKING:
    from sqlalchemy.orm import Session


engine, SessionLocal = create_sqlite_engine()


@pytest.fixture
def db_session() -> Generator["Session", None, None]:
    """Fresh schema per test."""
    with session_scope(Base, engine, SessionLocal) as db:
        yield db


class TestAreaService:
    """Unit tests for AreaService."""

    def test_create_area_with_default_color(self, db_session: "Session") -> None:
        area = AreaService.create_area(db_session, AreaCreate(name="  Cocina "))

        assert area.id is not None
        assert area.name == "Cocina"
        assert area.color == DEFAULT_AREA_COLOR
        assert area.created_at is not None

    def test_get_area(self, db_session: "Session") -> None:
        created = AreaService.create_area(db_session, AreaCreate(name="Baño", color="#10B981"))

        assert AreaService.get_area(db_session, created.id).color == "#10B981"
        assert AreaService.get_area(db_session, 999) is None

    def test_get_all_areas_sorted_by_name(self, db_session: "Session") -> None:
        for name in ("Salón", "Baño", "Cocina"):
            AreaService.create_area(db_session, AreaCreate(name=name))

        names = [area.name for area in AreaService.get_all_areas(db_session)]

        assert names == ["Baño", "Cocina", "Salón"]

    def test_update_area_partial(self, db_session: "Session") -> None:
        area = AreaService.create_area(db_session, AreaCreate(name="Cocina", color="#000000"))

        updated = AreaService.update_area(db_session, area.id, AreaUpdate(name="Cocina grande"))

        assert updated.name == "Cocina grande"
        assert updated.color == "#000000"

    def test_update_missing_area(self, db_session: "Session") -> None:
        assert AreaService.update_area(db_session, 42, AreaUpdate(name="x")) is None

    def test_delete_area_detaches_tasks(self, db_session: "Session") -> None:
        area = AreaService.create_area(db_session, AreaCreate(name="Jardín"))
        task = TaskService.create_task(
            db_session,
            TaskCreate(
                name="Regar",
                frequency=Frequency.WEEKLY,
                area_id=area.id,
                start_date=datetime(2024, 1, 1),
            ),
        )

        assert AreaService.delete_area(db_session, area.id) is True

        db_session.expire_all()
        remaining = db_session.get(Task, task.id)
        assert remaining is not None
        assert remaining.area_id is None
        assert AreaService.get_area(db_session, area.id) is None

    def test_delete_missing_area(self, db_session: "Session") -> None:
        assert AreaService.delete_area(db_session, 123) is False
