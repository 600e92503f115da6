"""Unit tests for TaskService."""

from collections.abc import Generator
from datetime import datetime
from typing import TYPE_CHECKING

import pytest
from pydantic import ValidationError
from sqlalchemy import text

from choretrack.database import Base
from choretrack.models.completion import Completion
from choretrack.models.task import Task
from choretrack.schemas.area import AreaCreate
from choretrack.schemas.task import TaskCreate, TaskUpdate
from choretrack.services.area_service import AreaService
from choretrack.services.task_service import TaskService
from choretrack.utils.period_utils import Frequency
from tests.utils import create_sqlite_engine, session_scope

if TYPE_CHECKING:
    from pytest_mock.plugin import MockerFixture
    from sqlalchemy.orm import Session


engine, SessionLocal = create_sqlite_engine()


@pytest.fixture
def db_session() -> Generator["Session", None, None]:
    """Fresh schema per test."""
    with session_scope(Base, engine, SessionLocal) as db:
        yield db


def _create(db: "Session", **overrides) -> Task:
    data = {
        "name": "Fregar",
        "frequency": Frequency.WEEKLY,
        "start_date": datetime(2024, 1, 1),
    }
    data.update(overrides)
    return TaskService.create_task(db, TaskCreate(**data))


class TestCreateTask:
    """Task creation and schedule defaults."""

    def test_create_weekly_task(self, db_session: "Session") -> None:
        task = _create(db_session, description="Platos y encimera")

        assert task.id is not None
        assert task.frequency is Frequency.WEEKLY
        assert task.active is True
        assert task.months_array == ()
        assert task.created_at is not None

    def test_quarterly_without_months_gets_defaults(self, db_session: "Session") -> None:
        task = _create(db_session, name="Limpiar horno", frequency=Frequency.QUARTERLY)

        assert task.months_array == (1, 4, 7, 10)

    def test_months_are_parsed_once_and_stored_as_json(self, db_session: "Session") -> None:
        task = _create(db_session, name="Ventanas", frequency=Frequency.BIANNUAL, months_array="[10, 4]")

        assert task.months_array == (4, 10)
        stored = db_session.execute(text("SELECT months_array FROM tasks WHERE id = :id"), {"id": task.id}).scalar_one()
        assert stored == "[4, 10]"

    def test_weekly_task_stores_null_months(self, db_session: "Session") -> None:
        task = _create(db_session)

        stored = db_session.execute(text("SELECT months_array FROM tasks WHERE id = :id"), {"id": task.id}).scalar_one()
        assert stored is None

    def test_invalid_months_rejected_by_schema(self) -> None:
        with pytest.raises(ValidationError):
            TaskCreate(name="x", frequency=Frequency.ANNUAL, start_date=datetime(2024, 1, 1), months_array=[13])

    def test_week_of_month_range(self) -> None:
        with pytest.raises(ValidationError):
            TaskCreate(name="x", frequency=Frequency.MONTHLY, start_date=datetime(2024, 1, 1), week_of_month=5)

    def test_blank_name_rejected(self) -> None:
        with pytest.raises(ValidationError):
            TaskCreate(name="   ", frequency=Frequency.WEEKLY, start_date=datetime(2024, 1, 1))

    def test_unknown_area_rejected(self, db_session: "Session") -> None:
        with pytest.raises(ValueError, match="Area with id 99 not found"):
            _create(db_session, area_id=99)


class TestQueryTasks:
    """Reading tasks back."""

    def test_get_task_loads_area(self, db_session: "Session") -> None:
        area = AreaService.create_area(db_session, AreaCreate(name="Cocina"))
        task = _create(db_session, area_id=area.id)

        loaded = TaskService.get_task(db_session, task.id)

        assert loaded.area.name == "Cocina"
        assert TaskService.get_task(db_session, 999) is None

    def test_get_all_tasks_filters(self, db_session: "Session") -> None:
        area = AreaService.create_area(db_session, AreaCreate(name="Baño"))
        _create(db_session, name="A", area_id=area.id)
        _create(db_session, name="B", frequency=Frequency.MONTHLY)
        _create(db_session, name="C", active=False)

        assert [t.name for t in TaskService.get_all_tasks(db_session)] == ["A", "B", "C"]
        assert [t.name for t in TaskService.get_all_tasks(db_session, active_only=True)] == ["A", "B"]
        assert [t.name for t in TaskService.get_all_tasks(db_session, area_id=area.id)] == ["A"]
        assert [t.name for t in TaskService.get_all_tasks(db_session, frequency=Frequency.MONTHLY)] == ["B"]


class TestUpdateTask:
    """Partial updates."""

    def test_partial_update(self, db_session: "Session") -> None:
        task = _create(db_session, description="old")

        updated = TaskService.update_task(db_session, task.id, TaskUpdate(description="new", active=False))

        assert updated.description == "new"
        assert updated.active is False
        assert updated.name == "Fregar"

    def test_switching_to_annual_applies_default_months(self, db_session: "Session") -> None:
        task = _create(db_session)

        updated = TaskService.update_task(db_session, task.id, TaskUpdate(frequency=Frequency.ANNUAL))

        assert updated.months_array == (1,)

    def test_frequency_change_replaces_previous_months(self, db_session: "Session") -> None:
        task = _create(db_session, frequency=Frequency.QUARTERLY)

        updated = TaskService.update_task(db_session, task.id, TaskUpdate(frequency=Frequency.ANNUAL))

        assert updated.months_array == (1,)
        assert TaskService.next_due_date(updated, datetime(2024, 2, 10)) == datetime(2025, 1, 1)

    @pytest.mark.parametrize(
        ("start", "target", "expected"),
        [
            (Frequency.BIANNUAL, Frequency.QUARTERLY, (1, 4, 7, 10)),
            (Frequency.QUARTERLY, Frequency.WEEKLY, ()),
            (Frequency.ANNUAL, Frequency.MONTHLY, ()),
        ],
    )
    def test_frequency_change_without_months_uses_new_defaults(
        self, db_session: "Session", start: Frequency, target: Frequency, expected: tuple[int, ...]
    ) -> None:
        task = _create(db_session, frequency=start)

        updated = TaskService.update_task(db_session, task.id, TaskUpdate(frequency=target))

        assert updated.months_array == expected

    def test_frequency_change_keeps_explicit_months(self, db_session: "Session") -> None:
        task = _create(db_session, frequency=Frequency.QUARTERLY)

        updated = TaskService.update_task(
            db_session, task.id, TaskUpdate(frequency=Frequency.BIANNUAL, months_array=[3, 9])
        )

        assert updated.months_array == (3, 9)

    def test_same_frequency_keeps_custom_months(self, db_session: "Session") -> None:
        task = _create(db_session, frequency=Frequency.ANNUAL, months_array=[6])

        updated = TaskService.update_task(
            db_session, task.id, TaskUpdate(frequency=Frequency.ANNUAL, name="Revisar caldera")
        )

        assert updated.months_array == (6,)

    def test_null_required_field_rejected(self, db_session: "Session") -> None:
        task = _create(db_session)

        with pytest.raises(ValueError, match="'frequency' cannot be null"):
            TaskService.update_task(db_session, task.id, TaskUpdate(frequency=None))

    def test_update_to_unknown_area_rejected(self, db_session: "Session") -> None:
        task = _create(db_session)

        with pytest.raises(ValueError):
            TaskService.update_task(db_session, task.id, TaskUpdate(area_id=77))

    def test_update_missing_task(self, db_session: "Session") -> None:
        assert TaskService.update_task(db_session, 5, TaskUpdate(name="x")) is None


class TestDeleteTask:
    """Deletion."""

    def test_delete_removes_completions(self, db_session: "Session") -> None:
        task = _create(db_session)
        db_session.add(Completion(task_id=task.id, period="2024-W03", completed_at=datetime(2024, 1, 17)))
        db_session.commit()

        assert TaskService.delete_task(db_session, task.id) is True

        assert db_session.query(Completion).count() == 0
        assert TaskService.delete_task(db_session, task.id) is False


class TestNextDueDate:
    """Service wrapper around the due-date rules."""

    def test_uses_explicit_reference(self, db_session: "Session") -> None:
        task = _create(db_session)
        assert TaskService.next_due_date(task, datetime(2024, 1, 10)) == datetime(2024, 1, 15)

    def test_defaults_to_virtual_clock(self, db_session: "Session", mocker: "MockerFixture") -> None:
        task = _create(db_session, frequency=Frequency.QUARTERLY)
        mocker.patch(
            "choretrack.services.task_service.get_current_time",
            return_value=datetime(2024, 11, 15, 8, 0),
        )

        assert TaskService.next_due_date(task) == datetime(2025, 1, 1)
