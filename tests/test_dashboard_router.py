"""Unit tests for dashboard and periods API routers."""

from collections.abc import Generator
from typing import TYPE_CHECKING

import pytest
from fastapi.testclient import TestClient

from choretrack.database import Base, get_db
from choretrack.main import app
from choretrack.services.time_manager import reset_time_override, set_current_time
from tests.utils import MID_WEEK, api_path, client_with_session, create_sqlite_engine, session_scope

if TYPE_CHECKING:
    from sqlalchemy.orm import Session


engine, SessionLocal = create_sqlite_engine()


@pytest.fixture
def db_session() -> Generator["Session", None, None]:
    """Fresh schema per test."""
    with session_scope(Base, engine, SessionLocal) as db:
        yield db


@pytest.fixture
def client(db_session: "Session") -> Generator[TestClient, None, None]:
    """Test client with the virtual clock set to a Wednesday at noon."""
    set_current_time(MID_WEEK)
    try:
        with client_with_session(app, get_db, db_session) as test_client:
            yield test_client
    finally:
        reset_time_override()


class TestDashboardRouter:
    """Unit tests for /dashboard."""

    def test_dashboard(self, client: TestClient) -> None:
        weekly = client.post(
            api_path("/tasks/"),
            json={"name": "Fregar", "frequency": "WEEKLY", "start_date": "2024-01-01T00:00:00"},
        ).json()
        client.post(
            api_path("/tasks/"),
            json={"name": "Ventanas", "frequency": "ANNUAL", "start_date": "2024-01-01T00:00:00"},
        )
        client.post(api_path(f"/tasks/{weekly['id']}/complete"))

        response = client.get(api_path("/dashboard/"))

        assert response.status_code == 200
        data = response.json()
        assert data["periods"]["weekly"]["key"] == "2024-W03"
        assert data["periods"]["annual"]["label"] == "2024"
        assert data["tasks"]["weekly"][0]["is_completed"] is True
        assert data["tasks"]["annual"][0]["name"] == "Ventanas"
        assert data["tasks"]["annual"][0]["next_due_date"] == "2025-01-01T00:00:00"
        assert data["summary"]["weekly"] == {"total": 1, "completed": 1, "pending": 0}
        assert data["summary"]["annual"] == {"total": 1, "completed": 0, "pending": 1}


class TestPeriodsRouter:
    """Unit tests for /periods."""

    def test_all_current_periods(self, client: TestClient) -> None:
        response = client.get(api_path("/periods/"))

        assert response.status_code == 200
        keys = {period["frequency"]: period["key"] for period in response.json()}
        assert keys == {
            "WEEKLY": "2024-W03",
            "MONTHLY": "2024-01",
            "QUARTERLY": "2024-Q1",
            "BIANNUAL": "2024-H1",
            "ANNUAL": "2024",
        }

    def test_period_at_reference_instant(self, client: TestClient) -> None:
        response = client.get(api_path("/periods/weekly"), params={"at": "2024-01-15T00:00:00"})

        assert response.status_code == 200
        data = response.json()
        assert data["key"] == "2024-W03"
        assert data["label"] == "15 ene - 21 ene 2024"
        assert data["start"] == "2024-01-15T00:00:00"
        assert data["end"] == "2024-01-21T23:59:59.999999"
        assert data["ordinal"] == 3

    def test_quarter_label(self, client: TestClient) -> None:
        response = client.get(api_path("/periods/QUARTERLY"), params={"at": "2024-08-01T10:00:00"})

        assert response.json()["label"] == "3° Trimestre 2024"

    def test_unknown_frequency(self, client: TestClient) -> None:
        response = client.get(api_path("/periods/daily"))

        assert response.status_code == 422
        assert "DAILY" in response.json()["detail"]
