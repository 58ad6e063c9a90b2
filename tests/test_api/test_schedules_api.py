"""
Tests for Schedules API
=======================
"""

import pytest
from fastapi import status
from fastapi.testclient import TestClient


@pytest.fixture
def medicine_id(client: TestClient):
    response = client.post("/api/v1/medicines/", json={
        "user_id": "user-1",
        "name": "Atorvastatin",
        "dosage": "20mg",
        "times": ["21:00", "09:00"]
    })
    return response.json()["id"]


class TestDateSchedule:
    """Tests for per-date schedules"""

    @pytest.mark.api
    def test_past_date_is_missed(self, client: TestClient, medicine_id):
        response = client.get("/api/v1/schedules/user-1/date/2020-01-01")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["day"] == "2020-01-01"
        assert data["weekday"] == 2
        assert [i["time"] for i in data["items"]] == ["09:00", "21:00"]
        assert [i["period"] for i in data["items"]] == ["morning", "night"]
        assert all(i["status"] == "missed" for i in data["items"])
        assert data["summary"]["missed"] == 2
        assert data["has_missed"] is True

    @pytest.mark.api
    def test_future_date_is_upcoming(self, client: TestClient, medicine_id):
        data = client.get("/api/v1/schedules/user-1/date/2999-12-31").json()

        assert all(i["status"] == "upcoming" for i in data["items"])
        assert data["has_missed"] is False

    @pytest.mark.api
    def test_missed_check(self, client: TestClient, medicine_id):
        past = client.get("/api/v1/schedules/user-1/date/2020-01-01/missed").json()
        future = client.get("/api/v1/schedules/user-1/date/2999-12-31/missed").json()

        assert past["has_missed"] is True
        assert future["has_missed"] is False

    @pytest.mark.api
    def test_invalid_date(self, client: TestClient):
        response = client.get("/api/v1/schedules/user-1/date/not-a-date")
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


class TestWeekSchedule:
    """Tests for weekly schedules"""

    @pytest.mark.api
    def test_explicit_week(self, client: TestClient, medicine_id):
        response = client.get("/api/v1/schedules/user-1/week", params={"week_start": "2024-03-11"})

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["week_start"] == "2024-03-11"
        assert [d["weekday"] for d in data["days"]] == list(range(7))
        assert all(len(d["items"]) == 2 for d in data["days"])

    @pytest.mark.api
    def test_current_week(self, client: TestClient, medicine_id):
        data = client.get("/api/v1/schedules/user-1/week").json()

        assert len(data["days"]) == 7
        # weeks start on Monday by default
        assert data["days"][0]["weekday"] == 0
