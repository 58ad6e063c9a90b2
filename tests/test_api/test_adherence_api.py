"""
Tests for Adherence API
=======================
"""

import pytest
from datetime import datetime, timedelta
from fastapi import status
from fastapi.testclient import TestClient

from models import DoseRecord, DoseRecordStatus


@pytest.fixture
def medicine_with_history(client: TestClient, db_session):
    """A medicine with three taken and one missed record in early March 2024"""
    medicine = client.post("/api/v1/medicines/", json={
        "user_id": "user-1",
        "name": "Metformin",
        "dosage": "500mg",
        "times": ["08:00"]
    }).json()

    start = datetime(2024, 3, 1)
    pattern = [DoseRecordStatus.TAKEN, DoseRecordStatus.MISSED, DoseRecordStatus.TAKEN, DoseRecordStatus.TAKEN]
    for i, record_status in enumerate(pattern):
        day = start + timedelta(days=i)
        db_session.add(DoseRecord(
            medicine_id=medicine["id"],
            user_id="user-1",
            scheduled_date=day.date(),
            scheduled_time="08:00",
            status=record_status,
            taken_at=day.replace(hour=8, minute=3) if record_status == DoseRecordStatus.TAKEN else None
        ))
    db_session.commit()

    return medicine


class TestMedicineAdherence:
    """Tests for per-medicine statistics"""

    @pytest.mark.api
    def test_medicine_stats(self, client: TestClient, medicine_with_history):
        response = client.get(f"/api/v1/adherence/medicine/{medicine_with_history['id']}", params={"lang": "en"})

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["adherence"] == 75
        assert data["adherence_level"] == "fair"
        assert data["streak"] == 2
        assert data["total_doses"] == 4
        assert data["taken_doses"] == 3
        assert data["missed_doses"] == 1
        assert data["next_dose"].endswith("08:00 AM")

    @pytest.mark.api
    def test_medicine_stats_not_found(self, client: TestClient):
        response = client.get("/api/v1/adherence/medicine/99999")
        assert response.status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.api
    def test_user_medicines_with_stats(self, client: TestClient, medicine_with_history):
        data = client.get("/api/v1/adherence/user/user-1/medicines").json()

        assert len(data) == 1
        assert data[0]["medicine_id"] == str(medicine_with_history["id"])


class TestUserAdherence:
    """Tests for account-wide and range statistics"""

    @pytest.mark.api
    def test_user_stats(self, client: TestClient, medicine_with_history):
        data = client.get("/api/v1/adherence/user/user-1").json()

        assert data["total_medicines"] == 1
        assert data["overall_adherence"] == 75
        assert data["current_streak"] == 2
        assert data["total_doses_taken"] == 3

    @pytest.mark.api
    def test_range(self, client: TestClient, medicine_with_history):
        response = client.get(
            "/api/v1/adherence/user/user-1/range",
            params={"start_date": "2024-03-03", "end_date": "2024-03-04"}
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["adherence"] == 100
        assert data["adherence_level"] == "good"
        assert data["start_date"] == "2024-03-03"

    @pytest.mark.api
    def test_range_without_records_is_perfect(self, client: TestClient):
        data = client.get(
            "/api/v1/adherence/user/user-1/range",
            params={"start_date": "2020-01-01", "end_date": "2020-01-31"}
        ).json()
        assert data["adherence"] == 100

    @pytest.mark.api
    def test_inverted_range(self, client: TestClient):
        response = client.get(
            "/api/v1/adherence/user/user-1/range",
            params={"start_date": "2024-03-10", "end_date": "2024-03-01"}
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST


class TestHealth:

    @pytest.mark.api
    def test_health(self, client: TestClient, medicine_with_history):
        data = client.get("/health").json()

        assert data["status"] == "healthy"
        assert data["database"]["rows"] == {"medicines": 1, "dose_records": 4}
        assert data["config"]["default_language"] == "ko"
