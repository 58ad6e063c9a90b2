"""
Tests for Schedule Service
Tests today's dose list, dose actions and per-date/week schedules end to end
over the database
"""

import pytest
from datetime import date, timedelta

from sqlalchemy.orm import Session

from services.schedule_service import ScheduleService, configured_week_start
from dosing import DoseStatus, ScheduleStatus, Weekday
from models import DoseRecord, DoseRecordStatus


# =============================================================================
# Test Fixtures
# =============================================================================

@pytest.fixture
def schedule_service():
    """Create schedule service instance"""
    return ScheduleService()


# =============================================================================
# Today's Doses
# =============================================================================

class TestGetTodayDoses:
    """Tests for the composed daily pipeline"""

    @pytest.mark.asyncio
    async def test_active_medicines_expanded(
        self, schedule_service, db_session: Session, test_medicine, as_needed_medicine, paused_medicine, now
    ):
        today = await schedule_service.get_today_doses("user-1", "en", now=now, db=db_session)

        assert len(today.doses) == 3
        assert today.doses[0].dose_status == DoseStatus.AS_NEEDED
        assert [g.time for g in today.groups] == ["overdue", "00:00", "20:00"]
        assert today.status.total == 3
        assert today.status.overdue == 1
        assert today.status.upcoming == 1
        assert all(d.name != paused_medicine.name for d in today.doses)

    @pytest.mark.asyncio
    async def test_no_medicines(self, schedule_service, db_session: Session, now):
        today = await schedule_service.get_today_doses("nobody", now=now, db=db_session)

        assert today.doses == []
        assert today.groups == []
        assert today.status.total == 0

    @pytest.mark.asyncio
    async def test_local_taken_ids_apply(self, schedule_service, db_session: Session, test_medicine, now):
        dose_id = f"{test_medicine.id}-dose-1"

        today = await schedule_service.get_today_doses(
            "user-1", "en", now=now, local_taken=[dose_id], db=db_session
        )

        evening = next(d for d in today.doses if d.dose_id == dose_id)
        assert evening.dose_status == DoseStatus.TAKEN
        assert today.doses[-1].dose_id == dose_id
        assert today.status.taken == 1

    @pytest.mark.asyncio
    async def test_local_undo_of_taken_record_counts_as_overdue(
        self, schedule_service, db_session: Session, test_medicine, now
    ):
        await schedule_service.take_dose(test_medicine.id, "user-1", "08:00", now=now, db=db_session)

        today = await schedule_service.get_today_doses(
            "user-1", "en", now=now, local_undone=[f"{test_medicine.id}-dose-0"], db=db_session
        )

        statuses = sorted(d.dose_status.value for d in today.doses)
        assert statuses == ["overdue", "upcoming"]
        assert today.status.taken == 0
        assert today.status.overdue == 1
        assert today.status.upcoming == 1

    @pytest.mark.asyncio
    async def test_local_skip_of_taken_record_is_not_counted_taken(
        self, schedule_service, db_session: Session, test_medicine, now
    ):
        await schedule_service.take_dose(test_medicine.id, "user-1", "08:00", now=now, db=db_session)

        today = await schedule_service.get_today_doses(
            "user-1", "en", now=now, local_skipped=[f"{test_medicine.id}-dose-0"], db=db_session
        )

        statuses = sorted(d.dose_status.value for d in today.doses)
        assert statuses == ["skipped", "upcoming"]
        assert today.status.taken == 0
        assert today.status.overdue == 0
        assert today.status.upcoming == 1

    @pytest.mark.asyncio
    async def test_default_language_is_korean(self, schedule_service, db_session: Session, as_needed_medicine, now):
        today = await schedule_service.get_today_doses("user-1", now=now, db=db_session)
        assert today.doses[0].dose_time_formatted == "필요시"


# =============================================================================
# Dose Actions
# =============================================================================

class TestDoseActions:
    """Tests for take / skip / undo"""

    @pytest.mark.asyncio
    async def test_take_dose_persists_and_reconciles(self, schedule_service, db_session: Session, test_medicine, now):
        record = await schedule_service.take_dose(test_medicine.id, "user-1", "8:00 AM", now=now, db=db_session)

        assert record.status == DoseRecordStatus.TAKEN
        assert record.taken_at == now
        assert record.scheduled_time == "08:00"
        assert record.scheduled_date == now.date()

        today = await schedule_service.get_today_doses("user-1", "en", now=now, db=db_session)
        assert today.status.taken == 1
        assert today.status.overdue == 0
        assert all(g.time != "overdue" for g in today.groups)

    @pytest.mark.asyncio
    async def test_skip_then_undo(self, schedule_service, db_session: Session, test_medicine, now):
        skipped = await schedule_service.skip_dose(test_medicine.id, "user-1", "08:00", note="nauseous", now=now, db=db_session)
        assert skipped.status == DoseRecordStatus.SKIPPED
        assert skipped.note == "nauseous"

        today = await schedule_service.get_today_doses("user-1", now=now, db=db_session)
        assert today.doses[0].dose_status == DoseStatus.UPCOMING
        assert today.doses[-1].dose_status == DoseStatus.SKIPPED

        undone = await schedule_service.undo_dose(test_medicine.id, "user-1", "08:00", now=now, db=db_session)
        assert undone.status == DoseRecordStatus.PENDING
        assert undone.taken_at is None
        assert db_session.query(DoseRecord).count() == 1

        today = await schedule_service.get_today_doses("user-1", now=now, db=db_session)
        assert today.status.overdue == 1

    @pytest.mark.asyncio
    async def test_action_for_other_user_rejected(self, schedule_service, db_session: Session, test_medicine, now):
        with pytest.raises(ValueError):
            await schedule_service.take_dose(test_medicine.id, "intruder", "08:00", now=now, db=db_session)

    @pytest.mark.asyncio
    async def test_action_at_unscheduled_time_rejected(self, schedule_service, db_session: Session, test_medicine, now):
        with pytest.raises(ValueError):
            await schedule_service.take_dose(test_medicine.id, "user-1", "13:00", now=now, db=db_session)
        assert db_session.query(DoseRecord).count() == 0

    @pytest.mark.asyncio
    async def test_action_on_paused_medicine_rejected(self, schedule_service, db_session: Session, paused_medicine, now):
        with pytest.raises(ValueError):
            await schedule_service.skip_dose(paused_medicine.id, "user-1", "09:00", now=now, db=db_session)


# =============================================================================
# Per-Date and Week Schedules
# =============================================================================

class TestSchedules:
    """Tests for calendar schedules over persisted history"""

    @pytest.mark.asyncio
    async def test_yesterday(self, schedule_service, db_session: Session, dose_history, now):
        yesterday = now.date() - timedelta(days=1)

        schedule = await schedule_service.get_schedule_for_date("user-1", yesterday, now=now, db=db_session)

        assert schedule.day == yesterday
        assert schedule.weekday == Weekday.THURSDAY
        assert [i.status for i in schedule.items] == [ScheduleStatus.TAKEN, ScheduleStatus.MISSED]
        assert schedule.summary.taken == 1
        assert schedule.has_missed is True

    @pytest.mark.asyncio
    async def test_has_missed_on_date(self, schedule_service, db_session: Session, test_medicine, now):
        tomorrow = now.date() + timedelta(days=1)
        yesterday = now.date() - timedelta(days=1)

        assert await schedule_service.has_missed_on_date("user-1", tomorrow, now=now, db=db_session) is False
        assert await schedule_service.has_missed_on_date("user-1", yesterday, now=now, db=db_session) is True

    @pytest.mark.asyncio
    async def test_week_defaults_to_current_week(self, schedule_service, db_session: Session, dose_history, now):
        week = await schedule_service.get_week_schedule("user-1", now=now, db=db_session)

        assert configured_week_start() == Weekday.MONDAY
        assert week[0].day == date(2024, 3, 11)
        assert len(week) == 7
        # Monday's morning record is missed, Tuesday-Thursday mornings were taken
        assert [d.items[0].status for d in week[:4]] == [
            ScheduleStatus.MISSED,
            ScheduleStatus.TAKEN,
            ScheduleStatus.TAKEN,
            ScheduleStatus.TAKEN,
        ]
        assert all(d.summary.upcoming == 2 for d in week[5:])

    @pytest.mark.asyncio
    async def test_explicit_week_start(self, schedule_service, db_session: Session, test_medicine, now):
        week = await schedule_service.get_week_schedule(
            "user-1", week_start=date(2024, 3, 17), now=now, db=db_session
        )
        assert [d.day for d in week] == [date(2024, 3, 17) + timedelta(days=i) for i in range(7)]
