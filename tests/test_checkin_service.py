from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import insert

from conftest import ALL_ZERO_RESPONSES, OTHER_USER_ID, USER_ID
from wellnest.database.tables import mental_health_checkins
from wellnest.errors import RecordNotFoundError
from wellnest.models.schemas import EpdsScore, Prediction, Vitals
from wellnest.services.checkin_service import CheckInService, period_start

VITALS = Vitals(age=31, systolic=118, diastolic=76, heartbeat=70, blood_sugar=7.0, body_temperature=98.4)


async def _save_epds(session_maker, user_id=USER_ID, score=5):
    async with session_maker() as session:
        async with session.begin():
            return await CheckInService.create_epds_record(
                session, user_id, ALL_ZERO_RESPONSES, EpdsScore(epds_score=score, risk_level="Low Risk")
            )


async def test_epds_record_round_trip(session_maker):
    saved = await _save_epds(session_maker, score=11)

    async with session_maker() as session:
        loaded = await CheckInService.get_epds_record(session, USER_ID, saved.id)

    assert loaded.epds_score == 11
    assert loaded.responses == ALL_ZERO_RESPONSES
    assert loaded.scoring_method == "remote"
    assert loaded.approximate is False


async def test_history_is_newest_first_and_owner_scoped(session_maker):
    first = await _save_epds(session_maker, score=3)
    second = await _save_epds(session_maker, score=9)
    await _save_epds(session_maker, user_id=OTHER_USER_ID, score=20)

    async with session_maker() as session:
        records = await CheckInService.list_epds_records(session, USER_ID)

    assert [r.id for r in records] == [second.id, first.id]


async def test_period_filter_excludes_old_records(session_maker, sync_engine):
    recent = await _save_epds(session_maker)
    with sync_engine.begin() as conn:
        conn.execute(insert(mental_health_checkins).values(
            id="old-record",
            user_id=USER_ID,
            responses=ALL_ZERO_RESPONSES,
            epds_score=2,
            actions=[],
            additional_actions=[],
            scoring_method="remote",
            approximate=False,
            created_at=datetime.now(timezone.utc) - timedelta(days=40),
        ))

    async with session_maker() as session:
        month = await CheckInService.list_epds_records(session, USER_ID, "month")
        everything = await CheckInService.list_epds_records(session, USER_ID, "all")

    assert [r.id for r in month] == [recent.id]
    assert {r.id for r in everything} == {recent.id, "old-record"}


async def test_delete_only_own_records(session_maker):
    saved = await _save_epds(session_maker)

    async with session_maker() as session:
        async with session.begin():
            with pytest.raises(RecordNotFoundError):
                await CheckInService.delete_epds_record(session, OTHER_USER_ID, saved.id)

    async with session_maker() as session:
        async with session.begin():
            await CheckInService.delete_epds_record(session, USER_ID, saved.id)

    async with session_maker() as session:
        assert await CheckInService.list_epds_records(session, USER_ID) == []


async def test_physical_record_keeps_both_labels(session_maker):
    async with session_maker() as session:
        async with session.begin():
            saved = await CheckInService.create_physical_record(
                session, USER_ID, VITALS, Prediction(prediction="low risk", risk_level="low risk")
            )

    async with session_maker() as session:
        records = await CheckInService.list_physical_records(session, USER_ID, "week")

    assert len(records) == 1
    assert records[0].id == saved.id
    assert records[0].blood_sugar == 7.0
    assert records[0].risk_level == "low risk"


async def test_get_missing_record(session_maker):
    async with session_maker() as session:
        with pytest.raises(RecordNotFoundError):
            await CheckInService.get_physical_record(session, USER_ID, "missing")


def test_period_start():
    now = datetime(2024, 3, 15, tzinfo=timezone.utc)
    assert period_start("week", now) == now - timedelta(days=7)
    assert period_start("month", now) == now - timedelta(days=30)
    assert period_start("all", now) is None
