"""
Physical health check-in endpoints
"""
from fastapi import APIRouter, Depends
from starlette.concurrency import run_in_threadpool

from wellnest.database.connection import require_session
from wellnest.database.queries import run_in_transaction
from wellnest.models.schemas import VitalsPayload
from wellnest.services.checkin_service import CheckInService
from wellnest.services.inflight import submissions
from wellnest.services.prediction import PredictionClient
from wellnest.services.supabase_auth import get_current_user_id
from wellnest.utils.validators import validate_period, validate_vitals

router = APIRouter()


def get_prediction_client() -> PredictionClient:
    return PredictionClient()


@router.post("/physical/submit")
async def submit_physical(
    payload: VitalsPayload,
    user_id: str = Depends(get_current_user_id),
    client: PredictionClient = Depends(get_prediction_client),
):
    """Validate vitals, get the risk prediction and save the check-in"""
    vitals = validate_vitals(payload)
    session_maker = require_session()

    with submissions.claim(user_id, "physical"):
        prediction = await run_in_threadpool(client.predict, vitals)
        record = await run_in_transaction(
            session_maker,
            lambda session: CheckInService.create_physical_record(session, user_id, vitals, prediction),
        )

    return {"status": "ok", "result": prediction, "record": record}


@router.get("/physical/history")
async def get_physical_history(period: str = "all", user_id: str = Depends(get_current_user_id)):
    """Physical check-ins of the user, newest first"""
    period = validate_period(period)
    session_maker = require_session()

    async with session_maker() as session:
        records = await CheckInService.list_physical_records(session, user_id, period)
    return {"status": "ok", "data": records}


@router.get("/physical/history/{record_id}")
async def get_physical_record(record_id: str, user_id: str = Depends(get_current_user_id)):
    session_maker = require_session()
    async with session_maker() as session:
        record = await CheckInService.get_physical_record(session, user_id, record_id)
    return {"status": "ok", "data": record}


@router.delete("/physical/history/{record_id}")
async def delete_physical_record(record_id: str, user_id: str = Depends(get_current_user_id)):
    session_maker = require_session()
    await run_in_transaction(
        session_maker,
        lambda session: CheckInService.delete_physical_record(session, user_id, record_id),
    )
    return {"status": "ok", "id": record_id}
