"""
EPDS mental health check-in endpoints
"""
from fastapi import APIRouter, Depends
from starlette.concurrency import run_in_threadpool

from wellnest.database.connection import require_session
from wellnest.database.queries import run_in_transaction
from wellnest.models.schemas import EpdsSubmission
from wellnest.services.checkin_service import CheckInService
from wellnest.services.epds import EPDS_QUESTIONS, AssessmentSession
from wellnest.services.inflight import submissions
from wellnest.services.scoring import ScoreProvider, get_score_provider
from wellnest.services.supabase_auth import get_current_user_id
from wellnest.utils.validators import validate_period

router = APIRouter()


@router.get("/epds/questions")
async def get_epds_questions():
    """The ten EPDS questions in scoring order, options ordered 0..3"""
    return {"status": "ok", "questions": EPDS_QUESTIONS}


@router.post("/epds/submit")
async def submit_epds(
    payload: EpdsSubmission,
    user_id: str = Depends(get_current_user_id),
    provider: ScoreProvider = Depends(get_score_provider),
):
    """
    Score and save an EPDS check-in.

    Incomplete questionnaires are rejected before the scoring service is
    called, with the unanswered ids in questionnaire order. Nothing is saved
    when scoring fails; the client keeps its answers and can resubmit.
    """
    assessment = AssessmentSession(payload.responses)
    assessment.validate()
    session_maker = require_session()

    # The claim covers the insert so a duplicate cannot save a second record
    with submissions.claim(user_id, "epds"):
        score = await run_in_threadpool(assessment.submit, provider)
        record = await run_in_transaction(
            session_maker,
            lambda session: CheckInService.create_epds_record(session, user_id, assessment.answers, score),
        )

    return {"status": "ok", "result": score, "record": record}


@router.get("/epds/history")
async def get_epds_history(period: str = "all", user_id: str = Depends(get_current_user_id)):
    """EPDS records of the user, newest first"""
    period = validate_period(period)
    session_maker = require_session()

    async with session_maker() as session:
        records = await CheckInService.list_epds_records(session, user_id, period)
    return {"status": "ok", "data": records}


@router.get("/epds/history/{record_id}")
async def get_epds_record(record_id: str, user_id: str = Depends(get_current_user_id)):
    session_maker = require_session()
    async with session_maker() as session:
        record = await CheckInService.get_epds_record(session, user_id, record_id)
    return {"status": "ok", "data": record}


@router.delete("/epds/history/{record_id}")
async def delete_epds_record(record_id: str, user_id: str = Depends(get_current_user_id)):
    session_maker = require_session()
    await run_in_transaction(
        session_maker,
        lambda session: CheckInService.delete_epds_record(session, user_id, record_id),
    )
    return {"status": "ok", "id": record_id}
