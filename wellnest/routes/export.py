"""
Personal data export endpoint
"""
from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from wellnest.database.connection import require_session
from wellnest.models.schemas import UserDataExport
from wellnest.services.checkin_service import CheckInService
from wellnest.services.supabase_auth import get_current_user_id

router = APIRouter()


@router.get("/export", response_model=UserDataExport)
async def export_user_data(user_id: str = Depends(get_current_user_id)):
    """All check-in records of the user as one JSON document"""
    session_maker = require_session()
    async with session_maker() as session:
        physical = await CheckInService.list_physical_records(session, user_id)
        mental = await CheckInService.list_epds_records(session, user_id)

    return UserDataExport(
        physical_health_records=physical,
        mental_health_records=mental,
        export_timestamp=datetime.now(timezone.utc),
    )
