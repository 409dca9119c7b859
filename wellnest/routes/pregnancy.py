"""
Pregnancy progress and postpartum baby age endpoints
"""
from datetime import date
from typing import Optional

from fastapi import APIRouter, Query

from wellnest.errors import ValidationError
from wellnest.models.schemas import BabyAge, PregnancyInfo
from wellnest.services.pregnancy import (
    calculate_baby_age,
    calculate_pregnancy_from_week,
    calculate_pregnancy_week,
    parse_iso_date,
)

router = APIRouter()


@router.get("/pregnancy/progress", response_model=PregnancyInfo)
async def get_pregnancy_progress(
    due_date: Optional[str] = Query(None, description="Expected due date, YYYY-MM-DD"),
    week: Optional[int] = Query(None, ge=1, le=42, description="Current week entered by the user"),
    recorded_on: Optional[str] = Query(None, description="Date the week was entered, YYYY-MM-DD"),
):
    """
    Pregnancy progress from either the due date or a week number.
    Exactly one of ``due_date`` and ``week`` must be given.
    """
    if (due_date is None) == (week is None):
        raise ValidationError("Provide either due_date or week")

    today = date.today()
    if due_date is not None:
        return calculate_pregnancy_week(today, parse_iso_date(due_date))

    recorded = parse_iso_date(recorded_on) if recorded_on else None
    return calculate_pregnancy_from_week(week, recorded_on=recorded, today=today)


@router.get("/pregnancy/baby-age", response_model=BabyAge)
async def get_baby_age(birth_date: str = Query(..., description="Birth date, YYYY-MM-DD")):
    """Age of the baby for postpartum users"""
    return BabyAge(birth_date=birth_date, age=calculate_baby_age(birth_date))
