"""
Pregnancy progress calculations - gestational week/day, trimester, progress,
baby size comparison and postpartum baby age.
"""
import math
from datetime import date, datetime
from typing import Optional, Tuple, Union

from wellnest.errors import InvalidDateError
from wellnest.models.schemas import BabySize, PregnancyInfo

DateLike = Union[date, datetime]

TOTAL_PREGNANCY_DAYS = 280  # 40 weeks
TOTAL_WEEKS = 40
MIN_SIZE_WEEK = 4

BABY_SIZES = {
    4: BabySize(name="Poppy seed", emoji="🌱", size="2mm"),
    5: BabySize(name="Sesame seed", emoji="🌱", size="3mm"),
    6: BabySize(name="Lentil", emoji="🌱", size="4mm"),
    7: BabySize(name="Blueberry", emoji="🫐", size="10mm"),
    8: BabySize(name="Kidney bean", emoji="🫘", size="16mm"),
    9: BabySize(name="Green olive", emoji="🫒", size="23mm"),
    10: BabySize(name="Strawberry", emoji="🍓", size="31mm"),
    11: BabySize(name="Lime", emoji="🟢", size="41mm"),
    12: BabySize(name="Plum", emoji="🟣", size="54mm"),
    13: BabySize(name="Lemon", emoji="🍋", size="74mm"),
    14: BabySize(name="Apple", emoji="🍏", size="87mm"),
    15: BabySize(name="Orange", emoji="🍊", size="10cm"),
    16: BabySize(name="Avocado", emoji="🥑", size="11.6cm"),
    17: BabySize(name="Turnip", emoji="🥬", size="13cm"),
    18: BabySize(name="Bell pepper", emoji="🫑", size="14.2cm"),
    19: BabySize(name="Mango", emoji="🥭", size="15.3cm"),
    20: BabySize(name="Banana", emoji="🍌", size="16.4cm"),
    21: BabySize(name="Carrot", emoji="🥕", size="26.7cm"),
    22: BabySize(name="Papaya", emoji="🟠", size="27.8cm"),
    23: BabySize(name="Grapefruit", emoji="🍊", size="28.9cm"),
    24: BabySize(name="Corn", emoji="🌽", size="30cm"),
    25: BabySize(name="Cauliflower", emoji="🥬", size="34.6cm"),
    26: BabySize(name="Lettuce", emoji="🥬", size="35.6cm"),
    27: BabySize(name="Eggplant", emoji="🍆", size="36.6cm"),
    28: BabySize(name="Coconut", emoji="🥥", size="37.6cm"),
    29: BabySize(name="Butternut squash", emoji="🎃", size="38.6cm"),
    30: BabySize(name="Cabbage", emoji="🥬", size="39.9cm"),
    31: BabySize(name="Pineapple", emoji="🍍", size="41.1cm"),
    32: BabySize(name="Squash", emoji="🎃", size="42.4cm"),
    33: BabySize(name="Celery", emoji="🥬", size="43.7cm"),
    34: BabySize(name="Cantaloupe", emoji="🍈", size="45cm"),
    35: BabySize(name="Honeydew", emoji="🍈", size="46.2cm"),
    36: BabySize(name="Romaine lettuce", emoji="🥬", size="47.4cm"),
    37: BabySize(name="Swiss chard", emoji="🥬", size="48.6cm"),
    38: BabySize(name="Leek", emoji="🥬", size="49.8cm"),
    39: BabySize(name="Watermelon", emoji="🍉", size="50.7cm"),
    40: BabySize(name="Pumpkin", emoji="🎃", size="51.2cm"),
}


def parse_iso_date(value: Optional[str]) -> date:
    """
    Parse a YYYY-MM-DD date (a full ISO timestamp is accepted, its date part is used)

    Raises:
        InvalidDateError: If the value is empty or not an ISO date
    """
    if not value or not value.strip():
        raise InvalidDateError(value, "Missing date")
    text = value.strip()
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        raise InvalidDateError(value) from None


def trimester_for_week(week: int) -> Tuple[int, str]:
    """Trimester number and label: weeks up to 12, up to 26, then the rest"""
    if week <= 12:
        return 1, "1st"
    if week <= 26:
        return 2, "2nd"
    return 3, "3rd"


def progress_for_week(week: int) -> float:
    return min(100.0, week / TOTAL_WEEKS * 100)


def baby_size_for_week(week: int) -> BabySize:
    """Size comparison for a week, clamped to the table range"""
    key = min(TOTAL_WEEKS, max(MIN_SIZE_WEEK, week))
    return BABY_SIZES.get(key, BABY_SIZES[TOTAL_WEEKS])


def _build_info(week: int, day: Optional[int], days_remaining: int) -> PregnancyInfo:
    trimester, trimester_name = trimester_for_week(week)
    return PregnancyInfo(
        current_week=week,
        current_day=day,
        trimester=trimester,
        trimester_name=trimester_name,
        days_remaining=days_remaining,
        progress_percentage=progress_for_week(week),
        baby_size=baby_size_for_week(week),
    )


def _as_datetime(value: DateLike) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime(value.year, value.month, value.day)


def calculate_pregnancy_week(today: DateLike, due_date: DateLike) -> PregnancyInfo:
    """
    Calculate pregnancy progress from an expected due date.

    Partial days until the due date count as a whole day. Due dates in the
    past give zero days remaining and due dates more than 40 weeks away
    give week 1, day 0; nothing here raises.
    """
    start = _as_datetime(today)
    due = _as_datetime(due_date)
    if (start.tzinfo is None) != (due.tzinfo is None):
        start = start.replace(tzinfo=None)
        due = due.replace(tzinfo=None)

    days_remaining = max(0, math.ceil((due - start).total_seconds() / 86400))
    pregnancy_day = TOTAL_PREGNANCY_DAYS - days_remaining

    week = max(1, pregnancy_day // 7)
    day = max(0, pregnancy_day) % 7
    return _build_info(week, day, days_remaining)


def calculate_pregnancy_from_week(
    current_week: int,
    recorded_on: Optional[date] = None,
    today: Optional[date] = None,
) -> PregnancyInfo:
    """
    Calculate pregnancy progress from a week number entered by the user.

    Without ``recorded_on`` there is no way to know how far into the week the
    pregnancy is, so ``current_day`` is None. When the date the week was
    entered is known, the days elapsed since then move the week forward and
    give the day within it.
    """
    if recorded_on is None:
        days_remaining = max(0, (TOTAL_WEEKS - current_week) * 7)
        return _build_info(current_week, None, days_remaining)

    today = today or date.today()
    elapsed = (today - recorded_on).days
    if elapsed < 0:
        raise InvalidDateError(recorded_on.isoformat(), "Recorded date is in the future")

    pregnancy_day = current_week * 7 + elapsed
    week = max(1, pregnancy_day // 7)
    days_remaining = max(0, TOTAL_PREGNANCY_DAYS - pregnancy_day)
    return _build_info(week, pregnancy_day % 7, days_remaining)


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'s' if count != 1 else ''}"


def calculate_baby_age(birth_date: Union[str, date], today: Optional[date] = None) -> str:
    """
    Human readable age of a baby: days under a week, weeks under 30 days,
    30-day months after that.

    Raises:
        InvalidDateError: If the birth date cannot be parsed or lies in the future
    """
    birth = parse_iso_date(birth_date) if isinstance(birth_date, str) else birth_date
    today = today or date.today()

    diff_days = (today - birth).days
    if diff_days < 0:
        raise InvalidDateError(birth.isoformat(), "Birth date is in the future")

    if diff_days < 7:
        return _plural(diff_days, "day")
    if diff_days < 30:
        return _plural(diff_days // 7, "week")
    return _plural(diff_days // 30, "month")
