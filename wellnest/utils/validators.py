"""
Validation utilities
"""
import math
from typing import Any, Dict, Optional, Tuple

from wellnest.config import settings
from wellnest.errors import ValidationError, VitalsValidationError
from wellnest.models.schemas import Vitals, VitalsPayload

PERIODS = ("week", "month", "all")

# field -> (min, max, message)
VITAL_RANGES: Dict[str, Tuple[float, float, str]] = {
    "age": (1, 120, "Please enter a valid age (1-120)"),
    "systolic": (50, 300, "Please enter a valid systolic pressure (50-300)"),
    "diastolic": (30, 200, "Please enter a valid diastolic pressure (30-200)"),
    "heartbeat": (30, 300, "Please enter a valid heart rate (30-300)"),
    "body_temperature": (95, 105, "Please enter a valid body temperature (95-105°F)"),
}

INTEGER_VITALS = ("age", "systolic", "diastolic", "heartbeat")


def _vital_range(field: str) -> Tuple[float, float, str]:
    if field == "blood_sugar":
        low, high = settings.BLOOD_SUGAR_MIN, settings.BLOOD_SUGAR_MAX
        return low, high, f"Please enter a valid blood sugar level ({low}-{high} mmol/L)"
    return VITAL_RANGES[field]


def validate_vital(field: str, value: Any) -> Tuple[Optional[float], str]:
    """
    Validate one vitals field

    Returns:
        (numeric value, "") when valid, (None, error message) otherwise
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return None, "This field is required"

    try:
        number = float(value)
    except (TypeError, ValueError):
        return None, "Please enter a valid number"
    if math.isnan(number) or math.isinf(number):
        return None, "Please enter a valid number"

    low, high, message = _vital_range(field)
    if number < low or number > high:
        return None, message
    return number, ""


def validate_vitals(payload: VitalsPayload) -> Vitals:
    """
    Validate every vitals field and report all errors together

    Raises:
        VitalsValidationError: With a message per invalid field
    """
    values: Dict[str, float] = {}
    errors: Dict[str, str] = {}
    for field in ("age", "systolic", "diastolic", "heartbeat", "blood_sugar", "body_temperature"):
        number, error = validate_vital(field, getattr(payload, field))
        if error:
            errors[field] = error
        else:
            values[field] = number

    if errors:
        raise VitalsValidationError(errors)

    return Vitals(
        **{field: int(values[field]) if field in INTEGER_VITALS else values[field] for field in values}
    )


def validate_period(period: str) -> str:
    """
    Validate history window parameter

    Raises:
        ValidationError: If period is not 'week', 'month' or 'all'
    """
    if period not in PERIODS:
        raise ValidationError("Invalid period. Must be 'week', 'month', or 'all'")
    return period
