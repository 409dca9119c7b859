"""
Pydantic models for request/response validation
"""
from datetime import datetime
from typing import Any, Dict, List, Optional, Union
from pydantic import BaseModel, Field


class BabySize(BaseModel):
    """Size comparison shown for a gestational week"""
    name: str
    emoji: str
    size: str


class PregnancyInfo(BaseModel):
    """Derived pregnancy progress, computed on demand and never stored"""
    current_week: int
    current_day: Optional[int] = None  # None when no date is known to derive it from
    trimester: int
    trimester_name: str
    days_remaining: int
    progress_percentage: float
    baby_size: BabySize


class BabyAge(BaseModel):
    birth_date: str
    age: str


class EpdsQuestion(BaseModel):
    id: str
    question: str
    options: List[str]


class EpdsSubmission(BaseModel):
    """EPDS check-in payload: question id -> ordinal answer (0..3), checked by AssessmentSession"""
    responses: Dict[str, Any] = Field(default_factory=dict)


class EpdsScore(BaseModel):
    """Normalised result of a score provider"""
    epds_score: int
    risk_level: Optional[str] = None
    anxiety_flag: Optional[bool] = None
    actions: List[str] = Field(default_factory=list)
    additional_actions: List[str] = Field(default_factory=list)
    scoring_method: str = "remote"
    approximate: bool = False


class EpdsRecord(BaseModel):
    """Persisted EPDS assessment"""
    id: str
    user_id: str
    responses: Dict[str, int]
    epds_score: int
    risk_level: Optional[str] = None
    anxiety_flag: Optional[bool] = None
    actions: List[str] = Field(default_factory=list)
    additional_actions: List[str] = Field(default_factory=list)
    scoring_method: str
    approximate: bool
    created_at: datetime


class VitalsPayload(BaseModel):
    """Physical health check-in payload.

    Values arrive as the raw form strings (or numbers) and are checked by
    ``wellnest.utils.validators.validate_vitals`` so every field error can be
    reported at once.
    """
    age: Union[str, int, float, None] = None
    systolic: Union[str, int, float, None] = None
    diastolic: Union[str, int, float, None] = None
    heartbeat: Union[str, int, float, None] = None
    blood_sugar: Union[str, int, float, None] = None
    body_temperature: Union[str, int, float, None] = None


class Vitals(BaseModel):
    """Validated vitals, numeric"""
    age: int
    systolic: int
    diastolic: int
    heartbeat: int
    blood_sugar: float  # mmol/L
    body_temperature: float  # °F


class Prediction(BaseModel):
    prediction: Optional[str] = None
    risk_level: Optional[str] = None


class PhysicalRecord(BaseModel):
    """Persisted physical health check-in"""
    id: str
    user_id: str
    age: int
    systolic: int
    diastolic: int
    heartbeat: int
    blood_sugar: float
    body_temperature: float
    prediction: Optional[str] = None
    risk_level: Optional[str] = None
    created_at: datetime


class UserDataExport(BaseModel):
    """Personal data export. Profile and reminders are not stored by this service and export empty"""
    profile: Dict[str, Any] = Field(default_factory=dict)
    physical_health_records: List[PhysicalRecord]
    mental_health_records: List[EpdsRecord]
    reminders: List[Dict[str, Any]] = Field(default_factory=list)
    export_timestamp: datetime
