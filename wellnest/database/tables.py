"""
Table definitions for check-in records (see schema.sql for the Postgres DDL)
"""
from sqlalchemy import JSON, Boolean, Column, DateTime, Float, Integer, MetaData, String, Table

metadata = MetaData()

physical_health_checkins = Table(
    "physical_health_checkins",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("user_id", String(64), nullable=False, index=True),
    Column("age", Integer, nullable=False),
    Column("systolic", Integer, nullable=False),
    Column("diastolic", Integer, nullable=False),
    Column("heartbeat", Integer, nullable=False),
    Column("blood_sugar", Float, nullable=False),
    Column("body_temperature", Float, nullable=False),
    Column("prediction", String(64)),
    Column("risk_level", String(64)),
    Column("created_at", DateTime(timezone=True), nullable=False),
)

mental_health_checkins = Table(
    "mental_health_checkins",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("user_id", String(64), nullable=False, index=True),
    Column("responses", JSON, nullable=False),
    Column("epds_score", Integer, nullable=False),
    Column("risk_level", String(64)),
    Column("anxiety_flag", Boolean),
    Column("actions", JSON, nullable=False),
    Column("additional_actions", JSON, nullable=False),
    Column("scoring_method", String(16), nullable=False),
    Column("approximate", Boolean, nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False),
)
