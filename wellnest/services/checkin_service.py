"""
Check-in service - persistence of physical and mental (EPDS) check-in records
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional
from uuid import uuid4

from sqlalchemy import Table, delete, insert, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from wellnest.database.queries import execute_with_retry
from wellnest.database.tables import mental_health_checkins, physical_health_checkins
from wellnest.errors import PersistenceError, RecordNotFoundError
from wellnest.models.schemas import EpdsRecord, EpdsScore, PhysicalRecord, Prediction, Vitals

logger = logging.getLogger(__name__)

PERIOD_DAYS = {"week": 7, "month": 30}


def period_start(period: str, now: Optional[datetime] = None) -> Optional[datetime]:
    """Oldest timestamp included in a history window, None for 'all'"""
    days = PERIOD_DAYS.get(period)
    if days is None:
        return None
    now = now or datetime.now(timezone.utc)
    return now - timedelta(days=days)


class CheckInService:
    """Insert-after-validate, list-by-recency and delete-by-id, scoped to one user"""

    @staticmethod
    async def _execute(session: AsyncSession, statement: Any, action: str, retry: bool = True):
        # Writes run inside run_in_transaction, which retries the whole transaction
        try:
            if retry:
                return await execute_with_retry(session, statement)
            return await session.execute(statement)
        except SQLAlchemyError as e:
            logger.error("Failed to %s: %s: %s", action, type(e).__name__, str(e)[:200])
            raise PersistenceError(f"Database error while trying to {action}") from e

    @staticmethod
    async def _insert(session: AsyncSession, table: Table, values: Dict[str, Any]) -> Dict[str, Any]:
        row = {"id": str(uuid4()), "created_at": datetime.now(timezone.utc), **values}
        await CheckInService._execute(session, insert(table).values(**row), f"save {table.name} record", retry=False)
        return row

    @staticmethod
    async def _list(session: AsyncSession, table: Table, user_id: str, period: str) -> List[Dict[str, Any]]:
        query = (
            select(table)
            .where(table.c.user_id == user_id)
            .order_by(table.c.created_at.desc())
        )
        since = period_start(period)
        if since is not None:
            query = query.where(table.c.created_at >= since)

        result = await CheckInService._execute(session, query, f"load {table.name} history")
        return [dict(row) for row in result.mappings().all()]

    @staticmethod
    async def _get(session: AsyncSession, table: Table, user_id: str, record_id: str) -> Dict[str, Any]:
        result = await CheckInService._execute(
            session,
            select(table).where(table.c.id == record_id, table.c.user_id == user_id),
            f"load {table.name} record",
        )
        row = result.mappings().first()
        if row is None:
            raise RecordNotFoundError(record_id)
        return dict(row)

    @staticmethod
    async def _delete(session: AsyncSession, table: Table, user_id: str, record_id: str) -> None:
        result = await CheckInService._execute(
            session,
            delete(table).where(table.c.id == record_id, table.c.user_id == user_id),
            f"delete {table.name} record",
            retry=False,
        )
        if not result.rowcount:
            raise RecordNotFoundError(record_id)
        logger.info("Deleted %s record %s", table.name, record_id)

    # Mental (EPDS)

    @staticmethod
    async def create_epds_record(
        session: AsyncSession,
        user_id: str,
        responses: Dict[str, int],
        score: EpdsScore,
    ) -> EpdsRecord:
        row = await CheckInService._insert(session, mental_health_checkins, {
            "user_id": user_id,
            "responses": dict(responses),
            "epds_score": score.epds_score,
            "risk_level": score.risk_level,
            "anxiety_flag": score.anxiety_flag,
            "actions": list(score.actions),
            "additional_actions": list(score.additional_actions),
            "scoring_method": score.scoring_method,
            "approximate": score.approximate,
        })
        logger.info("Saved EPDS record %s (score=%s, method=%s)", row["id"], score.epds_score, score.scoring_method)
        return EpdsRecord(**row)

    @staticmethod
    async def list_epds_records(session: AsyncSession, user_id: str, period: str = "all") -> List[EpdsRecord]:
        rows = await CheckInService._list(session, mental_health_checkins, user_id, period)
        return [EpdsRecord(**row) for row in rows]

    @staticmethod
    async def get_epds_record(session: AsyncSession, user_id: str, record_id: str) -> EpdsRecord:
        return EpdsRecord(**await CheckInService._get(session, mental_health_checkins, user_id, record_id))

    @staticmethod
    async def delete_epds_record(session: AsyncSession, user_id: str, record_id: str) -> None:
        await CheckInService._delete(session, mental_health_checkins, user_id, record_id)

    # Physical

    @staticmethod
    async def create_physical_record(
        session: AsyncSession,
        user_id: str,
        vitals: Vitals,
        prediction: Prediction,
    ) -> PhysicalRecord:
        row = await CheckInService._insert(session, physical_health_checkins, {
            "user_id": user_id,
            **vitals.model_dump(),
            "prediction": prediction.prediction,
            "risk_level": prediction.risk_level,
        })
        logger.info("Saved physical check-in %s (risk_level=%s)", row["id"], prediction.risk_level)
        return PhysicalRecord(**row)

    @staticmethod
    async def list_physical_records(session: AsyncSession, user_id: str, period: str = "all") -> List[PhysicalRecord]:
        rows = await CheckInService._list(session, physical_health_checkins, user_id, period)
        return [PhysicalRecord(**row) for row in rows]

    @staticmethod
    async def get_physical_record(session: AsyncSession, user_id: str, record_id: str) -> PhysicalRecord:
        return PhysicalRecord(**await CheckInService._get(session, physical_health_checkins, user_id, record_id))

    @staticmethod
    async def delete_physical_record(session: AsyncSession, user_id: str, record_id: str) -> None:
        await CheckInService._delete(session, physical_health_checkins, user_id, record_id)
