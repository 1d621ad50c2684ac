"""
Usage ledger: append-only records of billable actions plus per-user stats.
"""
import logging
from datetime import datetime, time, timedelta
from typing import Any, Dict, Optional
import uuid

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.base import utcnow
from app.models.usage import UsageRecord, USAGE_KINDS
from app.models.user import User

logger = logging.getLogger(__name__)

RECENT_ACTIVITY_LIMIT = 10
DAILY_WINDOW_DAYS = 7


class UsageService:
    """Service for recording and summarizing usage."""

    def __init__(self, db: AsyncSession):
        self.db = db

    def record(
        self,
        user: User,
        kind: str,
        *,
        resource_type: Optional[str] = None,
        resource_id: Optional[uuid.UUID] = None,
        total_tokens: int = 0,
        storage_used: int = 0,
        request_size: int = 0,
        response_size: int = 0,
        compute_time_ms: int = 0,
        endpoint: Optional[str] = None,
        ip: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> UsageRecord:
        """
        Stage a usage record on the session. The caller commits it together
        with the action it describes.

        Args:
            user: User the action is billed to
            kind: One of document_upload, model_training, chat, api_call

        Returns:
            The pending UsageRecord
        """
        if kind not in USAGE_KINDS:
            raise ValueError(f"Unknown usage kind: {kind}")

        record = UsageRecord(
            user_id=user.id,
            team_id=user.team_id,
            kind=kind,
            resource_type=resource_type,
            resource_id=resource_id,
            total_tokens=total_tokens,
            storage_used=storage_used,
            request_size=request_size,
            response_size=response_size,
            compute_time_ms=compute_time_ms,
            endpoint=endpoint,
            ip=ip,
            user_agent=user_agent,
        )
        self.db.add(record)
        return record

    async def summary(self, user_id: uuid.UUID) -> Dict[str, Any]:
        """
        Aggregate a user's usage: counts per kind, totals, the last seven
        days and the most recent records.
        """
        rows = await self.db.execute(
            select(
                UsageRecord.kind,
                func.count(UsageRecord.id),
                func.coalesce(func.sum(UsageRecord.total_tokens), 0),
                func.coalesce(func.sum(UsageRecord.storage_used), 0),
            )
            .where(UsageRecord.user_id == user_id)
            .group_by(UsageRecord.kind)
        )
        counts = {kind: 0 for kind in USAGE_KINDS}
        total_tokens = 0
        storage_used = 0
        for kind, count, tokens, storage in rows.all():
            counts[kind] = count
            total_tokens += int(tokens)
            storage_used += int(storage)

        today = utcnow().date()
        window_start = today - timedelta(days=DAILY_WINDOW_DAYS - 1)
        recent = await self.db.execute(
            select(UsageRecord.timestamp, UsageRecord.total_tokens)
            .where(
                UsageRecord.user_id == user_id,
                UsageRecord.timestamp >= datetime.combine(window_start, time.min),
            )
        )
        daily = {
            (window_start + timedelta(days=offset)).isoformat(): {"count": 0, "tokens": 0}
            for offset in range(DAILY_WINDOW_DAYS)
        }
        for timestamp, tokens in recent.all():
            bucket = daily.get(timestamp.date().isoformat())
            if bucket is not None:
                bucket["count"] += 1
                bucket["tokens"] += tokens or 0

        activity = await self.db.execute(
            select(UsageRecord)
            .where(UsageRecord.user_id == user_id)
            .order_by(UsageRecord.timestamp.desc())
            .limit(RECENT_ACTIVITY_LIMIT)
        )

        return {
            "usage_by_kind": [{"kind": kind, "count": count} for kind, count in counts.items()],
            "total_tokens": total_tokens,
            "storage_used": storage_used,
            "daily_usage": [
                {"date": day, "count": bucket["count"], "tokens": bucket["tokens"]}
                for day, bucket in daily.items()
            ],
            "recent_activity": list(activity.scalars().all()),
        }
