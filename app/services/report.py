"""Day-21 Commitment Report: small-wins summary, resilience, vow evolution, evidence highlights."""
import logging
from datetime import date, datetime, timedelta

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.checkin import Checkin
from app.models.evidence import Evidence
from app.models.vow import Vow
from app.schemas.metrics import (
    Day21ReportSchema,
    EvidenceHighlightSchema,
    ResilienceBreakdownSchema,
    VowEvolutionSchema,
    VowSnapshotSchema,
)
from app.services.metrics import calculate_small_wins_summary

logger = logging.getLogger(__name__)

# A check-in this many days or more after the previous one is a comeback
COMEBACK_GAP_DAYS = 2
MAX_HIGHLIGHTS = 3

# Transcript keywords (JA): struggle + persistence in the same check-in counts once
STRUGGLE_KEYWORDS = ["辛い", "きつい", "大変", "難しい", "やめたい", "諦め", "挫折", "苦しい"]
PERSIST_KEYWORDS = ["頑張", "続け", "乗り越え", "踏ん張", "やる", "負けない"]


def count_comebacks(checkin_dates: list[date]) -> int:
    days = sorted(set(checkin_dates))
    gap = timedelta(days=COMEBACK_GAP_DAYS)
    return sum(1 for prev, cur in zip(days, days[1:]) if cur - prev >= gap)


def is_persistence_mention(transcript: str | None) -> bool:
    text = transcript or ""
    return any(k in text for k in STRUGGLE_KEYWORDS) and any(k in text for k in PERSIST_KEYWORDS)


def compute_resilience(checkins: list) -> ResilienceBreakdownSchema:
    return ResilienceBreakdownSchema(
        if_then_executions=sum(1 for c in checkins if c.if_then_triggered),
        comebacks=count_comebacks([c.date for c in checkins]),
        persistence_in_checkins=sum(1 for c in checkins if is_persistence_mention(c.transcript)),
    )


def _snapshot(vow) -> VowSnapshotSchema:
    created = vow.created_at.isoformat() if vow.created_at else None
    return VowSnapshotSchema(content=vow.content, version=vow.version, created_at=created)


def compute_vow_evolution(vows: list) -> VowEvolutionSchema:
    """First vow vs latest vow, ``vows`` ordered by version."""
    if not vows:
        return VowEvolutionSchema()
    first, last = vows[0], vows[-1]
    if len(vows) == 1:
        return VowEvolutionSchema(v1=_snapshot(first))
    return VowEvolutionSchema(
        v1=_snapshot(first),
        v2=_snapshot(last),
        has_evolved=first.content != last.content,
    )


async def generate_day21_report(db: AsyncSession, user_id: str, now: datetime) -> Day21ReportSchema:
    summary = await calculate_small_wins_summary(db, user_id, now)

    checkins = await db.execute(select(Checkin).where(Checkin.user_id == user_id).order_by(Checkin.date))
    vows = await db.execute(select(Vow).where(Vow.user_id == user_id).order_by(Vow.version, Vow.id))
    evidences = await db.execute(
        select(Evidence)
        .where(Evidence.user_id == user_id)
        .order_by(Evidence.date.desc(), Evidence.id.desc())
        .limit(MAX_HIGHLIGHTS)
    )

    resilience = compute_resilience(list(checkins.scalars().all()))
    resilience_count = (
        resilience.if_then_executions + resilience.comebacks + resilience.persistence_in_checkins
    )
    logger.info("Day-21 report for user %s: tier=%s resilience=%d", user_id, summary.tier, resilience_count)

    return Day21ReportSchema(
        summary=summary,
        resilience_count=resilience_count,
        resilience_breakdown=resilience,
        vow_evolution=compute_vow_evolution(list(vows.scalars().all())),
        evidence_highlights=[
            EvidenceHighlightSchema(id=e.id, title=e.title, type=e.type, date=e.date)
            for e in evidences.scalars().all()
        ],
    )
