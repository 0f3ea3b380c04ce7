"""Small-Wins process metrics (check-in, if-then, evidence, commitment rates) and tier.

Everything here is read-only. The pure functions take "now" explicitly; the async
helpers only load rows and hand them to the pure functions.
"""
import logging
import math
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from typing import Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.checkin import Checkin
from app.models.commitment import Commitment
from app.models.evidence import Evidence
from app.models.user import User
from app.schemas.metrics import MetricsSchema, SmallWinsSummarySchema
from app.services.errors import TrialNotStarted, UserNotFound

logger = logging.getLogger(__name__)

# Tier bands: closed lower bound, checked top-down
ON_TRACK_THRESHOLD = 0.7
AT_RISK_THRESHOLD = 0.4

TIER_BANDS = [
    (ON_TRACK_THRESHOLD, "on_track"),
    (AT_RISK_THRESHOLD, "at_risk"),
    (0.0, "needs_reset"),
]

TIER_LABELS = {
    "on_track": "On Track",
    "at_risk": "At Risk",
    "needs_reset": "Needs Reset",
}

TIER_MESSAGES = {
    "on_track": "You are keeping your pace.",
    "at_risk": "Some of your habits need attention.",
    "needs_reset": "Stop for a moment and redesign your plan.",
}

# Product copy shown in the app (tier -> JA)
TIER_MESSAGES_JA = {
    "on_track": "今のペースを維持できています",
    "at_risk": "一部の行動に注意が必要です",
    "needs_reset": "一度立ち止まって再設計しましょう",
}

# One evidence submission expected per started week of the trial
EVIDENCE_PER_WEEK = 1

ONE_DAY = timedelta(days=1)


@dataclass
class ActivityWindow:
    """Check-ins, commitments and evidence of one user within [start, end)."""

    start: date
    end: date
    checkins: list = field(default_factory=list)
    commitments: list = field(default_factory=list)
    evidences: list = field(default_factory=list)

    def contains(self, day: date) -> bool:
        return self.start <= day < self.end


def as_utc(value: datetime) -> datetime:
    """SQLite returns naive datetimes; treat those as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def safe_rate(count: int, total: int) -> float:
    """count / total clamped to [0, 1]; 0 when there is nothing to divide by."""
    if total <= 0:
        return 0.0
    return max(0.0, min(1.0, count / total))


def elapsed_days(trial_start: datetime, now: datetime) -> int:
    """Days since trial start, counting the start day; never below 1."""
    delta = as_utc(now) - as_utc(trial_start)
    return max(1, delta // ONE_DAY + 1)


def expected_evidence(days: int) -> int:
    weeks = max(1, math.ceil(days / 7))
    return weeks * EVIDENCE_PER_WEEK


def checkin_streak(checkin_dates: Iterable[date], today: date) -> int:
    """Length of the unbroken run of check-in days ending today.

    Today does not break the run until it is over: with no check-in yet today,
    counting starts from yesterday.
    """
    days = set(checkin_dates)
    cursor = today if today in days else today - ONE_DAY
    streak = 0
    while cursor in days:
        streak += 1
        cursor -= ONE_DAY
    return streak


def build_metrics(
    checkin_count: int,
    checkin_total: int,
    if_then_count: int,
    evidence_count: int,
    evidence_expected: int,
    commitment_completed: int,
    commitment_total: int,
    checkin_streak: int = 0,
) -> MetricsSchema:
    """Assemble metrics from raw counts."""
    return MetricsSchema(
        checkin_count=checkin_count,
        checkin_total=checkin_total,
        checkin_rate=safe_rate(checkin_count, checkin_total),
        checkin_streak=checkin_streak,
        if_then_count=if_then_count,
        if_then_rate=safe_rate(if_then_count, checkin_total),
        evidence_count=evidence_count,
        evidence_expected=evidence_expected,
        evidence_rate=safe_rate(evidence_count, evidence_expected),
        commitment_completed=commitment_completed,
        commitment_total=commitment_total,
        commitment_rate=safe_rate(commitment_completed, commitment_total),
    )


def compute_metrics(window: ActivityWindow, trial_start: datetime, now: datetime) -> MetricsSchema:
    """Metrics for the rows in ``window`` as of ``now``."""
    today = now.date()
    total = elapsed_days(trial_start, now)

    checkins = [c for c in window.checkins if window.contains(c.date)]
    checkin_dates = {c.date for c in checkins}
    if_then_count = sum(1 for c in checkins if c.if_then_triggered)

    evidence_count = sum(1 for e in window.evidences if window.contains(e.date))

    due = [c for c in window.commitments if window.contains(c.due_date)]
    completed = sum(1 for c in due if c.status == "completed")

    return build_metrics(
        checkin_count=len(checkin_dates),
        checkin_total=total,
        if_then_count=if_then_count,
        evidence_count=evidence_count,
        evidence_expected=expected_evidence(total),
        commitment_completed=completed,
        commitment_total=len(due),
        checkin_streak=checkin_streak(checkin_dates, today),
    )


def average_rate(metrics: MetricsSchema) -> float:
    """Unweighted mean of the four rates; the streak is display-only."""
    return (
        metrics.checkin_rate
        + metrics.if_then_rate
        + metrics.evidence_rate
        + metrics.commitment_rate
    ) / 4


def compute_tier(avg_rate: float) -> str:
    for threshold, tier in TIER_BANDS:
        if avg_rate >= threshold:
            return tier
    return "needs_reset"


def summarize(metrics: MetricsSchema) -> SmallWinsSummarySchema:
    avg = average_rate(metrics)
    tier = compute_tier(avg)
    return SmallWinsSummarySchema(
        metrics=metrics,
        tier=tier,
        tier_label=TIER_LABELS[tier],
        tier_message=TIER_MESSAGES[tier],
        tier_message_ja=TIER_MESSAGES_JA[tier],
        average_rate=avg,
    )


# ---------- loaders ----------

async def get_user(db: AsyncSession, user_id: str) -> User:
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if user is None:
        raise UserNotFound(user_id)
    return user


def trial_start_of(user: User) -> datetime:
    if user.trial_start_date is None:
        raise TrialNotStarted(user.id)
    return as_utc(user.trial_start_date)


async def load_activity_window(db: AsyncSession, user_id: str, start: date, end: date) -> ActivityWindow:
    checkins = await db.execute(
        select(Checkin).where(Checkin.user_id == user_id, Checkin.date >= start, Checkin.date < end)
    )
    commitments = await db.execute(
        select(Commitment).where(
            Commitment.user_id == user_id,
            Commitment.due_date >= start,
            Commitment.due_date < end,
        )
    )
    evidences = await db.execute(
        select(Evidence).where(Evidence.user_id == user_id, Evidence.date >= start, Evidence.date < end)
    )
    return ActivityWindow(
        start=start,
        end=end,
        checkins=list(checkins.scalars().all()),
        commitments=list(commitments.scalars().all()),
        evidences=list(evidences.scalars().all()),
    )


async def calculate_metrics(db: AsyncSession, user_id: str, now: datetime) -> MetricsSchema:
    user = await get_user(db, user_id)
    trial_start = trial_start_of(user)
    window = await load_activity_window(db, user_id, trial_start.date(), now.date() + ONE_DAY)
    return compute_metrics(window, trial_start, now)


async def calculate_small_wins_summary(db: AsyncSession, user_id: str, now: datetime) -> SmallWinsSummarySchema:
    """Metrics and tier for one user as of ``now``."""
    summary = summarize(await calculate_metrics(db, user_id, now))
    logger.debug("Small-wins summary for user %s: tier=%s avg=%.3f", user_id, summary.tier, summary.average_rate)
    return summary
