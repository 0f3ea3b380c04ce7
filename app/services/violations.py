"""Weekly violation detection, consecutive-week escalation and violation status.

The batch (``run_violation_check``) is triggered by an external scheduler once a
week. Detection and escalation are pure functions over rows and an explicit
``today``; the async functions load rows, persist results and isolate per-user
failures.
"""
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.checkin import Checkin
from app.models.commitment import Commitment
from app.models.evidence import Evidence
from app.models.termination import TerminationRecord
from app.models.user import ACTIVE_PHASES, User
from app.models.violation import NON_COUNTABLE_RESOLUTIONS, ViolationLog
from app.schemas.violation import ViolationCheckResultSchema, ViolationOutSchema, ViolationStatusSchema
from app.services.errors import ViolationAlreadyResolved, ViolationNotFound
from app.services.metrics import as_utc
from app.services.termination import get_pending_termination
from app.services.yearweek import previous_year_week, week_start, year_week

logger = logging.getLogger(__name__)

# No check-in in this many most recent calendar days (today included) -> absence
ABSENCE_DAYS = 3
# Weekly completed / due below this -> commitment_miss
COMMITMENT_MISS_THRESHOLD = 0.5

SEVERITY_WARNING = 1
SEVERITY_RENEGOTIATION = 2
SEVERITY_TERMINATION = 3

TERMINATION_REASON = "3 consecutive violation weeks"


# ---------- detection ----------

def detect_absence(checkin_dates: Iterable[date], today: date) -> bool:
    """True when no check-in is dated within the last ABSENCE_DAYS days (today included)."""
    since = today - timedelta(days=ABSENCE_DAYS - 1)
    return not any(since <= d <= today for d in checkin_dates)


def detect_commitment_miss(commitments: Iterable, today: date) -> bool:
    """True when under half of this week's (Monday-start) commitments are completed.

    A week with no commitments due is not a miss.
    """
    start = week_start(today)
    end = start + timedelta(days=7)
    due = [c for c in commitments if start <= c.due_date < end]
    if not due:
        return False
    completed = sum(1 for c in due if c.status == "completed")
    return completed / len(due) < COMMITMENT_MISS_THRESHOLD


# ---------- escalation ----------

def is_countable(violation) -> bool:
    """Unresolved, or resolved in a way that keeps the week on the record.

    Mirrors ``resolved_at IS NULL OR resolution NOT IN ('dismissed', 'continued')``:
    a resolved row without a resolution does not count.
    """
    if violation.resolved_at is None:
        return True
    return violation.resolution is not None and violation.resolution not in NON_COUNTABLE_RESOLUTIONS


def countable_weeks(violations: Iterable) -> set[int]:
    return {v.week_number for v in violations if is_countable(v)}


def consecutive_violation_weeks(weeks: set[int], current_week: int) -> int:
    """Count weeks present in ``weeks`` walking back from ``current_week`` until the first gap."""
    count = 0
    key = current_week
    while key in weeks:
        count += 1
        key = previous_year_week(key)
    return count


def severity_for_weeks(consecutive_weeks: int) -> int:
    if consecutive_weeks >= 3:
        return SEVERITY_TERMINATION
    if consecutive_weeks == 2:
        return SEVERITY_RENEGOTIATION
    return SEVERITY_WARNING


def required_action(unresolved: Iterable, has_pending_termination: bool) -> str:
    """Which screen the app should route to, from the highest unresolved severity."""
    if has_pending_termination:
        return "termination"
    highest = max((v.severity for v in unresolved), default=0)
    if highest >= SEVERITY_TERMINATION:
        return "termination"
    if highest == SEVERITY_RENEGOTIATION:
        return "renegotiation"
    if highest == SEVERITY_WARNING:
        return "warning"
    return "none"


@dataclass
class UserViolationOutcome:
    user_id: str
    detected: list[str] = field(default_factory=list)
    created: int = 0
    consecutive_weeks: int = 0
    severity: int = 0
    termination_created: bool = False


# ---------- persistence helpers ----------

async def _load_violations(db: AsyncSession, user_id: str) -> list[ViolationLog]:
    result = await db.execute(
        select(ViolationLog)
        .where(ViolationLog.user_id == user_id)
        .order_by(ViolationLog.detected_at.desc(), ViolationLog.id.desc())
    )
    return list(result.scalars().all())


async def insert_violation_if_absent(
    db: AsyncSession,
    user_id: str,
    violation_type: str,
    week_number: int,
    severity: int,
    now: datetime,
) -> bool:
    """Insert (user, type, week) unless it already exists; return True when inserted."""
    existing = await db.execute(
        select(ViolationLog.id).where(
            ViolationLog.user_id == user_id,
            ViolationLog.type == violation_type,
            ViolationLog.week_number == week_number,
        )
    )
    if existing.first() is not None:
        return False
    db.add(
        ViolationLog(
            user_id=user_id,
            type=violation_type,
            severity=severity,
            week_number=week_number,
            detected_at=now,
        )
    )
    return True


async def build_evidence_summary(db: AsyncSession, user_id: str) -> dict:
    """Point-in-time activity counts shown during the termination choice."""
    checkin_days = await db.execute(
        select(func.count(func.distinct(Checkin.date))).where(Checkin.user_id == user_id)
    )
    if_then = await db.execute(
        select(func.count(Checkin.id)).where(Checkin.user_id == user_id, Checkin.if_then_triggered.is_(True))
    )
    evidences = await db.execute(select(func.count(Evidence.id)).where(Evidence.user_id == user_id))
    return {
        "checkin_days": checkin_days.scalar_one() or 0,
        "if_then_count": if_then.scalar_one() or 0,
        "evidence_count": evidences.scalar_one() or 0,
    }


async def ensure_pending_termination(db: AsyncSession, user_id: str) -> bool:
    """Create a pending termination record unless one exists; return True when created."""
    if await get_pending_termination(db, user_id) is not None:
        return False
    db.add(
        TerminationRecord(
            user_id=user_id,
            reason=TERMINATION_REASON,
            initiated_by="system",
            final_choice="pending",
            evidence_summary=await build_evidence_summary(db, user_id),
            notification_method="dashboard",
        )
    )
    return True


# ---------- batch ----------

async def check_user(db: AsyncSession, user: User, now: datetime) -> UserViolationOutcome:
    """Detect, escalate and persist this week's violations for one user (no commit)."""
    today = now.date()
    current_week = year_week(today)
    outcome = UserViolationOutcome(user_id=user.id)

    recent = await db.execute(
        select(Checkin.date).where(
            Checkin.user_id == user.id,
            Checkin.date >= today - timedelta(days=ABSENCE_DAYS - 1),
        )
    )
    if detect_absence(recent.scalars().all(), today):
        outcome.detected.append("absence")

    start = week_start(today)
    commitments = await db.execute(
        select(Commitment).where(
            Commitment.user_id == user.id,
            Commitment.due_date >= start,
            Commitment.due_date < start + timedelta(days=7),
        )
    )
    if detect_commitment_miss(commitments.scalars().all(), today):
        outcome.detected.append("commitment_miss")

    # false_report is only ever recorded by an admin

    if not outcome.detected:
        return outcome

    violations = await _load_violations(db, user.id)
    recorded = {v.type for v in violations if v.week_number == current_week}
    new_types = [t for t in outcome.detected if t not in recorded]

    # A week already on record counts only through its stored rows, so a dismissed week stays out
    weeks = countable_weeks(violations)
    if new_types:
        weeks.add(current_week)
    outcome.consecutive_weeks = consecutive_violation_weeks(weeks, current_week)
    outcome.severity = severity_for_weeks(outcome.consecutive_weeks)

    for violation_type in new_types:
        if await insert_violation_if_absent(db, user.id, violation_type, current_week, outcome.severity, now):
            outcome.created += 1

    if outcome.severity >= SEVERITY_TERMINATION:
        outcome.termination_created = await ensure_pending_termination(db, user.id)
        if outcome.termination_created:
            logger.warning("[ADMIN ALERT] User %s has %d consecutive violation weeks", user.id, outcome.consecutive_weeks)
    return outcome


async def run_violation_check(db: AsyncSession, now: datetime) -> ViolationCheckResultSchema:
    """Scan every active user. One user's failure is logged and skipped, never raised."""
    result = await db.execute(select(User.id).where(User.current_phase.in_(ACTIVE_PHASES)).order_by(User.id))
    user_ids = list(result.scalars().all())
    logger.info("Violation check for %d active users (week %d)", len(user_ids), year_week(now.date()))

    summary = ViolationCheckResultSchema(timestamp=now)
    for user_id in user_ids:
        try:
            user = await db.get(User, user_id)
            outcome = await check_user(db, user, now)
            await db.commit()
        except Exception:
            await db.rollback()
            logger.exception("Violation check failed for user %s", user_id)
            summary.users_failed += 1
            continue

        summary.users_processed += 1
        summary.violations_detected += len(outcome.detected)
        summary.violations_created += outcome.created
        if outcome.termination_created:
            summary.admin_alerts += 1

    logger.info(
        "Violation check done: detected=%d created=%d alerts=%d failed=%d",
        summary.violations_detected,
        summary.violations_created,
        summary.admin_alerts,
        summary.users_failed,
    )
    return summary


async def record_manual_violation(
    db: AsyncSession,
    user_id: str,
    violation_type: str,
    now: datetime,
    severity: int = SEVERITY_WARNING,
) -> bool:
    """Admin entry point (used for false_report); idempotent per (user, type, week)."""
    inserted = await insert_violation_if_absent(db, user_id, violation_type, year_week(now.date()), severity, now)
    await db.commit()
    if inserted:
        logger.info("Manual %s violation recorded for user %s", violation_type, user_id)
    return inserted


# ---------- status & resolution ----------

async def get_violation_status(db: AsyncSession, user_id: str, now: datetime) -> ViolationStatusSchema:
    violations = await _load_violations(db, user_id)
    unresolved = [v for v in violations if v.resolved_at is None]
    pending = await get_pending_termination(db, user_id)
    latest = violations[0] if violations else None

    return ViolationStatusSchema(
        consecutive_violation_weeks=consecutive_violation_weeks(countable_weeks(violations), year_week(now.date())),
        latest_violation_type=latest.type if latest else None,
        latest_severity=latest.severity if latest else None,
        has_unresolved_warning=any(v.severity == SEVERITY_WARNING for v in unresolved),
        has_unresolved_renegotiation=any(v.severity == SEVERITY_RENEGOTIATION for v in unresolved),
        has_pending_termination=pending is not None,
        required_action=required_action(unresolved, pending is not None),
        unresolved_violations=[ViolationOutSchema.model_validate(v) for v in unresolved],
    )


async def resolve_violation(
    db: AsyncSession,
    user_id: str,
    violation_id: int,
    resolution: str,
    user_response: str | None,
    now: datetime,
) -> ViolationLog:
    result = await db.execute(
        select(ViolationLog).where(ViolationLog.id == violation_id, ViolationLog.user_id == user_id)
    )
    violation = result.scalar_one_or_none()
    if violation is None:
        raise ViolationNotFound(violation_id)
    if violation.resolved_at is not None:
        raise ViolationAlreadyResolved(violation_id)

    violation.resolved_at = as_utc(now)
    violation.resolution = resolution
    violation.user_response = user_response
    await db.commit()
    await db.refresh(violation)
    logger.info("Violation %s resolved by user %s as %s", violation_id, user_id, resolution)
    return violation
