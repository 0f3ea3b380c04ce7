"""Termination choice: pause, redesign or terminate, applied exactly once per pending record."""
import logging
from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.commitment import Commitment
from app.models.termination import TerminationRecord
from app.models.user import User
from app.models.vow import Vow
from app.services.errors import TerminationNotPending
from app.services.metrics import as_utc, get_user

logger = logging.getLogger(__name__)

# choice -> account phase afterwards (day0 = back to onboarding)
CHOICE_PHASES = {
    "pause": "paused",
    "redesign": "day0",
    "terminate": "terminated",
}

NEXT_ROUTES = {
    "pause": "termination-complete",
    "redesign": "onboarding",
    "terminate": "termination-complete",
}


async def get_pending_termination(db: AsyncSession, user_id: str) -> TerminationRecord | None:
    result = await db.execute(
        select(TerminationRecord)
        .where(TerminationRecord.user_id == user_id, TerminationRecord.final_choice == "pending")
        .order_by(TerminationRecord.id.desc())
        .limit(1)
    )
    return result.scalar_one_or_none()


async def _invalidate_plan(db: AsyncSession, user_id: str) -> None:
    """Redesign: retire current vows and fail pending commitments; nothing is deleted."""
    await db.execute(
        update(Vow)
        .where(Vow.user_id == user_id, Vow.is_current.is_(True))
        .values(is_current=False)
        .execution_options(synchronize_session=False)
    )
    await db.execute(
        update(Commitment)
        .where(Commitment.user_id == user_id, Commitment.status == "pending")
        .values(status="failed")
        .execution_options(synchronize_session=False)
    )


async def apply_termination_choice(
    db: AsyncSession,
    user_id: str,
    choice: str,
    now: datetime,
) -> tuple[TerminationRecord, User]:
    """Record the user's choice on the pending record and apply its phase transition.

    The record is claimed with a conditional update on ``final_choice = 'pending'``,
    so a second submission finds nothing to claim and raises TerminationNotPending
    before touching the account.
    """
    if choice not in CHOICE_PHASES:
        raise ValueError(f"Unknown termination choice: {choice!r}")
    user = await get_user(db, user_id)
    record = await get_pending_termination(db, user_id)
    if record is None:
        raise TerminationNotPending(user_id)

    claimed = await db.execute(
        update(TerminationRecord)
        .where(TerminationRecord.id == record.id, TerminationRecord.final_choice == "pending")
        .values(final_choice=choice, responded_at=as_utc(now))
        .execution_options(synchronize_session=False)
    )
    if claimed.rowcount != 1:
        await db.rollback()
        raise TerminationNotPending(user_id)

    if choice == "redesign":
        await _invalidate_plan(db, user_id)
    user.current_phase = CHOICE_PHASES[choice]

    await db.commit()
    await db.refresh(record)
    await db.refresh(user)
    logger.info("User %s chose %s on termination record %s", user_id, choice, record.id)
    return record, user
