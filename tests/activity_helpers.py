"""Row builders shared by the database and API tests."""
from datetime import date, datetime, timedelta, timezone

from app.core.security import create_access_token
from app.models import Checkin, Commitment, Evidence, TerminationRecord, User, ViolationLog, Vow

# Wednesday, ISO week 2026-W03; Monday of that week is 2026-01-12
NOW = datetime(2026, 1, 14, 12, 0, tzinfo=timezone.utc)
TODAY = NOW.date()


def auth_headers(user_id: str) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user_id)}"}


async def add_user(db, user_id="user-1", phase="trial", trial_days_ago: int | None = 20) -> User:
    trial_start = NOW - timedelta(days=trial_days_ago) if trial_days_ago is not None else None
    user = User(id=user_id, email=f"{user_id}@example.com", current_phase=phase, trial_start_date=trial_start)
    db.add(user)
    await db.commit()
    return user


async def add_checkins(db, user_id: str, days: list[date], if_then_days: tuple = (), transcripts: dict | None = None):
    transcripts = transcripts or {}
    for d in days:
        db.add(
            Checkin(
                user_id=user_id,
                date=d,
                type="evening",
                if_then_triggered=d in if_then_days,
                transcript=transcripts.get(d),
            )
        )
    await db.commit()


async def add_commitments(db, user_id: str, due: date, completed: int, pending: int):
    for i in range(completed):
        db.add(Commitment(user_id=user_id, content=f"done {i}", status="completed", due_date=due))
    for i in range(pending):
        db.add(Commitment(user_id=user_id, content=f"todo {i}", status="pending", due_date=due))
    await db.commit()


async def add_evidences(db, user_id: str, days: list[date]):
    for i, d in enumerate(days):
        db.add(Evidence(user_id=user_id, title=f"evidence {i}", type="note", date=d))
    await db.commit()


async def add_violation(db, user_id: str, week_number: int, type="absence", severity=1, resolution=None):
    resolved_at = NOW - timedelta(days=1) if resolution else None
    row = ViolationLog(
        user_id=user_id,
        type=type,
        severity=severity,
        week_number=week_number,
        detected_at=NOW - timedelta(days=7),
        resolved_at=resolved_at,
        resolution=resolution,
    )
    db.add(row)
    await db.commit()
    return row


async def add_pending_termination(db, user_id: str) -> TerminationRecord:
    record = TerminationRecord(
        user_id=user_id,
        reason="3 consecutive violation weeks",
        initiated_by="system",
        final_choice="pending",
        evidence_summary={"checkin_days": 4, "if_then_count": 1, "evidence_count": 0},
    )
    db.add(record)
    await db.commit()
    return record


async def add_vow(db, user_id: str, content: str, version: int, is_current: bool = True) -> Vow:
    vow = Vow(user_id=user_id, content=content, version=version, is_current=is_current)
    db.add(vow)
    await db.commit()
    return vow


def days_back(*offsets: int) -> list[date]:
    return [TODAY - timedelta(days=o) for o in offsets]
