import pytest
from sqlalchemy import select

from app.models import Commitment, TerminationRecord, User, Vow
from app.services.errors import TerminationNotPending, UserNotFound
from app.services.termination import apply_termination_choice, get_pending_termination

from activity_helpers import NOW, TODAY, add_commitments, add_pending_termination, add_user, add_vow


async def _column(db, column, *where):
    result = await db.execute(select(column).where(*where))
    return list(result.scalars().all())


@pytest.mark.parametrize("choice,phase", [("pause", "paused"), ("terminate", "terminated")])
async def test_choice_sets_phase(db, choice, phase):
    await add_user(db, "u1")
    await add_pending_termination(db, "u1")

    record, user = await apply_termination_choice(db, "u1", choice, NOW)

    assert record.final_choice == choice
    assert record.responded_at is not None
    assert user.current_phase == phase
    assert await _column(db, User.current_phase, User.id == "u1") == [phase]
    assert await get_pending_termination(db, "u1") is None


async def test_pause_keeps_the_plan(db):
    await add_user(db, "u1")
    await add_vow(db, "u1", "Run every morning", version=1)
    await add_commitments(db, "u1", TODAY, completed=0, pending=2)
    await add_pending_termination(db, "u1")

    await apply_termination_choice(db, "u1", "pause", NOW)

    assert await _column(db, Vow.is_current, Vow.user_id == "u1") == [True]
    assert await _column(db, Commitment.status, Commitment.user_id == "u1") == ["pending", "pending"]


async def test_redesign_returns_to_onboarding_and_retires_the_plan(db):
    await add_user(db, "u1")
    await add_vow(db, "u1", "Run every morning", version=1)
    await add_commitments(db, "u1", TODAY, completed=1, pending=2)
    await add_pending_termination(db, "u1")

    record, user = await apply_termination_choice(db, "u1", "redesign", NOW)

    assert record.final_choice == "redesign"
    assert user.current_phase == "day0"
    assert await _column(db, Vow.is_current, Vow.user_id == "u1") == [False]
    statuses = await _column(db, Commitment.status, Commitment.user_id == "u1")
    assert sorted(statuses) == ["completed", "failed", "failed"]


async def test_second_submission_is_rejected(db):
    await add_user(db, "u1")
    await add_pending_termination(db, "u1")
    await apply_termination_choice(db, "u1", "pause", NOW)

    with pytest.raises(TerminationNotPending):
        await apply_termination_choice(db, "u1", "terminate", NOW)

    assert await _column(db, User.current_phase, User.id == "u1") == ["paused"]
    assert await _column(db, TerminationRecord.final_choice, TerminationRecord.user_id == "u1") == ["pause"]


async def test_unknown_choice_leaves_record_pending(db):
    await add_user(db, "u1")
    await add_pending_termination(db, "u1")

    with pytest.raises(ValueError):
        await apply_termination_choice(db, "u1", "quit", NOW)

    assert await _column(db, TerminationRecord.final_choice, TerminationRecord.user_id == "u1") == ["pending"]
    assert await _column(db, User.current_phase, User.id == "u1") == ["trial"]


async def test_no_pending_record(db):
    await add_user(db, "u1")

    with pytest.raises(TerminationNotPending):
        await apply_termination_choice(db, "u1", "pause", NOW)

    assert await _column(db, User.current_phase, User.id == "u1") == ["trial"]


async def test_unknown_user(db):
    with pytest.raises(UserNotFound):
        await apply_termination_choice(db, "nobody", "pause", NOW)
