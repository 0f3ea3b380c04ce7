"""API routes: small-wins metrics, Day-21 report, violations and termination choice."""
from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Header, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.clock import utcnow
from app.core.security import user_id_from_authorization
from app.db.session import get_db
from app.schemas.metrics import Day21ReportSchema, SmallWinsSummarySchema
from app.schemas.violation import (
    ResolveViolationSchema,
    TerminationChoiceResultSchema,
    TerminationChoiceSchema,
    TerminationRecordOutSchema,
    ViolationOutSchema,
    ViolationStatusSchema,
)
from app.services.errors import (
    TerminationNotPending,
    TrialNotStarted,
    UserNotFound,
    ViolationAlreadyResolved,
    ViolationNotFound,
)
from app.services.metrics import calculate_small_wins_summary
from app.services.report import generate_day21_report
from app.services.termination import NEXT_ROUTES, apply_termination_choice, get_pending_termination
from app.services.violations import get_violation_status, resolve_violation

router = APIRouter(prefix="/api", tags=["api"])


# ---------- helpers ----------

async def get_current_user_id(authorization: Annotated[str | None, Header()] = None) -> str:
    """User id from the auth provider's bearer token; 401 when missing or invalid."""
    user_id = user_id_from_authorization(authorization)
    if user_id is None:
        raise HTTPException(status_code=401, detail="Unauthorized: Missing or invalid authorization token")
    return user_id


def _metrics_http_error(exc: UserNotFound | TrialNotStarted) -> HTTPException:
    if isinstance(exc, TrialNotStarted):
        return HTTPException(status_code=404, detail="Trial not started")
    return HTTPException(status_code=404, detail="User not found")


# ---------- metrics ----------

@router.get("/small-wins/summary", response_model=SmallWinsSummarySchema)
async def small_wins_summary(
    db: Annotated[AsyncSession, Depends(get_db)],
    user_id: Annotated[str, Depends(get_current_user_id)],
    now: Annotated[datetime, Depends(utcnow)],
):
    """Process metrics, tier and average rate for the dashboard."""
    try:
        return await calculate_small_wins_summary(db, user_id, now)
    except (UserNotFound, TrialNotStarted) as exc:
        raise _metrics_http_error(exc)


@router.get("/day21/report", response_model=Day21ReportSchema)
async def day21_report(
    db: Annotated[AsyncSession, Depends(get_db)],
    user_id: Annotated[str, Depends(get_current_user_id)],
    now: Annotated[datetime, Depends(utcnow)],
):
    try:
        return await generate_day21_report(db, user_id, now)
    except (UserNotFound, TrialNotStarted) as exc:
        raise _metrics_http_error(exc)


# ---------- violations ----------

@router.get("/violations/status", response_model=ViolationStatusSchema)
async def violation_status(
    db: Annotated[AsyncSession, Depends(get_db)],
    user_id: Annotated[str, Depends(get_current_user_id)],
    now: Annotated[datetime, Depends(utcnow)],
):
    """Consecutive weeks, unresolved violations and the screen the app should show."""
    return await get_violation_status(db, user_id, now)


@router.post("/violations/{violation_id}/resolve", response_model=ViolationOutSchema)
async def violation_resolve(
    violation_id: int,
    body: ResolveViolationSchema,
    db: Annotated[AsyncSession, Depends(get_db)],
    user_id: Annotated[str, Depends(get_current_user_id)],
    now: Annotated[datetime, Depends(utcnow)],
):
    try:
        return await resolve_violation(db, user_id, violation_id, body.resolution, body.user_response, now)
    except ViolationNotFound:
        raise HTTPException(status_code=404, detail="Violation not found")
    except ViolationAlreadyResolved:
        raise HTTPException(status_code=409, detail="Violation already resolved")


# ---------- termination ----------

@router.get("/termination", response_model=TerminationRecordOutSchema)
async def pending_termination(
    db: Annotated[AsyncSession, Depends(get_db)],
    user_id: Annotated[str, Depends(get_current_user_id)],
):
    record = await get_pending_termination(db, user_id)
    if record is None:
        raise HTTPException(status_code=404, detail="No pending termination")
    return record


@router.post("/termination/choice", response_model=TerminationChoiceResultSchema)
async def termination_choice(
    body: TerminationChoiceSchema,
    db: Annotated[AsyncSession, Depends(get_db)],
    user_id: Annotated[str, Depends(get_current_user_id)],
    now: Annotated[datetime, Depends(utcnow)],
):
    """Apply pause / redesign / terminate once; a repeated submission is 409."""
    try:
        record, user = await apply_termination_choice(db, user_id, body.choice, now)
    except UserNotFound:
        raise HTTPException(status_code=404, detail="User not found")
    except TerminationNotPending:
        raise HTTPException(status_code=409, detail="Termination choice already submitted")

    return TerminationChoiceResultSchema(
        record=TerminationRecordOutSchema.model_validate(record),
        current_phase=user.current_phase,
        next_route=NEXT_ROUTES[body.choice],
    )
