"""Scheduler and admin routes, guarded by the shared cron secret."""
from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Header, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.clock import utcnow
from app.core.config import get_settings
from app.db.session import get_db
from app.schemas.violation import ManualViolationSchema, ViolationCheckResultSchema
from app.services.errors import UserNotFound
from app.services.metrics import get_user
from app.services.violations import record_manual_violation, run_violation_check

router = APIRouter(prefix="/cron", tags=["cron"])
settings = get_settings()


def verify_cron_secret(x_cron_secret: Annotated[str | None, Header()] = None) -> None:
    if settings.cron_secret and x_cron_secret != settings.cron_secret:
        raise HTTPException(status_code=401, detail="Unauthorized")


@router.post(
    "/check-violations",
    response_model=ViolationCheckResultSchema,
    dependencies=[Depends(verify_cron_secret)],
)
async def check_violations(
    db: Annotated[AsyncSession, Depends(get_db)],
    now: Annotated[datetime, Depends(utcnow)],
):
    """Weekly scan of all active users. Partial failures are reported in the counts."""
    return await run_violation_check(db, now)


@router.post("/violations", dependencies=[Depends(verify_cron_secret)])
async def create_manual_violation(
    body: ManualViolationSchema,
    db: Annotated[AsyncSession, Depends(get_db)],
    now: Annotated[datetime, Depends(utcnow)],
):
    """Record a violation by hand (false_report has no automatic detector)."""
    try:
        await get_user(db, body.user_id)
    except UserNotFound:
        raise HTTPException(status_code=404, detail="User not found")
    created = await record_manual_violation(db, body.user_id, body.type, now, severity=body.severity)
    return {"created": created}
