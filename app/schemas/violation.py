"""Pydantic schemas for violations, the weekly check and termination choices."""
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

ViolationType = Literal["commitment_miss", "absence", "false_report"]
Resolution = Literal["warning_accepted", "renegotiated", "continued", "dismissed"]
TerminationChoice = Literal["pause", "redesign", "terminate"]
RequiredAction = Literal["none", "warning", "renegotiation", "termination"]


class ViolationOutSchema(BaseModel):
    id: int
    type: ViolationType
    severity: int
    week_number: int
    detected_at: datetime
    resolved_at: datetime | None = None
    resolution: Resolution | None = None
    user_response: str | None = None

    class Config:
        from_attributes = True


class ViolationStatusSchema(BaseModel):
    consecutive_violation_weeks: int
    latest_violation_type: ViolationType | None = None
    latest_severity: int | None = None
    has_unresolved_warning: bool = False
    has_unresolved_renegotiation: bool = False
    has_pending_termination: bool = False
    required_action: RequiredAction = "none"
    unresolved_violations: list[ViolationOutSchema] = []


class ResolveViolationSchema(BaseModel):
    resolution: Resolution
    user_response: str | None = Field(default=None, max_length=2000)


class ManualViolationSchema(BaseModel):
    user_id: str
    type: ViolationType = "false_report"
    severity: int = Field(default=1, ge=1, le=3)


class ViolationCheckResultSchema(BaseModel):
    success: bool = True
    violations_detected: int = 0
    violations_created: int = 0
    admin_alerts: int = 0
    users_processed: int = 0
    users_failed: int = 0
    timestamp: datetime


class TerminationRecordOutSchema(BaseModel):
    id: int
    reason: str
    initiated_by: str
    final_choice: Literal["pending", "pause", "redesign", "terminate"]
    evidence_summary: dict | None = None
    created_at: datetime | None = None
    responded_at: datetime | None = None

    class Config:
        from_attributes = True


class TerminationChoiceSchema(BaseModel):
    choice: TerminationChoice


class TerminationChoiceResultSchema(BaseModel):
    record: TerminationRecordOutSchema
    current_phase: str
    next_route: Literal["home", "onboarding", "termination-complete"]
