"""Pydantic schemas for Small-Wins metrics and the Day-21 report."""
from datetime import date
from typing import Literal

from pydantic import BaseModel, Field

Tier = Literal["on_track", "at_risk", "needs_reset"]


class MetricsSchema(BaseModel):
    checkin_count: int
    checkin_total: int  # elapsed days since trial start, at least 1
    checkin_rate: float = Field(ge=0, le=1)
    checkin_streak: int

    if_then_count: int
    if_then_rate: float = Field(ge=0, le=1)

    evidence_count: int
    evidence_expected: int
    evidence_rate: float = Field(ge=0, le=1)

    commitment_completed: int
    commitment_total: int
    commitment_rate: float = Field(ge=0, le=1)


class SmallWinsSummarySchema(BaseModel):
    metrics: MetricsSchema
    tier: Tier
    tier_label: str
    tier_message: str
    tier_message_ja: str
    average_rate: float = Field(ge=0, le=1)


class ResilienceBreakdownSchema(BaseModel):
    if_then_executions: int
    comebacks: int  # check-ins after a gap of 2+ days
    persistence_in_checkins: int


class VowSnapshotSchema(BaseModel):
    content: str
    version: int
    created_at: str | None = None


class VowEvolutionSchema(BaseModel):
    v1: VowSnapshotSchema | None = None
    v2: VowSnapshotSchema | None = None
    has_evolved: bool = False


class EvidenceHighlightSchema(BaseModel):
    id: int
    title: str
    type: str
    date: date


class Day21ReportSchema(BaseModel):
    summary: SmallWinsSummarySchema
    resilience_count: int
    resilience_breakdown: ResilienceBreakdownSchema
    vow_evolution: VowEvolutionSchema
    evidence_highlights: list[EvidenceHighlightSchema]
