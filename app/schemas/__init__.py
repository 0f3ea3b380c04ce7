from app.schemas.metrics import Day21ReportSchema, MetricsSchema, SmallWinsSummarySchema
from app.schemas.violation import (
    ResolveViolationSchema,
    TerminationChoiceSchema,
    ViolationCheckResultSchema,
    ViolationStatusSchema,
)

__all__ = [
    "Day21ReportSchema",
    "MetricsSchema",
    "SmallWinsSummarySchema",
    "ResolveViolationSchema",
    "TerminationChoiceSchema",
    "ViolationCheckResultSchema",
    "ViolationStatusSchema",
]
