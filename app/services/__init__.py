from app.services.metrics import calculate_small_wins_summary, compute_tier
from app.services.report import generate_day21_report
from app.services.termination import apply_termination_choice
from app.services.violations import get_violation_status, run_violation_check

__all__ = [
    "apply_termination_choice",
    "calculate_small_wins_summary",
    "compute_tier",
    "generate_day21_report",
    "get_violation_status",
    "run_violation_check",
]
