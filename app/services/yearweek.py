"""ISO year-week keys (YYYYWW) and year-boundary-safe week arithmetic."""
from datetime import date, timedelta


def weeks_in_year(year: int) -> int:
    """Return 52 or 53: Dec 28 always falls in the last ISO week of its year."""
    return date(year, 12, 28).isocalendar()[1]


def year_week(day: date) -> int:
    """Return the ISO year-week key, e.g. 2026-01-14 -> 202603.

    Uses the ISO year, so 2024-12-30 belongs to 202501, not 202452.
    """
    iso_year, iso_week, _ = day.isocalendar()
    return iso_year * 100 + iso_week


def split_year_week(key: int) -> tuple[int, int]:
    return key // 100, key % 100


def previous_year_week(key: int, offset: int = 1) -> int:
    """Step back ``offset`` weeks from ``key``, rolling into the previous ISO year(s)."""
    year, week = split_year_week(key)
    week -= offset
    while week < 1:
        year -= 1
        week += weeks_in_year(year)
    return year * 100 + week


def week_start(day: date) -> date:
    """Monday of the ISO week containing ``day``."""
    return day - timedelta(days=day.weekday())
