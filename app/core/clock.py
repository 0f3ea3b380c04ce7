"""Current time as a dependency, so request handlers never read the wall clock directly."""
from datetime import datetime, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
