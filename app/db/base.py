"""SQLAlchemy declarative base and model imports for Alembic."""
from app.db.session import Base

# Import all models so Alembic can see them
from app.models.checkin import Checkin  # noqa: F401
from app.models.commitment import Commitment  # noqa: F401
from app.models.evidence import Evidence  # noqa: F401
from app.models.termination import TerminationRecord  # noqa: F401
from app.models.user import User  # noqa: F401
from app.models.violation import ViolationLog  # noqa: F401
from app.models.vow import Vow  # noqa: F401

__all__ = ["Base", "User", "Checkin", "Commitment", "Evidence", "Vow", "ViolationLog", "TerminationRecord"]
