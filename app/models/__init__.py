from app.models.user import User
from app.models.checkin import Checkin
from app.models.commitment import Commitment
from app.models.evidence import Evidence
from app.models.vow import Vow
from app.models.violation import ViolationLog
from app.models.termination import TerminationRecord

__all__ = ["User", "Checkin", "Commitment", "Evidence", "Vow", "ViolationLog", "TerminationRecord"]
