"""TerminationRecord model: decision point offered after three consecutive violation weeks."""
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, JSON
from sqlalchemy.sql import func

from app.db.session import Base


class TerminationRecord(Base):
    __tablename__ = "termination_records"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    reason = Column(String(255), nullable=False)
    initiated_by = Column(String(16), nullable=False, default="system")  # system | admin | user
    final_choice = Column(String(16), nullable=False, default="pending", index=True)  # pending | pause | redesign | terminate
    # {checkin_days, if_then_count, evidence_count} at creation time
    evidence_summary = Column(JSON, nullable=True)
    notification_method = Column(String(16), nullable=False, default="dashboard")
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=True)
    responded_at = Column(DateTime(timezone=True), nullable=True)
