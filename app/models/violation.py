"""ViolationLog model: one detected failure condition per user, type and ISO week."""
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from app.db.session import Base

# Resolutions that stop a week from counting toward escalation
NON_COUNTABLE_RESOLUTIONS = ("dismissed", "continued")


class ViolationLog(Base):
    __tablename__ = "violation_logs"
    __table_args__ = (
        UniqueConstraint("user_id", "type", "week_number", name="uq_violation_logs_user_type_week"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    type = Column(String(32), nullable=False)  # commitment_miss | absence | false_report
    severity = Column(Integer, nullable=False, default=1)  # 1 warning, 2 renegotiation, 3 termination
    week_number = Column(Integer, nullable=False, index=True)  # YYYYWW, ISO year and week
    detected_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    resolved_at = Column(DateTime(timezone=True), nullable=True)
    resolution = Column(String(32), nullable=True)  # warning_accepted | renegotiated | continued | dismissed
    user_response = Column(Text, nullable=True)

    user = relationship("User", back_populates="violations")
