"""User model: one row per auth-provider account; phase drives the trial / paid lifecycle."""
from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from app.db.session import Base

# current_phase: day0 (onboarding), trial (21 days), paid, paused, completed, terminated.
# Only these phases are scanned by the weekly violation check.
ACTIVE_PHASES = ("trial", "paid")


class User(Base):
    __tablename__ = "users"

    # uid from the auth provider (UUID string)
    id = Column(String(36), primary_key=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    current_phase = Column(String(16), nullable=False, default="day0", index=True)
    trial_start_date = Column(DateTime(timezone=True), nullable=True)
    paid_start_date = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=True)

    checkins = relationship("Checkin", back_populates="user")
    commitments = relationship("Commitment", back_populates="user")
    violations = relationship("ViolationLog", back_populates="user", order_by="ViolationLog.id")
