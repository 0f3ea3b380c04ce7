"""Checkin model: one daily check-in (text or voice), optionally with an if-then execution."""
from sqlalchemy import Column, Integer, String, Text, Boolean, Date, DateTime, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from app.db.session import Base


class Checkin(Base):
    __tablename__ = "checkins"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)  # calendar day, no time component
    type = Column(String(16), nullable=False, default="evening")  # morning | evening | voice
    transcript = Column(Text, nullable=True)
    mood = Column(Integer, nullable=True)  # 1-5
    if_then_triggered = Column(Boolean, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=True)

    user = relationship("User", back_populates="checkins")
