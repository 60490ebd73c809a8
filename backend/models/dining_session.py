# backend/models/dining_session.py
import enum
from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Enum, UniqueConstraint, func
from sqlalchemy.orm import relationship
from database import Base

class SessionStatus(str, enum.Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

# One dining occasion at one table; scopes every cart line and split
class DiningSession(Base):
    __tablename__ = "dining_sessions"

    id = Column(Integer, primary_key=True, index=True)
    table_number = Column(Integer, nullable=False, index=True)
    status = Column(
        Enum(SessionStatus, name="session_status", values_callable=lambda e: [m.value for m in e]),
        default=SessionStatus.ACTIVE, nullable=False, index=True,
    )
    started_by_name = Column(String, nullable=True)
    started_at = Column(DateTime(timezone=True), server_default=func.now())
    ended_at = Column(DateTime(timezone=True), nullable=True)

    diners = relationship("Diner", back_populates="session", cascade="all, delete-orphan", order_by="Diner.id")
    lines = relationship("CartLine", back_populates="session", cascade="all, delete-orphan")

    @property
    def diner_names(self):
        return [d.name for d in self.diners]

# A named person seated in a session
class Diner(Base):
    __tablename__ = "diners"

    id = Column(Integer, primary_key=True, index=True)
    session_id = Column(Integer, ForeignKey("dining_sessions.id", ondelete="CASCADE"), index=True, nullable=False)
    name = Column(String, nullable=False)
    joined_at = Column(DateTime(timezone=True), server_default=func.now())

    session = relationship("DiningSession", back_populates="diners")

    __table_args__ = (
        UniqueConstraint("session_id", "name", name="uq_diner_session_name"),
    )
