from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Numeric, func
from sqlalchemy.orm import relationship
from database import Base

# A diner settling (part of) their individual bill
class Payment(Base):
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)
    session_id = Column(Integer, ForeignKey("dining_sessions.id", ondelete="CASCADE"), index=True, nullable=False)
    diner_name = Column(String, nullable=False, index=True)
    amount = Column(Numeric(12, 2), nullable=False)
    tip = Column(Numeric(12, 2), nullable=False, default=0)
    method = Column(String, nullable=False, default="card")
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    session = relationship("DiningSession")
