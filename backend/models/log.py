from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, JSON, func
from database import Base

# Audit trail of cart, split, order and payment events
class Log(Base):
    __tablename__ = "logs"

    id = Column(Integer, primary_key=True, index=True)
    ts = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    # Staff user for dashboard actions, diner name for customer actions
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    actor = Column(String(100), nullable=True)
    session_id = Column(Integer, nullable=True, index=True)

    action = Column(String(50), index=True)
    resource = Column(String(50), index=True)
    status = Column(String(20), index=True)
    ip = Column(String(64), nullable=True)

    meta = Column(JSON, nullable=True)
