# backend/models/discount.py
import enum
from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Numeric, Enum, CheckConstraint, func
from sqlalchemy.orm import relationship
from database import Base

class DiscountKind(str, enum.Enum):
    FIXED = "fixed"
    PERCENTAGE = "percentage"

# Manager adjustment on a whole session's bill, applied before VAT
class Discount(Base):
    __tablename__ = "discounts"

    id = Column(Integer, primary_key=True, index=True)
    session_id = Column(Integer, ForeignKey("dining_sessions.id", ondelete="CASCADE"), index=True, nullable=False)
    kind = Column(Enum(DiscountKind, name="discount_kind", values_callable=lambda e: [m.value for m in e]),
                  nullable=False)
    amount = Column(Numeric(12, 2), CheckConstraint("amount > 0"), nullable=False) # Currency or percent
    reason = Column(String, nullable=True)
    applied_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    session = relationship("DiningSession")
