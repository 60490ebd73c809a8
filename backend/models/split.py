# backend/models/split.py
from sqlalchemy import Column, Integer, ForeignKey, DateTime, Numeric, JSON, CheckConstraint, func
from sqlalchemy.orm import relationship
from database import Base

# Derived pricing record for a shared cart line.
# original_price and split_price are always recomputed from the owning line,
# never adjusted in place. Frozen once the line is confirmed.
class SplitLedgerEntry(Base):
    __tablename__ = "split_ledger"

    id = Column(Integer, primary_key=True, index=True)
    line_id = Column(Integer, ForeignKey("cart_lines.id", ondelete="CASCADE"), unique=True, nullable=False)

    participants = Column(JSON, nullable=False, default=list) # Ordered, distinct diner names
    split_count = Column(Integer, CheckConstraint("split_count > 0"), nullable=False)
    original_price = Column(Numeric(12, 2), nullable=False)
    split_price = Column(Numeric(18, 6), nullable=False) # Full precision; rounded for display only

    version = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    line = relationship("CartLine", back_populates="split")

    __mapper_args__ = {"version_id_col": version}
