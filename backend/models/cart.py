# backend/models/cart.py
import enum
from sqlalchemy import (
    Column, Integer, ForeignKey, String, DateTime, Numeric, Boolean, JSON, Enum, Index,
    CheckConstraint, func, text,
)
from sqlalchemy.orm import relationship
from database import Base

# Lifecycle of an order row. One enum for every code path; no ad hoc strings.
class LineStatus(str, enum.Enum):
    CART = "cart"
    CONFIRMED = "confirmed"
    VOIDED = "voided"  # Taken off the bill by staff after confirmation

# Kitchen progress of a confirmed line
class KitchenStatus(str, enum.Enum):
    WAITING = "waiting"
    PREPARING = "preparing"
    READY = "ready"
    SERVED = "served"

def _values(enum_cls):
    return [m.value for m in enum_cls]

# One order row for one diner in one session: a pending cart line until the
# session's cart is confirmed, then an immutable kitchen order.
class CartLine(Base):
    __tablename__ = "cart_lines"

    id = Column(Integer, primary_key=True, index=True)
    session_id = Column(Integer, ForeignKey("dining_sessions.id", ondelete="CASCADE"), index=True, nullable=False)
    diner_name = Column(String, nullable=False, index=True)
    menu_item_id = Column(Integer, ForeignKey("menu_items.id"), index=True, nullable=False)

    quantity = Column(Integer, CheckConstraint("quantity > 0"), nullable=False, default=1)
    unit_price = Column(Numeric(10, 2), nullable=False) # Menu price at the moment of addition

    notes = Column(String, nullable=True)
    is_shared = Column(Boolean, nullable=False, default=False)
    is_takeaway = Column(Boolean, nullable=False, default=False)
    customizations = Column(JSON, nullable=False, default=list) # Kept in the order the diner chose them
    options_key = Column(String(40), nullable=False) # sha1 of the canonical option set

    status = Column(Enum(LineStatus, name="line_status", values_callable=_values),
                    nullable=False, default=LineStatus.CART, index=True)
    kitchen_status = Column(Enum(KitchenStatus, name="kitchen_status", values_callable=_values), nullable=True)

    version = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
    confirmed_at = Column(DateTime(timezone=True), nullable=True)
    voided_at = Column(DateTime(timezone=True), nullable=True)
    void_reason = Column(String, nullable=True)

    session = relationship("DiningSession", back_populates="lines")
    menu_item = relationship("MenuItem")
    split = relationship(
        "SplitLedgerEntry", back_populates="line", uselist=False, cascade="all, delete-orphan",
    )

    __mapper_args__ = {"version_id_col": version}

    __table_args__ = (
        # Identical options for the same diner/item collapse into one pending line
        Index(
            "uq_cart_line_identity",
            "session_id", "diner_name", "menu_item_id", "options_key",
            unique=True,
            sqlite_where=text("status = 'cart'"),
            postgresql_where=text("status = 'cart'"),
        ),
    )

    @property
    def is_mutable(self):
        return self.status == LineStatus.CART
