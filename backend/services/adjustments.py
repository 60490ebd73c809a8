# backend/services/adjustments.py
"""Manager corrections to a confirmed bill: voided lines and session discounts."""
import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session

from models.cart import CartLine, LineStatus
from models.discount import Discount, DiscountKind
from services.errors import NotFoundError, OrderingError
from services.sessions import get_active_session
from utils.pricing import to_decimal

logger = logging.getLogger(__name__)

HUNDRED = Decimal("100")


def void_lines(db: Session, session_id: int, line_ids: List[int], reason: str = None) -> List[CartLine]:
    session = get_active_session(db, session_id)
    wanted = sorted(set(line_ids))
    lines = (
        db.query(CartLine)
        .filter(CartLine.id.in_(wanted), CartLine.session_id == session.id,
                CartLine.status == LineStatus.CONFIRMED)
        .with_for_update()
        .all()
    )
    missing = set(wanted) - {line.id for line in lines}
    if missing:
        raise NotFoundError(f"Confirmed order lines not found in session {session.id}: {sorted(missing)}")

    now = datetime.now(timezone.utc)
    for line in lines:
        line.status = LineStatus.VOIDED
        line.voided_at = now
        line.void_reason = reason or "manager_override"
    db.flush()
    logger.info("Order lines voided", extra={"session_id": session.id, "line_ids": wanted})
    return lines


def apply_discount(db: Session, session_id: int, kind: DiscountKind, amount, reason: str = None,
                   user_id: int = None) -> Discount:
    session = get_active_session(db, session_id)
    try:
        kind = DiscountKind(kind)
    except ValueError:
        raise OrderingError(f"Unknown discount type: {kind}")
    amount = to_decimal(amount)
    if amount <= 0:
        raise OrderingError("Discount amount must be positive")
    if kind == DiscountKind.PERCENTAGE and amount > HUNDRED:
        raise OrderingError("Percentage discount cannot exceed 100")

    discount = Discount(session_id=session.id, kind=kind, amount=amount,
                        reason=reason or "manager_override", applied_by=user_id)
    db.add(discount)
    db.flush()
    logger.info("Discount applied", extra={"session_id": session.id, "kind": kind.value, "amount": str(amount)})
    return discount


def adjust_bill(db: Session, session_id: int, voids: List[int] = None, discount: Optional[dict] = None,
                reason: str = None, user_id: int = None):
    """Void lines and/or add one discount in the caller's transaction."""
    if not voids and not discount:
        raise OrderingError("No adjustments specified")
    voided = void_lines(db, session_id, voids, reason) if voids else []
    applied = None
    if discount:
        applied = apply_discount(db, session_id, discount["kind"], discount["amount"], reason, user_id)
    return voided, applied


def list_discounts(db: Session, session_id: int) -> List[Discount]:
    return db.query(Discount).filter(Discount.session_id == session_id).order_by(Discount.id).all()


def discount_amount(discounts: List[Discount], subtotal: Decimal) -> Decimal:
    """Total reduction for ``subtotal``, never more than the subtotal itself."""
    total = Decimal("0")
    for discount in discounts:
        amount = to_decimal(discount.amount)
        if discount.kind == DiscountKind.PERCENTAGE:
            total += subtotal * amount / HUNDRED
        else:
            total += amount
    return min(total, subtotal)
