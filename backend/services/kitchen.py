import logging
from typing import List

from sqlalchemy.orm import Session

from models.cart import CartLine, KitchenStatus, LineStatus
from models.dining_session import DiningSession, SessionStatus
from services.errors import NotFoundError, OrderingError

logger = logging.getLogger(__name__)

# Kitchen progress only moves forward
FLOW = [KitchenStatus.WAITING, KitchenStatus.PREPARING, KitchenStatus.READY, KitchenStatus.SERVED]


def kitchen_queue(db: Session) -> List[CartLine]:
    return (
        db.query(CartLine)
        .join(DiningSession, DiningSession.id == CartLine.session_id)
        .filter(
            CartLine.status == LineStatus.CONFIRMED,
            CartLine.kitchen_status != KitchenStatus.SERVED,
            DiningSession.status == SessionStatus.ACTIVE,
        )
        .order_by(CartLine.confirmed_at, CartLine.id)
        .all()
    )


def advance_status(db: Session, line_id: int, new_status: KitchenStatus) -> CartLine:
    line = (
        db.query(CartLine)
        .filter(CartLine.id == line_id, CartLine.status == LineStatus.CONFIRMED)
        .with_for_update()
        .first()
    )
    if not line:
        raise NotFoundError(f"Order {line_id} not found")

    old = line.kitchen_status or KitchenStatus.WAITING
    if FLOW.index(new_status) <= FLOW.index(old):
        raise OrderingError(f"Cannot move order from {old.value} to {new_status.value}")

    line.kitchen_status = new_status
    db.flush()
    logger.info("Kitchen status changed", extra={"line_id": line.id, "old": old.value, "new": new_status.value})
    return line
