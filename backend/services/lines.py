from datetime import datetime, timezone

from sqlalchemy.orm import Session

from models.cart import CartLine, LineStatus
from services.errors import NotFoundError


def get_line(db: Session, line_id: int) -> CartLine:
    line = db.query(CartLine).filter(CartLine.id == line_id).first()
    if not line:
        raise NotFoundError(f"Order line {line_id} not found")
    return line


def lock_cart_line(db: Session, line_id: int) -> CartLine:
    """Load a pending line for writing.

    The row is locked for the rest of the transaction and its version is
    checked on flush. Confirmed lines are reported as missing: they are no
    longer cart lines and cannot be mutated.
    """
    line = (
        db.query(CartLine)
        .filter(CartLine.id == line_id, CartLine.status == LineStatus.CART)
        .with_for_update()
        .first()
    )
    if not line:
        raise NotFoundError(f"Cart line {line_id} not found")
    return line


def touch(line: CartLine):
    # Forces an UPDATE so the line's version guards ledger-only writes too
    line.updated_at = datetime.now(timezone.utc)
