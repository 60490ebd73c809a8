# backend/services/cart_store.py
"""Pending order lines of a dining session.

Functions here only flush; the caller commits once per logical mutation
(see ``services.retry.run_with_stale_retry``) so a quantity change and the
split repricing it triggers land together or not at all.
"""
import hashlib
import json
import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy.orm import Session

from models.cart import CartLine, KitchenStatus, LineStatus
from models.menu import MenuItem
from services import split_ledger
from services.errors import ConfirmationError, NotFoundError, StaleWriteError
from services.lines import lock_cart_line
from services.sessions import get_active_session, get_session, require_diner

logger = logging.getLogger(__name__)


def _normalize_notes(notes: Optional[str]) -> Optional[str]:
    notes = (notes or "").strip()
    return notes or None


def options_key(notes, is_shared, is_takeaway, customizations) -> str:
    canonical = json.dumps({
        "notes": _normalize_notes(notes),
        "is_shared": bool(is_shared),
        "is_takeaway": bool(is_takeaway),
        "customizations": sorted(customizations or []),
    }, sort_keys=True)
    return hashlib.sha1(canonical.encode("utf-8")).hexdigest()


def _same_options(line: CartLine, notes, is_shared, is_takeaway, customizations) -> bool:
    # Field by field; customization order is irrelevant
    return (
        line.notes == _normalize_notes(notes)
        and bool(line.is_shared) == bool(is_shared)
        and bool(line.is_takeaway) == bool(is_takeaway)
        and sorted(line.customizations or []) == sorted(customizations or [])
    )


def list_cart(db: Session, session_id: int, diner_name: str = None) -> List[CartLine]:
    get_session(db, session_id)
    q = db.query(CartLine).filter(CartLine.session_id == session_id, CartLine.status == LineStatus.CART)
    if diner_name:
        q = q.filter(CartLine.diner_name == diner_name)
    return q.order_by(CartLine.id).all()


def add_item(
    db: Session,
    session_id: int,
    diner_name: str,
    menu_item_id: int,
    notes: str = None,
    is_shared: bool = False,
    is_takeaway: bool = False,
    customizations: List[str] = None,
) -> CartLine:
    session = get_active_session(db, session_id)
    require_diner(session, diner_name)

    item = db.query(MenuItem).filter(MenuItem.id == menu_item_id).first()
    if not item or not item.is_available:
        raise NotFoundError(f"Menu item {menu_item_id} not found")

    customizations = list(customizations or [])
    candidates = (
        db.query(CartLine)
        .filter(
            CartLine.session_id == session.id,
            CartLine.diner_name == diner_name,
            CartLine.menu_item_id == item.id,
            CartLine.status == LineStatus.CART,
        )
        .with_for_update()
        .all()
    )
    line = next((c for c in candidates if _same_options(c, notes, is_shared, is_takeaway, customizations)), None)

    if line:
        line.quantity += 1
        split_ledger.refresh_for_line(line)
    else:
        # unit_price is a snapshot; later menu price changes never touch this line
        line = CartLine(
            session_id=session.id,
            diner_name=diner_name,
            menu_item_id=item.id,
            quantity=1,
            unit_price=item.price,
            notes=_normalize_notes(notes),
            is_shared=bool(is_shared),
            is_takeaway=bool(is_takeaway),
            customizations=customizations,
            options_key=options_key(notes, is_shared, is_takeaway, customizations),
            status=LineStatus.CART,
        )
        db.add(line)

    db.flush()
    logger.info("Cart item added", extra={"session_id": session.id, "line_id": line.id,
                                          "menu_item_id": item.id, "quantity": line.quantity})
    return line


def set_quantity(db: Session, line_id: int, quantity: int, expected_version: int = None) -> Optional[CartLine]:
    """Set a line's quantity; zero or less removes it. Returns None when removed."""
    line = lock_cart_line(db, line_id)
    if expected_version is not None and line.version != expected_version:
        raise StaleWriteError(f"Cart line {line_id} was changed by someone else, refresh and try again")

    if quantity <= 0:
        remove_item(db, line_id)
        return None

    line.quantity = quantity
    split_ledger.refresh_for_line(line)
    db.flush()
    logger.info("Cart quantity set", extra={"line_id": line.id, "quantity": quantity})
    return line


def change_quantity(db: Session, line_id: int, delta: int, expected_version: int = None) -> Optional[CartLine]:
    line = lock_cart_line(db, line_id)
    return set_quantity(db, line_id, line.quantity + delta, expected_version=expected_version)


def remove_item(db: Session, line_id: int) -> int:
    line = lock_cart_line(db, line_id)
    had_split = line.split is not None
    db.delete(line) # Cascades to the split ledger entry
    db.flush()
    logger.info("Cart item removed", extra={"line_id": line_id, "had_split": had_split})
    return line_id


def clear_cart(db: Session, session_id: int) -> dict:
    get_active_session(db, session_id)
    lines = (
        db.query(CartLine)
        .filter(CartLine.session_id == session_id, CartLine.status == LineStatus.CART)
        .with_for_update()
        .all()
    )
    splits = sum(1 for line in lines if line.split is not None)
    for line in lines:
        db.delete(line)
    db.flush()
    logger.info("Cart cleared", extra={"session_id": session_id, "lines": len(lines), "splits": splits})
    return {"deleted_lines": len(lines), "deleted_splits": splits}


def confirm_cart(db: Session, session_id: int) -> List[CartLine]:
    session = get_active_session(db, session_id)
    if not session.diners:
        raise ConfirmationError("Nobody has joined this table yet")

    lines = (
        db.query(CartLine)
        .filter(CartLine.session_id == session.id, CartLine.status == LineStatus.CART)
        .order_by(CartLine.id)
        .with_for_update()
        .all()
    )
    if not lines:
        raise ConfirmationError("The cart is empty")

    now = datetime.now(timezone.utc)
    for line in lines:
        # Last repricing before the split is frozen with the line
        split_ledger.refresh_for_line(line)
        line.status = LineStatus.CONFIRMED
        line.kitchen_status = KitchenStatus.WAITING
        line.confirmed_at = now
    db.flush()

    logger.info("Cart confirmed", extra={"session_id": session.id, "lines": len(lines)})
    return lines


def list_orders(db: Session, session_id: int) -> List[CartLine]:
    get_session(db, session_id)
    return (
        db.query(CartLine)
        .filter(CartLine.session_id == session_id, CartLine.status == LineStatus.CONFIRMED)
        .order_by(CartLine.confirmed_at, CartLine.id)
        .all()
    )
