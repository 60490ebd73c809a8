# backend/routes/orders.py
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from config import get_retry_attempts
from database import get_db
from models.cart import CartLine
from models.users import User
from routes.cart import split_to_out
from schemas.order import ConfirmPayload, OrderItemOut, OrdersOut, KitchenQueueOut, OrderStatusPatch
from services import cart_store, kitchen
from services.retry import run_with_stale_retry
from utils.audit import client_ip, write_log
from utils.pricing import line_total, money
from utils.tokenJWT import staff_required

router = APIRouter(prefix="/orders", tags=["Orders"])

# Map a confirmed line to the kitchen/customer order view
def _order_to_out(line: CartLine) -> OrderItemOut:
    return OrderItemOut(
        id=line.id,
        session_id=line.session_id,
        table_number=line.session.table_number if line.session else None,
        diner_name=line.diner_name,
        menu_item_id=line.menu_item_id,
        name=line.menu_item.name if line.menu_item else "Removed item",
        quantity=line.quantity,
        unit_price=float(money(line.unit_price)),
        line_total=float(money(line_total(line.unit_price, line.quantity))),
        notes=line.notes,
        is_takeaway=line.is_takeaway,
        customizations=list(line.customizations or []),
        kitchen_status=line.kitchen_status,
        confirmed_at=line.confirmed_at,
        split=split_to_out(line.split) if line.split is not None else None,
    )

# Send every pending cart line of the table to the kitchen
@router.post("/confirm", response_model=OrdersOut)
def confirm_orders(
    payload: ConfirmPayload,
    request: Request,
    db: Session = Depends(get_db),
    attempts: int = Depends(get_retry_attempts),
):
    def op():
        lines = cart_store.confirm_cart(db, payload.session_id)
        write_log(db, action="ORDER_CONFIRM", resource="orders", session_id=payload.session_id,
                  ip=client_ip(request), commit=False,
                  meta={"line_ids": [l.id for l in lines], "count": len(lines)})
        return [l.id for l in lines]

    confirmed_ids = set(run_with_stale_retry(db, op, attempts))
    items = [_order_to_out(l) for l in cart_store.list_orders(db, payload.session_id) if l.id in confirmed_ids]
    return OrdersOut(session_id=payload.session_id, items=items)

# Confirmed orders of one table, newest last
@router.get("/session/{session_id}", response_model=OrdersOut)
def list_session_orders(session_id: int, db: Session = Depends(get_db)):
    return OrdersOut(session_id=session_id, items=[_order_to_out(l) for l in cart_store.list_orders(db, session_id)])

# Kitchen dashboard: everything confirmed but not yet served
@router.get("/kitchen", response_model=KitchenQueueOut)
def kitchen_orders(db: Session = Depends(get_db), current_user: User = Depends(staff_required)):
    lines = kitchen.kitchen_queue(db)
    return KitchenQueueOut(items=[_order_to_out(l) for l in lines], total=len(lines))

@router.patch("/{line_id}/status", response_model=OrderItemOut)
def update_order_status(
    line_id: int,
    payload: OrderStatusPatch,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(staff_required),
    attempts: int = Depends(get_retry_attempts),
):
    def op():
        line = kitchen.advance_status(db, line_id, payload.status)
        write_log(db, action="ORDER_STATUS_CHANGE", resource="orders", user_id=current_user.id,
                  session_id=line.session_id, ip=client_ip(request), commit=False,
                  meta={"line_id": line_id, "new": payload.status.value})
        return line

    line = run_with_stale_retry(db, op, attempts)
    return _order_to_out(line)
