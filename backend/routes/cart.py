# backend/routes/cart.py
from fastapi import APIRouter, Depends, Request, Query
from sqlalchemy.orm import Session
from typing import Optional

from config import get_retry_attempts
from database import get_db
from models.cart import CartLine
from models.split import SplitLedgerEntry
from services import cart_store
from services.lines import get_line
from services.retry import run_with_stale_retry
from utils.audit import client_ip, write_log
from utils.pricing import line_total, money
from schemas.cart import CartAddItem, CartUpdateItem, CartChangeItem, CartOut, CartItemOut, CartClearOut, SplitOut

router = APIRouter(prefix="/cart", tags=["Cart"])

def split_to_out(entry: SplitLedgerEntry) -> SplitOut:
    return SplitOut(
        line_id=entry.line_id,
        participants=list(entry.participants or []),
        split_count=entry.split_count,
        original_price=float(money(entry.original_price)),
        split_price=float(money(entry.split_price)),
        version=entry.version,
    )

def _line_to_out(line: CartLine) -> CartItemOut:
    return CartItemOut(
        id=line.id,
        session_id=line.session_id,
        diner_name=line.diner_name,
        menu_item_id=line.menu_item_id,
        name=line.menu_item.name if line.menu_item else "",
        quantity=line.quantity,
        unit_price=float(money(line.unit_price)),
        line_total=float(money(line_total(line.unit_price, line.quantity))),
        notes=line.notes,
        is_shared=line.is_shared,
        is_takeaway=line.is_takeaway,
        customizations=list(line.customizations or []),
        status=line.status.value,
        version=line.version,
        split=split_to_out(line.split) if line.split is not None else None,
    )

def _cart_to_out(db: Session, session_id: int, diner_name: Optional[str] = None) -> CartOut:
    # Always rebuilt from the database after a mutation, never patched
    lines = cart_store.list_cart(db, session_id, diner_name)
    total = sum((line_total(l.unit_price, l.quantity) for l in lines), 0)
    return CartOut(session_id=session_id, items=[_line_to_out(l) for l in lines], total=float(money(total)))

@router.get("/{session_id}", response_model=CartOut)
def get_cart(
    session_id: int,
    diner: Optional[str] = Query(None, description="Only this diner's lines"),
    db: Session = Depends(get_db),
):
    return _cart_to_out(db, session_id, diner)

@router.post("/add", response_model=CartItemOut)
def add_to_cart(
    payload: CartAddItem,
    request: Request,
    db: Session = Depends(get_db),
    attempts: int = Depends(get_retry_attempts),
):
    def op():
        line = cart_store.add_item(
            db, payload.session_id, payload.diner_name, payload.menu_item_id,
            notes=payload.notes, is_shared=payload.is_shared, is_takeaway=payload.is_takeaway,
            customizations=payload.customizations,
        )
        write_log(db, action="CART_ADD", resource="cart", actor=payload.diner_name,
                  session_id=payload.session_id, ip=client_ip(request), commit=False,
                  meta={"line_id": line.id, "menu_item_id": payload.menu_item_id, "quantity": line.quantity})
        return line.id

    line_id = run_with_stale_retry(db, op, attempts)
    return _line_to_out(get_line(db, line_id))

@router.put("/items/{item_id}", response_model=CartOut)
def update_cart_item(
    item_id: int,
    payload: CartUpdateItem,
    request: Request,
    db: Session = Depends(get_db),
    attempts: int = Depends(get_retry_attempts),
):
    session_id = get_line(db, item_id).session_id

    def op():
        line = cart_store.set_quantity(db, item_id, payload.quantity, expected_version=payload.expected_version)
        write_log(db, action="CART_UPDATE" if line else "CART_DELETE", resource="cart",
                  session_id=session_id, ip=client_ip(request), commit=False,
                  meta={"line_id": item_id, "quantity": payload.quantity})

    run_with_stale_retry(db, op, attempts)
    return _cart_to_out(db, session_id)

@router.post("/items/{item_id}/change", response_model=CartOut)
def change_cart_item(
    item_id: int,
    payload: CartChangeItem,
    request: Request,
    db: Session = Depends(get_db),
    attempts: int = Depends(get_retry_attempts),
):
    session_id = get_line(db, item_id).session_id

    def op():
        line = cart_store.change_quantity(db, item_id, payload.delta, expected_version=payload.expected_version)
        write_log(db, action="CART_UPDATE" if line else "CART_DELETE", resource="cart",
                  session_id=session_id, ip=client_ip(request), commit=False,
                  meta={"line_id": item_id, "delta": payload.delta, "quantity": line.quantity if line else 0})

    run_with_stale_retry(db, op, attempts)
    return _cart_to_out(db, session_id)

@router.delete("/items/{item_id}", response_model=CartOut)
def delete_cart_item(
    item_id: int,
    request: Request,
    db: Session = Depends(get_db),
    attempts: int = Depends(get_retry_attempts),
):
    session_id = get_line(db, item_id).session_id

    def op():
        cart_store.remove_item(db, item_id)
        write_log(db, action="CART_DELETE", resource="cart", session_id=session_id,
                  ip=client_ip(request), commit=False, meta={"line_id": item_id})

    run_with_stale_retry(db, op, attempts)
    return _cart_to_out(db, session_id)

@router.post("/{session_id}/clear", response_model=CartClearOut)
def clear_cart(
    session_id: int,
    request: Request,
    db: Session = Depends(get_db),
    attempts: int = Depends(get_retry_attempts),
):
    def op():
        result = cart_store.clear_cart(db, session_id)
        write_log(db, action="CART_CLEAR", resource="cart", session_id=session_id,
                  ip=client_ip(request), commit=False, meta=result)
        return result

    result = run_with_stale_retry(db, op, attempts)
    return CartClearOut(session_id=session_id, **result)
