# backend/routes/sessions.py
from decimal import Decimal
from fastapi import APIRouter, Depends, Request
from typing import Optional
from sqlalchemy.orm import Session

from config import get_vat_rate, get_retry_attempts
from database import get_db
from models.dining_session import SessionStatus
from models.users import User
from schemas.bill import BillAdjustment, SessionBillOut, DinerBillOut
from schemas.session import SessionCreate, SessionOut, DinerJoin, DinerOut, ParticipantsOut, SessionClose
from services import adjustments, billing, sessions
from services.retry import run_with_stale_retry
from utils.audit import client_ip, write_log
from utils.tokenJWT import staff_required

router = APIRouter(prefix="/sessions", tags=["Sessions"])

# Staff opens a table for a new party
@router.post("", response_model=SessionOut)
def open_session(
    payload: SessionCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(staff_required),
    attempts: int = Depends(get_retry_attempts),
):
    def op():
        session = sessions.open_session(db, payload.table_number, payload.started_by_name)
        write_log(db, action="SESSION_OPEN", resource="sessions", user_id=current_user.id,
                  session_id=session.id, ip=client_ip(request), commit=False,
                  meta={"table_number": payload.table_number})
        return session.id

    session_id = run_with_stale_retry(db, op, attempts)
    return sessions.get_session(db, session_id)

@router.get("/{session_id}", response_model=SessionOut)
def get_session(session_id: int, db: Session = Depends(get_db)):
    return sessions.get_session(db, session_id)

# Diner enters their name after scanning the table QR code
@router.post("/{session_id}/diners", response_model=DinerOut)
def join_session(
    session_id: int,
    payload: DinerJoin,
    request: Request,
    db: Session = Depends(get_db),
    attempts: int = Depends(get_retry_attempts),
):
    def op():
        diner = sessions.join_session(db, session_id, payload.name)
        write_log(db, action="SESSION_JOIN", resource="sessions", actor=diner.name,
                  session_id=session_id, ip=client_ip(request), commit=False)
        return diner.id, diner.name

    diner_id, name = run_with_stale_retry(db, op, attempts)
    return DinerOut(id=diner_id, name=name)

@router.get("/{session_id}/participants", response_model=ParticipantsOut)
def list_participants(session_id: int, db: Session = Depends(get_db)):
    names = sessions.get_session(db, session_id).diner_names
    return ParticipantsOut(participants=names, count=len(names))

@router.post("/{session_id}/close", response_model=SessionOut)
def close_session(
    session_id: int,
    request: Request,
    payload: Optional[SessionClose] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(staff_required),
    attempts: int = Depends(get_retry_attempts),
):
    status = payload.status if payload else SessionStatus.COMPLETED

    def op():
        sessions.close_session(db, session_id, status)
        write_log(db, action="SESSION_CLOSE", resource="sessions", user_id=current_user.id,
                  session_id=session_id, ip=client_ip(request), commit=False,
                  meta={"status": status.value})

    run_with_stale_retry(db, op, attempts)
    return sessions.get_session(db, session_id)

# Whole-table bill
@router.get("/{session_id}/bill", response_model=SessionBillOut)
def session_bill(session_id: int, db: Session = Depends(get_db), vat_rate: Decimal = Depends(get_vat_rate)):
    bill = billing.compute_session_bill(db, session_id, vat_rate)
    return SessionBillOut(
        session_id=bill.session_id,
        subtotal=float(bill.subtotal),
        discount=float(bill.discount),
        vat=float(bill.vat),
        total=float(bill.total),
        vat_rate=float(vat_rate),
        line_count=bill.line_count,
    )

# One diner's bill, including their share of split items
@router.get("/{session_id}/bill/{diner_name}", response_model=DinerBillOut)
def diner_bill(
    session_id: int,
    diner_name: str,
    db: Session = Depends(get_db),
    vat_rate: Decimal = Depends(get_vat_rate),
):
    bill = billing.compute_diner_bill(db, session_id, diner_name, vat_rate)
    return DinerBillOut(
        session_id=bill.session_id,
        diner_name=bill.diner_name,
        personal_total=float(bill.personal_total),
        shared_total=float(bill.shared_total),
        subtotal=float(bill.subtotal),
        discount=float(bill.discount),
        vat=float(bill.vat),
        total=float(bill.total),
        vat_rate=float(vat_rate),
    )

# Manager override: void confirmed lines and/or discount the whole table
@router.post("/{session_id}/adjust", response_model=SessionBillOut)
def adjust_bill(
    session_id: int,
    payload: BillAdjustment,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(staff_required),
    vat_rate: Decimal = Depends(get_vat_rate),
    attempts: int = Depends(get_retry_attempts),
):
    discount = payload.discount.model_dump() if payload.discount else None

    def op():
        adjustments.adjust_bill(db, session_id, payload.voids, discount, payload.reason, current_user.id)
        write_log(db, action="BILL_ADJUST", resource="sessions", user_id=current_user.id,
                  session_id=session_id, ip=client_ip(request), commit=False,
                  meta={"voids": payload.voids, "discount": discount, "reason": payload.reason})

    run_with_stale_retry(db, op, attempts)
    return session_bill(session_id, db, vat_rate)
