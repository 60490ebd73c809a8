# backend/routes/splits.py
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from config import get_retry_attempts
from database import get_db
from routes.cart import split_to_out
from schemas.cart import SplitOut
from schemas.split import SplitCreate, SplitParticipantsUpdate, ShareOut
from services import split_ledger
from services.retry import run_with_stale_retry
from utils.audit import client_ip, write_log
from utils.pricing import money

router = APIRouter(prefix="/splits", tags=["Splits"])

@router.post("", response_model=SplitOut)
def create_split(
    payload: SplitCreate,
    request: Request,
    db: Session = Depends(get_db),
    attempts: int = Depends(get_retry_attempts),
):
    def op():
        entry = split_ledger.create_split(db, payload.line_id, payload.participants)
        write_log(db, action="SPLIT_CREATE", resource="splits", session_id=entry.line.session_id,
                  ip=client_ip(request), commit=False,
                  meta={"line_id": payload.line_id, "participants": entry.participants,
                        "split_price": str(money(entry.split_price))})

    run_with_stale_retry(db, op, attempts)
    return split_to_out(split_ledger.get_split(db, payload.line_id))

@router.get("/{line_id}", response_model=SplitOut)
def get_split(line_id: int, db: Session = Depends(get_db)):
    return split_to_out(split_ledger.get_split(db, line_id))

@router.put("/{line_id}/participants", response_model=SplitOut)
def update_participants(
    line_id: int,
    payload: SplitParticipantsUpdate,
    request: Request,
    db: Session = Depends(get_db),
    attempts: int = Depends(get_retry_attempts),
):
    def op():
        entry = split_ledger.update_participants(db, line_id, payload.participants)
        write_log(db, action="SPLIT_UPDATE", resource="splits", session_id=entry.line.session_id,
                  ip=client_ip(request), commit=False,
                  meta={"line_id": line_id, "participants": entry.participants})

    run_with_stale_retry(db, op, attempts)
    return split_to_out(split_ledger.get_split(db, line_id))

@router.post("/{line_id}/recompute", response_model=SplitOut)
def recompute_split(
    line_id: int,
    db: Session = Depends(get_db),
    attempts: int = Depends(get_retry_attempts),
):
    run_with_stale_retry(db, lambda: split_ledger.recompute_split(db, line_id), attempts)
    return split_to_out(split_ledger.get_split(db, line_id))

@router.get("/{line_id}/share/{diner_name}", response_model=ShareOut)
def get_share(line_id: int, diner_name: str, db: Session = Depends(get_db)):
    amount = split_ledger.get_share_for(db, line_id, diner_name)
    return ShareOut(line_id=line_id, diner_name=diner_name, amount=float(money(amount)))
