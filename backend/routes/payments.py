# backend/routes/payments.py
from decimal import Decimal
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from config import get_vat_rate, get_retry_attempts
from database import get_db
from models.payment import Payment
from schemas.bill import PaymentCreate, PaymentOut, PaymentOverviewOut, DinerPaymentOut
from services import payments
from services.retry import run_with_stale_retry
from utils.audit import client_ip, write_log

router = APIRouter(prefix="/payments", tags=["Payments"])

def _payment_to_out(p: Payment) -> PaymentOut:
    return PaymentOut(id=p.id, session_id=p.session_id, diner_name=p.diner_name,
                      amount=float(p.amount), tip=float(p.tip), method=p.method)

# A diner pays their individual bill (or part of it)
@router.post("", response_model=PaymentOut, status_code=201)
def pay(
    payload: PaymentCreate,
    request: Request,
    db: Session = Depends(get_db),
    vat_rate: Decimal = Depends(get_vat_rate),
    attempts: int = Depends(get_retry_attempts),
):
    def op():
        payment = payments.record_payment(
            db, payload.session_id, payload.diner_name, vat_rate,
            amount=payload.amount, tip=payload.tip, method=payload.method,
        )
        write_log(db, action="PAYMENT", resource="payments", actor=payload.diner_name,
                  session_id=payload.session_id, ip=client_ip(request), commit=False,
                  meta={"amount": str(payment.amount), "tip": str(payment.tip), "method": payment.method})
        return payment

    return _payment_to_out(run_with_stale_retry(db, op, attempts))

# Who has paid and what is still outstanding at the table
@router.get("/{session_id}", response_model=PaymentOverviewOut)
def payment_overview(session_id: int, db: Session = Depends(get_db), vat_rate: Decimal = Depends(get_vat_rate)):
    statuses = payments.payment_overview(db, session_id, vat_rate)
    diners = [
        DinerPaymentOut(
            diner_name=s.diner_name,
            bill_total=float(s.bill_total),
            paid=float(s.paid),
            tips=float(s.tips),
            outstanding=float(s.outstanding),
            is_paid=s.is_paid,
        )
        for s in statuses
    ]
    billed = [s for s in statuses if s.bill_total > 0]
    return PaymentOverviewOut(session_id=session_id, diners=diners,
                              all_paid=bool(billed) and all(s.is_paid for s in billed))
