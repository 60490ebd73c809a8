# backend/services/payments.py
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import List

from sqlalchemy.orm import Session

from models.dining_session import DiningSession, SessionStatus
from models.payment import Payment
from services.billing import compute_diner_bill
from services.errors import NotFoundError, PaymentError
from services.sessions import require_diner
from utils.pricing import money, to_decimal

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DinerPaymentStatus:
    diner_name: str
    bill_total: Decimal
    paid: Decimal
    tips: Decimal
    outstanding: Decimal

    @property
    def is_paid(self) -> bool:
        return self.bill_total > 0 and self.outstanding <= 0


def _lock_session(db: Session, session_id: int) -> DiningSession:
    session = db.query(DiningSession).filter(DiningSession.id == session_id).with_for_update().first()
    if not session:
        raise NotFoundError(f"Session {session_id} not found")
    return session


def _paid_by(db: Session, session_id: int, diner_name: str):
    rows = db.query(Payment).filter(Payment.session_id == session_id, Payment.diner_name == diner_name).all()
    paid = sum((to_decimal(p.amount) for p in rows), Decimal("0"))
    tips = sum((to_decimal(p.tip) for p in rows), Decimal("0"))
    return paid, tips


def diner_status(db: Session, session_id: int, diner_name: str, vat_rate) -> DinerPaymentStatus:
    bill = compute_diner_bill(db, session_id, diner_name, vat_rate)
    paid, tips = _paid_by(db, session_id, diner_name)
    return DinerPaymentStatus(
        diner_name=diner_name,
        bill_total=bill.total,
        paid=money(paid),
        tips=money(tips),
        outstanding=money(max(bill.total - paid, Decimal("0"))),
    )


def payment_overview(db: Session, session_id: int, vat_rate) -> List[DinerPaymentStatus]:
    session = db.query(DiningSession).filter(DiningSession.id == session_id).first()
    if not session:
        raise NotFoundError(f"Session {session_id} not found")
    return [diner_status(db, session.id, name, vat_rate) for name in session.diner_names]


def record_payment(db: Session, session_id: int, diner_name: str, vat_rate,
                   amount=None, tip=0, method: str = "card") -> Payment:
    session = _lock_session(db, session_id)
    if session.status == SessionStatus.CANCELLED:
        raise PaymentError(f"Session {session_id} was cancelled")
    require_diner(session, diner_name)

    status = diner_status(db, session.id, diner_name, vat_rate)
    if status.outstanding <= 0:
        raise PaymentError(f"{diner_name} has nothing left to pay")

    amount = status.outstanding if amount is None else money(amount)
    tip = money(tip or 0)
    if amount <= 0:
        raise PaymentError("Payment amount must be positive")
    if amount > status.outstanding:
        raise PaymentError(f"Payment of {amount} exceeds the outstanding {status.outstanding}")
    if tip < 0:
        raise PaymentError("Tip cannot be negative")

    payment = Payment(session_id=session.id, diner_name=diner_name, amount=amount, tip=tip, method=method)
    db.add(payment)
    db.flush()
    logger.info("Payment recorded", extra={"session_id": session.id, "diner": diner_name,
                                           "amount": str(amount), "tip": str(tip)})
    return payment
