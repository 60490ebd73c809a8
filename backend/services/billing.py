# backend/services/billing.py
"""Table and per-diner bills over confirmed order lines.

Both computations are pure reads: nothing is written, repaired or cached, so
calling them twice without a mutation in between gives identical results.
A line counts as shared when it carries a split ledger entry; it adds its full
original price to the table bill and one split share to each participant's
own bill. Voided lines are not billed. Session discounts come off before VAT;
each diner carries a share of them proportional to their own subtotal.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import List

from sqlalchemy.orm import Session

from models.cart import CartLine, LineStatus
from services.adjustments import discount_amount, list_discounts
from services.sessions import get_session, require_diner
from services.split_ledger import check_entry
from utils.pricing import line_total, money, to_decimal, with_vat

ZERO = Decimal("0")


@dataclass(frozen=True)
class SessionBill:
    session_id: int
    subtotal: Decimal
    discount: Decimal
    vat: Decimal
    total: Decimal
    line_count: int


@dataclass(frozen=True)
class DinerBill:
    session_id: int
    diner_name: str
    personal_total: Decimal
    shared_total: Decimal
    subtotal: Decimal
    discount: Decimal
    vat: Decimal
    total: Decimal


def _confirmed_lines(db: Session, session_id: int) -> List[CartLine]:
    return (
        db.query(CartLine)
        .filter(CartLine.session_id == session_id, CartLine.status == LineStatus.CONFIRMED)
        .order_by(CartLine.id)
        .all()
    )


def _line_price(line: CartLine) -> Decimal:
    if line.split is not None:
        return to_decimal(check_entry(line.split, line).original_price)
    return line_total(line.unit_price, line.quantity)


def compute_session_bill(db: Session, session_id: int, vat_rate) -> SessionBill:
    session = get_session(db, session_id)
    lines = _confirmed_lines(db, session.id)

    subtotal = sum((_line_price(line) for line in lines), ZERO)
    discount = discount_amount(list_discounts(db, session.id), subtotal)
    taxable = subtotal - discount
    total = with_vat(taxable, vat_rate)
    return SessionBill(
        session_id=session.id,
        subtotal=money(subtotal),
        discount=money(discount),
        vat=money(total - taxable),
        total=money(total),
        line_count=len(lines),
    )


def compute_diner_bill(db: Session, session_id: int, diner_name: str, vat_rate) -> DinerBill:
    session = get_session(db, session_id)
    require_diner(session, diner_name)

    lines = _confirmed_lines(db, session.id)
    personal, shared = ZERO, ZERO
    for line in lines:
        if line.split is None:
            if line.diner_name == diner_name:
                personal += line_total(line.unit_price, line.quantity)
            continue
        entry = check_entry(line.split, line)
        if diner_name in (entry.participants or []):
            shared += to_decimal(entry.split_price)

    subtotal = personal + shared
    discount = ZERO
    discounts = list_discounts(db, session.id)
    if discounts and subtotal:
        table_subtotal = sum((_line_price(line) for line in lines), ZERO)
        discount = discount_amount(discounts, table_subtotal) * subtotal / table_subtotal
    taxable = subtotal - discount
    total = with_vat(taxable, vat_rate)
    return DinerBill(
        session_id=session.id,
        diner_name=diner_name,
        personal_total=money(personal),
        shared_total=money(shared),
        subtotal=money(subtotal),
        discount=money(discount),
        vat=money(total - taxable),
        total=money(total),
    )


def compute_all_diner_bills(db: Session, session_id: int, vat_rate) -> List[DinerBill]:
    session = get_session(db, session_id)
    return [compute_diner_bill(db, session.id, name, vat_rate) for name in session.diner_names]
