# backend/services/split_ledger.py
"""Split-bill ledger for shared cart lines.

There is exactly one way a ledger entry gets its prices: ``price_entry`` reads
``unit_price`` and ``quantity`` off the owning line as it is right now and
derives ``original_price`` and ``split_price`` from scratch. Every mutation path
(new split, participant change, quantity change, explicit recompute) goes
through it, so an old share can never survive a quantity change.

Reads never repair anything. If an entry disagrees with its line the read
fails instead of showing an outdated amount.
"""
import logging
from typing import List

from sqlalchemy.orm import Session

from models.cart import CartLine
from models.split import SplitLedgerEntry
from services.errors import InvalidSplitError, NotAParticipantError, NotFoundError, StaleWriteError
from services.lines import get_line, lock_cart_line, touch
from services.sessions import get_session
from utils.pricing import line_total, money, shares_balance, split_share, to_decimal, TOLERANCE

logger = logging.getLogger(__name__)


def _clean_participants(participants) -> List[str]:
    names = [(p or "").strip() for p in (participants or [])]
    if not names:
        raise InvalidSplitError("A split needs at least one participant")
    if any(not n for n in names):
        raise InvalidSplitError("Participant names cannot be blank")
    if len(set(names)) != len(names):
        raise InvalidSplitError("Each participant can only be listed once")
    return names


def _require_registered(db: Session, line: CartLine, names: List[str]):
    seated = set(get_session(db, line.session_id).diner_names)
    unknown = [n for n in names if n not in seated]
    if unknown:
        raise NotFoundError(f"Not seated in this session: {', '.join(unknown)}")


def price_entry(entry: SplitLedgerEntry, line: CartLine) -> SplitLedgerEntry:
    original_price = line_total(line.unit_price, line.quantity)
    split_price = split_share(original_price, entry.split_count)
    if not shares_balance(split_price, entry.split_count, original_price):
        raise InvalidSplitError(f"Split of line {line.id} does not add up to its price")

    entry.original_price = original_price
    entry.split_price = split_price
    return entry


def check_entry(entry: SplitLedgerEntry, line: CartLine) -> SplitLedgerEntry:
    """Fail if a stored entry no longer matches the line it prices."""
    expected = line_total(line.unit_price, line.quantity)
    if (
        abs(to_decimal(entry.original_price) - expected) > TOLERANCE
        or not shares_balance(entry.split_price, entry.split_count, entry.original_price)
        or entry.split_count != len(entry.participants or [])
    ):
        logger.error("Split ledger out of date", extra={
            "line_id": line.id, "stored_original": str(entry.original_price), "expected_original": str(expected),
        })
        raise StaleWriteError(f"Split for line {line.id} is out of date, recompute it before reading")
    return entry


def _entry_for(line: CartLine) -> SplitLedgerEntry:
    if line.split is None:
        raise NotFoundError(f"Line {line.id} is not split")
    return line.split


def create_split(db: Session, line_id: int, participants) -> SplitLedgerEntry:
    line = lock_cart_line(db, line_id)
    if line.split is not None:
        raise InvalidSplitError(f"Line {line.id} is already split, update its participants instead")
    if not line.is_shared:
        raise InvalidSplitError(f"Line {line.id} was not added as a shared item")

    names = _clean_participants(participants)
    _require_registered(db, line, names)

    entry = SplitLedgerEntry(line=line, participants=names, split_count=len(names))
    price_entry(entry, line)
    db.add(entry)
    touch(line)
    db.flush()

    logger.info("Split created", extra={
        "line_id": line.id, "split_count": entry.split_count, "split_price": str(money(entry.split_price)),
    })
    return entry


def recompute_split(db: Session, line_id: int) -> SplitLedgerEntry:
    line = lock_cart_line(db, line_id)
    entry = price_entry(_entry_for(line), line)
    db.flush()
    return entry


def refresh_for_line(line: CartLine):
    """Reprice the line's split, if it has one. Called after every quantity change."""
    if line.split is not None:
        price_entry(line.split, line)


def update_participants(db: Session, line_id: int, participants) -> SplitLedgerEntry:
    line = lock_cart_line(db, line_id)
    entry = _entry_for(line)

    names = _clean_participants(participants)
    _require_registered(db, line, names)

    entry.participants = names
    entry.split_count = len(names)
    price_entry(entry, line)
    touch(line)
    db.flush()

    logger.info("Split participants updated", extra={"line_id": line.id, "split_count": entry.split_count})
    return entry


def get_split(db: Session, line_id: int) -> SplitLedgerEntry:
    line = get_line(db, line_id)
    return check_entry(_entry_for(line), line)


def get_share_for(db: Session, line_id: int, diner_name: str):
    entry = get_split(db, line_id)
    if diner_name not in (entry.participants or []):
        raise NotAParticipantError(f"{diner_name} is not sharing line {line_id}")
    return to_decimal(entry.split_price)
