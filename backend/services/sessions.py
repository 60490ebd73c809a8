# backend/services/sessions.py
import logging
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from models.cart import CartLine, LineStatus
from models.dining_session import DiningSession, Diner, SessionStatus
from services.errors import NotFoundError, OrderingError, SessionConflictError

logger = logging.getLogger(__name__)


def get_session(db: Session, session_id: int) -> DiningSession:
    session = db.query(DiningSession).filter(DiningSession.id == session_id).first()
    if not session:
        raise NotFoundError(f"Session {session_id} not found")
    return session


def get_active_session(db: Session, session_id: int) -> DiningSession:
    session = get_session(db, session_id)
    if session.status != SessionStatus.ACTIVE:
        raise NotFoundError(f"Session {session_id} is {session.status.value}")
    return session


def active_session_for_table(db: Session, table_number: int):
    return (
        db.query(DiningSession)
        .filter(DiningSession.table_number == table_number, DiningSession.status == SessionStatus.ACTIVE)
        .first()
    )


def open_session(db: Session, table_number: int, started_by_name: str = None) -> DiningSession:
    if active_session_for_table(db, table_number):
        raise SessionConflictError(f"Table {table_number} already has an active session")
    session = DiningSession(table_number=table_number, started_by_name=started_by_name,
                            status=SessionStatus.ACTIVE)
    db.add(session)
    db.flush()
    logger.info("Session opened", extra={"session_id": session.id, "table_number": table_number})
    return session


def join_session(db: Session, session_id: int, name: str) -> Diner:
    session = get_active_session(db, session_id)
    name = (name or "").strip()
    if not name:
        raise OrderingError("Diner name is required")

    # Re-entering the same name at the table rejoins as that diner
    for diner in session.diners:
        if diner.name == name:
            return diner

    diner = Diner(session=session, name=name)
    db.add(diner)
    db.flush()
    return diner


def require_diner(session: DiningSession, name: str) -> str:
    if name not in session.diner_names:
        raise NotFoundError(f"Diner '{name}' is not part of session {session.id}")
    return name


def close_session(db: Session, session_id: int, status: SessionStatus = SessionStatus.COMPLETED) -> DiningSession:
    session = get_active_session(db, session_id)

    # Unconfirmed lines (and their splits) never outlive the session
    pending = (
        db.query(CartLine)
        .filter(CartLine.session_id == session.id, CartLine.status == LineStatus.CART)
        .with_for_update()
        .all()
    )
    for line in pending:
        db.delete(line)

    session.status = status
    session.ended_at = datetime.now(timezone.utc)
    db.flush()
    logger.info("Session closed", extra={"session_id": session.id, "status": status.value,
                                         "dropped_cart_lines": len(pending)})
    return session
