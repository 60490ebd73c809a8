# backend/services/retry.py
import logging
from typing import Callable, TypeVar

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from services.errors import StaleWriteError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def run_with_stale_retry(db: Session, operation: Callable[[], T], attempts: int = 3) -> T:
    """Run one logical mutation and commit it as a single unit.

    ``operation`` must re-read everything it touches, because a lost race
    rolls the session back and expires all loaded rows before the next try.
    Two kinds of lost race are retried: a version check that matched no row
    (``StaleDataError``) and a concurrent insert of the same unique row
    (``IntegrityError``, e.g. two identical adds or two diners joining under
    one name). The next attempt sees the winner's row and merges into it.
    Any other exception rolls back and propagates untouched.
    """
    attempts = max(1, attempts)
    for attempt in range(1, attempts + 1):
        try:
            result = operation()
            db.commit()
            return result
        except (StaleDataError, IntegrityError) as exc:
            db.rollback()
            logger.warning("Concurrent write detected, retrying",
                           extra={"attempt": attempt, "attempts": attempts,
                                  "error": type(exc).__name__, "detail": str(exc)})
        except Exception:
            db.rollback()
            raise
    raise StaleWriteError("The order changed while you were editing it, please refresh and try again")
