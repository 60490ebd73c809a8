# backend/services/errors.py
"""Domain errors of the ordering core.

Every error is recoverable at the request boundary: ``main.py`` maps each one
to its ``status_code`` with the message as ``detail``.
"""


class OrderingError(Exception):
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(OrderingError):
    """Line, session, diner or menu item does not exist (or is no longer mutable)."""
    status_code = 404


class InvalidSplitError(OrderingError):
    """Empty or duplicate participant list, or a split on a line that cannot take one."""
    status_code = 400


class DivisionError(OrderingError, ZeroDivisionError):
    """Share requested with a non-positive split count."""
    status_code = 400


class NotAParticipantError(OrderingError):
    status_code = 403


class ConfirmationError(OrderingError):
    """Confirming a cart that has no diners or no lines."""
    status_code = 400


class StaleWriteError(OrderingError):
    """Optimistic version check failed; the caller should re-read and retry."""
    status_code = 409


class SessionConflictError(OrderingError):
    """A table can only have one active session at a time."""
    status_code = 409


class PaymentError(OrderingError):
    status_code = 400
