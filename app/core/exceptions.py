"""
Error taxonomy for the order lifecycle.

Intake and review operations raise these to fail fast. Once the primary
record is written, downstream effects never raise: a vanished order is
logged at WARNING and a failed email at ERROR.
"""


class LifecycleError(Exception):
    """Base error carrying the HTTP status the route layer should return"""
    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidArgumentError(LifecycleError, ValueError):
    """Missing or malformed input"""
    status_code = 400


class NotFoundError(LifecycleError):
    """Referenced Order, Payment or Refund does not exist"""
    status_code = 404


class ConflictError(LifecycleError):
    """Duplicate transaction key, or refund requested on a refunded order"""
    status_code = 409


class DuplicateRecordError(Exception):
    """Raised by the ledger store when a unique index rejects a write"""
