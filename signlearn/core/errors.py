"""Domain error taxonomy.

Services and stores raise these; the HTTP layer (signlearn/api/errors.py)
maps each class to a status code and the ``{message, error?}`` envelope.

  ValidationError    400  malformed or out-of-range input
  UnauthorizedError  401  credential mismatch
  NotFoundError      404  referenced entity absent
  ConflictError      409  duplicate unique key
  StoreError         500  I/O failure talking to the record store

Idempotent no-ops ("already enrolled", "already completed") are NOT errors.
"""

from __future__ import annotations


class SignlearnError(Exception):
    status_code = 500
    code = "internal_error"

    def __init__(self, message: str, *, detail: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail


class ValidationError(SignlearnError):
    status_code = 400
    code = "validation_error"


class UnauthorizedError(SignlearnError):
    status_code = 401
    code = "unauthorized"


class NotFoundError(SignlearnError):
    status_code = 404
    code = "not_found"


class ConflictError(SignlearnError):
    status_code = 409
    code = "conflict"


class StoreError(SignlearnError):
    """Transient store failure. Never retried here; callers may retry."""

    status_code = 500
    code = "store_error"
