"""
guarded_api.errors

Typed error taxonomy shared by the guard, services and API layer.

Responsibilities:
- Give every failure a machine-readable kind (and, for authorization, a reason)
  so callers branch on type instead of matching message strings.
- Stay framework-free; HTTP mapping lives in `guarded_api.api.errors`.
"""

from __future__ import annotations

import enum
from typing import ClassVar


class ErrorKind(enum.StrEnum):
    authentication = "AUTHENTICATION"
    authorization = "AUTHORIZATION"
    not_found = "NOT_FOUND"
    conflict = "CONFLICT"
    validation = "VALIDATION"


class AuthorizationReason(enum.StrEnum):
    role_mismatch = "ROLE_MISMATCH"
    not_enrolled = "NOT_ENROLLED"
    forbidden = "FORBIDDEN"


class GuardError(Exception):
    """
    Base class for request-scoped failures. Never fatal to the process.
    """

    kind: ClassVar[ErrorKind]

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class AuthenticationError(GuardError):
    kind = ErrorKind.authentication


class AuthorizationError(GuardError):
    kind = ErrorKind.authorization

    def __init__(self, reason: AuthorizationReason, message: str | None = None) -> None:
        super().__init__(message or reason.value.replace("_", " ").lower())
        self.reason = reason


class NotFoundError(GuardError):
    kind = ErrorKind.not_found


class ConflictError(GuardError):
    kind = ErrorKind.conflict


class ValidationError(GuardError):
    kind = ErrorKind.validation


# --- Module Notes -----------------------------------------------------------
# Soft-deleted and cross-tenant resources surface as NotFoundError, never as
# AuthorizationError; see `auth.ownership.check_access`.
