"""Domain errors.

Every error carries a machine-readable ``code``, a human-readable ``message``
and the HTTP status the API renders it with. ``extra`` holds additional
response fields (offending field name, missing steps, ...).

Ownership failures are reported exactly like a missing resource so callers
cannot discover ids that belong to someone else.
"""

from __future__ import annotations

from typing import Any


class HeadHuntdError(Exception):
    code = "INTERNAL_ERROR"
    status_code = 500

    def __init__(self, message: str, extra: dict[str, Any] | None = None) -> None:
        self.message = message
        self.extra = extra or {}
        super().__init__(message)


class ValidationError(HeadHuntdError):
    """A step or request field is missing, malformed or oversized."""

    code = "VALIDATION_ERROR"
    status_code = 400

    def __init__(self, field: str, reason: str, message: str | None = None) -> None:
        self.field = field
        self.reason = reason
        super().__init__(message or f"{field}: {reason}", {"field": field, "reason": reason})


class NotFoundError(HeadHuntdError):
    code = "NOT_FOUND"
    status_code = 404

    def __init__(self, resource: str) -> None:
        self.resource = resource
        super().__init__(f"{resource} not found")


class AuthorizationError(NotFoundError):
    """The caller does not own the resource.

    Rendered identically to NotFoundError.
    """


class ForbiddenError(HeadHuntdError):
    code = "FORBIDDEN"
    status_code = 403

    def __init__(self, message: str = "Access denied") -> None:
        super().__init__(message)


class IncompleteDraftError(HeadHuntdError):
    code = "INCOMPLETE_DRAFT"
    status_code = 422

    def __init__(self, missing: list[str]) -> None:
        self.missing = list(missing)
        super().__init__(
            "Job cannot be published until all steps are complete",
            {"missing": self.missing},
        )


class InvalidTransitionError(HeadHuntdError):
    code = "INVALID_STATUS_TRANSITION"
    status_code = 422

    def __init__(self, current: str, target: str) -> None:
        self.current = current
        self.target = target
        super().__init__(f"Cannot move job from {current} to {target}", {"status": current})


class ConflictError(HeadHuntdError):
    code = "CONFLICT"
    status_code = 409


class AccountLockedError(HeadHuntdError):
    code = "ACCOUNT_LOCKED"
    status_code = 423

    def __init__(self) -> None:
        super().__init__("Account is locked due to too many failed login attempts. Please try again later.")


class PaymentProviderError(HeadHuntdError):
    code = "PAYMENT_PROVIDER_ERROR"
    status_code = 502
