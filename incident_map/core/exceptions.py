"""Domain-level exception hierarchy for service and repository layers."""

from __future__ import annotations


class DomainError(Exception):
    """Base class for domain-specific failures."""

    code = "error"


class NotFoundError(DomainError):
    """Raised when a requested report, message or source does not exist."""

    code = "not_found"


class ConflictError(DomainError):
    """Raised when a state conflict occurs (e.g. duplicate entries)."""

    code = "conflict"


class DuplicateVoteError(ConflictError):
    """Raised when an identity has already voted on a report."""

    code = "already_voted"


class ValidationError(DomainError):
    """Raised when input validation fails at the domain/service layer."""

    code = "validation_error"


class InvalidStateError(DomainError):
    """Raised when an operation targets a report that no longer accepts it."""

    code = "invalid_state"


class RateLimitError(DomainError):
    """Raised when an identity acts again before its cooldown elapsed."""

    code = "rate_limited"

    def __init__(self, message: str = "", *, retry_after: int = 0) -> None:
        super().__init__(message)
        self.retry_after = max(0, int(retry_after))


class UnauthorizedError(DomainError):
    """Raised when the admin credential check fails."""

    code = "unauthorized"


class InfrastructureError(DomainError):
    """Raised when infrastructure (DB or external service) is unavailable."""

    code = "unavailable"
