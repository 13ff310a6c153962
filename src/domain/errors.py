"""Error taxonomy shared by the workflow engine and the API layer."""

from __future__ import annotations


class DoubtError(Exception):
    """Base class for failures surfaced to callers with a stable kind."""

    kind = "error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class AuthenticationError(DoubtError):
    """Missing or invalid credential."""

    kind = "authentication"


class AuthorizationError(DoubtError):
    """Wrong role, or wrong relationship to the question."""

    kind = "authorization"


class ValidationError(DoubtError):
    """Missing or out-of-range input."""

    kind = "validation"


class NotFoundError(DoubtError):
    """Unknown question or comment."""

    kind = "not_found"


class ConflictError(DoubtError):
    """The question is not in a state that allows the operation."""

    kind = "conflict"
