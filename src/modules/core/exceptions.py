"""Base domain exceptions shared by every module.

Raised by the Service Layer when a business rule is violated.  Each kind
carries the structured data needed to describe the failure; the API layer
(Views) catches the concrete subclasses and translates them into HTTP
responses.  None of them is transient: the service never retries.
"""

from __future__ import annotations

from typing import Any


class DomainError(Exception):
    """Root of all business-rule violations."""


class NotFound(DomainError):
    """The requested entity does not exist."""

    entity = "Entity"

    def __init__(self, id: Any) -> None:
        self.id = id
        super().__init__(f"{self.entity} {id} not found.")


class InvalidState(DomainError):
    """The operation is not allowed in the entity's current state."""

    def __init__(
        self, operation: str, current_status: str, required_status: str, message: str
    ) -> None:
        self.operation = operation
        self.current_status = current_status
        self.required_status = required_status
        super().__init__(message)


class Conflict(DomainError):
    """The operation would break a referential rule."""

    entity = "Entity"

    def __init__(self, id: Any, reason: str) -> None:
        self.id = id
        self.reason = reason
        super().__init__(f"Cannot delete {self.entity.lower()} {id}: {reason}.")
