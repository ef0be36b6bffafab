"""Domain errors raised by the catalog, schedule and reservation ledger."""

from __future__ import annotations

from typing import Any


class DomainError(Exception):
    """Base error with a stable code routers can map to a response."""

    code = "domain_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_detail(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message}


class ValidationError(DomainError):
    code = "validation_error"

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field

    def to_detail(self) -> dict[str, Any]:
        return {**super().to_detail(), "field": self.field}


class NotFoundError(DomainError):
    code = "not_found"

    def __init__(self, entity: str, entity_id: object) -> None:
        super().__init__(f"{entity} {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id


class CapacityExceededError(DomainError):
    code = "capacity_exceeded"

    def __init__(self, requested: int, remaining: int) -> None:
        super().__init__(f"requested {requested} attendees but only {remaining} remaining")
        self.requested = requested
        self.remaining = remaining

    def to_detail(self) -> dict[str, Any]:
        return {**super().to_detail(), "requested": self.requested, "remaining": self.remaining}


class StorageUnavailableError(DomainError):
    code = "storage_unavailable"


class MalformedRecordError(StorageUnavailableError):
    """A stored record failed schema validation while being loaded."""

    code = "malformed_record"
