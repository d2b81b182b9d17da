"""Error taxonomy for the ingestion pipeline.

Fetch failures are not represented here: the HTTP client absorbs them and
hands back an empty payload.
"""

from __future__ import annotations


class IngestionError(RuntimeError):
    pass


class ValidationError(IngestionError, ValueError):
    def __init__(self, field: str, reason: str) -> None:
        super().__init__(f"Validation error ({field}): {reason}")
        self.field = field
        self.reason = reason


class TransformationError(IngestionError):
    def __init__(self, entity: str, reason: str, entity_id: object | None = None) -> None:
        label = entity if entity_id is None else f"{entity} {entity_id}"
        super().__init__(f"Cannot transform {label}: {reason}")
        self.entity = entity
        self.entity_id = entity_id
        self.reason = reason


class StorageError(IngestionError):
    def __init__(self, operation: str, reason: str) -> None:
        super().__init__(f"Storage error ({operation}): {reason}")
        self.operation = operation
        self.reason = reason
