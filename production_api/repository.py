"""
Typed repository over a document store collection.
"""

from __future__ import annotations

from typing import Generic, Optional, TypeVar

from production_api.db import DocumentStore
from production_api.errors import NotFoundError, ValidationError
from production_api.records import RecordKind

R = TypeVar("R")


def _is_missing(value) -> bool:
    if value is None:
        return True
    if isinstance(value, str) and not value.strip():
        return True
    if isinstance(value, list) and not value:
        return True
    return False


class Repository(Generic[R]):
    """find/insert/update/delete for one record kind.

    ``update_by_id`` takes a mapping holding only the attributes present in the
    request. Keys that are absent keep their stored value; a key mapped to
    ``None`` sets the attribute to null.
    """

    def __init__(self, store: DocumentStore, kind: RecordKind):
        self.store = store
        self.kind = kind

    def _to_record(self, data: Optional[dict]) -> Optional[R]:
        if data is None:
            return None
        return self.kind.record_type.from_dict(data)

    def _not_found(self) -> NotFoundError:
        return NotFoundError(f"{self.kind.name} not found")

    def find_all(self) -> list[R]:
        return [self._to_record(data) for data in self.store.find_all(self.kind.collection)]

    def find_by_id(self, record_id: str) -> R:
        record = self._to_record(self.store.find_by_id(self.kind.collection, record_id))
        if record is None:
            raise self._not_found()
        return record

    def find_one(self, filter: Optional[dict] = None) -> Optional[R]:
        return self._to_record(self.store.find_one(self.kind.collection, filter))

    def validate(self, data: dict) -> None:
        """Raise ValidationError if ``data`` lacks a required attribute."""
        missing = [key for key in self.kind.required if _is_missing(data.get(key))]
        if missing:
            raise ValidationError(
                f"{self.kind.name} is missing required field(s): {', '.join(missing)}"
            )

    def insert(self, data: dict) -> R:
        self.validate(data)
        data = {key: value for key, value in data.items() if key != "id"}
        return self._to_record(self.store.insert(self.kind.collection, data))

    def update_by_id(self, record_id: str, changes: dict) -> R:
        cleared = [
            key for key in self.kind.required
            if key in changes and _is_missing(changes[key])
        ]
        if cleared:
            raise ValidationError(
                f"{self.kind.name} field(s) cannot be empty: {', '.join(cleared)}"
            )
        changes = {key: value for key, value in changes.items() if key != "id"}
        updated = self.store.update_by_id(self.kind.collection, record_id, changes)
        if updated is None:
            raise self._not_found()
        return self._to_record(updated)

    def delete_by_id(self, record_id: str) -> R:
        deleted = self.store.delete_by_id(self.kind.collection, record_id)
        if deleted is None:
            raise self._not_found()
        return self._to_record(deleted)
