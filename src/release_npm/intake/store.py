"""Storage for submitted applications.

Writes are conditional on the record id not existing yet, so a colliding
id can never overwrite an earlier submission.
"""

from __future__ import annotations

import threading
from datetime import datetime
from typing import Protocol

from pydantic import BaseModel, ConfigDict, Field


class ApplicationRecord(BaseModel):
    """A stored submission."""

    model_config = ConfigDict(frozen=True)

    id: str
    variant: str
    fields: dict[str, str]
    status: str = "pending"
    submitted_at: datetime = Field(default_factory=datetime.now)


class DuplicateApplicationError(Exception):
    """A record with this id already exists."""

    def __init__(self, record_id: str) -> None:
        super().__init__(f"Application {record_id} already exists")
        self.record_id = record_id


class ApplicationStore(Protocol):
    """Idempotent-insert storage."""

    def put_if_absent(self, record: ApplicationRecord) -> None:
        """Store ``record`` unless its id is taken.

        Raises:
            DuplicateApplicationError: If the id already exists
        """
        ...

    def get(self, record_id: str) -> ApplicationRecord | None:
        """Return the record with ``record_id``, if any."""
        ...


class InMemoryApplicationStore:
    """Process-local store, keyed by record id."""

    def __init__(self, table_name: str = "community-applications") -> None:
        self.table_name = table_name
        self._records: dict[str, ApplicationRecord] = {}
        self._lock = threading.Lock()

    def put_if_absent(self, record: ApplicationRecord) -> None:
        with self._lock:
            if record.id in self._records:
                raise DuplicateApplicationError(record.id)
            self._records[record.id] = record

    def get(self, record_id: str) -> ApplicationRecord | None:
        return self._records.get(record_id)

    def __len__(self) -> int:
        return len(self._records)
