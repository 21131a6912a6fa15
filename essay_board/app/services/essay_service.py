"""
Business logic for essays.

``EssayService`` is the record store for essay recommendations.  It is
constructed once per application around a :class:`JSONStorage` and
handed to the request handlers; there is no module-level instance.

Every operation re-reads the data file.  Mutations hold the storage
transaction lock for the whole read-modify-write cycle and write the
complete document back.  Storage failures propagate as
:class:`StorageError`.
"""

from __future__ import annotations

import logging
import time
import uuid
from typing import Any, Callable, Dict, List, Optional

from pydantic import ValidationError

from ..core.db import JSONStorage, StorageError
from ..schemas.essay import EssayCreate, EssayPage, EssayRead, EssayUpdate

logger = logging.getLogger(__name__)

# Fields a client may change after submission.
MUTABLE_FIELDS = ("title", "author", "why", "source", "pseudonym")


def _now_ms() -> int:
    return int(time.time() * 1000)


class EssayService:
    """Create, read, update, delete and list essays."""

    def __init__(
        self,
        storage: JSONStorage,
        *,
        clock: Callable[[], int] = _now_ms,
        id_factory: Callable[[], Any] = uuid.uuid4,
    ) -> None:
        self._storage = storage
        self._clock = clock
        self._id_factory = id_factory

    async def list_essays(self, page: int = 1, limit: int = 20) -> EssayPage:
        """Return one page of essays, newest first.

        Essays sharing a ``createdAt`` value are ordered by insertion,
        most recently inserted first.  ``total`` is the size of the whole
        collection; a page past the end is empty, not an error.
        """
        # Validate first; the sort needs integer createdAt values.
        essays = [self._to_read(record) for record in self._storage.read()["essays"]]
        ordered = [
            essay
            for _, essay in sorted(
                enumerate(essays),
                key=lambda item: (item[1].created_at, item[0]),
                reverse=True,
            )
        ]
        start = (page - 1) * limit
        return EssayPage(essays=ordered[start:start + limit], total=len(essays))

    async def get_essay(self, essay_id: str) -> Optional[EssayRead]:
        """Retrieve a single essay by its ID."""
        record = self._find(self._storage.read()["essays"], essay_id)
        if record is None:
            return None
        return self._to_read(record)

    async def create_essay(self, data: EssayCreate) -> EssayRead:
        """Store a new essay and return it.

        The ID and ``createdAt`` timestamp are assigned here; clients
        cannot supply either.
        """
        with self._storage.transaction() as document:
            essays = document["essays"]
            taken = {record.get("id") for record in essays}
            essay_id = str(self._id_factory())
            while essay_id in taken:
                essay_id = str(self._id_factory())

            record: Dict[str, Any] = {"id": essay_id}
            record.update(data.model_dump(exclude_none=True))
            record["createdAt"] = self._clock()
            essays.append(record)
            self._storage.write(document)

        logger.info("Created essay %s (%r)", essay_id, data.title)
        return self._to_read(record)

    async def update_essay(self, essay_id: str, data: EssayUpdate) -> Optional[EssayRead]:
        """Apply a partial update.

        Only fields present in ``data`` are changed.  A ``None`` value for
        ``source`` or ``pseudonym`` removes it.  Returns ``None`` when the
        essay does not exist; nothing is written in that case.
        """
        changes = {
            key: value
            for key, value in data.model_dump(exclude_unset=True).items()
            if key in MUTABLE_FIELDS
        }
        with self._storage.transaction() as document:
            record = self._find(document["essays"], essay_id)
            if record is None:
                return None
            for key, value in changes.items():
                if value is None:
                    record.pop(key, None)
                else:
                    record[key] = value
            self._storage.write(document)

        logger.info("Updated essay %s (%s)", essay_id, ", ".join(sorted(changes)) or "no fields")
        return self._to_read(record)

    async def delete_essay(self, essay_id: str) -> bool:
        """Delete an essay by ID.

        Returns ``True`` if a record was removed.  The data file is only
        rewritten when something was actually deleted.
        """
        with self._storage.transaction() as document:
            essays = document["essays"]
            remaining = [record for record in essays if record.get("id") != essay_id]
            if len(remaining) == len(essays):
                return False
            document["essays"] = remaining
            self._storage.write(document)

        logger.info("Deleted essay %s", essay_id)
        return True

    @staticmethod
    def _find(records: List[Dict[str, Any]], essay_id: str) -> Optional[Dict[str, Any]]:
        for record in records:
            if record.get("id") == essay_id:
                return record
        return None

    def _to_read(self, record: Dict[str, Any]) -> EssayRead:
        try:
            return EssayRead.model_validate(record)
        except ValidationError as exc:
            raise StorageError(
                f"Malformed essay record {record.get('id')!r}: {exc}", self._storage.path
            ) from exc
