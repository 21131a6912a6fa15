"""
JSON document storage.

All essays and users live in a single JSON document of the form
``{"essays": [...], "users": [...]}``.  Every read loads the whole
document from disk and every write replaces the whole file, so no state
is cached between requests.  Writes go to a temporary file in the same
directory which is then moved over the target with ``os.replace``; a
failed write therefore leaves the previous document intact.

Mutating callers wrap their read-modify-write cycle in
:meth:`JSONStorage.transaction`, which serialises writers inside the
process.  Separate processes sharing one file are not coordinated.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, List

logger = logging.getLogger(__name__)

COLLECTIONS = ("essays", "users")


class StorageError(Exception):
    """Raised when the backing document cannot be read or written."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path


def empty_document() -> Dict[str, List[Dict[str, Any]]]:
    return {name: [] for name in COLLECTIONS}


class JSONStorage:
    """Whole-document access to the JSON data file."""

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)
        self._lock = threading.RLock()

    @property
    def path(self) -> Path:
        return self._path

    def init_db(self) -> None:
        """Create an empty document if the data file does not exist yet.

        An existing file is left untouched, even if it cannot be parsed;
        corruption is reported by the first read instead of being
        silently repaired.
        """
        with self._lock:
            if self._path.exists():
                return
            try:
                self._path.parent.mkdir(parents=True, exist_ok=True)
            except OSError as exc:
                raise StorageError(f"Cannot create data directory: {exc}", self._path) from exc
            self.write(empty_document())
            logger.info("Created new data file %s", self._path)

    def read(self) -> Dict[str, List[Dict[str, Any]]]:
        """Load and return the whole document.

        A missing file reads as an empty document.  Missing collections
        read as empty lists.
        """
        try:
            with self._path.open("r", encoding="utf-8") as handle:
                raw = json.load(handle)
        except FileNotFoundError:
            return empty_document()
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise StorageError(f"Cannot read data file: {exc}", self._path) from exc

        if not isinstance(raw, dict):
            raise StorageError("Data file must contain a JSON object", self._path)

        document = dict(raw)
        for name in COLLECTIONS:
            value = document.get(name)
            if value is None:
                document[name] = []
            elif not isinstance(value, list) or not all(isinstance(item, dict) for item in value):
                raise StorageError(f"Collection '{name}' must be a list of objects", self._path)
        return document

    def write(self, document: Dict[str, Any]) -> None:
        """Atomically replace the data file with ``document``."""
        try:
            payload = json.dumps(document, ensure_ascii=False, indent=2)
        except (TypeError, ValueError) as exc:
            raise StorageError(f"Cannot serialise document: {exc}", self._path) from exc

        tmp_name = None
        try:
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self._path.name}.", suffix=".tmp", dir=str(self._path.parent)
            )
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, self._path)
            tmp_name = None
        except OSError as exc:
            raise StorageError(f"Cannot write data file: {exc}", self._path) from exc
        finally:
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    logger.warning("Could not remove temporary file %s", tmp_name)

    @contextmanager
    def transaction(self) -> Iterator[Dict[str, List[Dict[str, Any]]]]:
        """Hold the writer lock and yield a freshly read document.

        Nothing is persisted automatically; call :meth:`write` inside the
        block to commit changes.
        """
        with self._lock:
            yield self.read()
