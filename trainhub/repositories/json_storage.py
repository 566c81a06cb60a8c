"""
JSON-file record store.

One store owns one record kind and one file. The file holds a single JSON
object mapping key -> record and is rewritten in full (to a temporary file,
then renamed over the destination) after every mutation, so the copy at rest
is always a complete snapshot. All access goes through one lock per store.
"""

from __future__ import annotations

import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Callable, Generic, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from trainhub.core.errors import AlreadyExistsError, NotFoundError, PersistenceFailure
from trainhub.core.logging import get_logger

RecordT = TypeVar("RecordT", bound=BaseModel)

logger = get_logger(__name__)


class JsonRecordStore(Generic[RecordT]):
    """Lock-guarded mapping from a string key to a pydantic record, backed by a JSON file."""

    def __init__(
        self,
        path: str | os.PathLike,
        model: Type[RecordT],
        key: Callable[[RecordT], str],
        *,
        label: str | None = None,
    ) -> None:
        self.path = Path(path)
        self.model = model
        self._key = key
        self.label = label or model.__name__.lower()
        self._records: dict[str, RecordT] = {}
        self._lock = threading.Lock()
        self.load()

    # ------------------------------------------------------------------ loading
    def load(self) -> None:
        """Read the backing file into memory.

        A missing file is a first run. A file that does not parse leaves the
        store empty: the corrupt contents are logged and then overwritten by
        the next successful write.
        """
        with self._lock:
            self._records = {}
            try:
                raw = self.path.read_bytes()
            except FileNotFoundError:
                return
            except OSError as exc:
                logger.warning("store file unreadable, starting empty", store=self.label, path=str(self.path), error=str(exc))
                return
            try:
                # UnicodeDecodeError is a ValueError
                data = json.loads(raw.decode("utf-8"))
                if not isinstance(data, dict):
                    raise ValueError(f"expected a JSON object, got {type(data).__name__}")
                records = {str(k): self.model.model_validate(v) for k, v in data.items()}
            except (ValueError, ValidationError) as exc:
                logger.warning("store file corrupt, starting empty", store=self.label, path=str(self.path), error=str(exc))
                return
            self._records = records
            logger.debug("store loaded", store=self.label, records=len(records))

    # ------------------------------------------------------------------ reads
    def get(self, key: str) -> Optional[RecordT]:
        with self._lock:
            record = self._records.get(key)
            return record.model_copy(deep=True) if record is not None else None

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._records

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def list_all(self) -> list[RecordT]:
        with self._lock:
            return [r.model_copy(deep=True) for r in self._records.values()]

    def list_filtered(self, predicate: Callable[[RecordT], bool]) -> list[RecordT]:
        with self._lock:
            return [r.model_copy(deep=True) for r in self._records.values() if predicate(r)]

    # ------------------------------------------------------------------ writes
    def put(self, record: RecordT) -> None:
        """Insert or overwrite ``record`` under its key and rewrite the file.

        On PersistenceFailure the in-memory mapping already holds the record.
        """
        key = self._key(record)
        with self._lock:
            self._records[key] = record.model_copy(deep=True)
        self._save()

    def insert(self, record: RecordT) -> None:
        """Like put, but refuses to overwrite an existing key."""
        key = self._key(record)
        with self._lock:
            if key in self._records:
                raise AlreadyExistsError(f"{self.label} already exists")
            self._records[key] = record.model_copy(deep=True)
        self._save()

    def update(self, key: str, mutate: Callable[[RecordT], Optional[RecordT]]) -> RecordT:
        """Apply ``mutate`` to a copy of the stored record and store the result.

        The read, the mutation and the replacement happen under the lock, so
        concurrent updates of one record never lose each other's changes. An
        exception raised by ``mutate`` leaves the stored record untouched.
        """
        with self._lock:
            current = self._records.get(key)
            if current is None:
                raise NotFoundError(f"{self.label} not found")
            draft = current.model_copy(deep=True)
            result = mutate(draft)
            updated = draft if result is None else result
            if self._key(updated) != key:
                raise ValueError(f"{self.label} key is immutable")
            self._records[key] = updated
            snapshot = updated.model_copy(deep=True)
        self._save()
        return snapshot

    def delete(self, key: str) -> None:
        with self._lock:
            if key not in self._records:
                raise NotFoundError(f"{self.label} not found")
            del self._records[key]
        self._save()

    # ------------------------------------------------------------------ persistence
    def _serialize(self) -> str:
        payload = {k: r.model_dump(mode="json") for k, r in self._records.items()}
        return json.dumps(payload, ensure_ascii=False, indent=2)

    def _save(self) -> None:
        # Snapshot and write under the lock: whatever lands on disk is the
        # complete mapping as of this write, including every earlier mutation.
        with self._lock:
            try:
                document = self._serialize()
                self._atomic_write(document)
            except (OSError, TypeError, ValueError) as exc:
                logger.error(
                    "store write failed",
                    store=self.label,
                    path=str(self.path),
                    error=str(exc),
                    exc_info=True,
                )
                raise PersistenceFailure(f"could not write {self.path}: {exc}") from exc

    def _atomic_write(self, document: str) -> None:
        directory = self.path.parent
        directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", suffix=".tmp", dir=directory)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(document)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, self.path)
        except BaseException:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            raise
