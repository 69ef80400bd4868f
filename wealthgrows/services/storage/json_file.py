"""
Local JSON File Storage Implementation

DESIGN DECISION: The ledger lives in plain JSON files on the user's
machine because:
1. No server, no account, no setup
2. The user can open and back up their data with any editor
3. Easy to export/migrate later

One file per collection. Writes go to a temporary file in the same
directory and are moved into place with os.replace, so a crash mid-write
leaves the previous snapshot intact rather than a half-written one.

The implementation follows the abstract interface, so we can swap
to SQLite later without changing business logic.
"""

import os
import tempfile
import threading
from pathlib import Path
from typing import Callable, Optional
from uuid import UUID

import structlog
from pydantic import ValidationError
from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from wealthgrows.config import StorageSettings, get_settings
from wealthgrows.models.audit import AuditEvent
from wealthgrows.services.storage.interface import (
    AuditStorageInterface,
    StoreCorrupt,
    StoreUnavailable,
)
from wealthgrows.services.storage.snapshot import SnapshotLedgerStorage


# One lock per data directory, shared by every store opened on it
_DIRECTORY_LOCKS: dict[Path, threading.RLock] = {}
_DIRECTORY_LOCKS_GUARD = threading.Lock()


def lock_for_directory(directory: Path) -> threading.RLock:
    """Process-wide lock guarding read-modify-write in `directory`."""
    resolved = directory.expanduser().resolve()
    with _DIRECTORY_LOCKS_GUARD:
        lock = _DIRECTORY_LOCKS.get(resolved)
        if lock is None:
            lock = threading.RLock()
            _DIRECTORY_LOCKS[resolved] = lock
        return lock


def _retrying(attempts: int) -> Retrying:
    """Retry policy for transient file-system errors."""
    return Retrying(
        stop=stop_after_attempt(attempts),
        wait=wait_exponential(multiplier=0.05, min=0, max=1),
        retry=retry_if_exception_type(OSError),
        reraise=True,
    )


def _atomic_write(path: Path, payload: str) -> None:
    """Write `payload` to `path` via a temp file and os.replace."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(
        dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(payload)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise


class JsonFileLedgerStorage(SnapshotLedgerStorage):
    """
    Ledger storage backed by one JSON file per collection.

    Files are `<data_dir>/<key>.json`. A missing file means the
    collection was never written; an unreadable file is StoreUnavailable;
    an unparseable one is StoreCorrupt.
    """

    def __init__(
        self,
        data_dir: Optional[Path] = None,
        settings: Optional[StorageSettings] = None,
        on_seed: Optional[Callable[[int], None]] = None,
    ):
        self._settings = settings or get_settings().storage
        self._data_dir = Path(data_dir or self._settings.data_dir).expanduser()
        super().__init__(
            transactions_key=self._settings.transactions_key,
            categories_key=self._settings.categories_key,
            lock=lock_for_directory(self._data_dir),
            on_seed=on_seed,
        )

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def path_for(self, key: str) -> Path:
        return self._data_dir / f"{key}.json"

    def _load_blob(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        if not path.exists():
            return None
        try:
            return _retrying(self._settings.io_retry_attempts)(
                path.read_text, encoding="utf-8"
            )
        except UnicodeDecodeError as e:
            raise StoreCorrupt(
                f"Snapshot is not valid UTF-8: {path}", collection=key
            ) from e
        except OSError as e:
            self._logger.error("store_read_failed", path=str(path), error=str(e))
            raise StoreUnavailable(
                f"Could not read {path}: {e}", collection=key
            ) from e

    def _store_blob(self, key: str, payload: str) -> None:
        path = self.path_for(key)
        try:
            _retrying(self._settings.io_retry_attempts)(_atomic_write, path, payload)
        except OSError as e:
            self._logger.error("store_write_failed", path=str(path), error=str(e))
            raise StoreUnavailable(
                f"Could not write {path}: {e}", collection=key
            ) from e


class JsonLinesAuditStorage(AuditStorageInterface):
    """
    Append-only audit log, one JSON event per line.

    Appending never rewrites earlier lines.
    """

    def __init__(self, path: Optional[Path] = None):
        if path is None:
            storage = get_settings().storage
            path = Path(storage.data_dir).expanduser() / storage.audit_log_name
        self._path = Path(path)
        self._lock = threading.Lock()
        self._logger = structlog.get_logger(__name__)

    @property
    def path(self) -> Path:
        return self._path

    def append_event(self, event: AuditEvent) -> bool:
        line = event.model_dump_json() + "\n"
        try:
            with self._lock:
                self._path.parent.mkdir(parents=True, exist_ok=True)
                with self._path.open("a", encoding="utf-8") as handle:
                    handle.write(line)
        except OSError as e:
            raise StoreUnavailable(
                f"Could not append to audit log {self._path}: {e}",
                collection="audit",
            ) from e
        return True

    def _read_events(self) -> list[AuditEvent]:
        if not self._path.exists():
            return []
        try:
            lines = self._path.read_text(encoding="utf-8").splitlines()
        except OSError as e:
            raise StoreUnavailable(
                f"Could not read audit log {self._path}: {e}",
                collection="audit",
            ) from e

        events = []
        for number, line in enumerate(lines, start=1):
            if not line.strip():
                continue
            try:
                events.append(AuditEvent.model_validate_json(line))
            except ValidationError:
                # A torn last line must not hide the rest of the history
                self._logger.warning(
                    "audit_line_unreadable", path=str(self._path), line=number
                )
        return events

    def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        events = [e for e in self._read_events() if e.correlation_id == correlation_id]
        return sorted(events, key=lambda e: e.timestamp)

    def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        events = sorted(self._read_events(), key=lambda e: e.timestamp, reverse=True)
        return events[:limit]
