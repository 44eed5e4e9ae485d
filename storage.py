import json
import logging
import os
import tempfile
from typing import Any, Callable, Dict, List, Mapping, Optional
from filelock import FileLock, Timeout
from config import StoreConfig
from errors import NotFoundError, StorageError

logger = logging.getLogger(__name__)

Record = Dict[str, Any]


class MalformedStorage(ValueError):
    pass


def _decode(text: str) -> List[Record]:
    data = json.loads(text)
    if not isinstance(data, list):
        raise MalformedStorage(f"expected a JSON array, got {type(data).__name__}")
    if not all(isinstance(item, dict) for item in data):
        raise MalformedStorage("expected every response to be a JSON object")
    return data


class ResponseStore:
    """Append-only JSON array of survey responses on disk.

    Every append re-reads and rewrites the whole file under a file lock, so
    concurrent submissions from threads or worker processes never lose an
    update.
    """

    def __init__(self, config: StoreConfig) -> None:
        self.config = config
        self.path = config.json_path
        self._lock: Optional[FileLock] = None

    @property
    def lock(self) -> FileLock:
        if self._lock is None:
            self.config.base_dir.mkdir(parents=True, exist_ok=True)
            self._lock = FileLock(
                str(self.config.lock_path), timeout=self.config.lock_timeout
            )
        return self._lock

    def exists(self) -> bool:
        return self.path.exists()

    def read_all(self) -> List[Record]:
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise NotFoundError("No responses found", details=str(exc)) from exc
        except OSError as exc:
            raise StorageError("Failed to read responses", details=str(exc)) from exc
        try:
            return _decode(text)
        except ValueError as exc:
            raise NotFoundError("No responses found", details=str(exc)) from exc

    def append(
        self,
        record: Mapping[str, Any],
        on_commit: Optional[Callable[[List[Record]], Any]] = None,
    ) -> int:
        """Add ``record`` to the end of the log and return the new total.

        ``on_commit`` runs with the full list after the write, while the
        lock is still held.
        """
        try:
            with self.lock:
                records = self._load_for_update()
                records.append(dict(record))
                self._write(records)
                if on_commit is not None:
                    on_commit(records)
        except Timeout as exc:
            raise StorageError(
                "Timed out waiting for the response store lock", details=str(exc)
            ) from exc
        except OSError as exc:
            raise StorageError("Failed to write responses", details=str(exc)) from exc
        return len(records)

    def _load_for_update(self) -> List[Record]:
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.info("No existing responses file at %s, creating new one", self.path)
            return []
        try:
            return _decode(text)
        except ValueError as exc:
            logger.warning("Discarding malformed responses file %s: %s", self.path, exc)
            return []

    def _write(self, records: List[Record]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        try:
            payload = json.dumps(records, ensure_ascii=False, indent=2)
        except (TypeError, ValueError) as exc:
            raise StorageError("Failed to serialize responses", details=str(exc)) from exc
        fd, tmp_name = tempfile.mkstemp(
            dir=str(self.path.parent), prefix=self.path.name, suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(tmp_name, self.path)
        except OSError:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
