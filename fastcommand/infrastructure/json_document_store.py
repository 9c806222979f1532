"""
Flat-file JSON document store.

Each named document is one JSON file under the data directory. Reads return a default
when the file does not exist yet; writes go through a temp file and os.replace so a
reader never sees a half-written document. update() serializes read-modify-write per
document: an in-process lock per file plus a best-effort fcntl lock on a sidecar
.lock file for multi-worker deployments.
"""

from __future__ import annotations

import copy
import json
import logging
import os
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, Optional, Tuple, TypeVar

try:
    import fcntl  # type: ignore
except ImportError:  # Windows: in-process locking only
    fcntl = None  # type: ignore

logger = logging.getLogger(__name__)

T = TypeVar("T")

_locks: Dict[str, threading.Lock] = {}
_locks_guard = threading.Lock()


def _lock_for(path: Path) -> threading.Lock:
    key = str(path.resolve())
    with _locks_guard:
        lock = _locks.get(key)
        if lock is None:
            lock = threading.Lock()
            _locks[key] = lock
        return lock


class JsonDocumentStore:
    """Named JSON documents stored as individual files under a directory."""

    def __init__(self, data_dir: str | os.PathLike):
        self.data_dir = Path(data_dir)

    def path_for(self, name: str) -> Path:
        return self.data_dir / f"{name}.json"

    def read(self, name: str, default: Any = None) -> Any:
        """Return the parsed document, or a copy of default if the file does not exist."""
        path = self.path_for(name)
        if not path.exists():
            return copy.deepcopy(default)
        with open(path, "r", encoding="utf-8") as f:
            try:
                return json.load(f)
            except json.JSONDecodeError as e:
                logger.error(f"Corrupt JSON document {path}: {e}")
                raise

    def write(self, name: str, data: Any) -> None:
        with self.locked(name):
            self._write_unlocked(self.path_for(name), data)

    def update(self, name: str, default: Any, mutator: Callable[[Any], Tuple[Any, T]]) -> T:
        """Atomic read-modify-write of one document.

        mutator receives the current document and returns (new_document, result);
        result is handed back to the caller. If mutator raises, nothing is written.
        """
        with self.locked(name):
            current = self.read(name, default)
            updated, result = mutator(current)
            self._write_unlocked(self.path_for(name), updated)
            return result

    @contextmanager
    def locked(self, name: str) -> Iterator[None]:
        path = self.path_for(name)
        self.data_dir.mkdir(parents=True, exist_ok=True)
        lock = _lock_for(path)
        with lock:
            fh: Optional[Any] = None
            try:
                if fcntl is not None:
                    fh = open(path.with_suffix(".lock"), "w")
                    fcntl.flock(fh.fileno(), fcntl.LOCK_EX)
                yield
            finally:
                if fh is not None:
                    try:
                        fcntl.flock(fh.fileno(), fcntl.LOCK_UN)
                    finally:
                        fh.close()

    def _write_unlocked(self, path: Path, data: Any) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.stem}.", suffix=".tmp", dir=str(path.parent))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, path)
        except BaseException:
            try:
                os.unlink(tmp_name)
            except OSError:
                pass
            raise


__all__ = ["JsonDocumentStore"]
