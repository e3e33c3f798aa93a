"""
In-process writer serialization, one lock per destination path.

Both sinks take the lock for their path before touching the file, so
concurrent submissions from one process queue instead of interleaving.
Nothing here coordinates separate processes.
"""

import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

_registry_lock = threading.Lock()
_path_locks: dict[str, threading.Lock] = {}


def lock_for(path: str | Path) -> threading.Lock:
    """Return the lock guarding ``path`` (resolved to an absolute path)."""
    key = str(Path(path).resolve())
    with _registry_lock:
        lock = _path_locks.get(key)
        if lock is None:
            lock = _path_locks[key] = threading.Lock()
        return lock


@contextmanager
def path_lock(path: str | Path) -> Iterator[None]:
    """
    Hold the writer lock for ``path`` for the duration of the block.

    Usage:
        with path_lock(csv_path):
            append_row(...)
    """
    lock = lock_for(path)
    with lock:
        yield
