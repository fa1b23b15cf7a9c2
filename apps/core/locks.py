"""
Per-entity critical sections.

``select_for_update`` serializes writers across processes on databases that
support row locks. SQLite ignores it, so read-modify-write sequences on a
group or expense also take a process-local lock keyed by the entity. The
lock must wrap the whole transaction, so the next writer only starts after
the previous one has committed.
"""

import threading
import weakref
from contextlib import contextmanager

from django.conf import settings

from .exceptions import StorageUnavailableError

_registry_lock = threading.Lock()
# Entries disappear once no thread holds or waits on the lock.
_locks = weakref.WeakValueDictionary()


def _lock_for(key):
    with _registry_lock:
        lock = _locks.get(key)
        if lock is None:
            lock = _locks[key] = threading.Lock()
        return lock


@contextmanager
def entity_lock(kind: str, entity_id, timeout: float = None):
    """
    Hold the lock for ``(kind, entity_id)`` for the duration of the block.

    Raises:
        StorageUnavailableError: If the lock is not acquired within
            ``timeout`` seconds (``STORAGE_LOCK_TIMEOUT`` by default)
    """
    if timeout is None:
        timeout = settings.STORAGE_LOCK_TIMEOUT

    lock = _lock_for((kind, str(entity_id)))
    if not lock.acquire(timeout=timeout):
        raise StorageUnavailableError(
            f"Timed out waiting for {kind} {entity_id} after {timeout}s"
        )
    try:
        yield
    finally:
        lock.release()
