"""Per-key re-entrant locks for serializing writes to a single aggregate.

Status changes for one order must never interleave: settlement and refund
issuance are guarded by flags on the order, and two writers reading the
same unflagged copy would both act. Commands that mutate an order are
processed under ``order_lock(order_id)``. Different orders never
contend with each other.

The locks serialize callers on separate threads, such as sync views run
in a threadpool. The ``async`` API routes process commands
synchronously on the event-loop thread, which already runs one request
handler at a time, so there the lock is always uncontended.
"""

import threading
from contextlib import contextmanager

from protean.utils.globals import current_domain

_registry_lock = threading.Lock()
_locks: dict[str, threading.RLock] = {}


def _lock_for(key: str) -> threading.RLock:
    with _registry_lock:
        lock = _locks.get(key)
        if lock is None:
            lock = threading.RLock()
            _locks[key] = lock
        return lock


@contextmanager
def order_lock(order_id):
    """Hold the lock for ``order_id`` for the duration of the block.

    Re-entrant, so a handler that already holds the lock can call helpers
    that take it again (collection-code validation → delivery transition).
    """
    lock = _lock_for(str(order_id))
    with lock:
        yield


def process_for_order(command, order_id):
    """Process ``command`` synchronously while holding the lock for ``order_id``.

    The lock spans the whole unit of work, so the next writer for the same
    order only reads it after this one has committed.
    """
    with order_lock(order_id):
        return current_domain.process(command, asynchronous=False)
