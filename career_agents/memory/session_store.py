"""Process-wide in-memory session store with per-session serialization.

Purpose of this abstraction:
    Own every `SessionContext` for the lifetime of the process, bind each session to
    the user that created it, and guarantee that at most one orchestration call
    mutates a given session at a time.

Locking model:
    - `_store_lock` guards the session and lock maps (creation only).
    - One `asyncio.Lock` per session id (`async_lock`) queues callers on the event
      loop, so waiting for a busy session never occupies a worker thread. The
      store is meant to be driven from a single event loop.
    - One `threading.Lock` per session id is held by the worker thread for the
      whole orchestration call through `session(...)`. It still excludes a
      timed-out worker that is finishing in the background.
    - Calls for different sessions never contend on either lock.

Lifecycle:
    Sessions are created lazily on first touch and are never removed by this
    module. An external store can replace this one without changing the
    orchestration contract.

Failure handling:
    Ownership mismatches raise `SessionOwnershipError` before any lock is taken.
"""

import asyncio
import logging
import threading
from contextlib import contextmanager
from typing import Iterator

from career_agents.core.errors import SessionOwnershipError
from career_agents.core.models import SessionContext


logger = logging.getLogger(__name__)


class SessionStore:
    """Lazily created, owner-bound, per-key locked session contexts."""

    def __init__(self):
        self._sessions: dict[str, SessionContext] = {}
        self._locks: dict[str, threading.Lock] = {}
        self._async_locks: dict[str, asyncio.Lock] = {}
        self._store_lock = threading.Lock()

    def __len__(self) -> int:
        with self._store_lock:
            return len(self._sessions)

    def get_or_create(self, session_id: str, owner_id: str) -> SessionContext:
        """Return the session for `session_id`, creating it for `owner_id` if new.

        Raises:
            SessionOwnershipError: The session exists and belongs to another owner.
        """
        with self._store_lock:
            context = self._sessions.get(session_id)
            if context is None:
                context = SessionContext(session_id=session_id, owner_id=owner_id)
                self._sessions[session_id] = context
                self._locks[session_id] = threading.Lock()
                self._async_locks[session_id] = asyncio.Lock()
                logger.info("Created session %s for owner %s", session_id, owner_id)

        if context.owner_id != owner_id:
            logger.warning("Ownership violation on session %s by %s", session_id, owner_id)
            raise SessionOwnershipError(session_id)

        return context

    def get(self, session_id: str, owner_id: str) -> SessionContext | None:
        """Return an existing session without creating one.

        Raises:
            SessionOwnershipError: The session belongs to another owner.
        """
        with self._store_lock:
            context = self._sessions.get(session_id)

        if context is not None and context.owner_id != owner_id:
            raise SessionOwnershipError(session_id)

        return context

    @contextmanager
    def session(self, session_id: str, owner_id: str) -> Iterator[SessionContext]:
        """Hold exclusive access to one session for the duration of the block."""
        context = self.get_or_create(session_id, owner_id)

        with self._store_lock:
            lock = self._locks[session_id]

        with lock:
            yield context

    def async_lock(self, session_id: str, owner_id: str) -> asyncio.Lock:
        """Return the event-loop lock that queues callers of one session.

        Raises:
            SessionOwnershipError: The session belongs to another owner.
        """
        self.get_or_create(session_id, owner_id)

        with self._store_lock:
            return self._async_locks[session_id]
