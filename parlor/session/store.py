"""
Store - Atomic per-record storage for sessions.

The Store is the only shared state. Every state change runs as one
read-modify-write transaction against one session record:

    store.update(session_id, lambda s: new_session)

If the callback raises, nothing is written and the error propagates.
Concurrent updates to the same session are serialized.

Secondary keys (room codes, one-per-day word games) are unique: inserting a
second session under a taken key raises CONFLICT.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from copy import deepcopy
from typing import Callable, Iterator
import threading

from ..engine_core.state import Session
from ..engine_core.errors import Conflict, SessionNotFound


class Store(ABC):
    """Atomic key-value storage for Session records."""

    @abstractmethod
    def get(self, session_id: str) -> Session | None:
        """Snapshot of a session, or None."""

    @abstractmethod
    def insert(self, session: Session) -> Session:
        """Write a new session; CONFLICT if its id or lookup key is taken."""

    @abstractmethod
    def update(self, session_id: str, fn: Callable[[Session], Session]) -> Session:
        """Atomically replace a session with fn(current)."""

    @abstractmethod
    def find_by_key(self, lookup_key: str) -> Session | None:
        """Session indexed under a secondary key, or None."""

    @abstractmethod
    def scan(self) -> Iterator[Session]:
        """Snapshots of every stored session."""


class InMemoryStore(Store):
    """
    Process-local Store.

    Sessions are deep-copied in and out so callers never share
    mutable state with the stored record.
    """

    def __init__(self):
        self._sessions: dict[str, Session] = {}
        self._keys: dict[str, str] = {}
        self._lock = threading.RLock()

    def get(self, session_id: str) -> Session | None:
        with self._lock:
            session = self._sessions.get(session_id)
            return deepcopy(session) if session is not None else None

    def insert(self, session: Session) -> Session:
        with self._lock:
            if session.session_id in self._sessions:
                raise Conflict(f"Game {session.session_id} already exists")
            key = session.lookup_key
            if key is not None and key in self._keys:
                raise Conflict("Lookup key is already taken", {"lookup_key": key})

            self._sessions[session.session_id] = deepcopy(session)
            if key is not None:
                self._keys[key] = session.session_id
            return deepcopy(session)

    def update(self, session_id: str, fn: Callable[[Session], Session]) -> Session:
        with self._lock:
            current = self._sessions.get(session_id)
            if current is None:
                raise SessionNotFound(session_id)

            updated = fn(deepcopy(current))
            if updated.session_id != session_id:
                raise ValueError("Session id is immutable")
            if updated.lookup_key != current.lookup_key:
                raise ValueError("Lookup key is immutable")

            self._sessions[session_id] = deepcopy(updated)
            return deepcopy(updated)

    def find_by_key(self, lookup_key: str) -> Session | None:
        with self._lock:
            session_id = self._keys.get(lookup_key)
            if session_id is None:
                return None
            return deepcopy(self._sessions[session_id])

    def scan(self) -> Iterator[Session]:
        with self._lock:
            snapshot = [deepcopy(s) for s in self._sessions.values()]
        return iter(snapshot)

    def __len__(self) -> int:
        return len(self._sessions)
