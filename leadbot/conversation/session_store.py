"""
Per-identity session storage.

The dialogue engine only talks to the abstract ``SessionStore`` so the
backing map can be swapped (in-memory today, a shared cache later)
without touching flow logic. Nothing survives a restart: a lost session
is equivalent to the user starting over.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import AsyncIterator, Optional

from leadbot.schemas.session_schema import Session

logger = logging.getLogger(__name__)


class SessionStore(ABC):
    """Key-value store of conversation state keyed by sender identity."""

    def __init__(self, initial_stage: str) -> None:
        self.initial_stage = initial_stage

    @abstractmethod
    def get(self, identity: str) -> Optional[Session]:
        """Return the session for ``identity`` without creating one."""

    @abstractmethod
    def get_or_create(self, identity: str) -> Session:
        """Return the session for ``identity``, creating it at the initial stage."""

    @abstractmethod
    def reset(self, identity: str) -> None:
        """Forget ``identity``. Idempotent."""

    @abstractmethod
    def lock(self, identity: str):
        """Async context manager serialising all work on one identity."""


@dataclass
class _KeyLock:
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    holders: int = 0


class InMemorySessionStore(SessionStore):
    """
    Process-local store with one FIFO ``asyncio.Lock`` per identity.

    Waiters on the same identity acquire in arrival order, so messages
    from one user are applied in the order they came in while different
    users never wait on each other. Lock entries are dropped once the
    last holder leaves.
    """

    def __init__(self, initial_stage: str) -> None:
        super().__init__(initial_stage)
        # Only reset() removes a session; abandoned conversations stay in
        # memory until the process restarts.
        self._sessions: dict[str, Session] = {}
        self._locks: dict[str, _KeyLock] = {}

    def get(self, identity: str) -> Optional[Session]:
        return self._sessions.get(identity)

    def get_or_create(self, identity: str) -> Session:
        session = self._sessions.get(identity)
        if session is None:
            session = Session(identity=identity, stage=self.initial_stage)
            self._sessions[identity] = session
            logger.debug("Session created for %s at %s", identity, self.initial_stage)
        return session

    def reset(self, identity: str) -> None:
        if self._sessions.pop(identity, None) is not None:
            logger.debug("Session cleared for %s", identity)

    @asynccontextmanager
    async def lock(self, identity: str) -> AsyncIterator[None]:
        entry = self._locks.get(identity)
        if entry is None:
            entry = self._locks[identity] = _KeyLock()
        entry.holders += 1
        try:
            async with entry.lock:
                yield
        finally:
            entry.holders -= 1
            if entry.holders == 0:
                self._locks.pop(identity, None)

    def __contains__(self, identity: str) -> bool:
        return identity in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)
