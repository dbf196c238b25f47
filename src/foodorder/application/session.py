from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from uuid import uuid4

from foodorder.domain.cart.entities import Cart
from foodorder.domain.common.ids import SessionId
from foodorder.domain.common.money import DEFAULT_CURRENCY


@dataclass
class ClientSession:
    session_id: SessionId
    cart: Cart = field(default_factory=Cart)
    # Serialises cart reads and writes; sync routes run on a thread pool.
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)


class SessionNotFoundError(Exception):
    pass


class SessionRegistry:
    """Owns the client sessions of one running application.

    A session holds the only reference to its cart; the cart is never
    persisted and disappears when the session is dropped. Callers touch a
    cart only inside ``locked(session_id)``.
    """

    def __init__(self, currency: str = DEFAULT_CURRENCY) -> None:
        self._currency = currency
        self._sessions: dict[SessionId, ClientSession] = {}
        self._lock = threading.Lock()

    def create(self) -> ClientSession:
        session = ClientSession(
            session_id=SessionId(f"ses_{uuid4().hex[:16]}"),
            cart=Cart(currency=self._currency),
        )
        with self._lock:
            self._sessions[session.session_id] = session
        return session

    def get(self, session_id: SessionId) -> ClientSession:
        with self._lock:
            session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(f"session {session_id} not found")
        return session

    @contextmanager
    def locked(self, session_id: SessionId) -> Iterator[ClientSession]:
        session = self.get(session_id)
        with session.lock:
            yield session

    def drop(self, session_id: SessionId) -> None:
        with self._lock:
            removed = self._sessions.pop(session_id, None)
        if removed is None:
            raise SessionNotFoundError(f"session {session_id} not found")

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
