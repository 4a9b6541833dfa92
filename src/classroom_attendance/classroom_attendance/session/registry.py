from __future__ import annotations

import threading
from typing import Optional

from ..core.enums import SessionState
from .model import LiveSession


class SessionRegistry:
    """Process-wide slot holding at most one live session.

    The slot is guarded by a re-entrant lock; callers that read-modify-write
    hold ``lock`` for the whole sequence. ``state`` tags the slot so a commit
    in flight can be told apart from an ordinary active session.
    """

    def __init__(self):
        self._lock = threading.RLock()
        self._session: Optional[LiveSession] = None
        self._state = SessionState.IDLE

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    @property
    def state(self) -> SessionState:
        with self._lock:
            return self._state

    def get(self) -> Optional[LiveSession]:
        with self._lock:
            return self._session

    def set(self, session: LiveSession) -> None:
        with self._lock:
            self._session = session
            self._state = SessionState.ACTIVE

    def clear(self) -> None:
        with self._lock:
            self._session = None
            self._state = SessionState.IDLE

    def begin_commit(self) -> None:
        with self._lock:
            if self._state != SessionState.ACTIVE:
                raise RuntimeError(f"cannot commit from {self._state.value}")
            self._state = SessionState.COMMITTING

    def end_commit(self, *, success: bool) -> None:
        with self._lock:
            if success:
                self.clear()
            elif self._session is not None:
                self._state = SessionState.ACTIVE
