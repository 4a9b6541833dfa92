from __future__ import annotations

import logging
import threading
import uuid
from collections import deque
from typing import Any, Callable, Optional, Protocol

from ..core.constants import DEFAULT_OUTBOX_LIMIT
from ..core.enums import EventType
from ..users.model import Identity
from .protocol import Envelope, envelope

logger = logging.getLogger(__name__)


class Socket(Protocol):
    def send(self, data: str) -> None:
        raise NotImplementedError

    def close(self, *args: Any, **kwargs: Any) -> None:
        raise NotImplementedError


class Connection:
    """One authenticated realtime client; identity is bound once at connect.

    Outbound envelopes wait in a bounded outbox that a writer thread drains
    in order, so producers never touch the socket themselves.
    """

    def __init__(self, socket: Socket, identity: Identity, *, connection_id: Optional[str] = None):
        self.socket = socket
        self.identity = identity
        self.connection_id = connection_id or uuid.uuid4().hex
        self._outbox: deque[str] = deque()
        self._cond = threading.Condition()
        self._limit = DEFAULT_OUTBOX_LIMIT
        self._sending = False
        self._stopped = False
        self._writer: Optional[threading.Thread] = None

    @property
    def user_id(self) -> str:
        return self.identity.user_id

    def start(self, *, on_failure: Callable[["Connection"], None], limit: int = DEFAULT_OUTBOX_LIMIT) -> None:
        self._limit = int(limit)
        self._writer = threading.Thread(
            target=self._write_loop,
            args=(on_failure,),
            name=f"ws-writer-{self.connection_id[:8]}",
            daemon=True,
        )
        self._writer.start()

    def enqueue(self, message: Envelope) -> bool:
        """Queue ``message`` for delivery; False when stopped or the outbox is full."""

        with self._cond:
            if self._stopped or len(self._outbox) >= self._limit:
                return False
            self._outbox.append(message.to_json())
            self._cond.notify_all()
            return True

    def drain(self, timeout: Optional[float] = None) -> bool:
        """Wait until everything queued so far has been written."""

        with self._cond:
            return self._cond.wait_for(lambda: not self._outbox and not self._sending, timeout)

    def stop(self) -> None:
        # Already queued envelopes are still written.
        with self._cond:
            self._stopped = True
            self._cond.notify_all()

    def _write_loop(self, on_failure: Callable[["Connection"], None]) -> None:
        while True:
            with self._cond:
                self._cond.wait_for(lambda: self._outbox or self._stopped)
                if not self._outbox:
                    return
                data = self._outbox.popleft()
                self._sending = True

            try:
                self.socket.send(data)
            except Exception:
                logger.warning("Send to %r failed", self, exc_info=True)
                with self._cond:
                    self._outbox.clear()
                    self._sending = False
                    self._stopped = True
                    self._cond.notify_all()
                on_failure(self)
                return

            with self._cond:
                self._sending = False
                self._cond.notify_all()

    def close_socket(self) -> None:
        try:
            self.socket.close()
        except Exception:
            logger.debug("Closing %r failed", self, exc_info=True)

    def __repr__(self) -> str:
        return f"Connection({self.connection_id[:8]}, {self.identity.role.value}:{self.user_id})"


class ConnectionHub:
    """Set of open connections with ordered fan-out.

    Broadcasts are serialized, so every connection queues them in the same
    order. Queuing never blocks: a connection whose socket fails, or whose
    outbox overflows, is dropped and its socket closed.
    """

    def __init__(self, *, outbox_limit: int = DEFAULT_OUTBOX_LIMIT):
        self._lock = threading.Lock()
        self._broadcast_lock = threading.Lock()
        self._connections: dict[str, Connection] = {}
        self._outbox_limit = outbox_limit

    def add(self, connection: Connection) -> None:
        with self._lock:
            self._connections[connection.connection_id] = connection
        connection.start(on_failure=self._on_send_failure, limit=self._outbox_limit)
        logger.info("Realtime client connected: %r (%d open)", connection, len(self))

    def remove(self, connection: Connection) -> None:
        with self._lock:
            removed = self._connections.pop(connection.connection_id, None)
        connection.stop()
        if removed is not None:
            logger.info("Realtime client disconnected: %r (%d open)", connection, len(self))

    def __len__(self) -> int:
        with self._lock:
            return len(self._connections)

    def connections(self) -> list[Connection]:
        with self._lock:
            return list(self._connections.values())

    def drain(self, timeout: Optional[float] = None) -> bool:
        return all(c.drain(timeout) for c in self.connections())

    def _on_send_failure(self, connection: Connection) -> None:
        self.remove(connection)
        connection.close_socket()

    def _drop_stalled(self, connection: Connection) -> None:
        logger.warning("Dropping %r: outbound queue full", connection)
        self.remove(connection)
        # the writer may be blocked in send
        threading.Thread(target=connection.close_socket, daemon=True).start()

    def unicast(self, connection: Connection, message: Envelope) -> bool:
        if connection.enqueue(message):
            return True
        with self._lock:
            still_open = connection.connection_id in self._connections
        if still_open:
            self._drop_stalled(connection)
        return False

    def broadcast(self, event: EventType, data: dict) -> int:
        message = envelope(event, data)
        with self._broadcast_lock:
            queued = 0
            for connection in self.connections():
                if self.unicast(connection, message):
                    queued += 1
        logger.debug("Broadcast %s queued for %d client(s)", message.event, queued)
        return queued
