from __future__ import annotations

import logging
from typing import Callable, Optional, Union

from ..core.enums import EventType
from ..core.exceptions import AuthenticationError, DomainError, UnknownEventError
from ..session.engine import SessionEngine
from ..users.model import Identity
from .hub import Connection, ConnectionHub, Socket
from .protocol import decode, envelope, error_envelope

logger = logging.getLogger(__name__)

Handler = Callable[[Connection, dict], None]


class RealtimeChannel:
    """Authenticates sockets and routes their messages into the engine.

    Results of broadcast operations reach clients through the hub (the
    engine publishes them); replies meant for one client are sent here.
    Errors go to the sender only and never close the connection, except a
    failed authentication at connect time.
    """

    def __init__(self, engine: SessionEngine, hub: ConnectionHub, verify: Callable[[Optional[str]], Identity]):
        self._engine = engine
        self._hub = hub
        self._verify = verify
        self._handlers: dict[str, Handler] = {
            EventType.ATTENDANCE_MARKED.value: self._on_attendance_marked,
            EventType.TODAY_SUMMARY.value: self._on_today_summary,
            EventType.MY_ATTENDANCE.value: self._on_my_attendance,
            EventType.DONE.value: self._on_done,
        }

    def connect(self, socket: Socket, token: Optional[str]) -> Optional[Connection]:
        try:
            identity = self._verify(token)
        except AuthenticationError as e:
            logger.info("Rejected realtime connection: %s", e)
            try:
                socket.send(error_envelope(str(e)).to_json())
            except Exception:
                logger.debug("Could not deliver auth error before closing", exc_info=True)
            socket.close()
            return None

        connection = Connection(socket, identity)
        self._hub.add(connection)
        return connection

    def disconnect(self, connection: Connection) -> None:
        self._hub.remove(connection)

    def handle_message(self, connection: Connection, raw: Union[str, bytes]) -> None:
        try:
            message = decode(raw)
            handler = self._handlers.get(message.event)
            if handler is None:
                raise UnknownEventError("Unknown event")
            handler(connection, message.data)
        except DomainError as e:
            logger.debug("%r: %s", connection, e)
            self._hub.unicast(connection, error_envelope(str(e)))
        except Exception:
            logger.exception("Unhandled error while processing a message from %r", connection)
            self._hub.unicast(connection, error_envelope("Server error"))

    # -- handlers -----------------------------------------------------------

    def _on_attendance_marked(self, connection: Connection, data: dict) -> None:
        self._engine.mark(connection.identity, data.get("studentId"), data.get("status"))

    def _on_today_summary(self, connection: Connection, data: dict) -> None:
        self._engine.summary(connection.identity)

    def _on_my_attendance(self, connection: Connection, data: dict) -> None:
        status = self._engine.my_status(connection.identity)
        self._hub.unicast(connection, envelope(EventType.MY_ATTENDANCE, {"status": status}))

    def _on_done(self, connection: Connection, data: dict) -> None:
        self._engine.commit(connection.identity)
