from __future__ import annotations

from flask import Flask, request
from flask_sock import Sock
from simple_websocket import ConnectionClosed

from ..container import Container


def register(app: Flask, container: Container) -> Sock:
    sock = Sock(app)
    channel = container.realtime_channel

    @sock.route("/ws")
    def realtime(ws):
        connection = channel.connect(ws, request.args.get("token"))
        if connection is None:
            return

        try:
            while True:
                raw = ws.receive()
                if raw is None:
                    continue
                channel.handle_message(connection, raw)
        except ConnectionClosed:
            pass
        finally:
            channel.disconnect(connection)

    return sock
