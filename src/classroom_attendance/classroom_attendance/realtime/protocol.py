"""Wire format of the realtime channel: ``{"event": str, "data": object}``."""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Union

from ..core.enums import EventType
from ..core.exceptions import InvalidJSONError, ValidationError


@dataclass(frozen=True)
class Envelope:
    event: str
    data: dict = field(default_factory=dict)

    def to_json(self) -> str:
        return json.dumps({"event": self.event, "data": self.data})


def envelope(event: Union[EventType, str], data: dict | None = None) -> Envelope:
    name = event.value if isinstance(event, EventType) else str(event)
    return Envelope(event=name, data=dict(data or {}))


def error_envelope(message: str) -> Envelope:
    return envelope(EventType.ERROR, {"message": message})


def decode(raw: Union[str, bytes, bytearray]) -> Envelope:
    if isinstance(raw, (bytes, bytearray)):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError:
            raise InvalidJSONError("Invalid JSON message")

    try:
        parsed: Any = json.loads(raw)
    except (TypeError, ValueError):
        raise InvalidJSONError("Invalid JSON message")

    if not isinstance(parsed, dict):
        raise ValidationError("Invalid message envelope")

    event = parsed.get("event")
    if not isinstance(event, str) or not event:
        raise ValidationError("Invalid message envelope")

    data = parsed.get("data")
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValidationError(f"Invalid {event} payload")

    return Envelope(event=event, data=data)
