"""Constants and defaults.

Note: Keep constants here to avoid magic strings spread across code.
"""

from .enums import AttendanceStatus

# Statuses a teacher may set during a live session.
LIVE_STATUSES = frozenset({AttendanceStatus.PRESENT, AttendanceStatus.ABSENT})

NOT_YET_UPDATED = "not yet updated"
COMMIT_MESSAGE = "Attendance persisted"

DEFAULT_TOKEN_TTL_HOURS = 24
DEFAULT_DB_CONNECT_TIMEOUT = 10
MIN_PASSWORD_LENGTH = 6

# Envelopes a realtime client may have waiting before it is dropped as stalled.
DEFAULT_OUTBOX_LIMIT = 256
