"""Classroom Attendance package.

Feature modules (users, classes, attendance, session, realtime) sit behind a
thin Flask controller layer; the live session engine and the WebSocket
channel carry the only stateful logic.
"""
