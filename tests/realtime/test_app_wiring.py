from __future__ import annotations

import json

from src.classroom_attendance.classroom_attendance.core.constants import COMMIT_MESSAGE
from src.classroom_attendance.classroom_attendance.core.enums import Role


def _connect(container, make_socket, user_id, role):
    sock = make_socket()
    conn = container.realtime_channel.connect(sock, container.tokens.issue(user_id=user_id, role=role))
    assert conn is not None
    return conn, sock


def _send(container, conn, event, data=None):
    container.realtime_channel.handle_message(conn, json.dumps({"event": event, "data": data or {}}))


def test_assembled_app_pushes_session_events_to_students(client, app_env, make_socket):
    _, container = app_env
    container.classes_repo.put("C1", "T1", ("S1", "S2", "S3"))
    teacher, _ = _connect(container, make_socket, "T1", Role.TEACHER)
    _, student_sock = _connect(container, make_socket, "S1", Role.STUDENT)

    headers = {"Authorization": f"Bearer {container.tokens.issue(user_id='T1', role=Role.TEACHER)}"}
    resp = client.post("/attendance/start", json={"classId": "C1"}, headers=headers)
    assert resp.status_code == 200

    _send(container, teacher, "ATTENDANCE_MARKED", {"studentId": "S1", "status": "present"})
    _send(container, teacher, "DONE")

    assert container.hub.drain(2.0)
    got = [json.loads(m) for m in student_sock.sent]
    assert [m["event"] for m in got] == ["SESSION_STARTED", "ATTENDANCE_MARKED", "DONE"]
    assert got[1]["data"] == {"studentId": "S1", "status": "present"}
    assert got[-1]["data"] == {"message": COMMIT_MESSAGE, "present": 1, "absent": 2, "total": 3}

    assert container.registry.get() is None
    assert {sid for (_, sid, _) in container.attendance_repo.rows} == {"S1", "S2", "S3"}
