from __future__ import annotations

from flask import Flask, g, request

from ..common.datetime_utils import parse_iso_date, to_iso
from ..common.http import api_route, auth_required, json_body, json_ok
from ..common.validators import require_non_empty
from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    verify = container.auth_service.verify
    engine = container.session_engine
    records = container.attendance_record_service

    @app.route("/attendance/start", methods=["POST"], endpoint="start_attendance")
    @auth_required(verify, Role.TEACHER)
    @api_route
    def start_attendance():
        class_id = require_non_empty(json_body().get("classId"), "classId")
        session = engine.start(g.identity, class_id)
        return json_ok(session.to_dict())

    @app.route("/attendance/stop", methods=["POST"], endpoint="stop_attendance")
    @auth_required(verify, Role.TEACHER)
    @api_route
    def stop_attendance():
        class_id = require_non_empty(json_body().get("classId"), "classId")
        ended_at = engine.stop(g.identity, class_id)
        return json_ok({"endedAt": to_iso(ended_at)})

    @app.route("/class/<class_id>/my-attendance", methods=["GET"], endpoint="my_attendance")
    @auth_required(verify, Role.STUDENT)
    @api_route
    def my_attendance(class_id: str):
        return json_ok(records.my_attendance(g.identity, class_id))

    @app.route("/class/<class_id>/attendance", methods=["GET"], endpoint="class_attendance")
    @auth_required(verify, Role.TEACHER)
    @api_route
    def class_attendance(class_id: str):
        date_s = request.args.get("date")
        try:
            session_date = parse_iso_date(date_s) if date_s else None
        except ValueError:
            raise ValidationError("date must be YYYY-MM-DD")
        return json_ok(records.class_attendance(g.identity, class_id, session_date=session_date))
