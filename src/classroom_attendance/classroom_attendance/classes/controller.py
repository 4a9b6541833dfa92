from __future__ import annotations

from flask import Flask, g

from ..common.http import api_route, auth_required, json_body, json_ok
from ..core.enums import Role
from ..container import Container


def register(app: Flask, container: Container) -> None:
    verify = container.auth_service.verify
    classes = container.class_service

    @app.route("/class", methods=["POST"], endpoint="create_class")
    @auth_required(verify, Role.TEACHER)
    @api_route
    def create_class():
        body = json_body()
        cls = classes.create_class(g.identity, name=body.get("className"))
        return json_ok(cls.summary_view(), status=201)

    @app.route("/class/<class_id>/add-student", methods=["POST"], endpoint="add_student")
    @auth_required(verify, Role.TEACHER)
    @api_route
    def add_student(class_id: str):
        body = json_body()
        cls = classes.add_student(g.identity, class_id=class_id, student_id=body.get("studentId"))
        return json_ok(cls.summary_view())

    @app.route("/class/<class_id>/remove-student/<student_id>", methods=["DELETE"], endpoint="remove_student")
    @auth_required(verify, Role.TEACHER)
    @api_route
    def remove_student(class_id: str, student_id: str):
        cls = classes.remove_student(g.identity, class_id=class_id, student_id=student_id)
        return json_ok(cls.summary_view(), message="Student removed from class")

    @app.route("/class/<class_id>", methods=["GET"], endpoint="get_class")
    @auth_required(verify)
    @api_route
    def get_class(class_id: str):
        return json_ok(classes.get_class_detail(g.identity, class_id))

    @app.route("/classes/my-classes", methods=["GET"], endpoint="my_classes")
    @auth_required(verify, Role.TEACHER)
    @api_route
    def my_classes():
        return json_ok(classes.list_my_classes(g.identity))

    @app.route("/classes/enrolled", methods=["GET"], endpoint="enrolled_classes")
    @auth_required(verify)
    @api_route
    def enrolled_classes():
        return json_ok(classes.list_enrolled(g.identity))
