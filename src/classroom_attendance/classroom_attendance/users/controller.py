from __future__ import annotations

from flask import Flask, g

from ..common.http import api_route, auth_required, json_body, json_ok
from ..core.enums import Role
from ..container import Container


def register(app: Flask, container: Container) -> None:
    verify = container.auth_service.verify

    @app.route("/auth/signup", methods=["POST"], endpoint="signup")
    @api_route
    def signup():
        body = json_body()
        user = container.auth_service.signup(
            name=body.get("name"),
            email=body.get("email"),
            password=body.get("password"),
            role=body.get("role"),
        )
        return json_ok(user.public_view(), status=201, message="User created successfully")

    @app.route("/auth/login", methods=["POST"], endpoint="login")
    @api_route
    def login():
        body = json_body()
        token = container.auth_service.login(body.get("email"), body.get("password"))
        return json_ok({"token": token}, message="Login successful")

    @app.route("/auth/me", methods=["GET"], endpoint="me")
    @auth_required(verify)
    @api_route
    def me():
        user = container.auth_service.get_profile(g.identity.user_id)
        return json_ok(user.public_view())

    @app.route("/students", methods=["GET"], endpoint="list_students")
    @auth_required(verify, Role.TEACHER)
    @api_route
    def list_students():
        return json_ok([s.public_view() for s in container.user_service.list_students()])
