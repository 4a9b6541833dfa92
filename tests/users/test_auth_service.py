from __future__ import annotations

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from src.classroom_attendance.classroom_attendance.core.enums import Role
from src.classroom_attendance.classroom_attendance.core.exceptions import AuthenticationError, NotFoundError, ValidationError
from src.classroom_attendance.classroom_attendance.users.service import AuthService, UserService
from src.classroom_attendance.classroom_attendance.users.tokens import TokenService


@pytest.fixture
def auth(users):
    return AuthService(users, TokenService("secret", ttl_hours=2))


def test_signup_then_login_yields_verifiable_token(auth):
    user = auth.signup(name="Ana", email="Ana@Example.com", password="secret1", role="student")
    assert user.email == "ana@example.com"
    assert user.role == Role.STUDENT

    token = auth.login("ana@example.com", "secret1")
    identity = auth.verify(token)
    assert identity.user_id == user.user_id
    assert identity.role == Role.STUDENT


def test_signup_validation(auth):
    with pytest.raises(ValidationError, match="Name is required"):
        auth.signup(name=" ", email="a@b.co", password="secret1", role="teacher")
    with pytest.raises(ValidationError, match="Email is invalid"):
        auth.signup(name="A", email="nope", password="secret1", role="teacher")
    with pytest.raises(ValidationError, match="at least 6"):
        auth.signup(name="A", email="a@b.co", password="123", role="teacher")
    with pytest.raises(ValidationError, match="Role"):
        auth.signup(name="A", email="a@b.co", password="secret1", role="admin")


def test_duplicate_email_is_rejected(auth):
    auth.signup(name="A", email="a@b.co", password="secret1", role="teacher")
    with pytest.raises(ValidationError, match="Email already exists"):
        auth.signup(name="B", email="A@b.co", password="secret2", role="student")


def test_login_with_wrong_credentials(auth, users):
    users.add(name="T", email="t@b.co", role=Role.TEACHER)
    with pytest.raises(AuthenticationError):
        auth.login("t@b.co", "wrong-password")
    with pytest.raises(AuthenticationError):
        auth.login("missing@b.co", "password123")


def test_login_tolerates_broken_hash(auth, users):
    users.create_user(name="X", email="x@b.co", password_hash="not-a-hash", role=Role.STUDENT)
    with pytest.raises(AuthenticationError):
        auth.login("x@b.co", "anything")


def test_token_claims_and_expiry():
    issued_at = datetime(2020, 1, 1, tzinfo=timezone.utc)
    tokens = TokenService("secret", ttl_hours=1, clock=lambda: issued_at)
    token = tokens.issue(user_id="U1", role=Role.TEACHER)

    claims = jwt.decode(token, "secret", algorithms=["HS256"], options={"verify_exp": False})
    assert claims["userId"] == "U1"
    assert claims["role"] == "teacher"
    assert claims["exp"] - claims["iat"] == 3600

    # issued long ago, so already expired
    with pytest.raises(AuthenticationError):
        tokens.verify(token)


def test_token_signed_with_other_secret_is_rejected():
    token = TokenService("other").issue(user_id="U1", role=Role.STUDENT)
    with pytest.raises(AuthenticationError):
        TokenService("secret").verify(token)


def test_fresh_token_verifies():
    tokens = TokenService("secret", clock=lambda: datetime.now(timezone.utc) - timedelta(minutes=1))
    assert tokens.verify(tokens.issue(user_id="U7", role=Role.STUDENT)).user_id == "U7"


def test_profile_and_student_listing(auth, users):
    teacher = users.add(name="T", email="t@b.co", role=Role.TEACHER)
    users.add(name="S", email="s@b.co", role=Role.STUDENT)

    assert auth.get_profile(teacher.user_id).name == "T"
    with pytest.raises(NotFoundError):
        auth.get_profile("nobody")

    assert [s.email for s in UserService(users).list_students()] == ["s@b.co"]
