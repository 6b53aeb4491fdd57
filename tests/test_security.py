import base64
import time

import jwt
import pytest

from conftest import auth_headers
from app.core.security import AuthenticationError, decode_token

SECRET = "interview-access-test-secret-0123456789"


def signed(claims, secret=SECRET):
    return jwt.encode(claims, secret, algorithm="HS256")


def test_jwt_claims_become_caller():
    token = signed({"sub": "user-9", "email": "ana@example.com", "given_name": "Ana"})

    caller = decode_token(token, SECRET)

    assert caller.id == "user-9"
    assert caller.email == "ana@example.com"
    assert caller.name == "Ana"


def test_jwt_falls_back_to_short_claims():
    caller = decode_token(signed({"kid": "user-3", "em": "x@example.com"}), SECRET)

    assert caller.id == "user-3"
    assert caller.email == "x@example.com"
    assert caller.name is None


def test_jwt_with_wrong_secret_is_rejected():
    with pytest.raises(AuthenticationError) as exc:
        decode_token(signed({"sub": "user-1"}, secret="some-other-secret-that-is-long-enough-99"), SECRET)

    assert exc.value.status_code == 401
    assert exc.value.message == "Invalid token"


def test_expired_jwt_is_rejected():
    token = signed({"sub": "user-1", "exp": int(time.time()) - 60})

    with pytest.raises(AuthenticationError):
        decode_token(token, SECRET)


def test_jwt_without_configured_secret_is_server_error():
    with pytest.raises(AuthenticationError) as exc:
        decode_token(signed({"sub": "user-1"}), None)

    assert exc.value.status_code == 500


def test_legacy_token_identifies_user():
    token = base64.b64encode(b"user-5:1700000000").decode()

    caller = decode_token(token, SECRET)

    assert caller.id == "user-5"
    assert caller.email == "unknown"


@pytest.mark.parametrize("raw", [b"user-5", b":1700000000"])
def test_legacy_token_without_both_parts_is_rejected(raw):
    with pytest.raises(AuthenticationError) as exc:
        decode_token(base64.b64encode(raw).decode(), SECRET)

    assert exc.value.message == "Invalid token format"


def test_missing_bearer_prefix_is_unauthorized(client):
    resp = client.get("/api/v1/interviews", headers={"Authorization": "Token abc"})

    assert resp.status_code == 401
    assert resp.json()["detail"] == "Missing or invalid authorization header"


def test_jwt_without_subject_is_unauthorized(client):
    headers = {"Authorization": f"Bearer {signed({'email': 'a@example.com'})}"}

    resp = client.get("/api/v1/interviews", headers=headers)

    assert resp.status_code == 401
    assert resp.json()["detail"] == "Invalid token subject"


def test_signed_token_is_accepted(client):
    headers = {"Authorization": f"Bearer {signed({'sub': 'user-1'})}"}

    resp = client.get("/api/v1/interviews", headers=headers)

    assert resp.status_code == 200


def test_legacy_token_is_accepted(client):
    resp = client.get("/api/v1/interviews", headers=auth_headers())

    assert resp.status_code == 200
    assert resp.json() == {"interviews": []}
