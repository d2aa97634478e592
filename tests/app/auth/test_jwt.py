"""Tests for bearer token verification."""

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from jose import jwt

from app.auth.jwt import decode_access_token
from app.config import get_settings
from app.main import create_app


def _token(secret=None, expires_in=timedelta(minutes=5)):
    settings = get_settings()
    claims = {"sub": "agent-1", "exp": datetime.now(timezone.utc) + expires_in}
    return jwt.encode(
        claims, secret or settings.jwt_secret, algorithm=settings.jwt_algorithm
    )


def test_decode_valid_token():
    assert decode_access_token(_token())["sub"] == "agent-1"


@pytest.mark.parametrize(
    "token",
    [
        "not-a-jwt",
        _token(secret="other-secret"),
        _token(expires_in=timedelta(minutes=-5)),
    ],
)
def test_decode_rejects_bad_tokens(token):
    with pytest.raises(ValueError, match="Invalid token"):
        decode_access_token(token)


@pytest.fixture
def secured_client(db):
    """App built outside testing mode so JWT checks apply."""
    with TestClient(create_app(testing=False)) as c:
        yield c


def test_api_requires_bearer_token(secured_client):
    r = secured_client.get("/api/v1/conversations/1")
    assert r.status_code == 401


def test_api_rejects_invalid_token(secured_client):
    r = secured_client.get(
        "/api/v1/conversations/1", headers={"Authorization": "Bearer nope"}
    )
    assert r.status_code == 401


def test_health_is_public(secured_client):
    r = secured_client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "healthy"


def test_api_accepts_valid_token(secured_client):
    r = secured_client.get(
        "/api/v1/conversations/999",
        headers={"Authorization": f"Bearer {_token()}"},
    )
    assert r.status_code == 404
    assert r.json()["detail"] == "conversation not found: 999"
