import pytest
from fastapi import HTTPException
from fastapi import status
from fastapi.testclient import TestClient

from uploadgate.core.config import settings
from uploadgate.core.security import API_KEY_HEADER_NAME
from uploadgate.core.security import api_key_matches
from uploadgate.core.security import verify_api_key
from uploadgate.main import app


@pytest.mark.asyncio
async def test_verify_api_key_success(monkeypatch):
    monkeypatch.setattr(settings, "api_key", "secret", raising=False)
    result = await verify_api_key("secret")
    assert result is True


@pytest.mark.asyncio
async def test_verify_api_key_failure(monkeypatch):
    monkeypatch.setattr(settings, "api_key", "secret", raising=False)
    with pytest.raises(HTTPException) as exc:
        await verify_api_key("wrong_key")
    assert exc.value.status_code == 403
    assert exc.value.detail == "Invalid API Key"


@pytest.mark.asyncio
async def test_verify_api_key_denied_when_unconfigured(monkeypatch):
    monkeypatch.setattr(settings, "api_key", None, raising=False)
    with pytest.raises(HTTPException) as exc:
        await verify_api_key("")
    assert exc.value.status_code == 403


@pytest.mark.parametrize(
    "candidate, expected, matches",
    [
        ("secret", "secret", True),
        ("secret", "Secret", False),
        ("secre", "secret", False),
        ("", None, False),
        ("", "", False),
        ("clé", "clé", True),
    ],
)
def test_api_key_matches(candidate, expected, matches):
    assert api_key_matches(candidate, expected) is matches


@pytest.fixture()
def keyed_client(monkeypatch):
    monkeypatch.setattr(settings, "api_key", "secret", raising=False)
    return TestClient(app)


@pytest.mark.parametrize(
    "method, path",
    [
        ("post", "/api/uploads/validate"),
        ("post", "/api/uploads/markdown"),
        ("post", "/api/uploads/failures"),
        ("get", "/api/uploads/policy"),
    ],
)
def test_upload_routes_reject_requests_without_the_header(keyed_client, method, path):
    resp = getattr(keyed_client, method)(path)
    # Missing credentials: 403 on older FastAPI releases, 401 on newer ones
    assert resp.status_code in (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN)


def test_upload_routes_reject_a_wrong_key(keyed_client):
    resp = keyed_client.get("/api/uploads/policy", headers={API_KEY_HEADER_NAME: "nope"})
    assert resp.status_code == status.HTTP_403_FORBIDDEN
    assert resp.json() == {"detail": "Invalid API Key"}


def test_upload_routes_accept_the_configured_key(keyed_client):
    resp = keyed_client.get("/api/uploads/policy", headers={API_KEY_HEADER_NAME: "secret"})
    assert resp.status_code == status.HTTP_200_OK
    assert "authorized_extensions" in resp.json()


def test_health_needs_no_key(keyed_client):
    assert keyed_client.get("/health").status_code == status.HTTP_200_OK
