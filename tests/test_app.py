"""Tests for application-level routes and middleware."""

from fastapi.testclient import TestClient

from immich_share.api.app import create_app
from tests.conftest import INVITATION_CODE


def test_health(container) -> None:
    client = TestClient(create_app(container))

    response = client.get("/api/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["service"] == "Immich Photo Uploader"
    assert data["timestamp"].endswith("Z")
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"


def test_manifest(container) -> None:
    client = TestClient(create_app(container))

    response = client.get("/api/manifest")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/manifest+json")
    data = response.json()
    assert data["start_url"] == "/"
    assert data["icons"][0]["src"] == "/api/icon"


def test_icon(container) -> None:
    client = TestClient(create_app(container))

    response = client.get("/api/icon")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("image/svg+xml")
    assert response.text.startswith("<svg")


def test_base_path_prefixes_routes(container) -> None:
    container.settings.base_path = "/share/"
    client = TestClient(create_app(container))

    assert client.get("/share/api/health").status_code == 200
    assert client.get("/api/health").status_code == 404
    manifest = client.get("/share/api/manifest").json()
    assert manifest["start_url"] == "/share/"
    assert manifest["icons"][0]["src"] == "/share/api/icon"


def test_body_size_limit(container) -> None:
    container.settings.body_size_limit = "1kb"
    client = TestClient(create_app(container))

    response = client.post(
        "/api/auth",
        content=b"x" * 2048,
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 413
    assert response.json() == {"error": "payloadTooLarge"}


def test_body_size_limit_counts_chunked_bodies(container) -> None:
    container.settings.body_size_limit = "1kb"
    client = TestClient(create_app(container))

    def chunks():  # type: ignore[no-untyped-def]
        for _ in range(3):
            yield b"x" * 1024

    response = client.post(
        "/api/auth",
        content=chunks(),
        headers={"Content-Type": "application/json"},
    )

    assert "content-length" not in response.request.headers
    assert response.status_code == 413
    assert response.json() == {"error": "payloadTooLarge"}
    assert response.headers["X-Content-Type-Options"] == "nosniff"


def test_chunked_body_within_limit_is_accepted(container) -> None:
    container.settings.body_size_limit = "1kb"
    client = TestClient(create_app(container))
    body = f'{{"invitationCode": "{INVITATION_CODE}", "userName": "Bo"}}'.encode()

    def chunks():  # type: ignore[no-untyped-def]
        yield body[:10]
        yield body[10:]

    response = client.post(
        "/api/auth",
        content=chunks(),
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 200
    assert response.json()["success"] is True
