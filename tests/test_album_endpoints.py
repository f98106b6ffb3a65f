"""Tests for the album pass-through endpoints."""

from fastapi.testclient import TestClient

from immich_share.api.app import create_app
from tests.conftest import FakeImmichClient


def test_list_albums(container) -> None:
    client = TestClient(create_app(container))

    response = client.get("/api/albums")

    assert response.status_code == 200
    assert response.json() == [{"id": "album-1", "albumName": "Trip"}]


def test_list_albums_upstream_failure(
    container, immich_client: FakeImmichClient
) -> None:
    immich_client.fail_reads = True
    client = TestClient(create_app(container))

    response = client.get("/api/albums")

    assert response.status_code == 500
    assert response.json() == {"error": "fetchAlbumsFailed"}


def test_get_album_forwards_query(container, immich_client: FakeImmichClient) -> None:
    client = TestClient(create_app(container))

    response = client.get(
        "/api/albums/album-7", params={"key": "share-key", "withoutAssets": "true"}
    )

    assert response.status_code == 200
    assert response.json()["id"] == "album-7"
    assert immich_client.album_lookups == [
        {
            "album_id": "album-7",
            "key": "share-key",
            "slug": None,
            "without_assets": True,
        }
    ]


def test_get_album_upstream_failure(
    container, immich_client: FakeImmichClient
) -> None:
    immich_client.fail_reads = True
    client = TestClient(create_app(container))

    response = client.get("/api/albums/album-7")

    assert response.status_code == 500
    assert response.json() == {"error": "fetchAlbumFailed"}


def test_add_assets(container, immich_client: FakeImmichClient) -> None:
    client = TestClient(create_app(container))

    response = client.put("/api/albums/album-1/assets", json={"assetIds": ["a", "b"]})

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "albumId": "album-1",
        "addedAssets": 2,
        "results": [{"id": "a", "success": True}, {"id": "b", "success": True}],
    }
    assert immich_client.attached == [("album-1", ["a", "b"])]


def test_add_assets_upstream_failure(
    container, immich_client: FakeImmichClient
) -> None:
    immich_client.fail_attach = True
    client = TestClient(create_app(container))

    response = client.put("/api/albums/album-1/assets", json={"assetIds": ["a"]})

    assert response.status_code == 500
    assert response.json() == {"error": "addAssetsFailed"}


def test_remove_assets(container, immich_client: FakeImmichClient) -> None:
    client = TestClient(create_app(container))

    response = client.request(
        "DELETE", "/api/albums/album-1/assets", json={"assetIds": ["a"]}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["removedAssets"] == 1
    assert data["results"] == [{"id": "a", "success": False, "error": "not_found"}]
    assert immich_client.removed == [("album-1", ["a"])]


def test_asset_ids_required(container) -> None:
    client = TestClient(create_app(container))

    empty = client.put("/api/albums/album-1/assets", json={"assetIds": []})
    missing = client.request("DELETE", "/api/albums/album-1/assets", json={})

    assert empty.status_code == 400
    assert empty.json() == {"error": "assetIdsRequired"}
    assert missing.status_code == 400
    assert missing.json() == {"error": "assetIdsRequired"}
