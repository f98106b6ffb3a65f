"""Immich album and asset API client."""

import asyncio
import secrets
import string
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

import httpx

from immich_share.domain.albums import (
    AlbumAssetResult,
    CreateAlbumRequest,
    UploadAssetRequest,
    UploadAssetResult,
)

REQUEST_TIMEOUT_SECONDS = 60
DEVICE_ID = "web-uploader"

_SUFFIX_ALPHABET = string.ascii_lowercase + string.digits


class ImmichClient(Protocol):
    """Interface for the Immich REST API."""

    async def create_album(self, request: CreateAlbumRequest) -> dict[str, object]:
        """Create an album and return it."""

    async def upload_asset(self, request: UploadAssetRequest) -> UploadAssetResult:
        """Upload one asset from a local file."""

    async def list_albums(self) -> list[dict[str, object]]:
        """Return all albums visible to the API key."""

    async def get_album(
        self,
        album_id: str,
        key: str | None = None,
        slug: str | None = None,
        without_assets: bool = False,
    ) -> dict[str, object]:
        """Fetch an album by id."""

    async def add_assets_to_album(
        self,
        album_id: str,
        asset_ids: list[str],
        key: str | None = None,
        slug: str | None = None,
    ) -> list[AlbumAssetResult]:
        """Add assets to an album."""

    async def remove_assets_from_album(
        self, album_id: str, asset_ids: list[str]
    ) -> list[AlbumAssetResult]:
        """Remove assets from an album."""

    def generate_device_asset_id(self) -> str:
        """Return a fresh device asset id for deduplication."""

    def get_device_id(self) -> str:
        """Return the device id this service uploads as."""


def _read_file(path: str) -> bytes:
    return Path(path).read_bytes()


def generate_device_asset_id() -> str:
    """Return ``web-upload-<ms>-<suffix>``."""
    suffix = "".join(secrets.choice(_SUFFIX_ALPHABET) for _ in range(9))
    return f"web-upload-{int(time.time() * 1000)}-{suffix}"


@dataclass
class HttpxImmichClient(ImmichClient):
    """HTTPX-backed Immich client.

    Every method maps to one REST call. Errors propagate to the caller
    unchanged: there are no retries.
    """

    server_url: str
    api_key: str
    http_client: httpx.AsyncClient

    def __post_init__(self) -> None:
        self.server_url = self.server_url.rstrip("/")

    @classmethod
    def create(cls, server_url: str, api_key: str) -> "HttpxImmichClient":
        """Create an Immich client with a managed httpx session."""
        return cls(
            server_url=server_url, api_key=api_key, http_client=httpx.AsyncClient()
        )

    @property
    def headers(self) -> dict[str, str]:
        return {"x-api-key": self.api_key, "Accept": "application/json"}

    def _url(self, path: str) -> str:
        return f"{self.server_url}/api{path}"

    async def create_album(self, request: CreateAlbumRequest) -> dict[str, object]:
        """Create an album via ``POST /albums``."""
        response = await self.http_client.post(
            self._url("/albums"),
            json=request.to_payload(),
            headers=self.headers,
            timeout=REQUEST_TIMEOUT_SECONDS,
        )
        response.raise_for_status()
        return response.json()

    async def upload_asset(self, request: UploadAssetRequest) -> UploadAssetResult:
        """Upload a file via multipart ``POST /assets``."""
        # Staged files are capped at the per-file upload limit.
        content = await asyncio.to_thread(_read_file, request.file_path)
        response = await self.http_client.post(
            self._url("/assets"),
            data=request.form_fields(),
            files={
                "assetData": (
                    request.original_filename,
                    content,
                    "application/octet-stream",
                )
            },
            headers=self.headers,
            timeout=REQUEST_TIMEOUT_SECONDS,
        )
        response.raise_for_status()
        payload = response.json()
        return UploadAssetResult(id=str(payload["id"]), status=str(payload["status"]))

    async def list_albums(self) -> list[dict[str, object]]:
        """List albums via ``GET /albums``."""
        response = await self.http_client.get(
            self._url("/albums"),
            headers=self.headers,
            timeout=REQUEST_TIMEOUT_SECONDS,
        )
        response.raise_for_status()
        return response.json()

    async def get_album(
        self,
        album_id: str,
        key: str | None = None,
        slug: str | None = None,
        without_assets: bool = False,
    ) -> dict[str, object]:
        """Fetch an album via ``GET /albums/{id}``."""
        params: dict[str, str] = {}
        if key:
            params["key"] = key
        if slug:
            params["slug"] = slug
        if without_assets:
            params["withoutAssets"] = "true"
        response = await self.http_client.get(
            self._url(f"/albums/{album_id}"),
            params=params,
            headers=self.headers,
            timeout=REQUEST_TIMEOUT_SECONDS,
        )
        response.raise_for_status()
        return response.json()

    async def add_assets_to_album(
        self,
        album_id: str,
        asset_ids: list[str],
        key: str | None = None,
        slug: str | None = None,
    ) -> list[AlbumAssetResult]:
        """Add assets via ``PUT /albums/{id}/assets``."""
        params: dict[str, str] = {}
        if key:
            params["key"] = key
        if slug:
            params["slug"] = slug
        response = await self.http_client.put(
            self._url(f"/albums/{album_id}/assets"),
            params=params,
            json={"ids": asset_ids},
            headers=self.headers,
            timeout=REQUEST_TIMEOUT_SECONDS,
        )
        response.raise_for_status()
        return _parse_asset_results(response.json())

    async def remove_assets_from_album(
        self, album_id: str, asset_ids: list[str]
    ) -> list[AlbumAssetResult]:
        """Remove assets via ``DELETE /albums/{id}/assets``.

        The ids travel in a JSON body, which ``httpx.AsyncClient.delete``
        does not accept, hence the generic ``request`` call.
        """
        response = await self.http_client.request(
            "DELETE",
            self._url(f"/albums/{album_id}/assets"),
            json={"ids": asset_ids},
            headers=self.headers,
            timeout=REQUEST_TIMEOUT_SECONDS,
        )
        response.raise_for_status()
        return _parse_asset_results(response.json())

    def generate_device_asset_id(self) -> str:
        return generate_device_asset_id()

    def get_device_id(self) -> str:
        return DEVICE_ID

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()


def _parse_asset_results(payload: list[dict[str, object]]) -> list[AlbumAssetResult]:
    results: list[AlbumAssetResult] = []
    for item in payload:
        error = item.get("error")
        results.append(
            AlbumAssetResult(
                id=str(item.get("id")),
                success=bool(item.get("success")),
                error=str(error) if error is not None else None,
            )
        )
    return results
