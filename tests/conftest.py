"""Shared test fixtures."""

import time
from dataclasses import dataclass, field
from pathlib import Path

import httpx
import pytest

from immich_share.adapters.immich_client import ImmichClient
from immich_share.config import Settings
from immich_share.containers import AppContainer
from immich_share.domain.albums import (
    AlbumAssetResult,
    CreateAlbumRequest,
    UploadAssetRequest,
    UploadAssetResult,
)
from immich_share.services.csrf import CsrfService
from immich_share.services.rate_limit import RateLimiter
from immich_share.services.sessions import SessionService
from immich_share.services.uploads import UploadService

SECRET = "test-secret-with-enough-length-for-hs256"
INVITATION_CODE = "let-me-in"


@dataclass
class FakeClock:
    """Manually advanced millisecond clock anchored at the real time."""

    now: int = field(default_factory=lambda: int(time.time() * 1000))

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


@dataclass
class FakeImmichClient(ImmichClient):
    """Fake Immich client that records calls."""

    albums: list[CreateAlbumRequest] = field(default_factory=list)
    uploads: list[UploadAssetRequest] = field(default_factory=list)
    uploaded_bytes: list[bytes] = field(default_factory=list)
    attached: list[tuple[str, list[str]]] = field(default_factory=list)
    removed: list[tuple[str, list[str]]] = field(default_factory=list)
    album_lookups: list[dict[str, object]] = field(default_factory=list)
    failing_filenames: set[str] = field(default_factory=set)
    fail_create: bool = False
    fail_attach: bool = False
    fail_reads: bool = False

    async def create_album(self, request: CreateAlbumRequest) -> dict[str, object]:
        if self.fail_create:
            raise httpx.ConnectError("backend down")
        self.albums.append(request)
        return {"id": f"album-{len(self.albums)}", "albumName": request.album_name}

    async def upload_asset(self, request: UploadAssetRequest) -> UploadAssetResult:
        self.uploads.append(request)
        self.uploaded_bytes.append(Path(request.file_path).read_bytes())
        if request.original_filename in self.failing_filenames:
            raise httpx.ReadTimeout("timed out")
        return UploadAssetResult(id=f"asset-{len(self.uploads)}", status="created")

    async def list_albums(self) -> list[dict[str, object]]:
        if self.fail_reads:
            raise httpx.ConnectError("backend down")
        return [{"id": "album-1", "albumName": "Trip"}]

    async def get_album(
        self,
        album_id: str,
        key: str | None = None,
        slug: str | None = None,
        without_assets: bool = False,
    ) -> dict[str, object]:
        if self.fail_reads:
            raise httpx.ConnectError("backend down")
        lookup = {
            "album_id": album_id,
            "key": key,
            "slug": slug,
            "without_assets": without_assets,
        }
        self.album_lookups.append(lookup)
        return {"id": album_id, "albumName": "Trip", "assets": []}

    async def add_assets_to_album(
        self,
        album_id: str,
        asset_ids: list[str],
        key: str | None = None,
        slug: str | None = None,
    ) -> list[AlbumAssetResult]:
        if self.fail_attach:
            raise httpx.ConnectError("backend down")
        self.attached.append((album_id, list(asset_ids)))
        return [AlbumAssetResult(id=asset_id, success=True) for asset_id in asset_ids]

    async def remove_assets_from_album(
        self, album_id: str, asset_ids: list[str]
    ) -> list[AlbumAssetResult]:
        self.removed.append((album_id, list(asset_ids)))
        return [
            AlbumAssetResult(id=asset_id, success=False, error="not_found")
            for asset_id in asset_ids
        ]

    def generate_device_asset_id(self) -> str:
        return f"web-upload-test-{len(self.uploads)}"

    def get_device_id(self) -> str:
        return "web-uploader"


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        immich_server_url="http://immich.test",
        immich_api_key="immich-key",
        jwt_secret=SECRET,
        invitation_code=INVITATION_CODE,
        upload_temp_dir=str(tmp_path),
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def immich_client() -> FakeImmichClient:
    return FakeImmichClient()


@pytest.fixture
def container(
    settings: Settings, clock: FakeClock, immich_client: FakeImmichClient
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        immich_client=immich_client,
        session_service=SessionService(secret=SECRET, clock=clock),
        csrf_service=CsrfService(secret=SECRET, clock=clock),
        rate_limiter=RateLimiter(clock=clock),
        upload_service=UploadService(
            immich_client=immich_client,
            temp_dir=Path(settings.upload_temp_dir),
            clock=clock,
        ),
        close_resources=close_resources,
    )
