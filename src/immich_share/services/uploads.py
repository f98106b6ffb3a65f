"""Upload orchestration: validate, stage, push to Immich, build the album."""

import asyncio
import logging
import secrets
import shutil
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path

from immich_share.adapters.immich_client import ImmichClient
from immich_share.domain.albums import CreateAlbumRequest, UploadAssetRequest
from immich_share.domain.uploads import (
    FileResult,
    IncomingFile,
    Outcome,
    UploadBatchResult,
)

logger = logging.getLogger(__name__)

MAX_FILES_PER_BATCH = 100
MAX_FILE_SIZE_BYTES = 100 * 1024 * 1024

ALLOWED_MEDIA_TYPES = frozenset(
    {
        "image/jpeg",
        "image/jpg",
        "image/png",
        "image/gif",
        "image/webp",
        "image/heic",
        "image/heif",
        "image/avif",
        "image/tiff",
        "image/bmp",
        "video/mp4",
        "video/quicktime",
        "video/x-msvideo",
        "video/x-matroska",
        "video/webm",
        "video/3gpp",
        "video/mpeg",
    }
)


class AlbumCreationError(Exception):
    """Raised when the album for a batch cannot be created."""


def _now_ms() -> int:
    return int(time.time() * 1000)


def album_description(user_name: str) -> str:
    """Return the description stored on albums created for ``user_name``."""
    return f"Shared by {user_name}"


def validate_file(incoming: IncomingFile) -> str | None:
    """Return an error code if ``incoming`` may not be uploaded."""
    media_type = (incoming.content_type or "").split(";")[0].strip().lower()
    if media_type not in ALLOWED_MEDIA_TYPES:
        return "invalidFileType"
    if incoming.size > MAX_FILE_SIZE_BYTES:
        return "fileTooLarge"
    return None


def _write_stream(path: Path, incoming: IncomingFile) -> None:
    incoming.stream.seek(0)
    with path.open("wb") as target:
        shutil.copyfileobj(incoming.stream, target)


@dataclass
class UploadService:
    """Pushes a batch of browser files into a new Immich album.

    Files are uploaded one at a time in input order. A failing file is
    recorded and skipped; only album creation failure aborts the batch.
    """

    immich_client: ImmichClient
    temp_dir: Path
    clock: Callable[[], int] = field(default=_now_ms)

    async def upload_batch(
        self, album_name: str, user_name: str, files: list[IncomingFile]
    ) -> UploadBatchResult:
        """Create an album, upload ``files`` and attach the successes."""
        logger.info(
            "Processing upload: %s files for album %r by %s",
            len(files),
            album_name,
            user_name,
        )
        try:
            album = await self.immich_client.create_album(
                CreateAlbumRequest(
                    album_name=album_name, description=album_description(user_name)
                )
            )
        except Exception as exc:
            logger.exception("Failed to create album %r", album_name)
            raise AlbumCreationError(album_name) from exc

        album_id = str(album["id"])
        logger.info("Created album %s", album_id)
        batch = UploadBatchResult(album_id=album_id, album_name=album_name)

        for incoming in files:
            batch.results.append(await self._process_file(incoming))

        asset_ids = batch.uploaded_asset_ids
        if asset_ids:
            batch.attach_outcome = await self._attach_assets(album_id, asset_ids)
        return batch

    async def _process_file(self, incoming: IncomingFile) -> FileResult:
        error = validate_file(incoming)
        if error is not None:
            logger.info("Skipping %s: %s", incoming.filename, error)
            return FileResult(filename=incoming.filename, success=False, error=error)

        temp_path = self._temp_path(incoming.filename)
        try:
            await asyncio.to_thread(_write_stream, temp_path, incoming)
            created_at = datetime.now(tz=UTC).isoformat()
            result = await self.immich_client.upload_asset(
                UploadAssetRequest(
                    file_path=str(temp_path),
                    original_filename=incoming.filename,
                    device_asset_id=self.immich_client.generate_device_asset_id(),
                    device_id=self.immich_client.get_device_id(),
                    file_created_at=created_at,
                    file_modified_at=created_at,
                    is_favorite=False,
                )
            )
        except Exception:
            logger.exception("Failed to upload %s", incoming.filename)
            return FileResult(
                filename=incoming.filename, success=False, error="uploadFailed"
            )
        finally:
            cleanup = await self._remove_temp_file(temp_path)
            if not cleanup.ok:
                logger.warning(
                    "Failed to clean up temp file %s: %s", temp_path, cleanup.error
                )

        logger.info(
            "Uploaded %s as %s (%s)", incoming.filename, result.id, result.status
        )
        return FileResult(filename=incoming.filename, success=True, asset_id=result.id)

    async def _attach_assets(self, album_id: str, asset_ids: list[str]) -> Outcome:
        try:
            await self.immich_client.add_assets_to_album(album_id, asset_ids)
        except Exception as exc:
            # The files already reached Immich; the batch still succeeds.
            logger.exception("Failed to add assets to album %s", album_id)
            return Outcome.failure(str(exc) or type(exc).__name__)
        logger.info("Added %s assets to album %s", len(asset_ids), album_id)
        return Outcome.success()

    async def _remove_temp_file(self, path: Path) -> Outcome:
        try:
            await asyncio.to_thread(path.unlink, missing_ok=True)
        except OSError as exc:
            return Outcome.failure(str(exc))
        return Outcome.success()

    def _temp_path(self, filename: str) -> Path:
        safe_name = Path(filename).name or "upload"
        return self.temp_dir / f"{self.clock()}-{secrets.token_hex(4)}-{safe_name}"
