"""Multipart upload endpoint."""

import logging

from fastapi import APIRouter, Depends, Request, Response, status
from starlette.datastructures import UploadFile
from starlette.exceptions import HTTPException

from immich_share.api.deps import (
    get_container,
    require_session,
    update_session_albums,
)
from immich_share.domain.sessions import SessionData
from immich_share.domain.uploads import IncomingFile
from immich_share.errors import ApiError
from immich_share.services.csrf import CsrfError
from immich_share.services.rate_limit import UPLOAD_POLICY, rate_limit_headers
from immich_share.services.uploads import MAX_FILES_PER_BATCH, AlbumCreationError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["upload"])

CSRF_HEADER = "x-csrf-token"


def _declared_size(upload: UploadFile) -> int:
    if upload.size is not None:
        return upload.size
    upload.file.seek(0, 2)
    size = upload.file.tell()
    upload.file.seek(0)
    return size


def _form_error_code(detail: str) -> str:
    # Starlette reports its part-count limit as a plain 400 detail.
    if detail.startswith("Too many files"):
        return "tooManyFiles"
    return "invalidRequest"


def _incoming_file(upload: UploadFile) -> IncomingFile:
    return IncomingFile(
        filename=upload.filename or "unknown",
        content_type=upload.content_type,
        size=_declared_size(upload),
        stream=upload.file,
    )


@router.post("/upload")
async def upload(
    request: Request,
    response: Response,
    session: SessionData = Depends(require_session),
) -> dict[str, object]:
    """Create an album from the submitted files."""
    container = get_container(request)

    try:
        container.csrf_service.verify(
            request.headers.get(CSRF_HEADER), session.session_id
        )
    except CsrfError as exc:
        logger.warning("Upload rejected by CSRF check: %s", exc.code)
        raise ApiError(status.HTTP_403_FORBIDDEN, exc.code) from exc

    limit = container.rate_limiter.check_policy(UPLOAD_POLICY, session.session_id)
    if not limit.allowed:
        raise ApiError(
            status.HTTP_429_TOO_MANY_REQUESTS,
            "tooManyUploads",
            headers=rate_limit_headers(limit),
        )

    try:
        form = await request.form(max_files=MAX_FILES_PER_BATCH + 1)
    except HTTPException as exc:
        logger.info("Rejected upload form: %s", exc.detail)
        raise ApiError(
            status.HTTP_400_BAD_REQUEST, _form_error_code(str(exc.detail))
        ) from exc

    try:
        raw_album_name = form.get("albumName")
        album_name = (
            raw_album_name.strip() if isinstance(raw_album_name, str) else ""
        )
        uploads = [
            item for item in form.getlist("photos") if isinstance(item, UploadFile)
        ]

        if not album_name:
            raise ApiError(status.HTTP_400_BAD_REQUEST, "albumNameRequired")
        if not uploads:
            raise ApiError(status.HTTP_400_BAD_REQUEST, "noFilesUploaded")
        if len(uploads) > MAX_FILES_PER_BATCH:
            raise ApiError(status.HTTP_400_BAD_REQUEST, "tooManyFiles")

        try:
            batch = await container.upload_service.upload_batch(
                album_name=album_name,
                user_name=session.user_name,
                files=[_incoming_file(item) for item in uploads],
            )
        except AlbumCreationError as exc:
            raise ApiError(
                status.HTTP_500_INTERNAL_SERVER_ERROR, "albumCreationFailed"
            ) from exc
    finally:
        await form.close()

    update_session_albums(request, response, session.session_id, batch.album_id)
    return batch.to_dict()
