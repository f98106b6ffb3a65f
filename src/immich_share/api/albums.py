"""Album pass-through endpoints backed by the Immich API key."""

import logging

import httpx
from fastapi import APIRouter, Query, Request, status

from immich_share.api.deps import get_container
from immich_share.api.models import AssetIdsRequest
from immich_share.errors import ApiError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/albums", tags=["albums"])


def _require_asset_ids(payload: AssetIdsRequest) -> list[str]:
    if not payload.asset_ids:
        raise ApiError(status.HTTP_400_BAD_REQUEST, "assetIdsRequired")
    return payload.asset_ids


@router.get("")
async def list_albums(request: Request) -> list[dict[str, object]]:
    """Return all albums from Immich."""
    container = get_container(request)
    try:
        return await container.immich_client.list_albums()
    except httpx.HTTPError as exc:
        logger.exception("Failed to fetch albums")
        raise ApiError(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "fetchAlbumsFailed"
        ) from exc


@router.get("/{album_id}")
async def get_album(
    album_id: str,
    request: Request,
    key: str | None = None,
    slug: str | None = None,
    without_assets: str | None = Query(default=None, alias="withoutAssets"),
) -> dict[str, object]:
    """Return one album, optionally through a shared-link key or slug."""
    container = get_container(request)
    try:
        return await container.immich_client.get_album(
            album_id,
            key=key or None,
            slug=slug or None,
            without_assets=without_assets == "true",
        )
    except httpx.HTTPError as exc:
        logger.exception("Failed to fetch album %s", album_id)
        raise ApiError(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "fetchAlbumFailed"
        ) from exc


@router.put("/{album_id}/assets")
async def add_assets(
    album_id: str,
    payload: AssetIdsRequest,
    request: Request,
    key: str | None = None,
    slug: str | None = None,
) -> dict[str, object]:
    """Add existing assets to an album."""
    asset_ids = _require_asset_ids(payload)
    container = get_container(request)
    try:
        results = await container.immich_client.add_assets_to_album(
            album_id, asset_ids, key=key or None, slug=slug or None
        )
    except httpx.HTTPError as exc:
        logger.exception("Failed to add assets to album %s", album_id)
        raise ApiError(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "addAssetsFailed"
        ) from exc
    return {
        "success": True,
        "albumId": album_id,
        "addedAssets": len(asset_ids),
        "results": [result.to_dict() for result in results],
    }


@router.delete("/{album_id}/assets")
async def remove_assets(
    album_id: str, payload: AssetIdsRequest, request: Request
) -> dict[str, object]:
    """Remove assets from an album."""
    asset_ids = _require_asset_ids(payload)
    container = get_container(request)
    try:
        results = await container.immich_client.remove_assets_from_album(
            album_id, asset_ids
        )
    except httpx.HTTPError as exc:
        logger.exception("Failed to remove assets from album %s", album_id)
        raise ApiError(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "removeAssetsFailed"
        ) from exc
    return {
        "success": True,
        "albumId": album_id,
        "removedAssets": len(asset_ids),
        "results": [result.to_dict() for result in results],
    }
