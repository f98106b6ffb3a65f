"""Request and result types for the Immich album and asset API."""

from dataclasses import dataclass


@dataclass(frozen=True)
class AlbumUser:
    """A user granted access to a new album."""

    user_id: str
    role: str = "editor"


@dataclass(frozen=True)
class CreateAlbumRequest:
    """Payload for creating an album."""

    album_name: str
    description: str | None = None
    asset_ids: list[str] | None = None
    album_users: list[AlbumUser] | None = None

    def to_payload(self) -> dict[str, object]:
        payload: dict[str, object] = {"albumName": self.album_name}
        if self.description is not None:
            payload["description"] = self.description
        if self.asset_ids:
            payload["assetIds"] = list(self.asset_ids)
        if self.album_users:
            payload["albumUsers"] = [
                {"userId": user.user_id, "role": user.role}
                for user in self.album_users
            ]
        return payload


@dataclass(frozen=True)
class UploadAssetRequest:
    """Metadata and source path for a single asset upload."""

    file_path: str
    original_filename: str
    device_asset_id: str
    device_id: str
    file_created_at: str
    file_modified_at: str
    is_favorite: bool | None = None
    duration: str | None = None
    filename: str | None = None
    visibility: str | None = None

    def form_fields(self) -> dict[str, str]:
        """Return the non-file multipart fields."""
        fields = {
            "deviceAssetId": self.device_asset_id,
            "deviceId": self.device_id,
            "fileCreatedAt": self.file_created_at,
            "fileModifiedAt": self.file_modified_at,
        }
        if self.is_favorite is not None:
            fields["isFavorite"] = "true" if self.is_favorite else "false"
        if self.duration:
            fields["duration"] = self.duration
        if self.filename:
            fields["filename"] = self.filename
        if self.visibility:
            fields["visibility"] = self.visibility
        return fields


@dataclass(frozen=True)
class UploadAssetResult:
    """Backend response to an upload.

    ``status`` is ``created``, ``replaced`` or ``duplicate`` and is relayed
    unchanged.
    """

    id: str
    status: str


@dataclass(frozen=True)
class AlbumAssetResult:
    """Per-asset outcome of adding to or removing from an album."""

    id: str
    success: bool
    error: str | None = None

    def to_dict(self) -> dict[str, object]:
        data: dict[str, object] = {"id": self.id, "success": self.success}
        if self.error is not None:
            data["error"] = self.error
        return data
