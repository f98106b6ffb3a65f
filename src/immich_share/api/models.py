"""Request body models for the JSON API."""

from pydantic import BaseModel, ConfigDict, Field


class AuthRequest(BaseModel):
    """Invitation code exchange."""

    model_config = ConfigDict(populate_by_name=True)

    invitation_code: str | None = Field(default=None, alias="invitationCode")
    user_name: str | None = Field(default=None, alias="userName")
    language: str | None = None


class AssetIdsRequest(BaseModel):
    """List of asset ids to add to or remove from an album."""

    model_config = ConfigDict(populate_by_name=True)

    asset_ids: list[str] | None = Field(default=None, alias="assetIds")
