"""Application configuration."""

import os
import re
import tempfile

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

_SIZE_UNITS = {
    "b": 1,
    "kb": 1024,
    "mb": 1024**2,
    "gb": 1024**3,
}
_SIZE_PATTERN = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*(b|kb|mb|gb)?\s*$", re.IGNORECASE)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    immich_server_url: str
    immich_api_key: str
    jwt_secret: str
    invitation_code: str
    default_language: str = "sv"
    base_path: str = ""
    body_size_limit: str = "500mb"
    language_cookie_name: str = "immich-share-language"
    upload_temp_dir: str = tempfile.gettempdir()
    trusted_proxy_hops: int = 1
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def is_production(self) -> bool:
        """Whether cookies must be marked secure."""
        return self.environment == "production"


def parse_body_size_limit(raw: str) -> int:
    """Parse a size such as ``500mb`` or ``1048576`` into bytes."""
    match = _SIZE_PATTERN.match(raw)
    if match is None:
        raise ValueError(f"Invalid body size limit: {raw!r}")
    amount, unit = match.groups()
    return int(float(amount) * _SIZE_UNITS[(unit or "b").lower()])


def normalize_base_path(raw: str) -> str:
    """Return ``""`` or a ``/prefix`` without a trailing slash."""
    cleaned = raw.strip().strip("/")
    if not cleaned:
        return ""
    return "/" + re.sub(r"/+", "/", cleaned)
