"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path

from immich_share.adapters.immich_client import HttpxImmichClient, ImmichClient
from immich_share.config import Settings
from immich_share.services.csrf import CsrfService
from immich_share.services.rate_limit import RateLimiter
from immich_share.services.sessions import SessionService
from immich_share.services.uploads import UploadService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    immich_client: ImmichClient
    session_service: SessionService
    csrf_service: CsrfService
    rate_limiter: RateLimiter
    upload_service: UploadService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container.

    Raises pydantic's ``ValidationError`` when required settings are missing.
    """
    resolved_settings = settings or Settings()
    immich_client = HttpxImmichClient.create(
        server_url=resolved_settings.immich_server_url,
        api_key=resolved_settings.immich_api_key,
    )
    session_service = SessionService(secret=resolved_settings.jwt_secret)
    csrf_service = CsrfService(secret=resolved_settings.jwt_secret)
    upload_service = UploadService(
        immich_client=immich_client,
        temp_dir=Path(resolved_settings.upload_temp_dir),
    )

    async def close_resources() -> None:
        await immich_client.close()

    return AppContainer(
        settings=resolved_settings,
        immich_client=immich_client,
        session_service=session_service,
        csrf_service=csrf_service,
        rate_limiter=RateLimiter(),
        upload_service=upload_service,
        close_resources=close_resources,
    )
