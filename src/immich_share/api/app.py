"""FastAPI application factory."""

import asyncio
import contextlib
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response

from immich_share.api.albums import router as albums_router
from immich_share.api.auth import router as auth_router
from immich_share.api.middleware import BodySizeLimitMiddleware
from immich_share.api.upload import router as upload_router
from immich_share.app_logging import configure_logging
from immich_share.config import normalize_base_path, parse_body_size_limit
from immich_share.containers import AppContainer
from immich_share.errors import ApiError
from immich_share.services.rate_limit import run_periodic_sweep

SERVICE_NAME = "Immich Photo Uploader"


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)
    base_path = normalize_base_path(container.settings.base_path)
    body_size_limit = parse_body_size_limit(container.settings.body_size_limit)
    api_prefix = f"{base_path}/api"

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        sweeper = asyncio.create_task(
            run_periodic_sweep(app.state.container.rate_limiter)
        )
        yield
        sweeper.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await sweeper
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(ApiError)
    async def handle_api_error(request: Request, exc: ApiError) -> JSONResponse:
        return JSONResponse(
            {"error": exc.code}, status_code=exc.status_code, headers=exc.headers
        )

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        logger.info("Rejected malformed request to %s", request.url.path)
        return JSONResponse(
            {"error": "invalidRequest"}, status_code=status.HTTP_400_BAD_REQUEST
        )

    app.add_middleware(BodySizeLimitMiddleware, max_bytes=body_size_limit)

    @app.middleware("http")
    async def security_headers(request: Request, call_next):  # type: ignore[no-untyped-def]
        response: Response = await call_next(request)
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "same-origin")
        response.headers.setdefault("X-Frame-Options", "DENY")
        return response

    app.include_router(auth_router, prefix=api_prefix)
    app.include_router(upload_router, prefix=api_prefix)
    app.include_router(albums_router, prefix=api_prefix)

    @app.get(f"{api_prefix}/health")
    async def health() -> dict[str, str]:
        """Liveness probe."""
        return {
            "status": "ok",
            "service": SERVICE_NAME,
            "timestamp": datetime.now(tz=UTC)
            .isoformat(timespec="milliseconds")
            .replace("+00:00", "Z"),
        }

    @app.get(f"{api_prefix}/manifest")
    async def manifest() -> JSONResponse:
        """Installable web app descriptor."""
        return JSONResponse(
            _manifest(base_path), media_type="application/manifest+json"
        )

    @app.get(f"{api_prefix}/icon")
    async def icon() -> Response:
        """App icon referenced by the manifest."""
        return Response(
            _ICON_SVG,
            media_type="image/svg+xml",
            headers={"Cache-Control": "public, max-age=31536000"},
        )

    return app


def _manifest(base_path: str) -> dict[str, object]:
    icon_src = f"{base_path}/api/icon"
    return {
        "name": "Share Photos - Immich",
        "short_name": "Share Photos",
        "description": "Upload photos to create shared albums",
        "start_url": f"{base_path}/",
        "display": "standalone",
        "background_color": "#ffffff",
        "theme_color": "#2563eb",
        "orientation": "portrait-primary",
        "icons": [
            {
                "src": icon_src,
                "sizes": size,
                "type": "image/svg+xml",
                "purpose": "any maskable",
            }
            for size in ("192x192", "512x512")
        ],
        "categories": ["photo", "utilities"],
        "screenshots": [],
        "prefer_related_applications": False,
    }


_ICON_SVG = """<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 100 100">
  <rect width="100" height="100" fill="#4f46e5" rx="15"/>
  <circle cx="30" cy="35" r="8" fill="white" opacity="0.9"/>
  <path d="M20 60 L45 40 L60 50 L80 35 L80 70 L20 70 Z" fill="white" opacity="0.9"/>
  <rect x="15" y="25" width="70" height="50" fill="none" stroke="white" stroke-width="3" rx="5"/>
</svg>
"""
