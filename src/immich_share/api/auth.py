"""Invitation-code login, session lookup and CSRF token issuance."""

import logging
import secrets

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from immich_share.api.cookies import (
    preferred_language,
    set_language_cookie,
    set_session_cookie,
)
from immich_share.api.deps import (
    client_address,
    get_container,
    get_session,
    require_session,
)
from immich_share.api.models import AuthRequest
from immich_share.domain.sessions import SessionData
from immich_share.errors import ApiError
from immich_share.services.rate_limit import AUTH_POLICY, rate_limit_headers

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


def verify_invitation_code(code: str, expected: str) -> bool:
    """Compare an invitation code in constant time."""
    return secrets.compare_digest(code.encode("utf-8"), expected.encode("utf-8"))


@router.post("/auth")
async def authenticate(request: Request, response: Response) -> dict[str, object]:
    """Exchange the invitation code for a session cookie.

    The attempt is counted before the body is parsed.
    """
    container = get_container(request)
    address = client_address(request)
    limit = container.rate_limiter.check_policy(AUTH_POLICY, address)
    if not limit.allowed:
        logger.warning("Too many authentication attempts from %s", address)
        raise ApiError(
            status.HTTP_429_TOO_MANY_REQUESTS,
            "tooManyAttempts",
            headers=rate_limit_headers(limit),
        )

    try:
        payload = AuthRequest.model_validate_json(await request.body())
    except ValidationError as exc:
        logger.info("Rejected malformed authentication request from %s", address)
        raise ApiError(status.HTTP_400_BAD_REQUEST, "invalidRequest") from exc

    user_name = (payload.user_name or "").strip()
    if not payload.invitation_code or not user_name:
        raise ApiError(status.HTTP_400_BAD_REQUEST, "invitationCodeAndNameRequired")

    settings = container.settings
    if not verify_invitation_code(payload.invitation_code, settings.invitation_code):
        raise ApiError(status.HTTP_401_UNAUTHORIZED, "invalidInvitationCode")

    token = container.session_service.create_session(user_name)
    set_session_cookie(response, token, secure=settings.is_production)
    if payload.language:
        set_language_cookie(
            response,
            payload.language,
            cookie_name=settings.language_cookie_name,
            secure=settings.is_production,
        )
    logger.info("Authenticated new session for %s", user_name)
    return {"success": True, "message": "Authentication successful"}


@router.get("/auth", response_model=None)
async def current_session(
    request: Request,
    session: SessionData | None = Depends(get_session),
) -> dict[str, object] | JSONResponse:
    """Describe the caller's session."""
    if session is None:
        return JSONResponse(
            {"authenticated": False}, status_code=status.HTTP_401_UNAUTHORIZED
        )
    settings = get_container(request).settings
    return {
        "authenticated": True,
        "sessionId": session.session_id,
        "userName": session.user_name,
        "albumIds": session.album_ids,
        "language": preferred_language(
            request.cookies,
            cookie_name=settings.language_cookie_name,
            default=settings.default_language,
        ),
    }


@router.get("/csrf")
async def csrf_token(
    request: Request, session: SessionData = Depends(require_session)
) -> dict[str, str]:
    """Issue a CSRF token bound to the caller's session."""
    container = get_container(request)
    return {"csrfToken": container.csrf_service.issue(session.session_id)}
