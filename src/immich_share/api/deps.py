"""Request-scoped dependencies: container, session and client address."""

from fastapi import Depends, Request, Response, status

from immich_share.api.cookies import SESSION_COOKIE_NAME, set_session_cookie
from immich_share.containers import AppContainer
from immich_share.domain.sessions import SessionData
from immich_share.errors import ApiError


def get_container(request: Request) -> AppContainer:
    return request.app.state.container


def get_session(request: Request) -> SessionData | None:
    """Return the verified session from the request cookie, if any."""
    token = request.cookies.get(SESSION_COOKIE_NAME)
    if not token:
        return None
    container = get_container(request)
    return container.session_service.verify_session(token)


def require_session(
    session: SessionData | None = Depends(get_session),
) -> SessionData:
    """Reject the request with 401 unless it carries a valid session."""
    if session is None:
        raise ApiError(status.HTTP_401_UNAUTHORIZED, "authenticationRequired")
    return session


def update_session_albums(
    request: Request, response: Response, session_id: str, album_id: str
) -> None:
    """Add ``album_id`` to the caller's session and replace the cookie.

    Does nothing when the cookie is missing, invalid, belongs to another
    session, or already lists the album.
    """
    token = request.cookies.get(SESSION_COOKIE_NAME)
    if not token:
        return
    container = get_container(request)
    new_token = container.session_service.add_album(token, session_id, album_id)
    if new_token is None:
        return
    set_session_cookie(
        response, new_token, secure=container.settings.is_production
    )


def client_address(request: Request) -> str:
    """Best-effort client address behind ``trusted_proxy_hops`` proxies.

    Each proxy appends the peer it saw to ``X-Forwarded-For``, so only the
    rightmost ``trusted_proxy_hops`` entries can be trusted.
    """
    hops = get_container(request).settings.trusted_proxy_hops
    if hops > 0:
        forwarded = [
            entry.strip()
            for entry in request.headers.get("x-forwarded-for", "").split(",")
            if entry.strip()
        ]
        if forwarded:
            return forwarded[-min(hops, len(forwarded))]
        real_ip = request.headers.get("x-real-ip", "").strip()
        if real_ip:
            return real_ip
    if request.client is not None and request.client.host:
        return request.client.host
    return "unknown"
