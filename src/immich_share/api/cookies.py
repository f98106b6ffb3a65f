"""Cookie helpers for the session and language preference."""

from fastapi import Response

from immich_share.services.sessions import SESSION_TTL_SECONDS

SESSION_COOKIE_NAME = "session"
LANGUAGE_COOKIE_MAX_AGE = 60 * 60 * 24 * 365
AVAILABLE_LANGUAGES = ("en", "sv")


def set_session_cookie(response: Response, token: str, *, secure: bool) -> None:
    """Set or replace the session cookie."""
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=token,
        max_age=SESSION_TTL_SECONDS,
        httponly=True,
        secure=secure,
        samesite="strict",
        path="/",
    )


def set_language_cookie(
    response: Response, language: str, *, cookie_name: str, secure: bool
) -> bool:
    """Persist a UI language choice; unknown languages are ignored."""
    if language not in AVAILABLE_LANGUAGES:
        return False
    response.set_cookie(
        key=cookie_name,
        value=language,
        max_age=LANGUAGE_COOKIE_MAX_AGE,
        httponly=False,
        secure=secure,
        samesite="lax",
        path="/",
    )
    return True


def preferred_language(
    cookies: dict[str, str], *, cookie_name: str, default: str
) -> str:
    """Return the stored UI language, falling back to ``default``."""
    language = cookies.get(cookie_name)
    if language in AVAILABLE_LANGUAGES:
        return language
    return default
