"""CSRF tokens bound to a session."""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field

import jwt

logger = logging.getLogger(__name__)

CSRF_PURPOSE = "csrf"
CSRF_TTL_MS = 60 * 60 * 1000
JWT_ALGORITHM = "HS256"


def _now_ms() -> int:
    return int(time.time() * 1000)


class CsrfError(Exception):
    """Raised when a request fails the CSRF check."""

    def __init__(self, code: str) -> None:
        super().__init__(code)
        self.code = code


@dataclass
class CsrfService:
    """Issues and verifies CSRF tokens.

    Tokens can be replayed until they expire; nothing records their use.
    """

    secret: str
    clock: Callable[[], int] = field(default=_now_ms)

    def issue(self, session_id: str) -> str:
        """Return a one-hour token for ``session_id``."""
        now = self.clock()
        claims = {
            "session_id": session_id,
            "purpose": CSRF_PURPOSE,
            "timestamp": now,
            "exp": (now + CSRF_TTL_MS) // 1000,
        }
        return jwt.encode(claims, self.secret, algorithm=JWT_ALGORITHM)

    def verify(self, token: str | None, session_id: str) -> None:
        """Raise ``CsrfError`` unless ``token`` is valid for ``session_id``."""
        if not token or not token.strip():
            raise CsrfError("csrfTokenRequired")
        try:
            claims = jwt.decode(
                token.strip(),
                self.secret,
                algorithms=[JWT_ALGORITHM],
                options={"require": ["exp"]},
            )
        except jwt.InvalidTokenError as exc:
            logger.warning("CSRF token rejected: %s", exc)
            raise CsrfError("invalidCsrfToken") from exc

        if claims.get("purpose") != CSRF_PURPOSE:
            raise CsrfError("invalidCsrfToken")
        if claims.get("session_id") != session_id:
            logger.warning("CSRF token bound to a different session")
            raise CsrfError("invalidCsrfToken")
