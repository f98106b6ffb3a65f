"""Signed, client-held browser sessions."""

import logging
import secrets
import time
from collections.abc import Callable
from dataclasses import dataclass, field

import jwt

from immich_share.domain.sessions import SessionData

logger = logging.getLogger(__name__)

SESSION_TTL_MS = 7 * 24 * 60 * 60 * 1000
SESSION_TTL_SECONDS = SESSION_TTL_MS // 1000
JWT_ALGORITHM = "HS256"


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class SessionService:
    """Issues, verifies and updates session tokens.

    There is no server-side store: the token carries the whole session and
    stays valid until ``expires_at``.
    """

    secret: str
    clock: Callable[[], int] = field(default=_now_ms)

    def create_session(self, user_name: str) -> str:
        """Create a session for ``user_name`` and return its signed token."""
        now = self.clock()
        session = SessionData(
            session_id=secrets.token_urlsafe(16),
            user_name=user_name.strip(),
            created_at=now,
            expires_at=now + SESSION_TTL_MS,
        )
        return self._sign(session)

    def verify_session(self, token: str) -> SessionData | None:
        """Return the session in ``token``, or None if it is not valid."""
        try:
            claims = jwt.decode(
                token,
                self.secret,
                algorithms=[JWT_ALGORITHM],
                options={"require": ["exp"]},
            )
            session = SessionData.from_claims(claims)
        except jwt.InvalidTokenError as exc:
            logger.warning("Session verification failed: %s", exc)
            return None
        except ValueError as exc:
            logger.warning("Session payload malformed: %s", exc)
            return None

        if session.expires_at < self.clock():
            return None
        return session

    def add_album(self, token: str, session_id: str, album_id: str) -> str | None:
        """Record ``album_id`` in the session and return the re-signed token.

        Returns None when the token is invalid, belongs to another session,
        or already lists the album.
        """
        session = self.verify_session(token)
        if session is None or session.session_id != session_id:
            return None
        if album_id in session.album_ids:
            return None
        session.album_ids.append(album_id)
        return self._sign(session)

    def _sign(self, session: SessionData) -> str:
        # The envelope exp restarts on every signing; expires_at does not.
        exp_seconds = (self.clock() + SESSION_TTL_MS) // 1000
        claims = {**session.to_claims(), "exp": exp_seconds}
        return jwt.encode(claims, self.secret, algorithm=JWT_ALGORITHM)
