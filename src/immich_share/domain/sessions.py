"""Domain models for browser sessions."""

from dataclasses import dataclass, field


@dataclass
class SessionData:
    """Identity and album state carried inside the signed session token.

    Timestamps are epoch milliseconds. The token is the only durable copy
    of this record, so every change has to be re-signed and written back
    to the cookie.
    """

    session_id: str
    user_name: str
    created_at: int
    expires_at: int
    album_ids: list[str] = field(default_factory=list)

    def to_claims(self) -> dict[str, object]:
        """Return the JWT claims for this session."""
        return {
            "session_id": self.session_id,
            "user_name": self.user_name,
            "album_ids": list(self.album_ids),
            "created_at": self.created_at,
            "expires_at": self.expires_at,
        }

    @classmethod
    def from_claims(cls, claims: dict[str, object]) -> "SessionData":
        """Build a session from decoded claims.

        Raises ``ValueError`` when a claim is missing or has the wrong type.
        """
        session_id = claims.get("session_id")
        user_name = claims.get("user_name")
        album_ids = claims.get("album_ids")
        created_at = claims.get("created_at")
        expires_at = claims.get("expires_at")
        if not isinstance(session_id, str) or not session_id:
            raise ValueError("session_id claim missing")
        if not isinstance(user_name, str):
            raise ValueError("user_name claim missing")
        if not isinstance(album_ids, list) or not all(
            isinstance(album_id, str) for album_id in album_ids
        ):
            raise ValueError("album_ids claim malformed")
        if not isinstance(created_at, int) or not isinstance(expires_at, int):
            raise ValueError("timestamp claims malformed")
        return cls(
            session_id=session_id,
            user_name=user_name,
            created_at=created_at,
            expires_at=expires_at,
            album_ids=list(dict.fromkeys(album_ids)),
        )
