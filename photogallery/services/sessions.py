"""Server-side session store: opaque token -> authenticated identity."""

import secrets
import threading
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from photogallery.schemas.auth import Identity

SESSION_TOKEN_BYTES = 32


@dataclass(frozen=True)
class SessionRecord:
    identity: Identity
    created_at: datetime
    expires_at: datetime


class SessionStore:
    """In-memory sessions. Lost on restart."""

    def __init__(self, ttl: timedelta) -> None:
        self.ttl = ttl
        self._sessions: dict[str, SessionRecord] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._sessions)

    def create(self, identity: Identity) -> str:
        """Start a session for identity and return its token."""
        now = datetime.now(UTC)
        token = secrets.token_urlsafe(SESSION_TOKEN_BYTES)
        record = SessionRecord(identity=identity, created_at=now, expires_at=now + self.ttl)
        with self._lock:
            self._purge_expired(now)
            self._sessions[token] = record
        return token

    def get(self, token: str | None) -> Identity | None:
        """Resolve a token to its identity; unknown or expired tokens resolve to None."""
        if not token:
            return None
        record = self._sessions.get(token)
        if record is None:
            return None
        if record.expires_at <= datetime.now(UTC):
            self.destroy(token)
            return None
        return record.identity

    def destroy(self, token: str | None) -> None:
        """Remove a session. Unknown or missing tokens are ignored."""
        if not token:
            return
        with self._lock:
            self._sessions.pop(token, None)

    def _purge_expired(self, now: datetime) -> None:
        expired = [t for t, r in self._sessions.items() if r.expires_at <= now]
        for token in expired:
            del self._sessions[token]
