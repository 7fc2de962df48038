"""
File-backed session store for staff logins.
One JSON file per session token; expiry is enforced whenever a session is read.
"""
import json
import logging
import secrets
import threading
import time
from pathlib import Path
from typing import Callable, Optional

from shared.constants import SESSION_TTL_SEC
from shared.models import SessionData

logger = logging.getLogger(__name__)

_SESSION_SUFFIX = ".json"


class SessionStore:
    def __init__(self, directory: Path, ttl_sec: int = SESSION_TTL_SEC,
                 clock: Callable[[], float] = time.time):
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)
        self.ttl_sec = ttl_sec
        self._clock = clock
        self._lock = threading.Lock()

    def _path(self, token: str) -> Path:
        return self.directory / f"{token}{_SESSION_SUFFIX}"

    @staticmethod
    def _valid_token(token: Optional[str]) -> bool:
        # token_urlsafe output only; anything else could escape the directory
        return bool(token) and all(c.isalnum() or c in "-_" for c in token)

    def create(self, user_id: int, user_email: str) -> SessionData:
        """Start a new session and persist it."""
        now = self._clock()
        session = SessionData(
            token=secrets.token_urlsafe(32),
            user_id=user_id,
            user_email=user_email,
            created_at=now,
            expires_at=now + self.ttl_sec,
        )
        with self._lock:
            self._path(session.token).write_text(json.dumps(session.to_dict()), encoding="utf-8")
        return session

    def get(self, token: Optional[str]) -> Optional[SessionData]:
        """Return the live session for a token, dropping it if it has expired."""
        if not self._valid_token(token):
            return None
        path = self._path(token)
        with self._lock:
            if not path.exists():
                return None
            try:
                session = SessionData.from_dict(json.loads(path.read_text(encoding="utf-8")))
            except (json.JSONDecodeError, KeyError, TypeError, ValueError, OSError):
                logger.warning("Discarding unreadable session file %s", path.name)
                path.unlink(missing_ok=True)
                return None
            if session.is_expired(self._clock()):
                path.unlink(missing_ok=True)
                return None
            return session

    def destroy(self, token: Optional[str]) -> None:
        if not self._valid_token(token):
            return
        with self._lock:
            self._path(token).unlink(missing_ok=True)

    def purge_expired(self) -> int:
        """Remove every expired or unreadable session file. Returns how many went."""
        removed = 0
        now = self._clock()
        with self._lock:
            for path in self.directory.glob(f"*{_SESSION_SUFFIX}"):
                try:
                    session = SessionData.from_dict(json.loads(path.read_text(encoding="utf-8")))
                    expired = session.is_expired(now)
                except (json.JSONDecodeError, KeyError, TypeError, ValueError, OSError):
                    expired = True
                if expired:
                    path.unlink(missing_ok=True)
                    removed += 1
        return removed
