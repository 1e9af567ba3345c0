"""Server-side sessions addressed by a signed cookie.

The store is created by the application factory and reached through
``request.app.state.session_store``; anything implementing
:class:`SessionStore` can be passed in instead of the in-memory default.
Sessions held in :class:`MemorySessionStore` do not survive a restart.
"""

import secrets
import time
from dataclasses import dataclass
from threading import Lock
from typing import Callable

from itsdangerous import BadSignature, Signer

from lawoffice.core import config

_SIGNER_SALT = "lawoffice.session"


@dataclass(frozen=True)
class SessionRecord:
    user_id: int
    expires_at: float


class SessionStore:
    def create(self, user_id: int) -> str:
        raise NotImplementedError

    def get(self, session_id: str) -> SessionRecord | None:
        raise NotImplementedError

    def delete(self, session_id: str) -> None:
        raise NotImplementedError


class MemorySessionStore(SessionStore):
    def __init__(self, max_age_seconds: int | None = None, clock: Callable[[], float] = time.time):
        self.max_age_seconds = max_age_seconds or config.SESSION_MAX_AGE_SECONDS
        self._clock = clock
        self._records: dict[str, SessionRecord] = {}
        self._lock = Lock()

    def __len__(self) -> int:
        return len(self._records)

    def _prune(self, now: float) -> None:
        expired = [sid for sid, record in self._records.items() if record.expires_at <= now]
        for sid in expired:
            del self._records[sid]

    def create(self, user_id: int) -> str:
        session_id = secrets.token_urlsafe(32)
        now = self._clock()
        with self._lock:
            self._prune(now)
            self._records[session_id] = SessionRecord(user_id=user_id, expires_at=now + self.max_age_seconds)
        return session_id

    def get(self, session_id: str) -> SessionRecord | None:
        with self._lock:
            record = self._records.get(session_id)
            if record is None:
                return None
            if record.expires_at <= self._clock():
                del self._records[session_id]
                return None
            return record

    def delete(self, session_id: str) -> None:
        with self._lock:
            self._records.pop(session_id, None)


def _signer() -> Signer:
    return Signer(config.SESSION_SECRET_KEY, salt=_SIGNER_SALT)


def sign_session_id(session_id: str) -> str:
    return _signer().sign(session_id).decode("utf-8")


def unsign_session_id(cookie_value: str | None) -> str | None:
    if not cookie_value:
        return None
    try:
        return _signer().unsign(cookie_value).decode("utf-8")
    except BadSignature:
        return None
