"""Request authentication.

Protected routes depend on exactly one :class:`Authenticator`, picked at
deployment time through ``AUTH_BACKEND``:

* ``bearer`` verifies the JWT from the ``Authorization`` header without
  touching storage;
* ``session`` resolves the signed session cookie through the session store
  and loads the user from storage.
"""

import jwt
from fastapi import HTTPException, Request, status
from fastapi.security.utils import get_authorization_scheme_param
from pydantic import BaseModel

from lawoffice.auth import jwt_handler
from lawoffice.auth.sessions import SessionStore, unsign_session_id
from lawoffice.core import config
from lawoffice.storage import Storage


class Identity(BaseModel):
    id: int
    username: str


class Authenticator:
    name = ""

    def authenticate(self, request: Request, storage: Storage) -> Identity:
        raise NotImplementedError


class BearerAuthenticator(Authenticator):
    name = "bearer"

    @staticmethod
    def _unauthorized(detail: str) -> HTTPException:
        return HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )

    def authenticate(self, request: Request, storage: Storage) -> Identity:
        scheme, token = get_authorization_scheme_param(request.headers.get("Authorization"))
        if not token or scheme.lower() != "bearer":
            raise self._unauthorized("No token provided")

        try:
            payload = jwt_handler.decode_access_token(token)
            return Identity(id=int(payload["sub"]), username=payload["username"])
        except (jwt.PyJWTError, KeyError, TypeError, ValueError) as exc:
            raise self._unauthorized("Invalid token") from exc


class SessionAuthenticator(Authenticator):
    name = "session"

    def __init__(self, store: SessionStore):
        self.store = store

    def authenticate(self, request: Request, storage: Storage) -> Identity:
        session_id = unsign_session_id(request.cookies.get(config.SESSION_COOKIE_NAME))
        record = self.store.get(session_id) if session_id else None
        if record is None:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")

        user = storage.get_user(record.user_id)
        if user is None:
            self.store.delete(session_id)
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
        return Identity(id=user.id, username=user.username)


def build_authenticator(backend: str, store: SessionStore) -> Authenticator:
    if backend == BearerAuthenticator.name:
        return BearerAuthenticator()
    if backend == SessionAuthenticator.name:
        return SessionAuthenticator(store)
    raise ValueError(f"Unknown auth backend: {backend!r}")
