from fastapi import Depends, Request
from sqlalchemy.orm import Session

from lawoffice.auth.authenticators import Authenticator, Identity
from lawoffice.auth.sessions import SessionStore
from lawoffice.database import get_db
from lawoffice.storage import DatabaseStorage, Storage


def get_storage(db: Session = Depends(get_db)) -> Storage:
    return DatabaseStorage(db)


def get_session_store(request: Request) -> SessionStore:
    return request.app.state.session_store


def get_authenticator(request: Request) -> Authenticator:
    return request.app.state.authenticator


def require_auth(
    request: Request,
    storage: Storage = Depends(get_storage),
    authenticator: Authenticator = Depends(get_authenticator),
) -> Identity:
    identity = authenticator.authenticate(request, storage)
    request.state.user = identity
    return identity
