import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from pydantic import BaseModel, Field, field_validator

from lawoffice.auth import jwt_handler
from lawoffice.auth.authenticators import Authenticator, Identity, SessionAuthenticator
from lawoffice.auth.dependencies import get_authenticator, get_session_store, get_storage, require_auth
from lawoffice.auth.passwords import hash_password, verify_credentials, verify_password
from lawoffice.auth.sessions import SessionStore, sign_session_id, unsign_session_id
from lawoffice.core import config
from lawoffice.storage import ConflictError, NotFoundError, Storage

router = APIRouter(tags=['auth'])

logger = logging.getLogger(__name__)

MIN_USERNAME_LENGTH = 3
MAX_USERNAME_LENGTH = 64
MIN_PASSWORD_LENGTH = 5
MAX_PASSWORD_LENGTH = 128


def _validate_new_password(value: str) -> str:
    if len(value) < MIN_PASSWORD_LENGTH:
        raise ValueError(f'Password must be at least {MIN_PASSWORD_LENGTH} characters.')
    if len(value) > MAX_PASSWORD_LENGTH:
        raise ValueError(f'Password must be {MAX_PASSWORD_LENGTH} characters or fewer.')
    return value


class RegisterRequest(BaseModel):
    username: str
    password: str

    @field_validator('username')
    @classmethod
    def validate_username(cls, value: str) -> str:
        normalized = value.strip()
        if not MIN_USERNAME_LENGTH <= len(normalized) <= MAX_USERNAME_LENGTH:
            raise ValueError(
                f'Username must be between {MIN_USERNAME_LENGTH} and {MAX_USERNAME_LENGTH} characters.'
            )
        return normalized

    @field_validator('password')
    @classmethod
    def validate_password(cls, value: str) -> str:
        return _validate_new_password(value)


class LoginRequest(BaseModel):
    username: str
    password: str

    @field_validator('username')
    @classmethod
    def strip_username(cls, value: str) -> str:
        return value.strip()


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(alias='currentPassword')
    new_password: str = Field(alias='newPassword')

    class Config:
        populate_by_name = True

    @field_validator('new_password')
    @classmethod
    def validate_new_password(cls, value: str) -> str:
        return _validate_new_password(value)


class MessageResponse(BaseModel):
    message: str


class TokenResponse(BaseModel):
    token: str


def _invalid_credentials() -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail='Invalid credentials')


@router.post('/auth/register', response_model=MessageResponse)
def register(payload: RegisterRequest, storage: Storage = Depends(get_storage)):
    if storage.get_user_by_username(payload.username) is not None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail='Username already exists')

    try:
        user = storage.create_user(payload.username, hash_password(payload.password))
    except ConflictError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail='Username already exists') from exc

    logger.info('Registered user %s (id=%s)', user.username, user.id)
    return {'message': 'User created successfully'}


@router.post('/auth/login', response_model=TokenResponse)
def login(payload: LoginRequest, storage: Storage = Depends(get_storage)):
    user = verify_credentials(storage, payload.username, payload.password)
    if user is None:
        logger.warning('Token login failed for %s', payload.username)
        raise _invalid_credentials()

    token = jwt_handler.create_access_token(user_id=user.id, username=user.username)
    logger.info('Token issued for user %s', user.username)
    return {'token': token}


@router.get('/auth/user', response_model=Identity)
def current_user(identity: Identity = Depends(require_auth)):
    return identity


@router.post('/auth/change-password', response_model=MessageResponse)
def change_password(
    payload: ChangePasswordRequest,
    identity: Identity = Depends(require_auth),
    storage: Storage = Depends(get_storage),
):
    user = storage.get_user(identity.id)
    if user is None or not verify_password(payload.current_password, user.hashed_password):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail='Current password is incorrect')

    try:
        storage.update_user_password(user.id, hash_password(payload.new_password))
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail='Current password is incorrect') from exc

    logger.info('Password changed for user %s', identity.username)
    return {'message': 'Password changed successfully'}


@router.post('/login', response_model=MessageResponse)
def session_login(
    payload: LoginRequest,
    response: Response,
    storage: Storage = Depends(get_storage),
    session_store: SessionStore = Depends(get_session_store),
    authenticator: Authenticator = Depends(get_authenticator),
):
    # Sessions are only created when they can authorize requests.
    if not isinstance(authenticator, SessionAuthenticator):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Session login is disabled')

    user = verify_credentials(storage, payload.username, payload.password)
    if user is None:
        logger.warning('Session login failed for %s', payload.username)
        raise _invalid_credentials()

    session_id = session_store.create(user.id)
    response.set_cookie(
        key=config.SESSION_COOKIE_NAME,
        value=sign_session_id(session_id),
        max_age=config.SESSION_MAX_AGE_SECONDS,
        httponly=True,
        secure=config.SESSION_COOKIE_SECURE,
        samesite='lax',
    )
    logger.info('Session opened for user %s', user.username)
    return {'message': 'Logged in successfully'}


@router.post('/logout', response_model=MessageResponse)
def logout(
    request: Request,
    response: Response,
    session_store: SessionStore = Depends(get_session_store),
):
    session_id = unsign_session_id(request.cookies.get(config.SESSION_COOKIE_NAME))
    if session_id:
        session_store.delete(session_id)
    response.delete_cookie(
        key=config.SESSION_COOKIE_NAME,
        httponly=True,
        secure=config.SESSION_COOKIE_SECURE,
        samesite='lax',
    )
    return {'message': 'Logged out successfully'}
