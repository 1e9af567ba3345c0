import logging
from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, field_validator

from lawoffice.auth.authenticators import Identity
from lawoffice.auth.dependencies import get_storage, require_auth
from lawoffice.models.page import PAGE_KEYS
from lawoffice.routes.article_routes import normalize_title
from lawoffice.storage import Storage

router = APIRouter(tags=['pages'])

logger = logging.getLogger(__name__)


class PageContentRequest(BaseModel):
    title: str
    content: dict[str, Any]

    @field_validator('title')
    @classmethod
    def validate_title(cls, value: str) -> str:
        return normalize_title(value)


class PageResponse(BaseModel):
    key: str
    title: str
    content: dict[str, Any]
    updated_at: datetime

    class Config:
        from_attributes = True


def known_page_key(key: str) -> str:
    if key not in PAGE_KEYS:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Page not found')
    return key


@router.get('/pages/{key}', response_model=PageResponse)
def get_page(key: str = Depends(known_page_key), storage: Storage = Depends(get_storage)):
    page = storage.get_page(key)
    if page is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Page not found')
    return page


@router.get('/admin/pages', response_model=list[PageResponse])
def list_pages(
    _identity: Identity = Depends(require_auth),
    storage: Storage = Depends(get_storage),
):
    return storage.get_pages()


# known_page_key runs before body validation: unknown keys are 404 whatever the body.
@router.put('/admin/pages/{key}', response_model=PageResponse)
def save_page(
    payload: PageContentRequest,
    identity: Identity = Depends(require_auth),
    key: str = Depends(known_page_key),
    storage: Storage = Depends(get_storage),
):
    page = storage.save_page(key, payload.title, payload.content)
    logger.info('Page %s saved by %s', key, identity.username)
    return page
