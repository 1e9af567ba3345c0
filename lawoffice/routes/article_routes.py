import logging
import re
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, field_validator

from lawoffice.auth.authenticators import Identity
from lawoffice.auth.dependencies import get_storage, require_auth
from lawoffice.storage import ConflictError, NotFoundError, Storage

router = APIRouter(tags=['articles'])

logger = logging.getLogger(__name__)

SLUG_PATTERN = re.compile(r'^[a-z0-9]+(?:-[a-z0-9]+)*$')
MAX_SLUG_LENGTH = 160
MAX_TITLE_LENGTH = 200
MAX_EXCERPT_LENGTH = 500


def normalize_slug(value: str) -> str:
    normalized = value.strip().lower()
    if not normalized:
        raise ValueError('Slug is required.')
    if len(normalized) > MAX_SLUG_LENGTH:
        raise ValueError(f'Slug must be {MAX_SLUG_LENGTH} characters or fewer.')
    if not SLUG_PATTERN.match(normalized):
        raise ValueError('Slug may only contain lowercase letters, digits and single hyphens.')
    return normalized


def normalize_title(value: str) -> str:
    normalized = value.strip()
    if not normalized:
        raise ValueError('Title is required.')
    if len(normalized) > MAX_TITLE_LENGTH:
        raise ValueError(f'Title must be {MAX_TITLE_LENGTH} characters or fewer.')
    return normalized


def normalize_content(value: str) -> str:
    if not value.strip():
        raise ValueError('Content is required.')
    return value


def normalize_excerpt(value: str | None) -> str | None:
    if value is None:
        return None

    normalized = value.strip()
    if not normalized:
        return None

    if len(normalized) > MAX_EXCERPT_LENGTH:
        raise ValueError(f'Excerpt must be {MAX_EXCERPT_LENGTH} characters or fewer.')

    return normalized


class ArticleCreate(BaseModel):
    title: str
    slug: str
    excerpt: str | None = None
    content: str
    published: bool = False

    @field_validator('title')
    @classmethod
    def validate_title(cls, value: str) -> str:
        return normalize_title(value)

    @field_validator('slug')
    @classmethod
    def validate_slug(cls, value: str) -> str:
        return normalize_slug(value)

    @field_validator('excerpt')
    @classmethod
    def validate_excerpt(cls, value: str | None) -> str | None:
        return normalize_excerpt(value)

    @field_validator('content')
    @classmethod
    def validate_content(cls, value: str) -> str:
        return normalize_content(value)


class ArticleUpdate(BaseModel):
    """Partial update: only the fields present in the body are applied."""

    title: str | None = None
    slug: str | None = None
    excerpt: str | None = None
    content: str | None = None
    published: bool | None = None

    @field_validator('title', 'slug', 'content', 'published')
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError('Field cannot be null.')
        return value

    @field_validator('title')
    @classmethod
    def validate_title(cls, value: str) -> str:
        return normalize_title(value)

    @field_validator('slug')
    @classmethod
    def validate_slug(cls, value: str) -> str:
        return normalize_slug(value)

    @field_validator('excerpt')
    @classmethod
    def validate_excerpt(cls, value: str | None) -> str | None:
        return normalize_excerpt(value)

    @field_validator('content')
    @classmethod
    def validate_content(cls, value: str) -> str:
        return normalize_content(value)


class ArticleResponse(BaseModel):
    id: int
    slug: str
    title: str
    excerpt: str | None = None
    content: str
    published: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


def _article_not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail='Article not found')


@router.get('/articles', response_model=list[ArticleResponse])
def list_published_articles(storage: Storage = Depends(get_storage)):
    return storage.get_published_articles()


@router.get('/articles/{slug}', response_model=ArticleResponse)
def get_article_by_slug(slug: str, storage: Storage = Depends(get_storage)):
    article = storage.get_article_by_slug(slug.strip().lower())
    if article is None or not article.published:
        raise _article_not_found()
    return article


@router.get('/admin/articles', response_model=list[ArticleResponse])
def list_all_articles(
    _identity: Identity = Depends(require_auth),
    storage: Storage = Depends(get_storage),
):
    return storage.get_articles()


@router.post('/admin/articles', response_model=ArticleResponse)
def create_article(
    payload: ArticleCreate,
    identity: Identity = Depends(require_auth),
    storage: Storage = Depends(get_storage),
):
    try:
        article = storage.create_article(payload.model_dump())
    except ConflictError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail='Slug already exists') from exc

    logger.info('Article %s (%s) created by %s', article.id, article.slug, identity.username)
    return article


@router.patch('/admin/articles/{article_id}', response_model=ArticleResponse)
def update_article(
    article_id: int,
    payload: ArticleUpdate,
    identity: Identity = Depends(require_auth),
    storage: Storage = Depends(get_storage),
):
    changes = payload.model_dump(exclude_unset=True)
    try:
        article = storage.update_article(article_id, changes)
    except NotFoundError as exc:
        raise _article_not_found() from exc
    except ConflictError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail='Slug already exists') from exc

    logger.info('Article %s updated by %s (fields: %s)', article_id, identity.username, ', '.join(sorted(changes)))
    return article


@router.delete('/admin/articles/{article_id}', status_code=status.HTTP_204_NO_CONTENT)
def delete_article(
    article_id: int,
    identity: Identity = Depends(require_auth),
    storage: Storage = Depends(get_storage),
):
    if storage.delete_article(article_id):
        logger.info('Article %s deleted by %s', article_id, identity.username)
