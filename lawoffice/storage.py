from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from lawoffice.models.article import Article
from lawoffice.models.page import Page
from lawoffice.models.user import User

logger = logging.getLogger(__name__)


class StorageError(RuntimeError):
    pass


class ConflictError(StorageError):
    pass


class NotFoundError(StorageError):
    pass


class Storage:
    """Persistence boundary used by the route handlers."""

    def get_user(self, user_id: int) -> User | None:
        raise NotImplementedError

    def get_user_by_username(self, username: str) -> User | None:
        raise NotImplementedError

    def create_user(self, username: str, hashed_password: str) -> User:
        raise NotImplementedError

    def update_user_password(self, user_id: int, hashed_password: str) -> User:
        raise NotImplementedError

    def get_articles(self) -> list[Article]:
        raise NotImplementedError

    def get_published_articles(self) -> list[Article]:
        raise NotImplementedError

    def get_article(self, article_id: int) -> Article | None:
        raise NotImplementedError

    def get_article_by_slug(self, slug: str) -> Article | None:
        raise NotImplementedError

    def create_article(self, data: dict[str, Any]) -> Article:
        raise NotImplementedError

    def update_article(self, article_id: int, changes: dict[str, Any]) -> Article:
        raise NotImplementedError

    def delete_article(self, article_id: int) -> bool:
        raise NotImplementedError

    def get_pages(self) -> list[Page]:
        raise NotImplementedError

    def get_page(self, key: str) -> Page | None:
        raise NotImplementedError

    def save_page(self, key: str, title: str, content: dict[str, Any]) -> Page:
        raise NotImplementedError


class DatabaseStorage(Storage):
    def __init__(self, db: Session):
        self.db = db

    def _commit(self, conflict_message: str) -> None:
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            raise ConflictError(conflict_message) from exc

    def get_user(self, user_id: int) -> User | None:
        return self.db.get(User, user_id)

    def get_user_by_username(self, username: str) -> User | None:
        return self.db.query(User).filter(User.username == username).first()

    def create_user(self, username: str, hashed_password: str) -> User:
        user = User(username=username, hashed_password=hashed_password)
        self.db.add(user)
        self._commit("Username already exists")
        self.db.refresh(user)
        return user

    def update_user_password(self, user_id: int, hashed_password: str) -> User:
        user = self.get_user(user_id)
        if user is None:
            raise NotFoundError("User not found")
        user.hashed_password = hashed_password
        self.db.commit()
        self.db.refresh(user)
        return user

    def get_articles(self) -> list[Article]:
        return self.db.query(Article).order_by(Article.created_at.desc(), Article.id.desc()).all()

    def get_published_articles(self) -> list[Article]:
        return (
            self.db.query(Article)
            .filter(Article.published.is_(True))
            .order_by(Article.created_at.desc(), Article.id.desc())
            .all()
        )

    def get_article(self, article_id: int) -> Article | None:
        return self.db.get(Article, article_id)

    def get_article_by_slug(self, slug: str) -> Article | None:
        return self.db.query(Article).filter(Article.slug == slug).first()

    def create_article(self, data: dict[str, Any]) -> Article:
        article = Article(**data)
        self.db.add(article)
        self._commit("Slug already exists")
        self.db.refresh(article)
        return article

    def update_article(self, article_id: int, changes: dict[str, Any]) -> Article:
        article = self.get_article(article_id)
        if article is None:
            raise NotFoundError("Article not found")
        for field, value in changes.items():
            setattr(article, field, value)
        self._commit("Slug already exists")
        self.db.refresh(article)
        return article

    def delete_article(self, article_id: int) -> bool:
        article = self.get_article(article_id)
        if article is None:
            return False
        self.db.delete(article)
        self.db.commit()
        return True

    def get_pages(self) -> list[Page]:
        return self.db.query(Page).order_by(Page.key).all()

    def get_page(self, key: str) -> Page | None:
        return self.db.get(Page, key)

    def save_page(self, key: str, title: str, content: dict[str, Any]) -> Page:
        page = self.get_page(key)
        if page is None:
            page = Page(key=key, title=title, content=content)
            self.db.add(page)
        else:
            page.title = title
            page.content = content
        self.db.commit()
        self.db.refresh(page)
        return page
