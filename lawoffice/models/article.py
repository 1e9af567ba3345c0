"""Article model definitions."""

from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text
from lawoffice.database import Base
from lawoffice.models.user import _utcnow


class Article(Base):
    """Represents an article written by the office."""
    __tablename__ = "articles"

    id = Column(Integer, primary_key=True, index=True)
    slug = Column(String(160), unique=True, index=True, nullable=False)
    title = Column(String(200), nullable=False)
    excerpt = Column(String(500))
    content = Column(Text, nullable=False)
    published = Column(Boolean, default=False, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)
