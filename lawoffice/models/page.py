"""Editable page content definitions."""

from sqlalchemy import JSON, Column, DateTime, String
from lawoffice.database import Base
from lawoffice.models.user import _utcnow

PAGE_KEYS = ("home", "office", "lawyer", "practice-areas")


class Page(Base):
    """Holds the editable sections of one public page."""
    __tablename__ = "pages"

    key = Column(String(32), primary_key=True)
    title = Column(String(200), nullable=False)
    content = Column(JSON, nullable=False, default=dict)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)
