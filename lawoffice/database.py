from threading import Lock

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from lawoffice.core import config


def _engine_options(url: str) -> dict:
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_pre_ping": True}


engine = create_engine(config.DATABASE_URL, **_engine_options(config.DATABASE_URL))

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

Base = declarative_base()

_schema_lock = Lock()
_schema_created = False


def init_database(bind=None) -> None:
    """Create the tables once per process (or on every call for an explicit bind)."""
    global _schema_created

    # Registers the models on Base.metadata.
    from lawoffice.models import article, page, user  # noqa: F401

    if bind is not None:
        Base.metadata.create_all(bind=bind)
        return

    if _schema_created:
        return

    with _schema_lock:
        if _schema_created:
            return
        Base.metadata.create_all(bind=engine)
        _schema_created = True


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
