import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault('DATABASE_URL', 'sqlite://')
os.environ.setdefault('BCRYPT_ROUNDS', '4')

from lawoffice.database import Base, get_db, init_database  # noqa: E402
from lawoffice.main import create_app  # noqa: E402
from lawoffice.storage import DatabaseStorage  # noqa: E402


@pytest.fixture
def db_engine():
    engine = create_engine(
        'sqlite://',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    init_database(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture
def storage(session_factory):
    db = session_factory()
    try:
        yield DatabaseStorage(db)
    finally:
        db.close()


@pytest.fixture
def make_client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    def _make(auth_backend: str = 'bearer', session_store=None) -> TestClient:
        app = create_app(session_store=session_store, auth_backend=auth_backend)
        app.dependency_overrides[get_db] = override_get_db
        return TestClient(app, raise_server_exceptions=False)

    return _make


@pytest.fixture
def client(make_client):
    return make_client()


def register_and_login(client: TestClient, username: str = 'alice', password: str = 'pw123') -> str:
    register = client.post('/api/auth/register', json={'username': username, 'password': password})
    assert register.status_code == 200
    login = client.post('/api/auth/login', json={'username': username, 'password': password})
    assert login.status_code == 200
    return login.json()['token']


@pytest.fixture
def auth_headers(client) -> dict[str, str]:
    return {'Authorization': f'Bearer {register_and_login(client)}'}


@pytest.fixture
def login_as():
    return register_and_login
