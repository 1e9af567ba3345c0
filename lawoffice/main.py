import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from lawoffice.auth.authenticators import build_authenticator
from lawoffice.auth.sessions import MemorySessionStore, SessionStore
from lawoffice.core import config
from lawoffice.database import init_database
from lawoffice.routes import article_routes, auth_routes, client_routes, page_routes

logger = logging.getLogger(__name__)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={'message': exc.detail},
        headers=getattr(exc, 'headers', None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [{'loc': list(error.get('loc', ())), 'msg': error.get('msg', '')} for error in exc.errors()]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={'message': 'Invalid request data', 'errors': errors},
    )


async def database_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception('Database error on %s %s', request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={'message': 'Database unavailable.'},
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception('Unhandled error on %s %s', request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={'message': 'Server error'},
    )


def create_app(session_store: SessionStore | None = None, auth_backend: str | None = None) -> FastAPI:
    app = FastAPI(title='Law Office Website API')

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=['*'],
        allow_headers=['*'],
    )

    if session_store is None:
        session_store = MemorySessionStore()
    app.state.session_store = session_store
    app.state.authenticator = build_authenticator(auth_backend or config.AUTH_BACKEND, session_store)

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, database_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    @app.on_event('startup')
    def initialize() -> None:
        config.validate_runtime_config()
        try:
            init_database()
        except SQLAlchemyError:
            logger.exception('Database initialization failed. Check DATABASE_URL.')

    @app.get('/api/health')
    def health():
        return {'status': 'Law Office API Running'}

    app.include_router(auth_routes.router, prefix='/api')
    app.include_router(article_routes.router, prefix='/api')
    app.include_router(page_routes.router, prefix='/api')
    # Must stay last: it answers every remaining GET.
    app.include_router(client_routes.router)

    return app


app = create_app()
