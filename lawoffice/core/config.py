import os

from dotenv import load_dotenv


load_dotenv()


def _get_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _get_list(value: str | None, default: list[str]) -> list[str]:
    if not value:
        return default
    return [item.strip() for item in value.split(",") if item.strip()]

APP_ENV = os.getenv("APP_ENV", "development")
IS_PRODUCTION = APP_ENV.strip().lower() == "production"

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./lawoffice.db")

JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "change-me")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_EXPIRES_MINUTES = int(os.getenv("JWT_EXPIRES_MINUTES", "60"))

SESSION_SECRET_KEY = os.getenv("SESSION_SECRET", "change-me")
SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "lawoffice_session")
SESSION_MAX_AGE_SECONDS = int(os.getenv("SESSION_MAX_AGE_SECONDS", "86400"))
SESSION_COOKIE_SECURE = _get_bool(os.getenv("SESSION_COOKIE_SECURE"), default=IS_PRODUCTION)

AUTH_BACKENDS = ("bearer", "session")
AUTH_BACKEND = os.getenv("AUTH_BACKEND", "bearer").strip().lower()

BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "10"))

CORS_ALLOWED_ORIGINS = _get_list(os.getenv("CORS_ALLOWED_ORIGINS"), ["http://localhost:5173"])

FRONTEND_DIST_DIR = os.getenv("FRONTEND_DIST_DIR", "")

def validate_runtime_config() -> None:
    if AUTH_BACKEND not in AUTH_BACKENDS:
        raise RuntimeError(f"AUTH_BACKEND must be one of {', '.join(AUTH_BACKENDS)}.")
    if IS_PRODUCTION and JWT_SECRET_KEY == "change-me":
        raise RuntimeError("JWT_SECRET_KEY must be set in production.")
    if IS_PRODUCTION and SESSION_SECRET_KEY == "change-me":
        raise RuntimeError("SESSION_SECRET must be set in production.")
