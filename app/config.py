"""
Application configuration. Loads from environment variables.
Secrets and sensitive config must never be hardcoded.
"""

import logging
import os
import secrets

from dotenv import load_dotenv

load_dotenv()
from functools import lru_cache

logger = logging.getLogger(__name__)

# Placeholder secrets shipped in old .env examples; never acceptable in production.
INSECURE_SECRETS = frozenset({"", "your-secret-key", "changeme", "secret"})

DEFAULT_CORS_ORIGINS = (
    "http://localhost:3000",
    "http://localhost:3001",
    "http://localhost:5001",
)


@lru_cache(maxsize=1)
def get_settings() -> "Settings":
    """Return cached settings instance."""
    return Settings()


class Settings:
    """Application settings loaded from environment."""

    # App
    app_name: str = "Tinvest"
    debug: bool = False
    environment: str = "development"
    log_level: str = "INFO"

    # Database (postgresql+psycopg for psycopg3; use postgresql:// for psycopg2)
    database_url: str = "postgresql+psycopg://localhost:5432/tinvest"
    db_connect_timeout: int = 10  # seconds

    # Security
    secret_key: str = ""
    secret_key_generated: bool = False
    access_token_expire_days: int = 7
    bcrypt_rounds: int = 12

    # Google sign-in
    google_client_id: str = ""
    google_certs_url: str = "https://www.googleapis.com/oauth2/v3/certs"
    google_timeout: float = 10.0

    # Front-end origins allowed by CORS
    cors_origins: list[str] = list(DEFAULT_CORS_ORIGINS)

    def __init__(self) -> None:
        self.app_name = os.getenv("APP_NAME", self.app_name)
        self.debug = os.getenv("DEBUG", "false").lower() == "true"
        self.environment = os.getenv("ENVIRONMENT", self.environment).lower()
        self.log_level = os.getenv("LOG_LEVEL", self.log_level).upper()

        default_user = os.getenv("PGUSER") or os.getenv("USER") or "postgres"
        default_url = (
            f"postgresql+psycopg://{default_user}:"
            f"{os.getenv('PGPASSWORD', '')}@"
            f"{os.getenv('PGHOST', 'localhost')}:"
            f"{os.getenv('PGPORT', '5432')}/"
            f"{os.getenv('PGDATABASE', 'tinvest')}"
        )
        raw_url = os.getenv("DATABASE_URL", default_url)
        # Ensure psycopg3 driver if URL uses generic postgresql://
        if raw_url.startswith("postgresql://") and not raw_url.startswith("postgresql+psycopg"):
            raw_url = raw_url.replace("postgresql://", "postgresql+psycopg://", 1)
        self.database_url = raw_url
        self.db_connect_timeout = int(os.getenv("DB_CONNECT_TIMEOUT", str(self.db_connect_timeout)))

        # SECRET_KEY wins; JWT_SECRET kept for deployments configured for the old Node server
        self.secret_key = os.getenv("SECRET_KEY") or os.getenv("JWT_SECRET") or ""
        self.secret_key_generated = False
        # Throwaway key for local debugging only; each worker process would get its own
        if not self.secret_key and self.debug and not self.is_production:
            self.secret_key = secrets.token_urlsafe(32)
            self.secret_key_generated = True
            logger.warning(
                "SECRET_KEY is not set; DEBUG is on so using a random per-process key. "
                "Issued tokens will not survive a restart."
            )
        self.access_token_expire_days = int(
            os.getenv("ACCESS_TOKEN_EXPIRE_DAYS", str(self.access_token_expire_days))
        )
        self.bcrypt_rounds = int(os.getenv("BCRYPT_ROUNDS", str(self.bcrypt_rounds)))

        self.google_client_id = os.getenv("GOOGLE_CLIENT_ID", "")
        self.google_certs_url = os.getenv("GOOGLE_CERTS_URL", self.google_certs_url)
        self.google_timeout = float(os.getenv("GOOGLE_TIMEOUT", str(self.google_timeout)))

        # Comma-separated origins; empty = built-in local development origins
        _origins = os.getenv("CORS_ORIGINS", "").strip()
        if _origins:
            self.cors_origins = [o.strip().rstrip("/") for o in _origins.split(",") if o.strip()]
        else:
            self.cors_origins = list(DEFAULT_CORS_ORIGINS)

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def validate_secret_key(self) -> None:
        """Refuse to start without a signing secret, or with a weak one in production."""
        if not self.secret_key:
            raise RuntimeError(
                "SECRET_KEY (or JWT_SECRET) must be set; set DEBUG=true for a throwaway key"
            )
        if not self.is_production:
            return
        if self.secret_key in INSECURE_SECRETS:
            raise RuntimeError("SECRET_KEY must be set to a strong value in production")
        if len(self.secret_key) < 32:
            raise RuntimeError("SECRET_KEY must be at least 32 characters in production")
