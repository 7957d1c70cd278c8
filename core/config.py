"""
core/config.py -- TaskDesk settings, read once from the environment.

Every environment read goes through get_settings(); nothing else touches
os.environ. The cached Settings instance fixes the token signing key and the
token lifetime for the life of the process, which is what lets TokenCodec be
built once and shared.

Settings and their env vars:
  DEBUG                 dev mode; a missing SECRET_KEY is generated, not fatal
  SECRET_KEY            HS256 signing key, 32+ characters
  TOKEN_EXPIRE_SECONDS  lifetime of every issued token, positive
  DATABASE_URL          SQLAlchemy URL shared by AccountStore and TodoStore
  SIGNIN_RATE_LIMIT     slowapi limit string for POST /auth/signin
  CORS_ORIGINS          browser origins allowed by CORSMiddleware

A bad SECRET_KEY or TOKEN_EXPIRE_SECONDS fails Settings validation. The API
lifespan builds the codec before serving, so that failure stops startup.

Layer rule: core/ imports nothing from api/, auth/ or todos/.
"""

import logging
import secrets
from functools import lru_cache

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger("taskdesk.config")

MIN_SECRET_KEY_LENGTH = 32


class Settings(BaseSettings):
    """TaskDesk settings from environment variables and an optional .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # Core
    # ------------------------------------------------------------------

    debug: bool = False
    # "" means unset; resolve_token_settings replaces it or raises.
    secret_key: str = ""
    database_url: str = "sqlite:///./taskdesk.db"

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    # Fixed lifetime of every issued bearer token.
    token_expire_seconds: int = 3600
    signin_rate_limit: str = "10/minute"

    # ------------------------------------------------------------------
    # HTTP
    # ------------------------------------------------------------------

    cors_origins: list[str] = ["http://localhost", "http://localhost:3000", "http://127.0.0.1"]

    # ------------------------------------------------------------------
    # Validators
    # ------------------------------------------------------------------

    @model_validator(mode="after")
    def resolve_token_settings(self) -> "Settings":
        """Resolve the signing key and check the token lifetime.

        An unset key is generated in DEBUG mode (tokens then die with the
        process) and fatal otherwise. A short key or a non-positive lifetime
        is fatal in every mode.
        """
        if not self.secret_key:
            if self.debug:
                self.secret_key = secrets.token_hex(32)
                logger.warning("DEBUG: generated a throwaway SECRET_KEY; issued tokens end with this process.")
            else:
                raise ValueError(
                    "SECRET_KEY is required unless DEBUG=true. "
                    f"Set a key of at least {MIN_SECRET_KEY_LENGTH} characters to sign TaskDesk tokens."
                )
        if len(self.secret_key) < MIN_SECRET_KEY_LENGTH:
            raise ValueError(f"SECRET_KEY must be at least {MIN_SECRET_KEY_LENGTH} characters.")
        if self.token_expire_seconds <= 0:
            raise ValueError("TOKEN_EXPIRE_SECONDS must be positive.")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide Settings. Clear the cache to re-read the environment."""
    return Settings()
