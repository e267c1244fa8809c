"""Process configuration, read from the environment once at startup."""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache

from domain.model.errors import ConfigurationError, ConfigurationMissingError
from services.credential_service import BCRYPT_ROUNDS, DEFAULT_TOKEN_TTL, CredentialService

logger = logging.getLogger(__name__)

# HS256 keys shorter than the digest size are accepted but weak
MIN_SECRET_LENGTH = 32


@dataclass(frozen=True)
class Settings:
    jwt_secret: str
    jwt_expire: str = DEFAULT_TOKEN_TTL
    bcrypt_rounds: int = BCRYPT_ROUNDS
    port: int = 4000

    def __repr__(self) -> str:
        return (
            f"Settings(jwt_secret='***', jwt_expire={self.jwt_expire!r}, "
            f"bcrypt_rounds={self.bcrypt_rounds}, port={self.port})"
        )


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from e


def load_settings() -> Settings:
    """Build Settings from environment variables.

    Raises:
        ConfigurationMissingError: JWT_SECRET is not set
        ConfigurationError: a numeric setting is not a number
    """
    secret = os.getenv("JWT_SECRET")
    if not secret or not secret.strip():
        raise ConfigurationMissingError("JWT_SECRET")
    if len(secret) < MIN_SECRET_LENGTH:
        logger.warning(
            "JWT_SECRET is shorter than recommended. "
            "Generate a secure key with: openssl rand -hex 32",
            extra={"minLength": MIN_SECRET_LENGTH},
        )

    return Settings(
        jwt_secret=secret,
        jwt_expire=os.getenv("JWT_EXPIRE") or DEFAULT_TOKEN_TTL,
        bcrypt_rounds=_int_env("BCRYPT_ROUNDS", BCRYPT_ROUNDS),
        port=_int_env("PORT", 4000),
    )


@lru_cache
def get_credential_service() -> CredentialService:
    """Return the process-wide credential service, built on first use."""
    settings = load_settings()
    return CredentialService(
        secret=settings.jwt_secret,
        token_ttl=settings.jwt_expire,
        bcrypt_rounds=settings.bcrypt_rounds,
    )
