"""Password hashing and signed session tokens.

Pure, stateless logic parameterized by a signing secret and a default
time-to-live. No I/O and no environment access: callers construct one
instance at startup and pass it to whatever needs authentication.
"""

import logging
import math
import re
from datetime import datetime, timedelta, timezone
from typing import Callable

import bcrypt
from jose import JWTError, jwt

from domain.model.errors import (
    ConfigurationError,
    ConfigurationMissingError,
    InvalidSignatureError,
    MalformedHashError,
    TokenExpiredError,
    ValidationError,
)
from domain.model.token import TokenClaims
from domain.model.user import Role
from services.duration import parse_duration

logger = logging.getLogger(__name__)

BCRYPT_ROUNDS = 10
DEFAULT_TOKEN_TTL = "24h"
JWT_ALGORITHM = "HS256"

# bcrypt only looks at the first 72 bytes of a password
BCRYPT_MAX_PASSWORD_BYTES = 72

_BCRYPT_HASH_RE = re.compile(r"^\$2[abxy]\$\d{2}\$[./A-Za-z0-9]{53}$")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CredentialService:
    """Hashes/verifies passwords and issues/verifies session tokens."""

    def __init__(
        self,
        secret: str | None,
        token_ttl: str | int | float | timedelta = DEFAULT_TOKEN_TTL,
        bcrypt_rounds: int = BCRYPT_ROUNDS,
        algorithm: str = JWT_ALGORITHM,
        clock: Callable[[], datetime] | None = None,
    ):
        if not secret or not secret.strip():
            raise ConfigurationMissingError("JWT_SECRET")
        if not 4 <= bcrypt_rounds <= 31:
            raise ConfigurationError(f"bcrypt rounds must be between 4 and 31, got {bcrypt_rounds}")

        self._secret = secret
        self._algorithm = algorithm
        self._clock = clock or _utcnow
        self.token_ttl = parse_duration(token_ttl)
        self.bcrypt_rounds = bcrypt_rounds
        # Expiry must be representable as a datetime
        self._expiry(self._clock(), self.token_ttl)

    def __repr__(self) -> str:
        return (
            f"CredentialService(token_ttl={self.token_ttl!r}, "
            f"bcrypt_rounds={self.bcrypt_rounds}, algorithm={self._algorithm!r})"
        )

    # ── passwords ────────────────────────────────────────────

    def hash_password(self, password: str) -> str:
        """Hash a plaintext password with bcrypt and a fresh random salt.

        Raises:
            ValidationError: empty password, or longer than bcrypt accepts
        """
        if not password:
            raise ValidationError("Password must not be empty")
        encoded = password.encode("utf-8")
        if len(encoded) > BCRYPT_MAX_PASSWORD_BYTES:
            raise ValidationError(f"Password must be at most {BCRYPT_MAX_PASSWORD_BYTES} bytes")

        salt = bcrypt.gensalt(rounds=self.bcrypt_rounds)
        return bcrypt.hashpw(encoded, salt).decode("utf-8")

    def verify_password(self, password: str, password_hash: str) -> bool:
        """Check a plaintext password against a stored bcrypt hash.

        Returns False on mismatch. Comparison is case-sensitive.

        Raises:
            MalformedHashError: stored hash is not a bcrypt hash
        """
        if not password_hash or not _BCRYPT_HASH_RE.match(password_hash):
            raise MalformedHashError("Stored password hash is not a valid bcrypt hash")

        encoded = (password or "").encode("utf-8")
        if not encoded or len(encoded) > BCRYPT_MAX_PASSWORD_BYTES:
            return False

        try:
            return bcrypt.checkpw(encoded, password_hash.encode("utf-8"))
        except ValueError as e:
            raise MalformedHashError(f"Stored password hash could not be read: {e}") from e

    # ── tokens ───────────────────────────────────────────────

    def issue_token(
        self,
        claims: TokenClaims,
        ttl: str | int | float | timedelta | None = None,
    ) -> str:
        """Sign claims into a token that expires after ttl (service default if None)."""
        lifetime = self.token_ttl if ttl is None else parse_duration(ttl)
        now = self._clock()
        payload = {
            "sub": claims.id,
            "email": claims.email,
            "role": Role(claims.role).value,
            "iat": int(now.timestamp()),
            "exp": self._expiry(now, lifetime),
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    @staticmethod
    def _expiry(now: datetime, lifetime: timedelta) -> int:
        """Expiry as a unix timestamp, rounded up so a token never lives shorter than its ttl."""
        try:
            return math.ceil((now + lifetime).timestamp())
        except OverflowError as e:
            raise ConfigurationError(f"Token lifetime {lifetime} runs past the supported date range") from e

    def verify_token(self, token: str) -> TokenClaims:
        """Validate signature and expiry, returning the embedded claims.

        Raises:
            TokenExpiredError: signature is valid but the token has expired
            InvalidSignatureError: anything else wrong with the token
        """
        if not token:
            raise InvalidSignatureError("Token is empty")

        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"verify_exp": False},
            )
        except JWTError as e:
            logger.debug("Token rejected", extra={"reason": str(e)})
            raise InvalidSignatureError("Token signature verification failed") from e

        exp = payload.get("exp")
        if not isinstance(exp, (int, float)):
            raise InvalidSignatureError("Token has no expiry")
        if self._clock().timestamp() > exp:
            raise TokenExpiredError("Token has expired")

        user_id = payload.get("sub")
        email = payload.get("email")
        if not user_id or not email:
            raise InvalidSignatureError("Token is missing identity claims")

        try:
            role = Role(payload.get("role", Role.USER.value))
        except ValueError as e:
            raise InvalidSignatureError("Token carries an unknown role") from e

        return TokenClaims(id=user_id, email=email, role=role)
