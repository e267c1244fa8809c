"""Auth service — signup and login business logic.

Pure business logic with no HTTP dependencies.
Raises domain errors that route handlers map to HTTP status codes.
Hashing runs in a worker thread so the event loop is never blocked by bcrypt.
"""

import asyncio
import logging
import re

from domain.model.errors import (
    DomainError,
    DuplicateError,
    InvalidCredentialsError,
    MalformedHashError,
    ValidationError,
)
from domain.model.token import TokenClaims
from domain.model.user import Role, User
from port.user_repository import UserRepository
from services.credential_service import CredentialService

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8


def validate_password(password: str) -> None:
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    if not re.search(r"[A-Z]", password):
        raise ValidationError("Password must contain at least one uppercase letter")
    if not re.search(r"[a-z]", password):
        raise ValidationError("Password must contain at least one lowercase letter")
    if not re.search(r"[0-9]", password):
        raise ValidationError("Password must contain at least one number")


async def register(
    repo: UserRepository,
    credentials: CredentialService,
    email: str,
    password: str,
    role: Role = Role.USER,
) -> tuple[User, str]:
    """Register a new user and issue their first session token.

    Returns the created User and a signed token.

    Raises:
        DuplicateError: email already registered
        ValidationError: password does not meet strength requirements
    """
    if repo.get_by_email(email):
        raise DuplicateError("Email already registered")

    validate_password(password)
    password_hash = await asyncio.to_thread(credentials.hash_password, password)

    user = repo.create(email=email, password_hash=password_hash, role=role)
    if not user:
        # A concurrent signup may have claimed the email after the check above
        if repo.get_by_email(email):
            raise DuplicateError("Email already registered")
        raise DomainError("Failed to create user")

    token = credentials.issue_token(TokenClaims.for_user(user))
    return user, token


async def authenticate(
    repo: UserRepository,
    credentials: CredentialService,
    email: str,
    password: str,
) -> User:
    """Authenticate a user by email and password.

    Doesn't reveal whether the email exists.

    Raises:
        InvalidCredentialsError: unknown email or wrong password (deliberately vague)
        MalformedHashError: the stored hash is corrupt
    """
    user = repo.get_by_email(email)
    if not user or not user.password_hash:
        raise InvalidCredentialsError("Invalid email or password")

    try:
        matches = await asyncio.to_thread(credentials.verify_password, password, user.password_hash)
    except MalformedHashError:
        logger.error("Stored password hash is malformed", extra={"userId": user.id})
        raise

    if not matches:
        raise InvalidCredentialsError("Invalid email or password")

    # login succeeds even if the timestamp write fails
    repo.update_last_login(user.id)
    return user


async def login(
    repo: UserRepository,
    credentials: CredentialService,
    email: str,
    password: str,
) -> tuple[User, str]:
    """Verify credentials, then issue a session token. Never issues one otherwise."""
    user = await authenticate(repo, credentials, email, password)
    token = credentials.issue_token(TokenClaims.for_user(user))
    return user, token
