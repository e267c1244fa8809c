"""Authentication routes (signup, login, me)."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from api.config import get_credential_service
from api.dependencies import get_user_repo
from api.models import AuthResponse, LoginRequest, SignupRequest, UserResponse
from api.security import get_current_user_required
from domain.model.errors import (
    DomainError,
    DuplicateError,
    InvalidCredentialsError,
    MalformedHashError,
    ValidationError,
)
from port.user_repository import UserRepository
from services import auth_service
from services.credential_service import CredentialService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    request: SignupRequest,
    repo: UserRepository = Depends(get_user_repo),
    credentials: CredentialService = Depends(get_credential_service),
):
    """Create an account and return a session token.

    Raises:
        HTTPException: 409 if email already exists, 400 if the password is too weak
    """
    try:
        user, token = await auth_service.register(repo, credentials, request.email, request.password)
    except DuplicateError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except DomainError as e:
        logger.error("Signup failed", extra={"email": request.email, "error": str(e)})
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))

    logger.info("User signed up", extra={"userId": user.id, "email": user.email})
    return AuthResponse(token=token, user=UserResponse.from_domain(user))


@router.post("/login", response_model=AuthResponse)
async def login(
    request: LoginRequest,
    repo: UserRepository = Depends(get_user_repo),
    credentials: CredentialService = Depends(get_credential_service),
):
    """Verify email/password and return a session token.

    Raises:
        HTTPException: 401 if credentials are invalid
    """
    try:
        user, token = await auth_service.login(repo, credentials, request.email, request.password)
    except InvalidCredentialsError as e:
        logger.info("Login rejected", extra={"email": request.email})
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))
    except MalformedHashError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Account credentials are corrupted; contact an administrator",
        )

    logger.info("User logged in", extra={"userId": user.id, "email": user.email})
    return AuthResponse(token=token, user=UserResponse.from_domain(user))


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: UserResponse = Depends(get_current_user_required)):
    """Return the authenticated user."""
    return current_user
