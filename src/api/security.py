"""Bearer-token authentication and authorization dependencies."""

import logging
from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from api.config import get_credential_service
from api.dependencies import get_user_repo
from api.models import UserResponse
from domain.model.errors import InvalidSignatureError, TokenExpiredError
from domain.model.token import TokenClaims
from domain.model.user import Role
from port.user_repository import UserRepository
from services.credential_service import CredentialService

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_claims(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    service: CredentialService = Depends(get_credential_service),
) -> TokenClaims:
    """Verify the bearer token. Raises 401, telling expiry apart from forgery."""
    if not credentials:
        raise _unauthorized("Not authenticated")

    try:
        return service.verify_token(credentials.credentials)
    except TokenExpiredError:
        raise _unauthorized("Session expired")
    except InvalidSignatureError:
        raise _unauthorized("Invalid authentication credentials")


def get_current_user_required(
    claims: TokenClaims = Depends(get_current_claims),
    user_repo: UserRepository = Depends(get_user_repo),
) -> UserResponse:
    """Resolve the token to a stored user. Raises 401 if the account is gone."""
    user = user_repo.get_by_id(claims.id)
    if not user:
        raise _unauthorized("User not found")
    return UserResponse.from_domain(user)


def require_admin(claims: TokenClaims = Depends(get_current_claims)) -> TokenClaims:
    """Allow only tokens carrying the admin role claim."""
    if claims.role != Role.ADMIN:
        logger.warning("Admin route denied", extra={"userId": claims.id})
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return claims
