"""Admin routes. Every endpoint requires the admin role claim."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status

from api.dependencies import get_user_repo
from api.models import UserListResponse, UserResponse
from api.security import require_admin
from domain.model.token import TokenClaims
from port.user_repository import UserRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.get("/users", response_model=UserListResponse)
async def list_users(
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200),
    admin: TokenClaims = Depends(require_admin),
    repo: UserRepository = Depends(get_user_repo),
):
    users = repo.list_users(skip=skip, limit=limit)
    return UserListResponse(
        users=[UserResponse.from_domain(u) for u in users],
        skip=skip,
        limit=limit,
    )


@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: str,
    admin: TokenClaims = Depends(require_admin),
    repo: UserRepository = Depends(get_user_repo),
):
    if user_id == admin.id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Admins cannot delete themselves")
    if not repo.delete(user_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    logger.info("User deleted by admin", extra={"userId": user_id, "adminId": admin.id})
