"""Session token claims."""

from dataclasses import dataclass

from domain.model.user import Role, User


@dataclass(frozen=True)
class TokenClaims:
    """Identity fields embedded in a signed session token."""

    id: str
    email: str
    role: Role = Role.USER

    @classmethod
    def for_user(cls, user: User) -> 'TokenClaims':
        return cls(id=user.id, email=user.email, role=user.role)
