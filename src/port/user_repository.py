from typing import Protocol
from domain.model.user import Role, User


class UserRepository(Protocol):
    """Protocol defining the interface for user data access."""
    def create(self, email: str, password_hash: str, role: Role = Role.USER) -> User | None:
        """Create a new user. Return User or None if creation failed."""
        ...

    def get_by_email(self, email: str) -> User | None:
        """Find a user by email. Return User or None if not found."""
        ...

    def get_by_id(self, user_id: str) -> User | None:
        """Find a user by ID. Return User or None if not found."""
        ...

    def list_users(self, skip: int = 0, limit: int = 50) -> list[User]:
        """Return users ordered by newest first."""
        ...

    def update_last_login(self, user_id: str) -> bool:
        """Update the last login timestamp for a user. Return True if successful."""
        ...

    def delete(self, user_id: str) -> bool:
        """Delete a user. Return True if a document was removed."""
        ...
