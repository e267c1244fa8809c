from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class Role(str, Enum):
    """Authorization scope carried by every account."""
    ADMIN = 'admin'
    USER = 'user'


@dataclass
class User:
    """Domain model representing a user."""
    id: str
    email: str
    created_at: datetime
    updated_at: datetime
    role: Role = Role.USER
    last_login: datetime | None = None
    password_hash: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN
