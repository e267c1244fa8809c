"""Domain-level exceptions.

Services raise these errors to express business rule violations.
Route handlers catch them and map to appropriate HTTP status codes.
"""


class DomainError(Exception):
    """Base class for all domain errors."""


class DuplicateError(DomainError):
    """Entity with the same unique key already exists."""


class ValidationError(DomainError):
    """Input violates a business validation rule."""


class InvalidCredentialsError(DomainError):
    """Email/password pair does not match a stored account."""


class MalformedHashError(DomainError):
    """Stored password hash was not produced by the credential service."""


class AuthenticationError(DomainError):
    """Session token could not be accepted."""


class InvalidSignatureError(AuthenticationError):
    """Token is malformed, tampered with, or signed with another secret."""


class TokenExpiredError(AuthenticationError):
    """Token is correctly signed but its expiry has passed."""


class ConfigurationError(DomainError):
    """Service configuration is unusable."""


class ConfigurationMissingError(ConfigurationError):
    """A required setting (e.g. the signing secret) is absent."""

    def __init__(self, setting: str):
        self.setting = setting
        super().__init__(f"{setting} is required but not configured")
