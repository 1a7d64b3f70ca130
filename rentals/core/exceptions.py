"""Application exceptions.

Business-rule failures raised below the use-case layer. Use cases translate
them into structured results; only unexpected failures reach the HTTP layer.
"""

from enum import Enum
from typing import Dict, List, Optional


class RentalsError(Exception):
    """Base exception for all application errors."""

    pass


class ValidationFailure(RentalsError):
    """Raised when submitted fields fail validation."""

    def __init__(self, field_errors: Dict[str, List[str]]):
        """Initialize the exception.

        Args:
            field_errors: Mapping of field name to the messages for that field.
        """
        self.field_errors = field_errors
        super().__init__("Missing or invalid information in required fields.")


class NotFoundError(RentalsError):
    """Raised when a requested entity does not exist."""

    def __init__(self, entity: str, identifier: str):
        self.entity = entity
        self.identifier = identifier
        super().__init__(f"{entity} not found")


class ConflictError(RentalsError):
    """Raised when a write would violate a uniqueness invariant."""

    pass


class DuplicateEmailError(ConflictError):
    """Raised when an email address is already held by another user."""

    def __init__(self, email: str):
        self.email = email
        super().__init__(f'User with email "{email}" already exists')


class PersistenceError(RentalsError):
    """Raised when the underlying storage fails."""

    pass


class ExternalProviderError(RentalsError):
    """Raised when a third-party identity exchange fails.

    ``safe`` marks messages that may be shown to the end user as-is.
    """

    def __init__(self, provider: str, message: str, safe: bool = False):
        self.provider = provider
        self.safe = safe
        super().__init__(message)


class ProviderNotConfiguredError(ExternalProviderError):
    """Raised when a known identity provider has no client credentials."""

    def __init__(self, provider: str):
        super().__init__(provider, f"Sign in with {provider} is not configured", safe=True)


class UnknownProviderError(ExternalProviderError):
    """Raised when no identity provider is registered under a name."""

    def __init__(self, provider: str):
        super().__init__(provider, f"Unknown sign-in provider: {provider}", safe=True)


class AuthFailure(str, Enum):
    """Reason a credentials sign-in was rejected.

    Kept for logging and server-side callers; never shown to the end user.
    """

    USER_NOT_FOUND = "user_not_found"
    ACCOUNT_DEACTIVATED = "account_deactivated"
    NO_PASSWORD_CONFIGURED = "no_password_configured"
    INVALID_PASSWORD = "invalid_password"


class PermissionDeniedError(RentalsError):
    """Raised when an identity may not act on a resource."""

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or "You do not have permission to perform this action")
