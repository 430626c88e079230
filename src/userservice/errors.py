"""Typed failures surfaced by the account and session operations.

Each maps to a distinct HTTP outcome in main.create_app():
409 for collisions, 404 for missing or soft-deleted accounts,
401 for token and credential failures.
"""


class UserServiceError(Exception):
    """Base class for all userservice domain errors."""


class UsernameAlreadyExistsError(UserServiceError):
    """Raised when a username or nickname is already taken."""


class ResourceNotFoundError(UserServiceError):
    """Raised when an account is missing or has been soft-deleted.

    Deleted accounts are indistinguishable from absent ones to callers.
    """


class InvalidTokenError(UserServiceError):
    """Raised when a token is malformed, expired, of the wrong type, or unknown."""


class AuthenticationError(UserServiceError):
    """Raised when a submitted password does not match the stored digest."""
