"""
Exception types raised by the Newsfeed service layer.
"""
from typing import Any, Optional


class NewsfeedError(Exception):
    """
    Base class for errors that callers turn into error responses.
    """
    def __init__(self, message: str, errors: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.errors = errors


class NotFoundError(NewsfeedError):
    """A user or article referenced by a request does not exist."""


class ValidationError(NewsfeedError):
    """Request input was rejected before reaching the aggregation core."""


class DuplicateUserError(ValueError):
    """A user with the same email is already registered."""
