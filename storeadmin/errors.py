"""
Error taxonomy.

HTTP-level failures are raised as ApiError by the client. The moderation
controller classifies them into the user-facing categories below.
"""

from typing import Optional


class StoreAdminError(Exception):
    """Base class for all storeadmin errors."""


class ApiError(StoreAdminError):
    """
    A failed REST call.

    status is the HTTP status code, or None when the request never got a
    response (connection error, timeout, unparseable body).
    """

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status
        self.message = message

    def __str__(self) -> str:
        if self.status is None:
            return self.message
        return f"HTTP {self.status}: {self.message}"


class NotAuthenticated(StoreAdminError):
    """No credential available; raised before any request is sent."""

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message)


class Unauthenticated(StoreAdminError):
    """Credential missing or expired. Not retryable, prompts re-login."""

    retryable = False


class Forbidden(StoreAdminError):
    """Authenticated but lacking rights. Not retryable."""

    retryable = False


class Transient(StoreAdminError):
    """Any other fetch failure. Retryable by explicit user action."""

    retryable = True


class DeleteFailed(StoreAdminError):
    """A review could not be deleted; the list is left unchanged."""

    retryable = True


def classify_fetch_error(exc: Exception) -> StoreAdminError:
    """
    Map a failure from the review fetch into the error taxonomy.

    Args:
        exc: Exception raised while fetching reviews

    Returns:
        Unauthenticated, Forbidden or Transient instance
    """
    if isinstance(exc, NotAuthenticated):
        return Unauthenticated(str(exc))
    if isinstance(exc, ApiError):
        if exc.status == 401:
            return Unauthenticated(str(exc))
        if exc.status == 403:
            return Forbidden(str(exc))
    return Transient(str(exc))
