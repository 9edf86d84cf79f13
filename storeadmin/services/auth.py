"""
Auth provider.

Token storage belongs to the host application; this module only defines the
contract the services depend on and a simple in-memory implementation.
"""

import logging
from typing import Optional

logger = logging.getLogger(__name__)


class AuthProvider:
    """Source of the bearer credential."""

    def get_token(self) -> Optional[str]:
        raise NotImplementedError

    def logout(self) -> None:
        raise NotImplementedError


class StaticTokenAuth(AuthProvider):
    """Holds a token given up front (CLI flag or STOREADMIN_TOKEN)."""

    def __init__(self, token: Optional[str] = None):
        self._token = token or None

    def get_token(self) -> Optional[str]:
        return self._token

    def logout(self) -> None:
        if self._token:
            logger.info("Logged out, credential cleared")
        self._token = None
