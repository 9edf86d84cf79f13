"""
HTTP client.

Thin JSON-over-HTTP wrapper around requests. Every successful response body
is an object with a `data` envelope; callers only ever see its contents.
"""

import logging
from typing import Any, Dict, Optional

import requests

from storeadmin.errors import ApiError
import config.settings as settings

logger = logging.getLogger(__name__)


def extract_error_detail(response: requests.Response) -> str:
    """
    Extract a human-readable message from an API error response.

    Handles {"error": ...}, {"message": ...} and {"detail": ...} bodies,
    falling back to truncated raw text.
    """
    try:
        body = response.json()
    except ValueError:
        text = response.text or ""
        return text[:300] or response.reason or "(empty response body)"

    if isinstance(body, dict):
        for key in ("error", "message", "detail"):
            if key in body:
                value = body[key]
                if isinstance(value, dict):
                    return " | ".join(f"{k}: {v}" for k, v in value.items())
                return str(value)

    return str(body)[:300]


class ApiClient:
    """
    REST client bound to one base URL.

    Attaches a bearer token per call when one is given. Raises ApiError on
    transport failures and non-2xx responses.
    """

    def __init__(
        self,
        base_url: str = settings.API_BASE_URL,
        timeout: float = settings.REQUEST_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize API client.

        Args:
            base_url: API root, e.g. http://localhost:3000/api
            timeout: Per-request timeout in seconds
            session: Optional pre-configured requests session
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

        logger.info(f"Initialized ApiClient with base_url={self.base_url}")

    def get(self, path: str, params: Optional[Dict] = None, token: Optional[str] = None) -> Any:
        return self._request("GET", path, params=params, token=token)

    def post(self, path: str, json: Optional[Dict] = None, token: Optional[str] = None) -> Any:
        return self._request("POST", path, json=json, token=token)

    def delete(self, path: str, token: Optional[str] = None) -> Any:
        return self._request("DELETE", path, token=token)

    def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict] = None,
        json: Optional[Dict] = None,
        token: Optional[str] = None
    ) -> Any:
        url = f"{self.base_url}/{path.lstrip('/')}"
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        logger.debug(f"{method} {url} params={params}")

        try:
            response = self.session.request(
                method,
                url,
                params=params,
                json=json,
                headers=headers,
                timeout=self.timeout
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"{method} {url} failed: {e}")
            raise ApiError(f"Request failed: {e}") from e

        if not response.ok:
            detail = extract_error_detail(response)
            logger.warning(f"{method} {url} returned {response.status_code}: {detail}")
            raise ApiError(detail, status=response.status_code)

        # 204 and other empty bodies carry no envelope
        if not response.content:
            return None

        try:
            body = response.json()
        except ValueError as e:
            raise ApiError(f"Invalid JSON in response from {url}", status=response.status_code) from e

        if isinstance(body, dict):
            return body.get("data")
        return body
