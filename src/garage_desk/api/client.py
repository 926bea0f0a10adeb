"""HTTP client for the backend REST API.

Every repository talks to the backend through :class:`ApiClient`. The client
adds the bearer token, drops ``None`` values from JSON bodies and turns HTTP
failures into :mod:`garage_desk.core.exceptions` errors carrying the backend's
message.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

import requests

from ..core.constants import DEFAULT_API_TIMEOUT
from ..core.exceptions import (
    DEFAULT_ERROR_MESSAGE,
    ApiConnectionError,
    ApiError,
    NotFoundError,
    UnauthorizedError,
)

logger = logging.getLogger(__name__)

CONNECTION_ERROR_MESSAGE = "Verbindungsfehler. Bitte überprüfen Sie Ihre Internetverbindung."

# Login forms report their own errors; the global 401 handling skips these.
AUTH_ENDPOINTS = ("/auth/login", "/auth/register", "/auth/verify-pin")


def compact(payload: Optional[dict]) -> Optional[dict]:
    """Drop keys whose value is None (recursively for nested dicts)."""
    if payload is None:
        return None
    out = {}
    for key, value in payload.items():
        if value is None:
            continue
        out[key] = compact(value) if isinstance(value, dict) else value
    return out


def _extract_message(body: Any) -> Optional[str]:
    if not isinstance(body, dict):
        return None
    message = body.get("message") or body.get("error")
    if isinstance(message, list):
        return ", ".join(str(m) for m in message if m)
    return str(message) if message else None


class ApiClient:
    def __init__(
        self,
        base_url: str,
        *,
        token_provider: Optional[Callable[[], Optional[str]]] = None,
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_API_TIMEOUT,
    ):
        self._base_url = base_url.rstrip("/")
        self._token_provider = token_provider or (lambda: None)
        self._session = session or requests.Session()
        self._timeout = timeout

    @property
    def base_url(self) -> str:
        return self._base_url

    def get(self, path: str, params: Optional[dict] = None) -> Any:
        return self._request("GET", path, params=compact(params))

    def post(
        self,
        path: str,
        json: Optional[dict] = None,
        *,
        files: Optional[dict] = None,
        data: Optional[dict] = None,
    ) -> Any:
        if files:
            return self._request("POST", path, files=files, data=data)
        return self._request("POST", path, json=compact(json))

    def patch(self, path: str, json: Optional[dict] = None) -> Any:
        return self._request("PATCH", path, json=compact(json))

    def delete(self, path: str) -> Any:
        return self._request("DELETE", path)

    def _headers(self, *, multipart: bool) -> dict:
        headers = {}
        if not multipart:
            # requests sets the multipart boundary itself
            headers["Content-Type"] = "application/json"
        token = self._token_provider()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def _request(self, method: str, path: str, **kwargs) -> Any:
        url = f"{self._base_url}{path}"
        headers = self._headers(multipart=bool(kwargs.get("files")))
        logger.debug("%s %s", method, path)

        try:
            response = self._session.request(method, url, headers=headers, timeout=self._timeout, **kwargs)
        except requests.RequestException as e:
            logger.warning("API %s %s unreachable: %s", method, path, e)
            raise ApiConnectionError(CONNECTION_ERROR_MESSAGE, path=path, is_auth_endpoint=_is_auth(path)) from e

        if 200 <= response.status_code < 300:
            return self._decode(response)

        body = self._decode(response)
        message = _extract_message(body) or DEFAULT_ERROR_MESSAGE
        logger.warning("API %s %s -> %s: %s", method, path, response.status_code, message)

        error_cls = ApiError
        if response.status_code == 401:
            error_cls = UnauthorizedError
        elif response.status_code == 404:
            error_cls = NotFoundError

        raise error_cls(
            message,
            status_code=response.status_code,
            path=path,
            payload=body if isinstance(body, dict) else None,
            is_auth_endpoint=_is_auth(path),
        )

    @staticmethod
    def _decode(response: requests.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return None


def _is_auth(path: str) -> bool:
    return any(marker in path for marker in AUTH_ENDPOINTS)
