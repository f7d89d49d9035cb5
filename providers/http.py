"""
HTTP transport for the billing backend (requests).
Every failure leaves here as ApiRequestError carrying one normalized ApiError shape.
"""

from __future__ import annotations

import logging
from typing import Any

import requests

from core.exceptions import ApiRequestError, NotAuthenticatedError, NotFoundError
from core.interfaces import ITokenStorage
from core.models import ApiError

logger = logging.getLogger(__name__)

NO_RESPONSE = "No response from server. Check your network connection."
UNEXPECTED = "An unexpected error occurred"
SERVER_ERROR = "Server error"
NOT_AUTHENTICATED = "Not authenticated. Please log in."


def error_from_response(resp: requests.Response) -> ApiError:
    """Normalize an error response body (object, string or empty) into ApiError."""
    try:
        body: Any = resp.json()
    except ValueError:
        body = (resp.text or "").strip()
    message = SERVER_ERROR
    errors: list[str] = []
    if isinstance(body, dict):
        message = str(body.get("message") or body.get("error") or SERVER_ERROR)
        raw_errors = body.get("errors")
        if isinstance(raw_errors, list):
            errors = [str(e) for e in raw_errors]
    elif isinstance(body, str) and body:
        message = body
    return ApiError(message=message, errors=errors, status=resp.status_code, data=body or None)


class HttpTransport:
    """JSON over HTTP with optional bearer auth taken from token storage on every call."""

    def __init__(
        self,
        base_url: str,
        token_storage: ITokenStorage | None = None,
        timeout_sec: float = 30.0,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._tokens = token_storage
        self._timeout = timeout_sec

    def _headers(self, token: str | None) -> dict[str, str]:
        h: dict[str, str] = {"Content-Type": "application/json"}
        if token:
            h["Authorization"] = f"Bearer {token}"
        return h

    def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        auth: bool = True,
    ) -> Any:
        """
        Send one request and return the decoded JSON body (None when empty).
        Raises NotAuthenticatedError (no token / 401), NotFoundError (404), ApiRequestError otherwise.
        """
        token: str | None = None
        if auth:
            token = self._tokens.token() if self._tokens else None
            if not token:
                raise NotAuthenticatedError(ApiError(message=NOT_AUTHENTICATED, status=401))

        url = f"{self._base_url}{path}"
        logger.debug("%s %s", method, url)
        try:
            resp = requests.request(
                method, url, json=json, headers=self._headers(token), timeout=self._timeout
            )
        except (requests.ConnectionError, requests.Timeout) as e:
            logger.warning("%s %s: no response (%s)", method, url, e)
            raise ApiRequestError(ApiError(message=NO_RESPONSE, status=0)) from e
        except requests.RequestException as e:
            raise ApiRequestError(ApiError(message=str(e) or UNEXPECTED, status=-1)) from e

        if resp.status_code >= 400:
            err = error_from_response(resp)
            logger.debug("%s %s -> %s %s", method, url, resp.status_code, err.message)
            if resp.status_code == 404:
                raise NotFoundError(err)
            if resp.status_code == 401:
                if auth and self._tokens is not None:
                    # expired credential: session is treated as logged out
                    self._tokens.clear()
                raise NotAuthenticatedError(err)
            raise ApiRequestError(err)

        if resp.status_code == 204 or not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as e:
            raise ApiRequestError(
                ApiError(message="Invalid JSON in server response", status=resp.status_code)
            ) from e
