"""Clasificador de errores httpx -> `MessagingError`.

Tabla:
- 400 -> InvalidArgument
- 401/403 -> AuthenticationError
- 404 -> NotFound
- 429 -> QuotaExceeded (con `retry_after`)
- 503 -> ServerUnavailable (con `retry_after`)
- otros 5xx -> ServerError
- timeout / fallo de red -> ApiConnectionFailed
- URL inválida -> InvalidArgument
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any

import httpx

from core.domain.errors import (
    ApiConnectionFailed,
    AuthenticationError,
    InvalidArgument,
    MessagingError,
    NotFound,
    QuotaExceeded,
    ServerError,
    ServerUnavailable,
)
from core.interfaces.error_classifier import ErrorClassifier


def _decode_errors(response: httpx.Response) -> dict[str, Any]:
    try:
        payload = response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return {}
    return payload if isinstance(payload, dict) else {}


def _error_message(errors: dict[str, Any], response: httpx.Response) -> str:
    error = errors.get("error")
    if isinstance(error, dict) and isinstance(error.get("message"), str):
        return error["message"]
    if isinstance(error, str) and error:
        return error
    return f"HTTP {response.status_code} {response.reason_phrase}".strip()


def parse_retry_after(value: str | None) -> float | None:
    """`Retry-After` admite segundos o una fecha HTTP."""

    if not value:
        return None
    value = value.strip()
    if value.isdigit():
        return float(value)
    try:
        when = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    return max(0.0, (when - datetime.now(timezone.utc)).total_seconds())


class MessagingApiErrorClassifier(ErrorClassifier):
    """Implementación por defecto de `ErrorClassifier` para httpx."""

    def classify(self, failure: BaseException) -> MessagingError:
        if isinstance(failure, MessagingError):
            return failure

        if isinstance(failure, httpx.HTTPStatusError):
            return self._from_response(failure.response)

        if isinstance(failure, httpx.TimeoutException):
            return ApiConnectionFailed(f"Request timed out: {failure}")

        if isinstance(failure, httpx.TransportError):
            return ApiConnectionFailed(f"Unable to connect to the API: {failure}")

        if isinstance(failure, httpx.InvalidURL):
            return InvalidArgument(f"Invalid request URL: {failure}")

        return MessagingError(str(failure) or type(failure).__name__)

    def _from_response(self, response: httpx.Response) -> MessagingError:
        status = response.status_code
        errors = _decode_errors(response)
        message = _error_message(errors, response)
        kwargs: dict[str, Any] = {
            "status_code": status,
            "errors": errors,
            "response": response,
        }

        if status == 400:
            return InvalidArgument(message, **kwargs)
        if status in (401, 403):
            return AuthenticationError(message, **kwargs)
        if status == 404:
            return NotFound(message, **kwargs)
        if status == 429:
            return QuotaExceeded(
                message,
                retry_after=parse_retry_after(response.headers.get("Retry-After")),
                **kwargs,
            )
        if status == 503:
            return ServerUnavailable(
                message,
                retry_after=parse_retry_after(response.headers.get("Retry-After")),
                **kwargs,
            )
        if status >= 500:
            return ServerError(message, **kwargs)
        return MessagingError(message, **kwargs)
