"""Errores de dominio de la API de mensajería.

Ningún error de transporte (httpx) sale del cliente: todo pasa por un
`ErrorClassifier` y llega al llamador como una subclase de `MessagingError`.
"""

from __future__ import annotations

from typing import Any


class MessagingError(Exception):
    """Error base de la API de mensajería."""

    def __init__(
        self,
        message: str = "",
        *,
        status_code: int | None = None,
        errors: dict[str, Any] | None = None,
        response: Any = None,
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.errors = errors or {}
        self.response = response
        super().__init__(message)


class InvalidArgument(MessagingError):
    """HTTP 400: la API rechazó la petición (token o topic inválido)."""


class AuthenticationError(MessagingError):
    """HTTP 401/403: credenciales ausentes, inválidas o sin permisos."""


class NotFound(MessagingError):
    """HTTP 404: el token/instancia no existe."""


class QuotaExceeded(MessagingError):
    """HTTP 429."""

    def __init__(self, message: str = "", *, retry_after: float | None = None, **kwargs: Any) -> None:
        self.retry_after = retry_after
        super().__init__(message, **kwargs)


class ServerError(MessagingError):
    """HTTP 5xx."""


class ServerUnavailable(ServerError):
    """HTTP 503."""

    def __init__(self, message: str = "", *, retry_after: float | None = None, **kwargs: Any) -> None:
        self.retry_after = retry_after
        super().__init__(message, **kwargs)


class ApiConnectionFailed(MessagingError):
    """Fallo de red: conexión, DNS, TLS o timeout."""


class UnexpectedSettlement(MessagingError):
    """Una petición concurrente terminó sin valor ni excepción clasificable."""
