"""Builders de httpx para la API de Instance ID.

Por qué builders:
- Estandariza base URL, timeouts y headers de autenticación en un solo sitio.
- Facilita testeo: el cliente acepta transports ya construidos (p.ej. con
  `httpx.MockTransport`).
"""

from __future__ import annotations

import httpx

from core.config import AppSettings


def default_headers(settings: AppSettings, extra_headers: dict[str, str] | None = None) -> dict[str, str]:
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
    }
    if settings.access_token:
        headers["Authorization"] = f"Bearer {settings.access_token}"
        # Requerido por la API de IID cuando se usa un token OAuth2.
        headers["access_token_auth"] = "true"
    if extra_headers:
        headers.update(extra_headers)
    return headers


def build_client(
    settings: AppSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.BaseTransport | None = None,
) -> httpx.Client:
    """Crea un `httpx.Client` síncrono apuntando a `settings.base_url`."""

    settings = settings or AppSettings()
    return httpx.Client(
        base_url=settings.base_url,
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        headers=default_headers(settings, extra_headers),
        transport=transport,
    )


def build_async_client(
    settings: AppSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Crea un `httpx.AsyncClient` con los mismos defaults que `build_client`."""

    settings = settings or AppSettings()
    return httpx.AsyncClient(
        base_url=settings.base_url,
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        headers=default_headers(settings, extra_headers),
        transport=transport,
    )
