"""Cliente HTTP de la API de Instance ID (topics + lookup de instancias).

Endpoints:
- POST /iid/v1:batchAdd     suscribe tokens a un topic
- POST /iid/v1:batchRemove  desuscribe tokens de un topic
- GET  /iid/<token>?details=true  metadata de la instancia

Las variantes "muchos topics" lanzan una petición por topic en paralelo y
esperan a que todas terminen (join-all). Un fallo individual no cancela al
resto ni se propaga: queda como `Failure` en el mapa de resultados.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Iterable, Sequence
from urllib.parse import quote

import httpx

from adapters.error_classifier import MessagingApiErrorClassifier
from adapters.http_client import build_async_client, build_client
from core.config import AppSettings
from core.domain.errors import MessagingError, UnexpectedSettlement
from core.domain.models import AppInstance, RegistrationToken, RegistrationTokens, Topic
from core.domain.results import Failure, Outcome, Success
from core.interfaces.error_classifier import ErrorClassifier

logger = logging.getLogger(__name__)

BATCH_ADD_ENDPOINT = "/iid/v1:batchAdd"
BATCH_REMOVE_ENDPOINT = "/iid/v1:batchRemove"
INSTANCE_ENDPOINT = "/iid/{token}"


def _token_strings(tokens: RegistrationTokens | Iterable[RegistrationToken | str]) -> list[str]:
    if isinstance(tokens, RegistrationTokens):
        return tokens.as_strings()
    return [str(t) for t in tokens]


def _instance_endpoint(token: RegistrationToken) -> str:
    # Un solo segmento de path: "/" y "%" del token van escapados.
    return INSTANCE_ENDPOINT.format(token=quote(token.value, safe=""))


def _batch_body(topic: Topic | str, tokens: list[str]) -> dict[str, Any]:
    return {
        "to": f"/topics/{topic}",
        "registration_tokens": tokens,
    }


class InstanceApiClient:
    """Adaptador delgado sobre httpx.

    Args:
        settings: configuración usada para construir los transports propios.
        client: `httpx.Client` inyectado para las llamadas síncronas.
        async_client: `httpx.AsyncClient` inyectado para las concurrentes.
        error_classifier: convierte fallos de transporte en `MessagingError`.

    Los transports inyectados no se cierran aquí; los creados por el cliente sí.
    """

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        client: httpx.Client | None = None,
        async_client: httpx.AsyncClient | None = None,
        error_classifier: ErrorClassifier | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._client = client
        self._async_client = async_client
        self._owns_client = client is None
        self._owns_async_client = async_client is None
        self._classifier = error_classifier or MessagingApiErrorClassifier()

    def _get_client(self) -> httpx.Client:
        if self._client is None:
            self._client = build_client(self._settings)
        return self._client

    def _get_async_client(self) -> httpx.AsyncClient:
        if self._async_client is None:
            self._async_client = build_async_client(self._settings)
        return self._async_client

    # -- síncrono -----------------------------------------------------------

    def subscribe_to_topic(
        self,
        topic: Topic | str,
        tokens: RegistrationTokens | Sequence[RegistrationToken | str],
    ) -> httpx.Response:
        return self._request(
            "POST",
            BATCH_ADD_ENDPOINT,
            json=_batch_body(topic, _token_strings(tokens)),
        )

    def unsubscribe_from_topic(
        self,
        topic: Topic | str,
        tokens: RegistrationTokens | Sequence[RegistrationToken | str],
    ) -> httpx.Response:
        return self._request(
            "POST",
            BATCH_REMOVE_ENDPOINT,
            json=_batch_body(topic, _token_strings(tokens)),
        )

    def get_app_instance(self, registration_token: RegistrationToken | str) -> httpx.Response:
        return self._request(
            "GET",
            _instance_endpoint(RegistrationToken.from_value(registration_token)),
            params={"details": "true"},
        )

    def _request(self, method: str, endpoint: str, **kwargs: Any) -> httpx.Response:
        logger.debug("%s %s", method, endpoint)
        try:
            response = self._get_client().request(method, endpoint, **kwargs)
            response.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            error = self._classifier.classify(exc)
            logger.warning("%s %s failed: %s", method, endpoint, error)
            raise error from exc
        return response

    def decode_json(self, response: httpx.Response) -> Any:
        """Decodifica el cuerpo JSON; un cuerpo inválido sale como `MessagingError`."""

        try:
            return response.json()
        except ValueError as exc:
            error = self._classifier.classify(exc)
            error.status_code = response.status_code
            error.response = response
            raise error from exc

    # -- concurrente --------------------------------------------------------

    async def subscribe_to_topics(
        self,
        topics: Iterable[Topic | str],
        tokens: RegistrationTokens | Sequence[RegistrationToken | str],
    ) -> dict[str, Outcome[Any]]:
        return await self._fan_out(BATCH_ADD_ENDPOINT, topics, tokens)

    async def unsubscribe_from_topics(
        self,
        topics: Iterable[Topic | str],
        tokens: RegistrationTokens | Sequence[RegistrationToken | str],
    ) -> dict[str, Outcome[Any]]:
        return await self._fan_out(BATCH_REMOVE_ENDPOINT, topics, tokens)

    async def get_app_instance_async(
        self,
        registration_token: RegistrationToken | str,
    ) -> Outcome[AppInstance]:
        """Lookup no bloqueante; los fallos se resuelven como `Failure`."""

        token = RegistrationToken.from_value(registration_token)
        endpoint = _instance_endpoint(token)
        logger.debug("GET %s (async)", endpoint)
        try:
            response = await self._get_async_client().get(endpoint, params={"details": "true"})
            response.raise_for_status()
            data = response.json()
            if not isinstance(data, dict):
                raise MessagingError(
                    f"Unexpected instance payload for token {token}",
                    status_code=response.status_code,
                    response=response,
                )
            instance = AppInstance.from_raw_data(token, data)
        except Exception as exc:
            return Failure(self._classifier.classify(exc))
        return Success(instance)

    async def _fan_out(
        self,
        endpoint: str,
        topics: Iterable[Topic | str],
        tokens: RegistrationTokens | Sequence[RegistrationToken | str],
    ) -> dict[str, Outcome[Any]]:
        token_list = _token_strings(tokens)
        # Un topic repetido produce una sola petición y una sola entrada.
        names = list(dict.fromkeys(Topic.from_value(t).value for t in topics))
        client = self._get_async_client()

        async def send(name: str) -> Any:
            response = await client.post(endpoint, json=_batch_body(name, token_list))
            response.raise_for_status()
            return response.json()

        logger.debug("POST %s for %d topic(s)", endpoint, len(names))
        settled = await asyncio.gather(*(send(name) for name in names), return_exceptions=True)

        result: dict[str, Outcome[Any]] = {}
        for name, value in zip(names, settled):
            result[name] = self._settle(name, value)

        failed = [name for name, outcome in result.items() if not outcome.ok]
        if failed:
            logger.warning("%s: %d/%d topic(s) failed: %s", endpoint, len(failed), len(result), ", ".join(failed))
        else:
            logger.info("%s: %d topic(s) succeeded", endpoint, len(result))
        return result

    def _settle(self, topic_name: str, value: Any) -> Outcome[Any]:
        if isinstance(value, Exception):
            return Failure(self._classifier.classify(value))
        if isinstance(value, BaseException):
            # p.ej. CancelledError de una petición hija: ni valor ni fallo HTTP.
            return Failure(
                UnexpectedSettlement(
                    f"Request for topic {topic_name!r} settled as {type(value).__name__}"
                )
            )
        return Success(value)

    # -- ciclo de vida ------------------------------------------------------

    def close(self) -> None:
        if self._client is not None and self._owns_client:
            self._client.close()
            self._client = None

    async def aclose(self) -> None:
        if self._async_client is not None and self._owns_async_client:
            await self._async_client.aclose()
            self._async_client = None
        self.close()

    def __enter__(self) -> InstanceApiClient:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    async def __aenter__(self) -> InstanceApiClient:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()
