"""Fachada de gestión de topics.

`InstanceApiClient` habla HTTP; este módulo habla en términos del dominio:
- Normaliza la entrada del llamador a `Topic` / `RegistrationTokens`.
- Decodifica las respuestas de un solo topic.
- Construye "desuscribir de todo" sobre el lookup concurrente de instancias.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Iterable

from adapters.instance_api import InstanceApiClient
from core.domain.models import AppInstance, RegistrationTokens, Topic, TokenInput
from core.domain.results import Failure, Outcome

logger = logging.getLogger(__name__)


class TopicManager:
    """Operaciones de alto nivel sobre un único `InstanceApiClient`."""

    def __init__(self, client: InstanceApiClient) -> None:
        self._client = client

    def subscribe_to_topic(self, topic: Topic | str, tokens: TokenInput) -> dict[str, Any]:
        topic = Topic.from_value(topic)
        tokens = RegistrationTokens.from_value(tokens)
        response = self._client.subscribe_to_topic(topic, tokens)
        return self._client.decode_json(response)

    def unsubscribe_from_topic(self, topic: Topic | str, tokens: TokenInput) -> dict[str, Any]:
        topic = Topic.from_value(topic)
        tokens = RegistrationTokens.from_value(tokens)
        response = self._client.unsubscribe_from_topic(topic, tokens)
        return self._client.decode_json(response)

    async def subscribe_to_topics(
        self,
        topics: Iterable[Topic | str],
        tokens: TokenInput,
    ) -> dict[str, Outcome[Any]]:
        topics = [Topic.from_value(t) for t in topics]
        return await self._client.subscribe_to_topics(topics, RegistrationTokens.from_value(tokens))

    async def unsubscribe_from_topics(
        self,
        topics: Iterable[Topic | str],
        tokens: TokenInput,
    ) -> dict[str, Outcome[Any]]:
        topics = [Topic.from_value(t) for t in topics]
        return await self._client.unsubscribe_from_topics(topics, RegistrationTokens.from_value(tokens))

    async def get_app_instance(self, token: str) -> AppInstance:
        """Variante de `InstanceApiClient.get_app_instance_async` que lanza el error."""

        outcome = await self._client.get_app_instance_async(token)
        return outcome.unwrap()

    async def unsubscribe_from_all_topics(self, tokens: TokenInput) -> dict[str, Outcome[Any]]:
        """Desuscribe cada token de todos los topics a los que está suscrito.

        Los lookups de instancias corren en paralelo. Un token cuyo lookup
        falló aparece como ``token:<valor>``; el resto de entradas son los
        topics de las llamadas a batchRemove.
        """

        tokens = RegistrationTokens.from_value(tokens)
        lookups = await asyncio.gather(
            *(self._client.get_app_instance_async(token) for token in tokens.tokens)
        )

        result: dict[str, Outcome[Any]] = {}
        topics_by_token: dict[str, list[Topic]] = {}
        for token, outcome in zip(tokens.tokens, lookups):
            if isinstance(outcome, Failure):
                result[f"token:{token}"] = outcome
                continue
            topics_by_token[token.value] = outcome.value.topics

        # Un batchRemove por topic, con los tokens que realmente lo tienen.
        tokens_by_topic: dict[str, list[str]] = {}
        for token_value, topics in topics_by_token.items():
            for topic in topics:
                tokens_by_topic.setdefault(topic.value, []).append(token_value)

        if not tokens_by_topic:
            logger.info("No topic subscriptions found for %d token(s)", len(tokens))
            return result

        removals = await asyncio.gather(
            *(
                self._client.unsubscribe_from_topics([topic], topic_tokens)
                for topic, topic_tokens in tokens_by_topic.items()
            )
        )
        for removal in removals:
            result.update(removal)
        return result
