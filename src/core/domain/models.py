"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Validación estricta de topics/tokens en el borde, antes de tocar la red.
- Los value objects son inmutables (`frozen=True`) y comparables por valor.

Nota:
- Estos modelos describen *qué* es la información, no *cómo* se obtiene.
"""

from __future__ import annotations

import re
from datetime import date
from typing import Any, Iterable, Union

from pydantic import BaseModel, Field, field_validator
from pydantic.config import ConfigDict

_TOPIC_PREFIX = "/topics/"
_TOPIC_NAME_RE = re.compile(r"^[a-zA-Z0-9\-_.~%]{1,900}$")


class Topic(BaseModel):
    """Un topic de mensajería (canal de broadcast)."""

    model_config = ConfigDict(frozen=True)

    value: str = Field(
        ...,
        description="Nombre del topic, sin el prefijo '/topics/'.",
    )

    @field_validator("value", mode="before")
    @classmethod
    def _normalize(cls, v: Any) -> Any:
        if not isinstance(v, str):
            return v
        v = v.strip()
        if v.startswith(_TOPIC_PREFIX):
            v = v[len(_TOPIC_PREFIX):]
        if not _TOPIC_NAME_RE.match(v):
            raise ValueError(
                f"Invalid topic name {v!r}: expected 1-900 chars of [a-zA-Z0-9-_.~%]"
            )
        return v

    @classmethod
    def from_value(cls, value: Topic | str) -> Topic:
        if isinstance(value, Topic):
            return value
        return cls(value=value)

    def __str__(self) -> str:
        return self.value


class RegistrationToken(BaseModel):
    """Identificador opaco de una instalación (dispositivo/app)."""

    model_config = ConfigDict(frozen=True)

    value: str = Field(..., min_length=1)

    @field_validator("value", mode="before")
    @classmethod
    def _strip(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    @classmethod
    def from_value(cls, value: RegistrationToken | str) -> RegistrationToken:
        if isinstance(value, RegistrationToken):
            return value
        return cls(value=value)

    def __str__(self) -> str:
        return self.value


TokenInput = Union[
    "RegistrationTokens",
    RegistrationToken,
    str,
    Iterable[Union[RegistrationToken, str]],
]


class RegistrationTokens(BaseModel):
    """Colección no vacía de tokens; conserva el orden de entrada."""

    model_config = ConfigDict(frozen=True)

    tokens: tuple[RegistrationToken, ...] = Field(..., min_length=1)

    @classmethod
    def from_value(cls, value: TokenInput) -> RegistrationTokens:
        if isinstance(value, RegistrationTokens):
            return value
        if isinstance(value, (str, RegistrationToken)):
            value = [value]
        return cls(tokens=tuple(RegistrationToken.from_value(v) for v in value))

    def as_strings(self) -> list[str]:
        return [t.value for t in self.tokens]

    def __len__(self) -> int:
        return len(self.tokens)


class TopicSubscription(BaseModel):
    """Suscripción de un token a un topic, tal como la reporta la API."""

    model_config = ConfigDict(frozen=True)

    topic: Topic
    registration_token: RegistrationToken
    subscribed_at: date | None = Field(
        default=None,
        description="Fecha de alta (`addDate`) si la API la informa.",
    )


class AppInstance(BaseModel):
    """Metadata de una instancia (token) devuelta por el lookup con `details=true`.

    Ejemplo de payload:

        {"application": "com.example.app", "platform": "ANDROID",
         "rel": {"topics": {"news": {"addDate": "2024-01-05"}}}}
    """

    model_config = ConfigDict(frozen=True)

    registration_token: RegistrationToken
    raw_data: dict[str, Any] = Field(
        default_factory=dict,
        description="Cuerpo JSON decodificado, sin filtrar.",
    )
    topic_subscriptions: tuple[TopicSubscription, ...] = ()

    @classmethod
    def from_raw_data(
        cls,
        registration_token: RegistrationToken | str,
        data: dict[str, Any],
    ) -> AppInstance:
        token = RegistrationToken.from_value(registration_token)

        subscriptions: list[TopicSubscription] = []
        rel = data.get("rel")
        topics = rel.get("topics") if isinstance(rel, dict) else None
        if isinstance(topics, dict):
            for name, info in topics.items():
                add_date = info.get("addDate") if isinstance(info, dict) else None
                subscriptions.append(
                    TopicSubscription(
                        topic=Topic.from_value(name),
                        registration_token=token,
                        subscribed_at=add_date,
                    )
                )

        return cls(
            registration_token=token,
            raw_data=dict(data),
            topic_subscriptions=tuple(subscriptions),
        )

    @property
    def application(self) -> str | None:
        value = self.raw_data.get("application")
        return value if isinstance(value, str) else None

    @property
    def platform(self) -> str | None:
        value = self.raw_data.get("platform")
        return value if isinstance(value, str) else None

    @property
    def topics(self) -> list[Topic]:
        return [s.topic for s in self.topic_subscriptions]

    def is_subscribed_to_topic(self, topic: Topic | str) -> bool:
        return Topic.from_value(topic) in self.topics
