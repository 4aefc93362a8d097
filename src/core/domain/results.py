"""Resultado por ítem de una operación en lote.

Un lote nunca lanza por el fallo de un ítem: cada entrada es `Success` o
`Failure` y el llamador inspecciona `ok`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Generic, NoReturn, TypeVar, Union

from core.domain.errors import MessagingError

T = TypeVar("T")


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T

    ok: ClassVar[bool] = True

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Failure:
    error: MessagingError

    ok: ClassVar[bool] = False

    def unwrap(self) -> NoReturn:
        """Relanza el error clasificado."""

        raise self.error


Outcome = Union[Success[T], Failure]
