"""Contrato del clasificador de errores.

Por qué Protocol:
- El cliente HTTP depende de la capacidad `classify`, no de una clase concreta.
- Los tests pueden inyectar un clasificador trivial sin herencia.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from core.domain.errors import MessagingError


@runtime_checkable
class ErrorClassifier(Protocol):
    """Convierte un fallo de transporte en un `MessagingError`.

    Reglas de diseño:
    - Sin estado: la misma excepción produce siempre el mismo tipo de error.
    - Nunca lanza; devuelve el error para que el llamador decida.
    """

    def classify(self, failure: BaseException) -> MessagingError:
        ...
