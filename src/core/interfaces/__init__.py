"""Contratos (Protocol) que implementan los adaptadores.

El Core depende de estas abstracciones, no de httpx.
"""

from core.interfaces.error_classifier import ErrorClassifier

__all__ = ["ErrorClassifier"]
