"""Adaptadores concretos (httpx) de la API de Instance ID."""

from adapters.error_classifier import MessagingApiErrorClassifier
from adapters.instance_api import InstanceApiClient

__all__ = ["InstanceApiClient", "MessagingApiErrorClassifier"]
