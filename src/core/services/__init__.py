"""Servicios del Core (orquestación sobre los adaptadores)."""

from core.services.topic_management import TopicManager

__all__ = ["TopicManager"]
