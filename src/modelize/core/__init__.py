"""Ambient infrastructure: configuration, logging, events and value helpers."""

from modelize.core.config import CollectionPattern, ModelizeSettings, load_settings
from modelize.core.events import EventBus, EventBusProtocol, NullEventBus
from modelize.core.logging import configure_logging, get_logger

__all__ = [
    "CollectionPattern",
    "EventBus",
    "EventBusProtocol",
    "ModelizeSettings",
    "NullEventBus",
    "configure_logging",
    "get_logger",
    "load_settings",
]
