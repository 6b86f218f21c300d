"""Utility modules for logging and error handling."""

from .errors import (
    AuthenticationError,
    ClientInitError,
    EventLoopError,
    MQTTConnectionError,
    MQTTPubSubError,
    PublishError,
    SubscribeError,
    UnsubscribeError,
    UsageError,
)
from .logger import configure_logging, get_logger, redact_sensitive

__all__ = [
    "AuthenticationError",
    "ClientInitError",
    "EventLoopError",
    "MQTTConnectionError",
    "MQTTPubSubError",
    "PublishError",
    "SubscribeError",
    "UnsubscribeError",
    "UsageError",
    "configure_logging",
    "get_logger",
    "redact_sensitive",
]
