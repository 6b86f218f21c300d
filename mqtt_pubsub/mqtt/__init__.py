"""MQTT client session and received message handling."""

from .client import MQTTSession
from .messages import ReceivedMessage

__all__ = ["MQTTSession", "ReceivedMessage"]
