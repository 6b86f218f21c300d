"""Custom exception classes for the command-line tools."""


class MQTTPubSubError(Exception):
    """Base exception for all application errors."""
    pass


class UsageError(MQTTPubSubError):
    """Unknown option, missing option value or missing required field."""
    pass


class ClientInitError(MQTTPubSubError):
    """The MQTT client library or client handle could not be created."""
    pass


class AuthenticationError(MQTTPubSubError):
    """Username and password could not be applied to the client."""
    pass


class MQTTConnectionError(MQTTPubSubError):
    """MQTT connection errors."""
    pass


class PublishError(MQTTPubSubError):
    """Publishing the message failed."""
    pass


class SubscribeError(MQTTPubSubError):
    """Subscribing to the topic failed."""
    pass


class UnsubscribeError(MQTTPubSubError):
    """Unsubscribing from the topic failed. Reported as a warning only."""
    pass


class EventLoopError(MQTTPubSubError):
    """The network loop reported an error while receiving messages."""

    def __init__(self, message: str, rc: int) -> None:
        super().__init__(message)
        self.rc: int = rc
