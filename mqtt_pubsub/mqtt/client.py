"""MQTT client wrapper with a scoped connect/act/teardown lifecycle."""

from types import TracebackType
from typing import Any, Callable, Optional, Type

import paho.mqtt.client as mqtt

from ..config.settings import KEEPALIVE_SECONDS, QOS_AT_MOST_ONCE, SessionConfig
from ..utils.errors import (
    AuthenticationError,
    ClientInitError,
    EventLoopError,
    MQTTConnectionError,
    PublishError,
    SubscribeError,
    UnsubscribeError,
)
from ..utils.logger import get_logger
from .messages import ReceivedMessage

logger = get_logger(__name__)

MessageCallback = Callable[[ReceivedMessage], None]


class MQTTSession:
    """
    Wrapper for paho.mqtt.client driven from a single thread.

    Use as a context manager: entering creates the client, applies
    credentials, registers callbacks and connects; leaving disconnects and
    drops the client on every path. Failures raise the matching
    ``MQTTPubSubError`` subclass; nothing is retried.
    """

    def __init__(self, config: SessionConfig, on_message: Optional[MessageCallback] = None) -> None:
        self.config: SessionConfig = config
        self.on_message: Optional[MessageCallback] = on_message
        self.client: Optional[mqtt.Client] = None
        self.connected: bool = False

    def __enter__(self) -> 'MQTTSession':
        self.open()
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        self.close()

    def open(self) -> None:
        """Create the client handle, authenticate and connect."""
        try:
            client = self._create_client()
            self._setup_authentication(client)
            self._setup_callbacks(client)
            self._connect(client)
        except BaseException:
            self.close()
            raise

    def _create_client(self) -> mqtt.Client:
        """Create the paho client with clean session semantics."""
        client_id = self.config.client_id or ""
        try:
            client = mqtt.Client(
                mqtt.CallbackAPIVersion.VERSION2,
                client_id=client_id,
                clean_session=True,
            )
        except (ValueError, TypeError, OSError) as e:
            raise ClientInitError(f"failed to create MQTT client instance: {e}") from e
        logger.debug(f"Created MQTT client (client_id={client_id or '<generated>'})")
        self.client = client
        return client

    def _setup_authentication(self, client: mqtt.Client) -> None:
        """Configure MQTT authentication if credentials provided."""
        username = self.config.username
        password = self.config.password
        if username is None:
            if password is not None:
                raise AuthenticationError("failed to set user and password: password given without user")
            return

        try:
            client.username_pw_set(username, password)
        except (ValueError, TypeError) as e:
            raise AuthenticationError(f"failed to set user and password: {e}") from e
        logger.debug(f"Credentials set for user {username}")

    def _setup_callbacks(self, client: mqtt.Client) -> None:
        """Configure callbacks before connecting so no message is missed."""
        client.on_connect = self._on_connect
        client.on_disconnect = self._on_disconnect
        client.on_message = self._on_message

    def _connect(self, client: mqtt.Client) -> None:
        host = self.config.host
        port = self.config.port
        logger.info(f"Connecting to MQTT broker {host}:{port}")
        try:
            rc = client.connect(host, port, keepalive=KEEPALIVE_SECONDS)
        except (OSError, ValueError) as e:
            raise MQTTConnectionError(f"failed to connect to MQTT broker {host}:{port}: {e}") from e
        if rc != mqtt.MQTT_ERR_SUCCESS:
            raise MQTTConnectionError(
                f"failed to connect to MQTT broker {host}:{port}: {mqtt.error_string(rc)}"
            )
        self.connected = True

    def _on_connect(self, client: Any, userdata: Any, flags: Any, reason_code: Any, properties: Any) -> None:
        """Log the broker's answer to the connect request."""
        if getattr(reason_code, "is_failure", False):
            logger.error(f"MQTT broker refused connection: {reason_code}")
        else:
            logger.info("Connected to MQTT broker")

    def _on_disconnect(self, client: Any, userdata: Any, flags: Any, reason_code: Any, properties: Any) -> None:
        logger.debug(f"Disconnected from MQTT broker (rc={reason_code})")

    def _on_message(self, client: Any, userdata: Any, msg: Any) -> None:
        """Hand the message to the registered callback, nothing else."""
        if self.on_message is not None:
            self.on_message(ReceivedMessage.from_paho(msg))

    def publish(self, topic: str, payload: str, retain: bool = False) -> int:
        """
        Publish a message once at QoS 0.

        Args:
            topic: MQTT topic
            payload: Message payload
            retain: Whether the broker should retain the message

        Returns:
            The message id assigned by the client library.
        """
        if self.client is None:
            raise PublishError("failed to publish message: client is not connected")
        try:
            info = self.client.publish(topic, payload, qos=QOS_AT_MOST_ONCE, retain=retain)
        except (ValueError, TypeError) as e:
            raise PublishError(f"failed to publish message: {e}") from e
        if info.rc != mqtt.MQTT_ERR_SUCCESS:
            raise PublishError(f"failed to publish message: {mqtt.error_string(info.rc)}")
        logger.debug(f"Published to {topic}: {payload[:100]}")
        return info.mid

    def subscribe(self, topic: str) -> int:
        """Subscribe to ``topic`` at QoS 0 and return the request's message id."""
        if self.client is None:
            raise SubscribeError("failed to subscribe: client is not connected")
        try:
            rc, mid = self.client.subscribe(topic, qos=QOS_AT_MOST_ONCE)
        except (ValueError, TypeError) as e:
            raise SubscribeError(f"failed to subscribe: {e}") from e
        if rc != mqtt.MQTT_ERR_SUCCESS:
            raise SubscribeError(f"failed to subscribe: {mqtt.error_string(rc)}")
        logger.info(f"Subscribed to topic: {topic}")
        return mid

    def unsubscribe(self, topic: str) -> None:
        """Unsubscribe from ``topic``."""
        if self.client is None:
            raise UnsubscribeError("failed to unsubscribe: client is not connected")
        try:
            rc, _ = self.client.unsubscribe(topic)
        except (ValueError, TypeError) as e:
            raise UnsubscribeError(f"failed to unsubscribe: {e}") from e
        if rc != mqtt.MQTT_ERR_SUCCESS:
            raise UnsubscribeError(f"failed to unsubscribe: {mqtt.error_string(rc)}")
        logger.info(f"Unsubscribed from topic: {topic}")

    def loop(self, timeout: float) -> None:
        """
        Run one network step, waiting at most ``timeout`` seconds.

        Message callbacks fire synchronously from within this call.
        """
        if self.client is None:
            raise EventLoopError("failed to execute message loop: client is not connected", mqtt.MQTT_ERR_NO_CONN)
        rc = self.client.loop(timeout=timeout)
        if rc != mqtt.MQTT_ERR_SUCCESS:
            raise EventLoopError(f"failed to execute message loop; {mqtt.error_string(rc)}", rc)

    def close(self) -> None:
        """Gracefully disconnect and release the client handle."""
        if self.client is None:
            return
        try:
            if self.connected:
                logger.info("Disconnecting from MQTT broker")
                self.client.disconnect()
        except OSError as e:
            logger.warning(f"Error during disconnect: {e}")
        finally:
            self.connected = False
            self.client = None
