"""Publish a single message and exit."""

from ..config.settings import ExitStatus, SessionConfig
from ..mqtt.client import MQTTSession
from ..utils.errors import MQTTPubSubError
from ..utils.logger import get_logger

logger = get_logger(__name__)


class PublishCommand:
    """
    Connect, publish the configured message once, disconnect.
    """

    def __init__(self, config: SessionConfig) -> None:
        if config.topic is None or config.message is None:
            raise ValueError("PublishCommand requires topic and message")
        self.config: SessionConfig = config
        self.topic: str = config.topic
        self.message: str = config.message

    def run(self) -> ExitStatus:
        """Run the publish sequence. Any failure is terminal."""
        try:
            with MQTTSession(self.config) as session:
                mid = session.publish(self.topic, self.message, retain=self.config.retain)
                logger.info(f"Published message {mid} to {self.topic}")
        except MQTTPubSubError as e:
            logger.error(str(e))
            return ExitStatus.FAILURE

        return ExitStatus.SUCCESS
