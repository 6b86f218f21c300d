"""Shared fixtures: a fake paho client so no broker is needed."""

import logging
from collections.abc import Generator
from unittest.mock import Mock, patch

import paho.mqtt.client as mqtt
import pytest

from mqtt_pubsub.utils.logger import ROOT_LOGGER_NAME


@pytest.fixture(name="paho_client_factory")
def paho_client_factory_fixture() -> Generator[Mock, None, None]:
    """Replace paho's Client class; the instance is ``factory.return_value``."""
    client = Mock()
    client.connect.return_value = mqtt.MQTT_ERR_SUCCESS
    client.publish.return_value = Mock(rc=mqtt.MQTT_ERR_SUCCESS, mid=1)
    client.subscribe.return_value = (mqtt.MQTT_ERR_SUCCESS, 2)
    client.unsubscribe.return_value = (mqtt.MQTT_ERR_SUCCESS, 3)
    client.loop.return_value = mqtt.MQTT_ERR_SUCCESS
    with patch("paho.mqtt.client.Client", return_value=client) as factory:
        yield factory


@pytest.fixture(name="paho_client")
def paho_client_fixture(paho_client_factory: Mock) -> Mock:
    """The fake paho client instance."""
    return paho_client_factory.return_value


@pytest.fixture(autouse=True)
def reset_package_logger() -> Generator[None, None, None]:
    """Undo configure_logging() so caplog sees records and stale streams are dropped."""
    yield
    root = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(root.handlers):
        root.removeHandler(handler)
    root.propagate = True
    root.setLevel(logging.NOTSET)


def make_paho_message(mid: int = 1, topic: str = "test", payload: bytes = b"hello", retain: bool = False) -> Mock:
    """Build an object shaped like paho's MQTTMessage."""
    return Mock(mid=mid, topic=topic, payload=payload, retain=retain)
