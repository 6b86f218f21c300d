"""End-to-end tests of the mqtt-pub and mqtt-sub entry points."""

import json
import signal
from unittest.mock import Mock

import paho.mqtt.client as mqtt
import pytest

from mqtt_pubsub.main import pub_main, sub_main

from .conftest import make_paho_message


def test_pub_main(paho_client: Mock, capsys: pytest.CaptureFixture[str]) -> None:
    assert pub_main(["-t", "test", "-m", "hello"]) == 0

    paho_client.connect.assert_called_once_with("localhost", 1883, keepalive=60)
    paho_client.publish.assert_called_once_with("test", "hello", qos=0, retain=False)
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err == ""


def test_pub_main_help(paho_client_factory: Mock, capsys: pytest.CaptureFixture[str]) -> None:
    assert pub_main(["--help"]) == 0

    paho_client_factory.assert_not_called()
    assert "Publish message to MQTT topic" in capsys.readouterr().out


def test_pub_main_missing_message(paho_client_factory: Mock, capsys: pytest.CaptureFixture[str]) -> None:
    assert pub_main(["-t", "test"]) == 1

    paho_client_factory.assert_not_called()
    captured = capsys.readouterr()
    assert "Usage:" in captured.out
    assert "error: topic or message not specified" in captured.err


def test_pub_main_unknown_option(paho_client_factory: Mock, capsys: pytest.CaptureFixture[str]) -> None:
    assert pub_main(["-t", "test", "-m", "hello", "--qos", "1"]) == 1

    paho_client_factory.assert_not_called()
    captured = capsys.readouterr()
    assert "Usage:" in captured.out
    assert "error: unknown option" in captured.err


def test_pub_main_connect_failure(paho_client: Mock, capsys: pytest.CaptureFixture[str]) -> None:
    paho_client.connect.side_effect = ConnectionRefusedError(111, "Connection refused")

    assert pub_main(["-t", "test", "-m", "hello", "-h", "broker", "-p", "1884"]) == 1

    captured = capsys.readouterr()
    assert captured.out == ""
    assert "error: failed to connect to MQTT broker broker:1884" in captured.err


def test_pub_main_json_diagnostics(paho_client: Mock, capsys: pytest.CaptureFixture[str]) -> None:
    paho_client.publish.return_value = Mock(rc=mqtt.MQTT_ERR_NO_CONN, mid=0)

    assert pub_main(["-t", "test", "-m", "hello", "--log-json"]) == 1

    lines = capsys.readouterr().err.strip().splitlines()
    record = json.loads(lines[-1])
    assert record["level"] == "ERROR"
    assert record["message"].startswith("failed to publish message")


def test_verbose_redacts_password(paho_client: Mock, capsys: pytest.CaptureFixture[str]) -> None:
    assert pub_main(["-t", "test", "-m", "hello", "-u", "user", "-P", "hunter2", "-v"]) == 0

    err = capsys.readouterr().err
    assert "debug: Starting mqtt-pub" in err
    assert "***REDACTED***" in err
    assert "hunter2" not in err


def test_sub_main(paho_client: Mock, capsys: pytest.CaptureFixture[str]) -> None:
    def loop(timeout: float) -> int:
        paho_client.on_message(paho_client, None, make_paho_message(mid=4, topic="test", payload=b"hello"))
        signal.raise_signal(signal.SIGINT)
        return mqtt.MQTT_ERR_SUCCESS

    paho_client.loop.side_effect = loop

    assert sub_main(["-t", "test"]) == 0

    paho_client.subscribe.assert_called_once_with("test", qos=0)
    paho_client.unsubscribe.assert_called_once_with("test")
    out = capsys.readouterr().out
    assert "message id: 4\ntopic     : test\nretained  : no\npayload   : hello\n" in out


def test_sub_main_missing_topic(paho_client_factory: Mock, capsys: pytest.CaptureFixture[str]) -> None:
    assert sub_main(["-r"]) == 1

    paho_client_factory.assert_not_called()
    captured = capsys.readouterr()
    assert "Subscribe to a MQTT topic" in captured.out
    assert "error: missing topic" in captured.err


def test_sub_main_rejects_message_option(paho_client_factory: Mock) -> None:
    assert sub_main(["-t", "test", "-m", "hello"]) == 1

    paho_client_factory.assert_not_called()
