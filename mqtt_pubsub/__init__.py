"""Command-line tools to publish to and subscribe from an MQTT broker."""

__version__ = "1.0.0"
