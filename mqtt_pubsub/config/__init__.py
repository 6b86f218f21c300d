"""Configuration management for the MQTT command-line tools."""

from .arguments import parse_arguments, print_usage
from .settings import Command, ExitStatus, Invocation, SessionConfig, Tool

__all__ = [
    "Command",
    "ExitStatus",
    "Invocation",
    "SessionConfig",
    "Tool",
    "parse_arguments",
    "print_usage",
]
