"""Command-line parsing shared by mqtt-pub and mqtt-sub."""

import argparse
import re
from typing import Dict, List, NoReturn, Optional, Sequence

from ..utils.errors import UsageError
from ..utils.logger import get_logger
from .settings import (
    DEFAULT_HOST,
    DEFAULT_PORT,
    Command,
    ExitStatus,
    Invocation,
    SessionConfig,
    Tool,
)

logger = get_logger(__name__)

PUB_USAGE = """\
mqtt-pub
Publish message to MQTT topic

Usage:
    mqtt-pub [-h host] [-p port] [-u user] [-P password]
             [-i client-id] [-r] [-v] [--log-json]
             -t topic -m message

Options:
    -h, --host     : hostname of MQTT broker (default: localhost)
    -p, --port     : port of MQTT broker (default: 1883)
    -u, --user     : name of the MQTT user (default: <unset>)
    -P, --password : password of the MQTT user (default: <unset>)
    -i, --client-id: MQTT client id (default: <unset>)
    -r, --retain   : retain message (default: message is not retained)
    -t, --topic    : MQTT topic to publish (required)
    -m, --message  : message to publish (required)
    -v, --verbose  : print debug diagnostics to stderr
        --log-json : print diagnostics as JSON lines
    -H, --help     : print this message

Example:
    mqtt-pub -t test -m hello
"""

SUB_USAGE = """\
mqtt-sub
Subscribe to a MQTT topic

Usage:
    mqtt-sub [-h host] [-p port] [-u user] [-P password]
             [-i client-id] [-r] [-v] [--log-json] -t topic

Options:
    -h, --host     : hostname of MQTT broker (default: localhost)
    -p, --port     : port of MQTT broker (default: 1883)
    -u, --user     : name of the MQTT user (default: <unset>)
    -P, --password : password of the MQTT user (default: <unset>)
    -i, --client-id: MQTT client id (default: <unset>)
    -r, --retain   : retain message (default: message is not retained)
    -t, --topic    : MQTT topic to subscribe (required)
    -v, --verbose  : print debug diagnostics to stderr
        --log-json : print diagnostics as JSON lines
    -H, --help     : print this message

Example:
    mqtt-sub -t test
"""

_ATOI_PATTERN = re.compile(r"\s*([+-]?\d+)")


def atoi(text: str) -> int:
    """
    Convert the leading integer of ``text`` like C ``atoi``.

    Leading whitespace and a sign are accepted, trailing garbage is ignored
    and input without a leading number yields 0.
    """
    match = _ATOI_PATTERN.match(text)
    if not match:
        return 0
    return int(match.group(1))


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises instead of printing and exiting."""

    def error(self, message: str) -> NoReturn:
        raise UsageError(message)


def _value_options(tool: Tool) -> Dict[str, str]:
    """Options taking a value, as short option -> long option."""
    options = {
        "-i": "--client-id",
        "-h": "--host",
        "-p": "--port",
        "-u": "--user",
        "-P": "--password",
        "-t": "--topic",
    }
    if tool is Tool.PUBLISH:
        options["-m"] = "--message"
    return options


_FLAG_OPTIONS = ("--retain", "--help", "--verbose", "--log-json")


def _resolve_long_option(token: str, long_options: Sequence[str]) -> Optional[str]:
    """Expand an exact or unambiguous abbreviated long option."""
    if token in long_options:
        return token
    candidates = [option for option in long_options if option.startswith(token)]
    if len(candidates) == 1:
        return candidates[0]
    return None


def attach_option_values(tool: Tool, argv: Sequence[str]) -> List[str]:
    """
    Rewrite ``-m VALUE`` and ``--message VALUE`` as ``--message=VALUE``.

    A value option takes the next argument as is, even when it starts with a
    dash (``-m --reset``, ``-P -secret``). Arguments after ``--`` are left
    untouched.
    """
    value_options = _value_options(tool)
    long_options = list(value_options.values()) + list(_FLAG_OPTIONS)
    result: List[str] = []
    index = 0
    while index < len(argv):
        token = argv[index]
        if token == "--":
            result.extend(argv[index:])
            break

        option = None
        if token in value_options:
            option = value_options[token]
        elif token.startswith("--") and "=" not in token:
            resolved = _resolve_long_option(token, long_options)
            if resolved in value_options.values():
                option = resolved

        if option is not None and index + 1 < len(argv):
            result.append(f"{option}={argv[index + 1]}")
            index += 2
        else:
            result.append(token)
            index += 1
    return result


def build_parser(tool: Tool) -> argparse.ArgumentParser:
    """Build the option parser for one of the tools."""
    parser = _ArgumentParser(prog=tool.value, add_help=False)
    parser.add_argument("-i", "--client-id", dest="client_id")
    parser.add_argument("-h", "--host", default=DEFAULT_HOST)
    parser.add_argument("-p", "--port", type=atoi, default=DEFAULT_PORT)
    parser.add_argument("-u", "--user", dest="username")
    parser.add_argument("-P", "--password")
    parser.add_argument("-r", "--retain", action="store_true")
    parser.add_argument("-t", "--topic")
    if tool is Tool.PUBLISH:
        parser.add_argument("-m", "--message")
    parser.add_argument("-H", "--help", dest="show_help", action="store_true")
    parser.add_argument("-v", "--verbose", action="store_true")
    parser.add_argument("--log-json", action="store_true")
    return parser


def _missing_fields(tool: Tool, config: SessionConfig) -> List[str]:
    missing = []
    if config.topic is None:
        missing.append("topic")
    if tool is Tool.PUBLISH and config.message is None:
        missing.append("message")
    return missing


def parse_arguments(tool: Tool, argv: Sequence[str]) -> Invocation:
    """
    Turn the argument vector (without program name) into an Invocation.

    Parsing never raises: unknown options and missing required fields select
    ``Command.SHOW_HELP`` with ``ExitStatus.FAILURE`` and are reported on the
    diagnostic logger. An explicit ``--help`` selects ``Command.SHOW_HELP``
    with ``ExitStatus.SUCCESS``. Repeated options keep their last value.
    """
    parser = build_parser(tool)
    try:
        namespace = parser.parse_args(attach_option_values(tool, argv))
    except UsageError as e:
        logger.error(f"unknown option: {e}")
        return Invocation(
            tool=tool,
            config=SessionConfig(),
            command=Command.SHOW_HELP,
            exit_status=ExitStatus.FAILURE,
        )

    config = SessionConfig(
        topic=namespace.topic,
        message=getattr(namespace, "message", None),
        client_id=namespace.client_id,
        host=namespace.host,
        port=namespace.port,
        username=namespace.username,
        password=namespace.password,
        retain=namespace.retain,
        verbose=namespace.verbose,
        log_json=namespace.log_json,
    )

    if namespace.show_help:
        return Invocation(tool=tool, config=config, command=Command.SHOW_HELP)

    missing = _missing_fields(tool, config)
    if missing:
        if tool is Tool.PUBLISH:
            logger.error(f"topic or message not specified (missing: {', '.join(missing)})")
        else:
            logger.error("missing topic")
        return Invocation(
            tool=tool,
            config=config,
            command=Command.SHOW_HELP,
            exit_status=ExitStatus.FAILURE,
        )

    return Invocation(tool=tool, config=config)


def usage(tool: Tool) -> str:
    """Usage text of the given tool."""
    return PUB_USAGE if tool is Tool.PUBLISH else SUB_USAGE


def print_usage(tool: Tool) -> None:
    """Print usage text to stdout."""
    print(usage(tool), end="")
