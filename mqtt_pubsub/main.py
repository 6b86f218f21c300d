"""Entry points for the mqtt-pub and mqtt-sub command-line tools."""

import sys
from typing import Optional, Sequence

from .commands import PublishCommand, SubscribeCommand
from .config import Command, ExitStatus, Tool, parse_arguments, print_usage
from .utils import configure_logging, get_logger

logger = get_logger(__name__)


def run(tool: Tool, argv: Optional[Sequence[str]] = None) -> int:
    """
    Parse arguments, run the tool's action and return the exit code.

    Args:
        tool: Which executable is running
        argv: Arguments without the program name (defaults to sys.argv[1:])
    """
    if argv is None:
        argv = sys.argv[1:]

    # Parse errors are reported before the logging flags are known
    configure_logging()
    invocation = parse_arguments(tool, argv)
    config = invocation.config
    configure_logging(verbose=config.verbose, json_format=config.log_json)

    if invocation.command is Command.SHOW_HELP:
        print_usage(tool)
        return int(invocation.exit_status)

    logger.debug(f"Starting {tool.value}", extra={"extra_fields": config.redacted()})

    if tool is Tool.PUBLISH:
        exit_status = PublishCommand(config).run()
    else:
        exit_status = SubscribeCommand(config).run()

    if exit_status is not ExitStatus.SUCCESS:
        logger.debug(f"{tool.value} finished with exit status {int(exit_status)}")
    return int(exit_status)


def pub_main(argv: Optional[Sequence[str]] = None) -> int:
    """mqtt-pub: publish a message to an MQTT topic."""
    return run(Tool.PUBLISH, argv)


def sub_main(argv: Optional[Sequence[str]] = None) -> int:
    """mqtt-sub: subscribe to an MQTT topic and print received messages."""
    return run(Tool.SUBSCRIBE, argv)
