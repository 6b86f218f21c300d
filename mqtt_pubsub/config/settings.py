"""Session configuration built from command-line arguments."""

from dataclasses import asdict, dataclass
from enum import Enum, IntEnum
from typing import Any, Dict, Optional

from ..utils.logger import redact_sensitive

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 1883
KEEPALIVE_SECONDS = 60
QOS_AT_MOST_ONCE = 0
LOOP_TIMEOUT_SECONDS = 1.0


class Tool(Enum):
    """The two executables sharing the option set."""
    PUBLISH = "mqtt-pub"
    SUBSCRIBE = "mqtt-sub"


class Command(Enum):
    """Action selected by the argument parser."""
    RUN = "run"
    SHOW_HELP = "show_help"


class ExitStatus(IntEnum):
    """Process exit status."""
    SUCCESS = 0
    FAILURE = 1


@dataclass(frozen=True)
class SessionConfig:
    """MQTT session settings for one invocation."""
    topic: Optional[str] = None
    message: Optional[str] = None
    client_id: Optional[str] = None
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    username: Optional[str] = None
    password: Optional[str] = None
    retain: bool = False
    verbose: bool = False
    log_json: bool = False

    def redacted(self) -> Dict[str, Any]:
        """Configuration as a dict that is safe to log."""
        return redact_sensitive(asdict(self))


@dataclass(frozen=True)
class Invocation:
    """Result of argument parsing: what to run, and the status so far."""
    tool: Tool
    config: SessionConfig
    command: Command = Command.RUN
    exit_status: ExitStatus = ExitStatus.SUCCESS
