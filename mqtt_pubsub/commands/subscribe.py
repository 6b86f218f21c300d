"""Subscribe to a topic and print messages until asked to stop."""

import signal
from collections import deque
from typing import Any, Deque, Dict, Optional

from ..config.settings import LOOP_TIMEOUT_SECONDS, ExitStatus, SessionConfig
from ..mqtt.client import MQTTSession
from ..mqtt.messages import ReceivedMessage
from ..utils.errors import EventLoopError, MQTTPubSubError, UnsubscribeError
from ..utils.logger import get_logger

logger = get_logger(__name__)

SHUTDOWN_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class ShutdownFlag:
    """
    Shutdown request set from a signal handler.

    The handler only assigns a boolean; the receive loop reads it once per
    iteration and does all of the actual shutdown work.
    """

    def __init__(self) -> None:
        self.requested: bool = False

    def request(self, sig: Optional[int] = None, frame: Any = None) -> None:
        """Signal handler compatible setter."""
        self.requested = True


class SubscribeCommand:
    """
    Connect, subscribe and print every received message until shutdown.
    """

    def __init__(
        self,
        config: SessionConfig,
        shutdown: Optional[ShutdownFlag] = None,
        loop_timeout: float = LOOP_TIMEOUT_SECONDS,
    ) -> None:
        if config.topic is None:
            raise ValueError("SubscribeCommand requires a topic")
        self.config: SessionConfig = config
        self.topic: str = config.topic
        self.shutdown: ShutdownFlag = shutdown or ShutdownFlag()
        self.loop_timeout: float = loop_timeout
        self._pending: Deque[ReceivedMessage] = deque()

    def _enqueue(self, message: ReceivedMessage) -> None:
        # Runs inside the network step; must not block.
        self._pending.append(message)

    def _drain(self) -> None:
        """Print queued messages in arrival order."""
        while self._pending:
            print(self._pending.popleft().format_block(), flush=True)

    def _install_signal_handlers(self) -> Dict[int, Any]:
        previous = {}
        for sig in SHUTDOWN_SIGNALS:
            previous[sig] = signal.getsignal(sig)
            signal.signal(sig, self.shutdown.request)
        return previous

    @staticmethod
    def _restore_signal_handlers(previous: Dict[int, Any]) -> None:
        for sig, handler in previous.items():
            if handler is not None:
                signal.signal(sig, handler)

    def run(self) -> ExitStatus:
        """Run the subscribe sequence with SIGINT/SIGTERM mapped to shutdown."""
        previous = self._install_signal_handlers()
        try:
            return self._run_session()
        finally:
            self._restore_signal_handlers(previous)

    def _run_session(self) -> ExitStatus:
        exit_status = ExitStatus.SUCCESS
        if self.config.retain:
            logger.debug("Retain flag has no effect when subscribing")

        try:
            with MQTTSession(self.config, on_message=self._enqueue) as session:
                session.subscribe(self.topic)

                try:
                    self._receive_loop(session)
                except EventLoopError as e:
                    logger.error(str(e))
                    exit_status = ExitStatus.FAILURE
                else:
                    logger.info("Shutdown requested")

                try:
                    session.unsubscribe(self.topic)
                except UnsubscribeError as e:
                    logger.warning(str(e))
        except MQTTPubSubError as e:
            logger.error(str(e))
            return ExitStatus.FAILURE

        return exit_status

    def _receive_loop(self, session: MQTTSession) -> None:
        while not self.shutdown.requested:
            try:
                session.loop(self.loop_timeout)
            finally:
                self._drain()
