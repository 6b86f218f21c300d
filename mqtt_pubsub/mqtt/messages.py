"""Received message representation and console formatting."""

from dataclasses import dataclass
from typing import Any

EMPTY_PAYLOAD_MARKER = "<empty>"


@dataclass(frozen=True)
class ReceivedMessage:
    """A message delivered by the broker."""
    mid: int
    topic: str
    retain: bool
    payload: bytes

    @staticmethod
    def from_paho(msg: Any) -> 'ReceivedMessage':
        """Copy the fields we print out of a paho ``MQTTMessage``."""
        return ReceivedMessage(
            mid=msg.mid,
            topic=msg.topic,
            retain=bool(msg.retain),
            payload=bytes(msg.payload or b""),
        )

    def payload_text(self) -> str:
        """Payload decoded as UTF-8, or the empty marker for zero-length payloads."""
        if not self.payload:
            return EMPTY_PAYLOAD_MARKER
        return self.payload.decode("utf-8", errors="replace")

    def format_block(self) -> str:
        """
        Format the message the way mqtt-sub prints it.

        Format:
            message id: 1
            topic     : test
            retained  : no
            payload   : hello

        The empty line separating blocks comes from print().
        """
        return (
            f"message id: {self.mid}\n"
            f"topic     : {self.topic}\n"
            f"retained  : {'yes' if self.retain else 'no'}\n"
            f"payload   : {self.payload_text()}\n"
        )
