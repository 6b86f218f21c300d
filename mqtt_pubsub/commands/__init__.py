"""The actions performed by mqtt-pub and mqtt-sub."""

from .publish import PublishCommand
from .subscribe import ShutdownFlag, SubscribeCommand

__all__ = ["PublishCommand", "ShutdownFlag", "SubscribeCommand"]
