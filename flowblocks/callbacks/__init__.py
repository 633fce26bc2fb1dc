"""Callback/hook system for block execution events."""

from flowblocks.callbacks.base import BaseCallback, BlockCallback
from flowblocks.callbacks.logging import LoggingCallback

__all__ = ["BlockCallback", "BaseCallback", "LoggingCallback"]
