"""Integration block execution: dispatcher, registry and handler helpers."""

from flowblocks.blocks.base import ActionContext, ActionHandler, describe_error
from flowblocks.blocks.dispatcher import IntegrationBlockExecutor
from flowblocks.blocks.http import HttpTransport
from flowblocks.blocks.registry import BlockRegistry

__all__ = [
    "ActionContext", "ActionHandler", "describe_error",
    "IntegrationBlockExecutor", "HttpTransport", "BlockRegistry",
]
