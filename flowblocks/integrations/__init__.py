"""Built-in integration blocks."""

from typing import Optional, Sequence

from flowblocks.blocks.http import HttpTransport
from flowblocks.blocks.registry import BlockRegistry
from flowblocks.callbacks.base import BlockCallback
from flowblocks.config import FlowblocksConfig
from flowblocks.credentials.resolver import CredentialResolver


def build_registry(
    credential_resolver: CredentialResolver,
    transport: Optional[HttpTransport] = None,
    config: Optional[FlowblocksConfig] = None,
    callbacks: Optional[Sequence[BlockCallback]] = None,
) -> BlockRegistry:
    """Return a :class:`BlockRegistry` with every built-in block registered."""
    from flowblocks.integrations.hinova import build_hinova_executor

    registry = BlockRegistry()
    registry.register(build_hinova_executor(credential_resolver, transport, config, callbacks))
    return registry
