"""flowblocks — action-execution core for conversational workflow integration blocks.

Usage:
    from flowblocks import Block, SessionState
    from flowblocks.credentials import CredentialEncryption, CredentialVault, VaultCredentialResolver
    from flowblocks.integrations import build_registry

    vault = CredentialVault(CredentialEncryption(key))
    registry = build_registry(VaultCredentialResolver(vault))
    result = await registry.execute(block, state)
"""

from flowblocks.types import (
    Variable, VariableUpdate, SetVariableHistoryItem, TypebotInQueue,
    SessionState, LogEntry, LogStatus, ExecutionResult, Block,
    CredentialRecord, CredentialType,
)
from flowblocks.exceptions import (
    FlowblocksError, ConfigurationError, BlockNotSupported,
    CredentialError, CredentialNotFound, CredentialCorruption, UpstreamError,
)
from flowblocks.version import __version__

__all__ = [
    "Variable", "VariableUpdate", "SetVariableHistoryItem", "TypebotInQueue",
    "SessionState", "LogEntry", "LogStatus", "ExecutionResult", "Block",
    "CredentialRecord", "CredentialType",
    "FlowblocksError", "ConfigurationError", "BlockNotSupported",
    "CredentialError", "CredentialNotFound", "CredentialCorruption", "UpstreamError",
    "__version__",
]
