"""Orchestrates: validate options → resolve credential → decrypt → route to handler.

One pass per block invocation, no retries of its own:

    NoAction            options absent or no action chosen → pass-through
    MissingCredential   action chosen, no credential reference → error log
    ResolvingCredential reference unknown to the workspace → error log
    Dispatch            handler registered for the action runs
    Completed           handler result returned unchanged

Corrupted credentials are the one failure that is raised instead of
logged; see :class:`flowblocks.exceptions.CredentialCorruption`.
"""

import logging
from enum import Enum
from typing import Any, Mapping, Optional, Sequence

from pydantic import BaseModel, TypeAdapter, ValidationError

from flowblocks.blocks.base import ActionContext, ActionHandler, log
from flowblocks.blocks.http import HttpTransport
from flowblocks.callbacks.base import BlockCallback
from flowblocks.config import FlowblocksConfig, config as default_config
from flowblocks.credentials.resolver import CredentialResolver
from flowblocks.exceptions import BlockNotSupported, ConfigurationError
from flowblocks.types import Block, ExecutionResult, LogStatus, SessionState

logger = logging.getLogger(__name__)


class IntegrationBlockExecutor:
    """Runs one integration block type against its closed set of actions.

    Args:
        block_type: Block ``type`` this executor accepts.
        actions: Enum of every action the block can be configured with.
        options_adapter: Validates raw ``block.options`` into the per-action
            options model. The "no action" variant must yield ``action=None``.
        handlers: One handler per member of *actions*.
        credentials_schema: Pydantic model the decrypted secret must match.
        credential_resolver: Looks credential references up per workspace.
        transport: HTTP transport shared by handlers; built from *config*
            when omitted.
        config: Runtime configuration; the module-level config by default.
        callbacks: Lifecycle hooks awaited in order.

    Raises:
        ConfigurationError: if *handlers* does not cover *actions* exactly.
            Adding an action without a handler fails at startup, not at the
            first conversation that selects it.
    """

    def __init__(
        self,
        *,
        block_type: str,
        actions: type[Enum],
        options_adapter: TypeAdapter,
        handlers: Mapping[Enum, ActionHandler],
        credentials_schema: type[BaseModel],
        credential_resolver: CredentialResolver,
        transport: Optional[HttpTransport] = None,
        config: Optional[FlowblocksConfig] = None,
        callbacks: Optional[Sequence[BlockCallback]] = None,
    ):
        missing = [a.value for a in actions if a not in handlers]
        unknown = [str(a) for a in handlers if a not in set(actions)]
        if missing or unknown:
            raise ConfigurationError(
                f"Handlers for block '{block_type}' do not match its actions",
                details={"missing": missing, "unknown": unknown},
            )
        self.block_type = block_type
        self.actions = actions
        self.options_adapter = options_adapter
        self.credentials_schema = credentials_schema
        self.credential_resolver = credential_resolver
        self.config = config or default_config
        self.transport = transport or HttpTransport(timeout_seconds=self.config.http_timeout_seconds)
        self.callbacks = list(callbacks or [])
        self._handlers = dict(handlers)

    async def execute(self, block: Block, state: SessionState) -> ExecutionResult:
        """Execute *block* once and return its uniform result."""
        for cb in self.callbacks:
            await cb.on_block_start(block, state)
        try:
            result = await self._execute(block, state)
        except Exception as exc:
            for cb in self.callbacks:
                await cb.on_error(exc, {"block_id": block.id, "block_type": block.type})
            raise
        for cb in self.callbacks:
            await cb.on_block_complete(block, result)
        return result

    async def _execute(self, block: Block, state: SessionState) -> ExecutionResult:
        edge = block.outgoing_edge_id
        if block.type != self.block_type:
            raise BlockNotSupported(
                f"Executor for '{self.block_type}' cannot run block type '{block.type}'",
                block_type=block.type,
            )

        if not block.options:
            return ExecutionResult(outgoing_edge_id=edge)

        try:
            options: Any = self.options_adapter.validate_python(block.options)
        except ValidationError as exc:
            logger.warning("[Dispatcher] Block %s has invalid options: %s", block.id, exc.error_count())
            return ExecutionResult(
                outgoing_edge_id=edge,
                logs=[log(LogStatus.ERROR, "Invalid block options", str(exc))],
            )

        action = getattr(options, "action", None)
        if action is None:
            return ExecutionResult(outgoing_edge_id=edge)

        credentials_id = getattr(options, "credentials_id", None)
        if not credentials_id:
            return ExecutionResult(
                outgoing_edge_id=edge,
                logs=[log(LogStatus.ERROR, "Missing credentialsId")],
            )

        credential = self.credential_resolver.resolve(credentials_id, state.workspace_id)
        if credential is None:
            logger.info("[Dispatcher] Credential %s not found in workspace %s", credentials_id, state.workspace_id)
            return ExecutionResult(
                outgoing_edge_id=edge,
                logs=[log(LogStatus.ERROR, "Credentials not found")],
            )

        secret = credential.decrypt(self.credentials_schema)

        handler = self._handlers[action]
        ctx = ActionContext(
            block_id=block.id,
            state=state,
            secret=secret,
            outgoing_edge_id=edge,
            transport=self.transport,
            config=self.config,
        )
        logger.debug("[Dispatcher] Block %s → %s", block.id, action.value)
        return await handler(options, ctx)
