"""Shared building blocks for integration action handlers.

Every action handler follows the same shape:

    1. resolve ``{{variables}}`` in its options (empty fields dropped)
    2. check its required field(s), re-resolving once more
    3. call the external service; failures become a log, never an exception
    4. map the payload (or an explicit empty-result policy) to variable updates
    5. hand the updates to the session mutator via :func:`finish`

Handlers are ``async def handler(options, ctx) -> ExecutionResult``.
"""

import json
import logging
from typing import Any, Awaitable, Callable, Optional, TypeVar

import httpx
from pydantic import BaseModel, ConfigDict

from flowblocks.blocks.http import HttpTransport
from flowblocks.config import FlowblocksConfig
from flowblocks.exceptions import FlowblocksError
from flowblocks.types import (
    ExecutionResult, LogEntry, LogStatus, SessionState, VariableUpdate,
)
from flowblocks.variables.resolver import find_variable_by_id, resolve_deep, resolve_scalar
from flowblocks.variables.session import apply_updates

logger = logging.getLogger(__name__)

O = TypeVar("O")


class ActionContext(BaseModel):
    """Everything a handler needs besides its own options."""
    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    block_id: str
    state: SessionState
    secret: BaseModel                   # decrypted credential fields
    outgoing_edge_id: Optional[str] = None
    transport: HttpTransport
    config: FlowblocksConfig

    @property
    def token(self) -> str:
        return getattr(self.secret, "token", "")


ActionHandler = Callable[[Any, ActionContext], Awaitable[ExecutionResult]]


# ── Option handling ───────────────────────────────────────────────────────────


def resolve_options(options: O, ctx: ActionContext) -> O:
    """Resolve every placeholder in *options*, dropping fields left empty."""
    return resolve_deep(options, ctx.state.variables, remove_empty_strings=True)


def resolve_required(value: str, ctx: ActionContext) -> str:
    """Second scalar pass over an already-present required field."""
    return resolve_scalar(value, ctx.state.variables)


# ── Results ───────────────────────────────────────────────────────────────────


def log(status: LogStatus, description: str, details: Optional[str] = None) -> LogEntry:
    return LogEntry(status=status, description=description, details=details)


def error_result(ctx: ActionContext, description: str) -> ExecutionResult:
    """Terminal, local validation failure: one error log, state unchanged."""
    return ExecutionResult(
        outgoing_edge_id=ctx.outgoing_edge_id,
        logs=[log(LogStatus.ERROR, description)],
    )


def describe_error(err: Exception, context: Optional[str] = None) -> LogEntry:
    """Convert an exception raised by an external call into one error log entry.

    *context* (e.g. "While fetching invoices") becomes the description when
    given; the error's own text goes to ``details``.
    """
    if isinstance(err, httpx.HTTPStatusError):
        response = err.response
        try:
            body = response.text
        except httpx.ResponseNotRead:
            body = ""
        details = f"{response.status_code} {response.reason_phrase}"
        if body:
            details += f": {body}"
        return log(LogStatus.ERROR, context or f"HTTP {response.status_code}", details)

    if isinstance(err, FlowblocksError):
        details = json.dumps(err.details, default=str) if err.details else str(err)
        return log(LogStatus.ERROR, context or str(err), details)

    return log(LogStatus.ERROR, context or type(err).__name__, str(err) or None)



# ── Variable updates ──────────────────────────────────────────────────────────


def stage_update(
    updates: list[VariableUpdate],
    ctx: ActionContext,
    variable_id: Optional[str],
    value: str,
) -> bool:
    """Queue *value* for *variable_id* if that variable exists.

    Unconfigured fields (``variable_id`` is None) and ids missing from the
    current variable set are skipped. Returns True when staged.
    """
    if not variable_id:
        return False
    if find_variable_by_id(ctx.state.variables, variable_id) is None:
        logger.debug("[Block %s] Output variable %s no longer exists, skipping", ctx.block_id, variable_id)
        return False
    updates.append(VariableUpdate(variable_id=variable_id, value=value))
    return True


def finish(
    ctx: ActionContext,
    updates: list[VariableUpdate],
    logs: list[LogEntry],
) -> ExecutionResult:
    """Build the handler's result, applying *updates* when there are any."""
    if not updates:
        return ExecutionResult(outgoing_edge_id=ctx.outgoing_edge_id, logs=logs)

    new_state, history = apply_updates(ctx.state, updates, ctx.block_id)
    return ExecutionResult(
        outgoing_edge_id=ctx.outgoing_edge_id,
        new_session_state=new_state,
        new_set_variable_history=history,
        logs=logs,
    )
