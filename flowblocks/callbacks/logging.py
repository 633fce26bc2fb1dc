"""Structured JSON logging callback for block execution events."""

import json
import logging
from datetime import datetime
from typing import Any

from flowblocks.callbacks.base import BaseCallback
from flowblocks.credentials.vault import sanitize_params
from flowblocks.types import Block, ExecutionResult, SessionState

logger = logging.getLogger("flowblocks.audit")


def _now() -> str:
    return datetime.utcnow().isoformat() + "Z"


class LoggingCallback(BaseCallback):
    """Emits one structured JSON log line per lifecycle event.

    Each line is a self-contained JSON object with ``event``, ``ts`` and the
    fields relevant to that event. Option values under sensitive keys are
    masked.

    Log level: INFO for normal events, ERROR for errors.
    Logger name: flowblocks.audit (configure in your logging setup)
    """

    async def on_block_start(self, block: Block, state: SessionState, **kwargs: Any) -> None:
        options = sanitize_params(block.options or {})
        logger.info(json.dumps({
            "event": "block_start",
            "ts": _now(),
            "block_id": block.id,
            "block_type": block.type,
            "workspace_id": state.workspace_id,
            "action": options.get("action"),
            "option_keys": sorted(options.keys()),
        }, ensure_ascii=False))

    async def on_block_complete(
        self, block: Block, result: ExecutionResult, **kwargs: Any
    ) -> None:
        logger.info(json.dumps({
            "event": "block_complete",
            "ts": _now(),
            "block_id": block.id,
            "block_type": block.type,
            "outgoing_edge_id": result.outgoing_edge_id,
            "state_changed": result.new_session_state is not None,
            "variables_set": len(result.new_set_variable_history),
            "logs": [
                {"status": entry.status.value, "description": entry.description[:200]}
                for entry in result.logs
            ],
        }, ensure_ascii=False))

    async def on_error(
        self, error: Exception, context: dict[str, Any], **kwargs: Any
    ) -> None:
        logger.error(json.dumps({
            "event": "error",
            "ts": _now(),
            "error_type": type(error).__name__,
            "error": str(error),
            "context": {k: str(v)[:200] for k, v in context.items()},
        }, ensure_ascii=False))
