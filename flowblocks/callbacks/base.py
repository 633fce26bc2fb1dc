"""Base callback protocol for block execution lifecycle hooks.

Callbacks are awaited at key points of every integration block run.
Implement this protocol to observe or instrument execution without
modifying the executors.

Usage:
    class MyCallback(BaseCallback):
        async def on_block_complete(self, block, result, **kw):
            print(f"{block.type}: {len(result.logs)} log(s)")

    executor = IntegrationBlockExecutor(..., callbacks=[MyCallback()])
"""

from typing import Any, Protocol, runtime_checkable

from flowblocks.types import Block, ExecutionResult, SessionState


@runtime_checkable
class BlockCallback(Protocol):
    """Protocol defining hooks for block execution events.

    All methods are async; the executor awaits each registered callback in order.
    """

    async def on_block_start(
        self,
        block: Block,
        state: SessionState,
        **kwargs: Any,
    ) -> None:
        """Called before a block's configuration is inspected."""
        ...

    async def on_block_complete(
        self,
        block: Block,
        result: ExecutionResult,
        **kwargs: Any,
    ) -> None:
        """Called with the result every terminal path produces."""
        ...

    async def on_error(
        self,
        error: Exception,
        context: dict[str, Any],
        **kwargs: Any,
    ) -> None:
        """Called when an exception escapes a block (e.g. corrupted credentials)."""
        ...


class BaseCallback:
    """Concrete base with no-op implementations of all hooks.

    Subclass this instead of implementing the Protocol directly
    to avoid implementing every method.
    """

    async def on_block_start(self, block: Block, state: SessionState, **kwargs: Any) -> None:
        pass

    async def on_block_complete(
        self, block: Block, result: ExecutionResult, **kwargs: Any
    ) -> None:
        pass

    async def on_error(
        self, error: Exception, context: dict[str, Any], **kwargs: Any
    ) -> None:
        pass
