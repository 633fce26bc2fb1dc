"""Central registry of integration block executors."""

from flowblocks.blocks.dispatcher import IntegrationBlockExecutor
from flowblocks.exceptions import BlockNotSupported
from flowblocks.types import Block, ExecutionResult, SessionState


class BlockRegistry:
    """Maps block types to the executor that runs them."""

    def __init__(self):
        self._executors: dict[str, IntegrationBlockExecutor] = {}

    def register(self, executor: IntegrationBlockExecutor) -> None:
        """Register *executor* under its ``block_type``. Re-registering replaces."""
        self._executors[executor.block_type] = executor

    def get(self, block_type: str) -> IntegrationBlockExecutor:
        """Get the executor for *block_type*.

        Raises:
            BlockNotSupported: if no executor is registered for it
        """
        if block_type not in self._executors:
            raise BlockNotSupported(f"Block type '{block_type}' is not registered", block_type=block_type)
        return self._executors[block_type]

    def list_block_types(self) -> list[str]:
        return sorted(self._executors)

    async def execute(self, block: Block, state: SessionState) -> ExecutionResult:
        """Route *block* to its executor by ``block.type``."""
        return await self.get(block.type).execute(block, state)
