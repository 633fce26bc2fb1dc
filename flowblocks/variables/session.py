"""Applies computed variable values back into a session.

The only sanctioned way for a block to change conversation variables.
"""

import logging
from typing import Iterable, Optional

from flowblocks.types import (
    SessionState, SetVariableHistoryItem, Variable, VariableUpdate,
)

logger = logging.getLogger(__name__)


def apply_updates(
    state: SessionState,
    updates: Iterable[VariableUpdate],
    block_id: Optional[str],
) -> tuple[SessionState, list[SetVariableHistoryItem]]:
    """Apply *updates* to the head context's variables.

    Updates whose variable id does not exist in the head context are
    skipped: configuration pointing at a deleted variable must not abort an
    otherwise successful block. Within one batch the last update to an id
    wins, but every applied update gets its own history item, in the order
    supplied.

    Args:
        state: Current session. Never mutated.
        updates: Values to write.
        block_id: Block that produced the values, recorded in the history.

    Returns:
        Tuple of (new SessionState, history items for the applied updates).
    """
    head = state.head
    positions = {v.id: i for i, v in enumerate(head.variables)}
    variables: list[Variable] = list(head.variables)
    history: list[SetVariableHistoryItem] = []
    index = state.current_set_variable_history_index

    for update in updates:
        pos = positions.get(update.variable_id)
        if pos is None:
            logger.debug(
                "[Session] Skipping update for unknown variable %s (block %s)",
                update.variable_id, block_id,
            )
            continue
        variables[pos] = variables[pos].model_copy(update={"value": update.value})
        history.append(SetVariableHistoryItem(
            result_id=head.result_id,
            index=index,
            block_id=block_id or "",
            variable_id=update.variable_id,
            value=update.value,
        ))
        index += 1

    new_head = head.model_copy(update={"variables": tuple(variables)})
    new_state = state.model_copy(update={
        "typebots_queue": (new_head, *state.typebots_queue[1:]),
        "current_set_variable_history_index": index,
    })
    return new_state, history
