"""Variable resolution and session mutation."""

from flowblocks.variables.resolver import (
    current_value, find_variable_by_id, find_variable_by_name,
    resolve_deep, resolve_scalar,
)
from flowblocks.variables.session import apply_updates

__all__ = [
    "current_value", "find_variable_by_id", "find_variable_by_name",
    "resolve_deep", "resolve_scalar", "apply_updates",
]
