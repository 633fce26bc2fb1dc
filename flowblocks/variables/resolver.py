"""
Placeholder resolution for block options.

``{{name}}`` references may appear in any string of a block's options:
a user can type ``{{cpf}}`` straight into a text field. Options are resolved
before any field validation so validators see concrete values.

All functions are pure (no side effects, no I/O).
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Any, Iterable, Optional, TypeVar

from pydantic import BaseModel

from flowblocks.types import Variable

T = TypeVar("T")

# Name must contain a non-blank character and no braces; "{{}}" and
# unclosed "{{" are not placeholders and stay as typed.
_PLACEHOLDER_RE = re.compile(r"\{\{\s*([^{}\s][^{}]*?)\s*\}\}")


# ── Lookups ───────────────────────────────────────────────────────────────────


def find_variable_by_id(
    variables: Iterable[Variable], variable_id: Optional[str]
) -> Optional[Variable]:
    """Return the variable with *variable_id*, or None."""
    if not variable_id:
        return None
    return next((v for v in variables if v.id == variable_id), None)


def find_variable_by_name(
    variables: Iterable[Variable], name: str
) -> Optional[Variable]:
    """Return the first variable named *name*, or None."""
    return next((v for v in variables if v.name == name), None)


def current_value(variable: Optional[Variable]) -> Optional[str]:
    """Value currently held by *variable*; None when unknown or never set."""
    if variable is None:
        return None
    return variable.value


# ── Resolution ────────────────────────────────────────────────────────────────


def resolve_scalar(template: Optional[str], variables: Iterable[Variable]) -> str:
    """Substitute every ``{{name}}`` in *template* with the variable's value.

    Unset and unknown variables resolve to ``""``. Text that is not a
    well-formed placeholder is returned untouched.
    """
    if not template:
        return ""
    variables = tuple(variables)

    def _sub(m: re.Match) -> str:
        value = current_value(find_variable_by_name(variables, m.group(1)))
        return value if value is not None else ""

    return _PLACEHOLDER_RE.sub(_sub, template)


def resolve_deep(
    config: T,
    variables: Iterable[Variable],
    remove_empty_strings: bool = False,
) -> T:
    """Resolve every string leaf of an arbitrarily nested *config*.

    Walks mappings, lists, tuples and pydantic models; anything else is
    returned as-is. Returns a structurally identical copy; a model comes back
    as a new instance of the same class.

    With *remove_empty_strings*, a leaf that resolves to ``""`` is dropped
    from its container instead of kept, so optional model fields fall back
    to their defaults. Required model fields keep the empty string.
    """
    variables = tuple(variables)

    def _is_dropped(v: Any) -> bool:
        return remove_empty_strings and isinstance(v, str) and v == ""

    def _walk_model(model: BaseModel) -> BaseModel:
        # Rebuilt under each field's alias so models without populate_by_name
        # validate; required fields keep "" instead of disappearing.
        data: dict[str, Any] = {}
        for name, field in type(model).model_fields.items():
            value = _walk(getattr(model, name))
            if _is_dropped(value) and not field.is_required():
                continue
            data[field.alias or name] = value
        if model.model_extra:
            data.update(_walk(model.model_extra))
        return type(model).model_validate(data)

    def _walk(v: Any) -> Any:
        if isinstance(v, Enum):
            return v
        if isinstance(v, str):
            return resolve_scalar(v, variables)
        if isinstance(v, BaseModel):
            return _walk_model(v)
        if isinstance(v, dict):
            resolved = {k: _walk(val) for k, val in v.items()}
            return {k: val for k, val in resolved.items() if not _is_dropped(val)}
        if isinstance(v, (list, tuple)):
            items = [_walk(item) for item in v]
            items = [item for item in items if not _is_dropped(item)]
            return type(v)(items)
        return v

    return _walk(config)
