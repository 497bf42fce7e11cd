"""Two-mode field selection shared by role and token payload builders."""

from __future__ import annotations

from collections.abc import Iterable, Set
from typing import Any

from pydantic import BaseModel


def collect_fields(
    data: dict[str, Any],
    *,
    names: Iterable[str],
    declared: BaseModel,
    prior: BaseModel | None,
    create: bool,
    always_on_create: Set[str] = frozenset(),
) -> None:
    """Copy selected fields from ``declared`` into an outgoing payload.

    On create, a field is sent when it holds a non-zero value or is listed in
    ``always_on_create``. On update, a field is sent only when it differs
    from ``prior``; a missing ``prior`` marks every field as changed.
    """
    for name in names:
        value = getattr(declared, name)
        if create:
            if name in always_on_create or _is_set(value):
                data[name] = to_wire(value)
            continue
        if prior is None or getattr(prior, name) != value:
            data[name] = to_wire(value)


def to_wire(value: Any) -> Any:
    """Convert one field value into its JSON payload form.

    Sets become lists sorted for stable payloads; the remote store must not
    depend on element order.
    """
    if isinstance(value, (set, frozenset)):
        return sorted(value)
    return value


def _is_set(value: Any) -> bool:
    """Return ``True`` for values other than the field type's zero value."""
    if isinstance(value, bool):
        return value
    return value not in (None, 0, "") and value != frozenset()
