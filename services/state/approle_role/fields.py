"""Outgoing payload and incoming response mapping for AppRole roles."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from services.state.approle_role.diff import collect_fields
from services.state.approle_role.domain import AppRoleRole
from services.state.approle_role.token_fields import (
    read_token_fields,
    update_token_fields,
)

ROLE_FIELDS: tuple[str, ...] = (
    "bind_secret_id",
    "secret_id_num_uses",
    "secret_id_ttl",
    "secret_id_bound_cidrs",
)

_ALWAYS_ON_CREATE = frozenset({"bind_secret_id"})


def role_payload(
    *,
    declared: AppRoleRole,
    prior: AppRoleRole | None,
    create: bool,
) -> dict[str, Any]:
    """Build the primary write payload for one role.

    Create sends every set field; update sends only fields changed since
    ``prior``. Token bundle fields are merged into the same mapping.
    """
    data: dict[str, Any] = {}
    update_token_fields(
        data,
        declared=declared.token,
        prior=prior.token if prior is not None else None,
        create=create,
    )
    collect_fields(
        data,
        names=ROLE_FIELDS,
        declared=declared,
        prior=prior,
        create=create,
        always_on_create=_ALWAYS_ON_CREATE,
    )
    return data


def read_role(
    data: Mapping[str, Any],
    *,
    backend: str,
    role_name: str,
    role_id: str | None,
) -> AppRoleRole:
    """Build one role from a primary read response."""
    values = {name: data[name] for name in ROLE_FIELDS if data.get(name) is not None}
    return AppRoleRole(
        backend=backend,
        role_name=role_name,
        role_id=role_id,
        token=read_token_fields(data),
        **values,
    )
