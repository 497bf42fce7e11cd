"""Shared token tuning field bundle attached to auth backend roles."""

from __future__ import annotations

import ipaddress
from collections.abc import Iterable, Mapping
from typing import Any

from packages.reconciler_shared.errors import (
    ErrorDetail,
    codes,
    validation_error,
    warning_detail,
)
from services.state.approle_role.diff import collect_fields
from services.state.approle_role.domain import TokenFields

TOKEN_FIELDS: tuple[str, ...] = tuple(TokenFields.model_fields)

_ALWAYS_ON_CREATE = frozenset({"token_type"})


def update_token_fields(
    data: dict[str, Any],
    *,
    declared: TokenFields,
    prior: TokenFields | None,
    create: bool,
) -> None:
    """Merge token fields into ``data`` following the create/update policy."""
    collect_fields(
        data,
        names=TOKEN_FIELDS,
        declared=declared,
        prior=prior,
        create=create,
        always_on_create=_ALWAYS_ON_CREATE,
    )


def read_token_fields(data: Mapping[str, Any]) -> TokenFields:
    """Build the token bundle from one remote response; nulls take defaults."""
    return TokenFields.model_validate(
        {name: data[name] for name in TOKEN_FIELDS if data.get(name) is not None}
    )


def check_cidrs(
    values: Iterable[str],
    *,
    field_name: str,
    metadata: Mapping[str, str],
) -> tuple[list[ErrorDetail], list[ErrorDetail]]:
    """Check CIDR literals, returning ``(errors, warnings)``.

    Unparseable entries are errors. Entries with host bits set are accepted
    by Vault, which masks them to the network address, so they only warn.
    """
    errors: list[ErrorDetail] = []
    warnings: list[ErrorDetail] = []
    for value in sorted(values):
        try:
            interface = ipaddress.ip_interface(value)
        except ValueError:
            errors.append(
                validation_error(
                    f"invalid CIDR {value!r} in {field_name}",
                    code=codes.INVALID_CIDR,
                    metadata={**metadata, "field": field_name},
                )
            )
            continue
        if interface.ip != interface.network.network_address:
            warnings.append(
                warning_detail(
                    f"{value!r} in {field_name} is not a network address; "
                    f"it will be treated as {interface.network}",
                    code=codes.CIDR_NOT_NETWORK_ADDRESS,
                    metadata={**metadata, "field": field_name},
                )
            )
    return errors, warnings
