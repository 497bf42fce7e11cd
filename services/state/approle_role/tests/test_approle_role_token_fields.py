"""Unit tests for the shared token field bundle helpers."""

from __future__ import annotations

from services.state.approle_role.domain import TokenFields
from services.state.approle_role.token_fields import (
    check_cidrs,
    read_token_fields,
    update_token_fields,
)


def test_create_sends_token_type_even_when_default() -> None:
    """Token type should always be sent on create."""
    data: dict[str, object] = {}

    update_token_fields(data, declared=TokenFields(), prior=None, create=True)

    assert data == {"token_type": "default"}


def test_create_sends_true_no_default_policy_flag() -> None:
    """Boolean token flags should be sent on create once set."""
    data: dict[str, object] = {}

    update_token_fields(
        data,
        declared=TokenFields(token_no_default_policy=True, token_num_uses=4),
        prior=None,
        create=True,
    )

    assert data["token_no_default_policy"] is True
    assert data["token_num_uses"] == 4


def test_update_sends_changed_token_fields_only() -> None:
    """Update should send the token diff against the prior bundle."""
    data: dict[str, object] = {}
    prior = TokenFields(token_ttl=60, token_policies=frozenset({"dev"}))

    update_token_fields(
        data,
        declared=TokenFields(token_ttl=60, token_policies=frozenset({"dev", "ops"})),
        prior=prior,
        create=False,
    )

    assert data == {"token_policies": ["dev", "ops"]}


def test_read_token_fields_defaults_null_values() -> None:
    """Null or missing response keys should take bundle defaults."""
    bundle = read_token_fields({"token_ttl": 30, "token_type": None})

    assert bundle == TokenFields(token_ttl=30)


def test_check_cidrs_classifies_entries() -> None:
    """Network CIDRs pass, host-bit CIDRs warn and garbage errors."""
    errors, warnings = check_cidrs(
        ["10.0.0.0/8", "192.168.1.7/24", "fd00::/8", "bogus"],
        field_name="token_bound_cidrs",
        metadata={"operation": "read"},
    )

    assert [error.code for error in errors] == ["INVALID_CIDR"]
    assert [warning.code for warning in warnings] == ["CIDR_NOT_NETWORK_ADDRESS"]
    assert warnings[0].metadata == {
        "operation": "read",
        "field": "token_bound_cidrs",
    }
    assert "192.168.1.0/24" in warnings[0].message


def test_check_cidrs_accepts_bare_addresses() -> None:
    """Single host addresses are full-length networks and do not warn."""
    errors, warnings = check_cidrs(
        ["127.0.0.1", "::1"], field_name="secret_id_bound_cidrs", metadata={}
    )

    assert errors == []
    assert warnings == []
