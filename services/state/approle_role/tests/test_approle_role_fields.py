"""Unit tests for AppRole role payload selection and response mapping."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from services.state.approle_role.domain import AppRoleRole, TokenFields
from services.state.approle_role.fields import read_role, role_payload


def _role(**overrides: object) -> AppRoleRole:
    values: dict[str, object] = {"backend": "approle", "role_name": "web"}
    values.update(overrides)
    return AppRoleRole.model_validate(values)


def test_create_payload_sends_set_fields_and_required_flags() -> None:
    """Create should send non-zero fields plus fields that are always sent."""
    role = _role(secret_id_num_uses=5)

    payload = role_payload(declared=role, prior=None, create=True)

    assert payload == {
        "bind_secret_id": True,
        "secret_id_num_uses": 5,
        "token_type": "default",
    }


def test_create_payload_sends_false_bind_secret_id() -> None:
    """An explicit false flag should still reach the remote store on create."""
    role = _role(bind_secret_id=False, secret_id_bound_cidrs=["10.0.0.0/8"])

    payload = role_payload(declared=role, prior=None, create=True)

    assert payload["bind_secret_id"] is False
    assert payload["secret_id_bound_cidrs"] == ["10.0.0.0/8"]


def test_create_payload_sorts_set_valued_fields() -> None:
    """Set-valued fields should serialize as sorted lists."""
    role = _role(token_policies=["prod", "dev", "audit"])

    payload = role_payload(declared=role, prior=None, create=True)

    assert payload["token_policies"] == ["audit", "dev", "prod"]


def test_update_payload_sends_only_changed_fields() -> None:
    """Update should omit fields equal to the last persisted values."""
    prior = _role(secret_id_num_uses=5, secret_id_ttl=600, token_ttl=60)
    declared = _role(secret_id_num_uses=3, secret_id_ttl=600, token_ttl=60)

    payload = role_payload(declared=declared, prior=prior, create=False)

    assert payload == {"secret_id_num_uses": 3}


def test_update_payload_sends_field_cleared_to_zero() -> None:
    """A field reset to its zero value should be sent on update."""
    prior = _role(secret_id_ttl=600, token_policies=["dev"])
    declared = _role()

    payload = role_payload(declared=declared, prior=prior, create=False)

    assert payload == {"secret_id_ttl": 0, "token_policies": []}


def test_update_payload_without_prior_sends_every_field() -> None:
    """Missing prior attributes should mark every field as changed."""
    payload = role_payload(declared=_role(), prior=None, create=False)

    assert set(payload) == {
        "bind_secret_id",
        "secret_id_num_uses",
        "secret_id_ttl",
        "secret_id_bound_cidrs",
        *TokenFields.model_fields,
    }


def test_payload_never_contains_identity_fields() -> None:
    """Path components and the identifier should not be sent in the body."""
    role = _role(role_id="abc")

    created = role_payload(declared=role, prior=None, create=True)
    updated = role_payload(declared=role, prior=None, create=False)

    for payload in (created, updated):
        assert "role_id" not in payload
        assert "backend" not in payload
        assert "role_name" not in payload


def test_read_role_maps_response_and_defaults_missing_keys() -> None:
    """Read mapping should copy known keys and default absent ones."""
    role = read_role(
        {
            "bind_secret_id": False,
            "secret_id_num_uses": 7,
            "secret_id_bound_cidrs": None,
            "token_ttl": 300,
            "token_policies": ["b", "a"],
            "local_secret_ids": False,
        },
        backend="approle",
        role_name="web",
        role_id="prior-id",
    )

    assert role.bind_secret_id is False
    assert role.secret_id_num_uses == 7
    assert role.secret_id_ttl == 0
    assert role.secret_id_bound_cidrs == frozenset()
    assert role.token.token_ttl == 300
    assert role.token.token_policies == frozenset({"a", "b"})
    assert role.role_id == "prior-id"
    assert role.path == "auth/approle/role/web"


def test_declaration_folds_flat_token_keys() -> None:
    """Flat ``token_*`` keys should land in the nested token bundle."""
    role = _role(token_ttl=60, token={"token_max_ttl": 120})

    assert role.token.token_ttl == 60
    assert role.token.token_max_ttl == 120


def test_declaration_rejects_unknown_and_invalid_values() -> None:
    """Unknown keys and negative durations should fail validation."""
    with pytest.raises(ValidationError):
        _role(bogus=1)
    with pytest.raises(ValidationError):
        _role(secret_id_ttl=-1)


def test_read_role_keeps_unparseable_remote_cidrs() -> None:
    """Remote CIDR literals are kept verbatim for the post-read check."""
    role = read_role(
        {"secret_id_bound_cidrs": ["bogus"]},
        backend="approle",
        role_name="web",
        role_id=None,
    )

    assert role.secret_id_bound_cidrs == frozenset({"bogus"})


def test_flat_dump_puts_token_fields_at_top_level() -> None:
    """Flat dump should be JSON-ready with sorted lists."""
    data = _role(token_policies=["z", "a"]).flat_dump()

    assert "token" not in data
    assert data["token_policies"] == ["a", "z"]
    assert data["role_name"] == "web"
