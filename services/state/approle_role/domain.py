"""Domain contracts for AppRole role declarations and local state."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from services.state.approle_role.paths import compose

DEFAULT_BACKEND = "approle"


def _trim_slashes(value: object) -> object:
    """Standardise on no surrounding whitespace or slashes."""
    if isinstance(value, str):
        return value.strip().strip("/")
    return value


class TokenFields(BaseModel):
    """Token tuning fields shared by every auth backend role."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    token_ttl: int = Field(default=0, ge=0)
    token_max_ttl: int = Field(default=0, ge=0)
    token_period: int = Field(default=0, ge=0)
    token_explicit_max_ttl: int = Field(default=0, ge=0)
    token_num_uses: int = Field(default=0, ge=0)
    token_policies: frozenset[str] = frozenset()
    token_bound_cidrs: frozenset[str] = frozenset()
    token_no_default_policy: bool = False
    token_type: str = "default"


class AppRoleRole(BaseModel):
    """One declared or persisted AppRole role.

    Top-level ``token_*`` keys are accepted and folded into ``token`` so flat
    declarations and remote responses validate without reshaping.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    backend: str = Field(default=DEFAULT_BACKEND, min_length=1)
    role_name: str = Field(min_length=1)
    role_id: str | None = None
    bind_secret_id: bool = True
    secret_id_bound_cidrs: frozenset[str] = frozenset()
    secret_id_num_uses: int = Field(default=0, ge=0)
    secret_id_ttl: int = Field(default=0, ge=0)
    token: TokenFields = Field(default_factory=TokenFields)

    @model_validator(mode="before")
    @classmethod
    def _fold_token_fields(cls, value: object) -> object:
        """Move flat ``token_*`` keys into the nested token bundle."""
        if not isinstance(value, dict):
            return value
        flat = {key: item for key, item in value.items() if key.startswith("token_")}
        if not flat:
            return value
        folded = {key: item for key, item in value.items() if key not in flat}
        nested = folded.get("token") or {}
        if isinstance(nested, TokenFields):
            nested = nested.model_dump(mode="python")
        folded["token"] = {**nested, **flat}
        return folded

    @field_validator("backend", "role_name", mode="before")
    @classmethod
    def _trim(cls, value: object) -> object:
        return _trim_slashes(value)

    @property
    def path(self) -> str:
        """Return the canonical remote path of this role."""
        return compose(self.backend, self.role_name)

    def flat_dump(self) -> dict[str, Any]:
        """Return a JSON-ready mapping with token fields at the top level."""
        data = self.model_dump(mode="json", exclude={"token"})
        data.update(self.token.model_dump(mode="json"))
        for key, item in data.items():
            if isinstance(item, list):
                data[key] = sorted(item)
        return data


class RoleState(BaseModel):
    """Local record of one reconciled role.

    ``id`` is the canonical remote path; an empty ``id`` means the role is
    absent locally. ``role`` holds the last known persisted attributes.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str = ""
    role: AppRoleRole | None = None

    @property
    def exists(self) -> bool:
        """Return ``True`` when a local identity is established."""
        return self.id != ""
