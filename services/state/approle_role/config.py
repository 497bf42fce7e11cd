"""Pydantic settings for AppRole role service behavior."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from packages.reconciler_shared.config import (
    ReconcilerSettings,
    resolve_component_settings,
)
from services.state.approle_role.component import SERVICE_COMPONENT_ID


class AppRoleRoleSettings(BaseModel):
    """AppRole role service runtime behavior settings."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    default_backend: str = Field(default="approle", min_length=1)

    @field_validator("default_backend", mode="before")
    @classmethod
    def _trim(cls, value: object) -> object:
        """Standardise on no leading or trailing slashes."""
        if isinstance(value, str):
            return value.strip().strip("/")
        return value


def resolve_approle_role_settings(settings: ReconcilerSettings) -> AppRoleRoleSettings:
    """Resolve service settings from ``components.service.approle_role``."""
    return resolve_component_settings(
        settings=settings,
        component_id=SERVICE_COMPONENT_ID,
        model=AppRoleRoleSettings,
    )
