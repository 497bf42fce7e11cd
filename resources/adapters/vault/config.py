"""Pydantic settings for the Vault adapter resource."""

from __future__ import annotations

import os
from typing import Mapping

from pydantic import BaseModel, ConfigDict, Field

from packages.reconciler_shared.config import (
    ReconcilerSettings,
    resolve_component_settings,
)
from resources.adapters.vault.component import RESOURCE_COMPONENT_ID


class VaultAdapterSettings(BaseModel):
    """Runtime settings for Vault HTTP API access."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    address: str = ""
    token: str = ""
    namespace: str = ""
    timeout_seconds: float = Field(default=10.0, gt=0)


DEFAULT_ADDRESS = "http://127.0.0.1:8200"


def resolve_vault_adapter_settings(
    settings: ReconcilerSettings,
    *,
    environ: Mapping[str, str] | None = None,
) -> VaultAdapterSettings:
    """Resolve adapter settings from ``components.adapter.vault``.

    Blank ``address``, ``token`` and ``namespace`` fall back to the standard
    ``VAULT_ADDR``, ``VAULT_TOKEN`` and ``VAULT_NAMESPACE`` variables.
    """
    env = os.environ if environ is None else environ
    resolved = resolve_component_settings(
        settings=settings,
        component_id=RESOURCE_COMPONENT_ID,
        model=VaultAdapterSettings,
    )
    return resolved.model_copy(
        update={
            "address": resolved.address
            or env.get("VAULT_ADDR", "")
            or DEFAULT_ADDRESS,
            "token": resolved.token or env.get("VAULT_TOKEN", ""),
            "namespace": resolved.namespace or env.get("VAULT_NAMESPACE", ""),
        }
    )
