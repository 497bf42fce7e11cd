"""Component identity for the Vault HTTP adapter resource."""

from __future__ import annotations

RESOURCE_COMPONENT_ID = "adapter_vault"
