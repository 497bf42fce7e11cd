"""Vault adapter resource exports."""

from resources.adapters.vault.adapter import (
    VaultAdapter,
    VaultAdapterDependencyError,
    VaultAdapterError,
    VaultAdapterInternalError,
    VaultAdapterInvalidRequestError,
    VaultAdapterNotFoundError,
    VaultAdapterPermissionError,
    VaultSecret,
)
from resources.adapters.vault.component import RESOURCE_COMPONENT_ID
from resources.adapters.vault.config import (
    VaultAdapterSettings,
    resolve_vault_adapter_settings,
)
from resources.adapters.vault.vault_adapter import HttpVaultAdapter

__all__ = [
    "HttpVaultAdapter",
    "RESOURCE_COMPONENT_ID",
    "VaultAdapter",
    "VaultAdapterDependencyError",
    "VaultAdapterError",
    "VaultAdapterInternalError",
    "VaultAdapterInvalidRequestError",
    "VaultAdapterNotFoundError",
    "VaultAdapterPermissionError",
    "VaultAdapterSettings",
    "VaultSecret",
    "resolve_vault_adapter_settings",
]
