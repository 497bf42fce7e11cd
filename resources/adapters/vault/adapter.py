"""Transport-agnostic Vault logical adapter contracts and DTOs."""

from __future__ import annotations

from typing import Any, Mapping, Protocol

from pydantic import BaseModel, ConfigDict, Field


class VaultAdapterError(Exception):
    """Base exception for adapter-level failures."""


class VaultAdapterDependencyError(VaultAdapterError):
    """Dependency-level failure (network/upstream unavailable or 5xx)."""


class VaultAdapterInternalError(VaultAdapterError):
    """Internal adapter failure (schema/mapping/contract mismatch)."""


class VaultAdapterNotFoundError(VaultAdapterError):
    """Target path does not exist."""


class VaultAdapterInvalidRequestError(VaultAdapterError):
    """Vault rejected the request payload or path."""


class VaultAdapterPermissionError(VaultAdapterError):
    """Configured token is not allowed to perform the operation."""


class VaultSecret(BaseModel):
    """One decoded Vault logical response."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    request_id: str = ""
    lease_duration: int = 0
    renewable: bool = False
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: tuple[str, ...] = ()


class VaultAdapter(Protocol):
    """Protocol for Vault logical key/value operations.

    ``write`` has partial merge semantics on the remote side: keys present in
    ``data`` overwrite, absent keys are left untouched.
    """

    def write(self, *, path: str, data: Mapping[str, Any]) -> VaultSecret | None:
        """Write ``data`` to ``path`` and return the response secret if any."""

    def read(self, *, path: str) -> VaultSecret | None:
        """Read ``path``; return ``None`` when the path does not exist."""

    def delete(self, *, path: str) -> None:
        """Delete ``path``; raise ``VaultAdapterNotFoundError`` when absent."""
