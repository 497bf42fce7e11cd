"""Authoritative in-process Python API for the AppRole role service."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Mapping

from packages.reconciler_shared.config import ReconcilerSettings
from packages.reconciler_shared.envelope import Envelope, EnvelopeMeta
from resources.adapters.vault.adapter import VaultAdapter
from services.state.approle_role.domain import AppRoleRole, RoleState


class AppRoleRoleService(ABC):
    """Public API reconciling declared AppRole roles against Vault."""

    @abstractmethod
    def declare(
        self,
        *,
        meta: EnvelopeMeta,
        declaration: Mapping[str, Any],
    ) -> Envelope[AppRoleRole]:
        """Validate one raw role declaration into a typed role."""

    @abstractmethod
    def create(
        self,
        *,
        meta: EnvelopeMeta,
        role: AppRoleRole,
    ) -> Envelope[RoleState]:
        """Create one role remotely and return the refreshed local state."""

    @abstractmethod
    def read(
        self,
        *,
        meta: EnvelopeMeta,
        state: RoleState,
    ) -> Envelope[RoleState]:
        """Refresh local state from the remote role, clearing it on drift."""

    @abstractmethod
    def update(
        self,
        *,
        meta: EnvelopeMeta,
        state: RoleState,
        role: AppRoleRole,
    ) -> Envelope[RoleState]:
        """Send changed fields of one role and return the refreshed state."""

    @abstractmethod
    def delete(
        self,
        *,
        meta: EnvelopeMeta,
        state: RoleState,
    ) -> Envelope[RoleState]:
        """Delete one role remotely; an absent role counts as deleted."""

    @abstractmethod
    def import_role(
        self,
        *,
        meta: EnvelopeMeta,
        path: str,
    ) -> Envelope[RoleState]:
        """Adopt an existing remote role by its canonical path."""


def build_approle_role_service(
    *,
    settings: ReconcilerSettings,
    adapter: VaultAdapter,
) -> AppRoleRoleService:
    """Build default AppRole role implementation over a caller-owned adapter."""
    from services.state.approle_role.config import resolve_approle_role_settings
    from services.state.approle_role.implementation import (
        DefaultAppRoleRoleService,
    )

    return DefaultAppRoleRoleService(
        settings=resolve_approle_role_settings(settings),
        adapter=adapter,
    )
