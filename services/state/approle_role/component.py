"""Component identity for the AppRole role service."""

from __future__ import annotations

SERVICE_COMPONENT_ID = "service_approle_role"
