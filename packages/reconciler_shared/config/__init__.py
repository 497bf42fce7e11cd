"""Public API for shared reconciler configuration utilities."""

from .models import (
    DEFAULT_CONFIG_PATH,
    ReconcilerSettings,
    load_settings,
    resolve_component_settings,
)

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "ReconcilerSettings",
    "load_settings",
    "resolve_component_settings",
]
