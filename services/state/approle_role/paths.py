"""Canonical remote path composition and decomposition for AppRole roles."""

from __future__ import annotations

import re

_BACKEND_FROM_PATH = re.compile(r"^auth/(.+)/role/.+$")
_NAME_FROM_PATH = re.compile(r"^auth/.+/role/(.+)$")

ROLE_ID_SUFFIX = "/role-id"


class PathNotFoundError(ValueError):
    """Raised when a path does not follow ``auth/<backend>/role/<name>``."""


def compose(backend: str, role_name: str) -> str:
    """Return the canonical role path for one backend mount and role name."""
    return "auth/" + backend.strip("/") + "/role/" + role_name.strip("/")


def decompose_mount(path: str) -> str:
    """Return the backend mount encoded in one role path."""
    match = _BACKEND_FROM_PATH.match(path)
    if match is None:
        raise PathNotFoundError("no backend found")
    return match.group(1)


def decompose_name(path: str) -> str:
    """Return the role name encoded in one role path."""
    match = _NAME_FROM_PATH.match(path)
    if match is None:
        raise PathNotFoundError("no role found")
    return match.group(1)


def role_id_path(path: str) -> str:
    """Return the nested path holding the RoleID of one role."""
    return path + ROLE_ID_SUFFIX
