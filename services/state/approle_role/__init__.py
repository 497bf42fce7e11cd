"""AppRole role service native package exports."""

from packages.reconciler_shared.envelope import Envelope, EnvelopeKind, EnvelopeMeta
from packages.reconciler_shared.errors import ErrorCategory, ErrorDetail
from services.state.approle_role.component import SERVICE_COMPONENT_ID
from services.state.approle_role.config import (
    AppRoleRoleSettings,
    resolve_approle_role_settings,
)
from services.state.approle_role.domain import AppRoleRole, RoleState, TokenFields
from services.state.approle_role.implementation import DefaultAppRoleRoleService
from services.state.approle_role.paths import (
    PathNotFoundError,
    compose,
    decompose_mount,
    decompose_name,
    role_id_path,
)
from services.state.approle_role.service import (
    AppRoleRoleService,
    build_approle_role_service,
)

__all__ = [
    "AppRoleRole",
    "AppRoleRoleService",
    "AppRoleRoleSettings",
    "DefaultAppRoleRoleService",
    "Envelope",
    "EnvelopeKind",
    "EnvelopeMeta",
    "ErrorCategory",
    "ErrorDetail",
    "PathNotFoundError",
    "RoleState",
    "SERVICE_COMPONENT_ID",
    "TokenFields",
    "build_approle_role_service",
    "compose",
    "decompose_mount",
    "decompose_name",
    "resolve_approle_role_settings",
    "role_id_path",
]
