"""Concrete AppRole role service implementation."""

from __future__ import annotations

from typing import Any, Mapping

from pydantic import ValidationError

from packages.reconciler_shared.envelope import (
    Envelope,
    EnvelopeMeta,
    failure,
    success,
    validate_meta,
)
from packages.reconciler_shared.errors import (
    ErrorDetail,
    codes,
    conflict_error,
    dependency_error,
    internal_error,
    not_found_error,
    policy_error,
    validation_error,
)
from packages.reconciler_shared.logging import (
    fields,
    get_logger,
    log_context,
    public_api_instrumented,
)
from resources.adapters.vault import (
    VaultAdapter,
    VaultAdapterError,
    VaultAdapterInternalError,
    VaultAdapterInvalidRequestError,
    VaultAdapterNotFoundError,
    VaultAdapterPermissionError,
)
from services.state.approle_role.component import SERVICE_COMPONENT_ID
from services.state.approle_role.config import AppRoleRoleSettings
from services.state.approle_role.domain import AppRoleRole, RoleState
from services.state.approle_role.fields import read_role, role_payload
from services.state.approle_role.paths import (
    PathNotFoundError,
    compose,
    decompose_mount,
    decompose_name,
    role_id_path,
)
from services.state.approle_role.service import AppRoleRoleService
from services.state.approle_role.token_fields import check_cidrs

_LOGGER = get_logger(__name__)


class DefaultAppRoleRoleService(AppRoleRoleService):
    """Default implementation driving the Vault logical adapter.

    Every remote call is issued sequentially with no retries. Failures are
    reported as envelope errors; the payload always carries the local state
    the caller should keep.
    """

    def __init__(
        self,
        *,
        settings: AppRoleRoleSettings,
        adapter: VaultAdapter,
    ) -> None:
        self._settings = settings
        self._adapter = adapter

    @public_api_instrumented(logger=_LOGGER, component_id=SERVICE_COMPONENT_ID)
    def declare(
        self,
        *,
        meta: EnvelopeMeta,
        declaration: Mapping[str, Any],
    ) -> Envelope[AppRoleRole]:
        """Validate one raw role declaration into a typed role."""
        errors = self._validate_meta(meta=meta, operation="declare")
        if errors:
            return failure(meta=meta, errors=errors)

        payload = dict(declaration)
        payload.setdefault("backend", self._settings.default_backend)
        try:
            role = AppRoleRole.model_validate(payload)
        except ValidationError as exc:
            first_error = exc.errors()[0]
            location = ".".join(str(item) for item in first_error.get("loc", ()))
            message = str(first_error.get("msg", "invalid declaration"))
            if location:
                message = f"{location}: {message}"
            return failure(
                meta=meta,
                errors=[
                    validation_error(
                        message,
                        code=codes.INVALID_ARGUMENT,
                        metadata=_metadata(operation="declare"),
                    )
                ],
            )

        cidr_errors, cidr_warnings = _check_role_cidrs(
            role, metadata=_metadata(operation="declare")
        )
        if cidr_errors:
            return failure(meta=meta, errors=cidr_errors, warnings=cidr_warnings)
        return success(meta=meta, payload=role, warnings=cidr_warnings)

    @public_api_instrumented(
        logger=_LOGGER,
        component_id=SERVICE_COMPONENT_ID,
        id_fields=("role.role_name",),
    )
    def create(
        self,
        *,
        meta: EnvelopeMeta,
        role: AppRoleRole,
    ) -> Envelope[RoleState]:
        """Create one role remotely and return the refreshed local state."""
        errors = self._validate_meta(meta=meta, operation="create")
        if errors:
            return failure(meta=meta, errors=errors, payload=RoleState())

        path = compose(role.backend, role.role_name)
        data = role_payload(declared=role, prior=None, create=True)

        _debug("Writing AppRole auth backend role", path=path)
        try:
            self._adapter.write(path=path, data=data)
        except VaultAdapterError as exc:
            return failure(
                meta=meta,
                errors=[
                    _remote_error(
                        f"error writing AppRole auth backend role {path!r}",
                        code=codes.REMOTE_WRITE_FAILED,
                        operation="create",
                        path=path,
                        exc=exc,
                    )
                ],
                payload=RoleState(),
            )
        _debug("Wrote AppRole auth backend role", path=path)

        state = RoleState(id=path, role=role)
        if role.role_id:
            _debug("Writing AppRole auth backend role RoleID", path=path)
            try:
                self._adapter.write(
                    path=role_id_path(path), data={"role_id": role.role_id}
                )
            except VaultAdapterError as exc:
                # Remote identifier is unknown until an update rewrites it.
                return failure(
                    meta=meta,
                    errors=[
                        _remote_error(
                            f"error writing AppRole auth backend role {path!r}'s RoleID",
                            code=codes.PARTIAL_CREATE_FAILED,
                            operation="create",
                            path=path,
                            exc=exc,
                        )
                    ],
                    payload=RoleState(
                        id=path, role=role.model_copy(update={"role_id": None})
                    ),
                )
            _debug("Wrote AppRole auth backend role RoleID", path=path)

        return self.read(meta=meta, state=state)

    @public_api_instrumented(
        logger=_LOGGER,
        component_id=SERVICE_COMPONENT_ID,
        id_fields=("state.id",),
    )
    def read(
        self,
        *,
        meta: EnvelopeMeta,
        state: RoleState,
    ) -> Envelope[RoleState]:
        """Refresh local state from the remote role, clearing it on drift."""
        errors = self._validate_meta(meta=meta, operation="read")
        if errors:
            return failure(meta=meta, errors=errors, payload=state)

        path = state.id
        try:
            backend = decompose_mount(path)
            role_name = decompose_name(path)
        except PathNotFoundError as exc:
            return failure(
                meta=meta,
                errors=[
                    validation_error(
                        f"invalid path {path!r} for AppRole auth backend role: {exc}",
                        code=codes.INVALID_PATH,
                        metadata=_metadata(operation="read", path=path),
                    )
                ],
                payload=state,
            )

        _debug("Reading AppRole auth backend role", path=path)
        try:
            secret = self._adapter.read(path=path)
        except VaultAdapterError as exc:
            return failure(
                meta=meta,
                errors=[
                    _remote_error(
                        f"error reading AppRole auth backend role {path!r}",
                        code=codes.REMOTE_READ_FAILED,
                        operation="read",
                        path=path,
                        exc=exc,
                    )
                ],
                payload=state,
            )
        _debug("Read AppRole auth backend role", path=path)

        if secret is None:
            with log_context({fields.PATH: path}):
                _LOGGER.warning(
                    "AppRole auth backend role not found, removing from state"
                )
            return success(meta=meta, payload=RoleState())

        prior_role_id = state.role.role_id if state.role is not None else None
        try:
            role = read_role(
                secret.data,
                backend=backend,
                role_name=role_name,
                role_id=prior_role_id,
            )
        except ValidationError as exc:
            return failure(
                meta=meta,
                errors=[
                    internal_error(
                        f"unexpected AppRole auth backend role {path!r} response: "
                        f"{exc.errors()[0].get('msg', 'invalid data')}",
                        metadata=_metadata(operation="read", path=path),
                    )
                ],
                payload=state,
            )
        refreshed = RoleState(id=path, role=role)

        _debug("Reading AppRole auth backend role RoleID", path=path)
        try:
            role_id_secret = self._adapter.read(path=role_id_path(path))
        except VaultAdapterError as exc:
            return failure(
                meta=meta,
                errors=[
                    _remote_error(
                        f"error reading AppRole auth backend role {path!r} RoleID",
                        code=codes.REMOTE_READ_FAILED,
                        operation="read",
                        path=path,
                        exc=exc,
                    )
                ],
                payload=refreshed,
            )
        _debug("Read AppRole auth backend role RoleID", path=path)
        if role_id_secret is not None:
            remote_role_id = role_id_secret.data.get("role_id")
            refreshed = RoleState(
                id=path,
                role=role.model_copy(
                    update={
                        "role_id": None if remote_role_id is None else str(remote_role_id)
                    }
                ),
            )

        cidr_errors, cidr_warnings = _check_role_cidrs(
            role, metadata=_metadata(operation="read", path=path)
        )
        if cidr_errors:
            return failure(
                meta=meta,
                errors=cidr_errors,
                warnings=cidr_warnings,
                payload=refreshed,
            )
        return success(meta=meta, payload=refreshed, warnings=cidr_warnings)

    @public_api_instrumented(
        logger=_LOGGER,
        component_id=SERVICE_COMPONENT_ID,
        id_fields=("state.id",),
    )
    def update(
        self,
        *,
        meta: EnvelopeMeta,
        state: RoleState,
        role: AppRoleRole,
    ) -> Envelope[RoleState]:
        """Send changed fields of one role and return the refreshed state."""
        errors = self._validate_meta(meta=meta, operation="update")
        if errors:
            return failure(meta=meta, errors=errors, payload=state)

        path = state.id
        if not state.exists:
            return failure(
                meta=meta,
                errors=[
                    validation_error(
                        "cannot update an AppRole auth backend role without a local identity",
                        code=codes.INVALID_PATH,
                        metadata=_metadata(operation="update"),
                    )
                ],
                payload=state,
            )
        declared_path = compose(role.backend, role.role_name)
        if declared_path != path:
            return failure(
                meta=meta,
                errors=[
                    conflict_error(
                        f"backend and role_name are immutable: {path!r} cannot "
                        f"become {declared_path!r} without recreating the role",
                        code=codes.IMMUTABLE_FIELD_CHANGED,
                        metadata=_metadata(operation="update", path=path),
                    )
                ],
                payload=state,
            )

        data = role_payload(declared=role, prior=state.role, create=False)

        _debug("Updating AppRole auth backend role", path=path)
        try:
            self._adapter.write(path=path, data=data)
        except VaultAdapterError as exc:
            return failure(
                meta=meta,
                errors=[
                    _remote_error(
                        f"error updating AppRole auth backend role {path!r}",
                        code=codes.REMOTE_WRITE_FAILED,
                        operation="update",
                        path=path,
                        exc=exc,
                    )
                ],
                payload=state,
            )
        _debug("Updated AppRole auth backend role", path=path)

        prior_role_id = state.role.role_id if state.role is not None else None
        updated = RoleState(
            id=path,
            role=role.model_copy(update={"role_id": role.role_id or prior_role_id}),
        )
        if role.role_id and role.role_id != prior_role_id:
            _debug("Updating AppRole auth backend role RoleID", path=path)
            try:
                self._adapter.write(
                    path=role_id_path(path), data={"role_id": role.role_id}
                )
            except VaultAdapterError as exc:
                return failure(
                    meta=meta,
                    errors=[
                        _remote_error(
                            f"error updating AppRole auth backend role {path!r}'s RoleID",
                            code=codes.IDENTIFIER_UPDATE_FAILED,
                            operation="update",
                            path=path,
                            exc=exc,
                        )
                    ],
                    payload=updated.model_copy(
                        update={
                            "role": updated.role.model_copy(
                                update={"role_id": prior_role_id}
                            )
                        }
                    ),
                )
            _debug("Updated AppRole auth backend role RoleID", path=path)

        return self.read(meta=meta, state=updated)

    @public_api_instrumented(
        logger=_LOGGER,
        component_id=SERVICE_COMPONENT_ID,
        id_fields=("state.id",),
    )
    def delete(
        self,
        *,
        meta: EnvelopeMeta,
        state: RoleState,
    ) -> Envelope[RoleState]:
        """Delete one role remotely; an absent role counts as deleted."""
        errors = self._validate_meta(meta=meta, operation="delete")
        if errors:
            return failure(meta=meta, errors=errors, payload=state)
        if not state.exists:
            return success(meta=meta, payload=RoleState())

        path = state.id
        _debug("Deleting AppRole auth backend role", path=path)
        try:
            self._adapter.delete(path=path)
        except VaultAdapterNotFoundError:
            _debug("AppRole auth backend role not found, removing from state", path=path)
            return success(meta=meta, payload=RoleState())
        except VaultAdapterError as exc:
            return failure(
                meta=meta,
                errors=[
                    _remote_error(
                        f"error deleting AppRole auth backend role {path!r}",
                        code=codes.REMOTE_DELETE_FAILED,
                        operation="delete",
                        path=path,
                        exc=exc,
                    )
                ],
                payload=state,
            )
        _debug("Deleted AppRole auth backend role", path=path)
        return success(meta=meta, payload=RoleState())

    @public_api_instrumented(
        logger=_LOGGER,
        component_id=SERVICE_COMPONENT_ID,
        id_fields=("path",),
    )
    def import_role(
        self,
        *,
        meta: EnvelopeMeta,
        path: str,
    ) -> Envelope[RoleState]:
        """Adopt an existing remote role by its canonical path."""
        result = self.read(meta=meta, state=RoleState(id=path))
        if not result.ok:
            return result
        if result.payload is not None and result.payload.value.exists:
            return result
        return failure(
            meta=meta,
            errors=[
                not_found_error(
                    f"cannot import non-existent AppRole auth backend role {path!r}",
                    code=codes.RESOURCE_NOT_FOUND,
                    metadata=_metadata(operation="import_role", path=path),
                )
            ],
            payload=RoleState(),
        )

    def _validate_meta(
        self, *, meta: EnvelopeMeta, operation: str
    ) -> list[ErrorDetail]:
        """Validate envelope metadata for one operation."""
        try:
            validate_meta(meta)
        except ValueError as exc:
            return [
                validation_error(
                    str(exc),
                    code=codes.INVALID_ARGUMENT,
                    metadata=_metadata(operation=operation),
                )
            ]
        return []


def _metadata(*, operation: str, path: str = "") -> dict[str, str]:
    """Build the standard error metadata for one lifecycle operation."""
    metadata = {"service": SERVICE_COMPONENT_ID, "operation": operation}
    if path:
        metadata["path"] = path
    return metadata


def _check_role_cidrs(
    role: AppRoleRole, *, metadata: Mapping[str, str]
) -> tuple[list[ErrorDetail], list[ErrorDetail]]:
    """Check both bound CIDR fields of one role."""
    errors: list[ErrorDetail] = []
    warnings: list[ErrorDetail] = []
    for field_name, values in (
        ("token_bound_cidrs", role.token.token_bound_cidrs),
        ("secret_id_bound_cidrs", role.secret_id_bound_cidrs),
    ):
        found_errors, found_warnings = check_cidrs(
            values, field_name=field_name, metadata=metadata
        )
        errors.extend(found_errors)
        warnings.extend(found_warnings)
    return errors, warnings


def _remote_error(
    summary: str,
    *,
    code: str,
    operation: str,
    path: str,
    exc: VaultAdapterError,
) -> ErrorDetail:
    """Map one adapter exception into a service-level error detail."""
    message = f"{summary}: {exc}"
    metadata = _metadata(operation=operation, path=path)
    metadata["exception_type"] = type(exc).__name__
    if isinstance(exc, VaultAdapterInvalidRequestError):
        return validation_error(message, code=code, metadata=metadata)
    if isinstance(exc, VaultAdapterPermissionError):
        return policy_error(message, code=code, metadata=metadata)
    if isinstance(exc, VaultAdapterNotFoundError):
        return not_found_error(message, code=code, metadata=metadata)
    if isinstance(exc, VaultAdapterInternalError):
        return internal_error(message, code=code, metadata=metadata)
    return dependency_error(message, code=code, metadata=metadata)


def _debug(message: str, *, path: str) -> None:
    """Emit one debug step log correlated with the role path."""
    with log_context({fields.PATH: path}):
        _LOGGER.debug(message)
