"""AppRole reconciler CLI actor implemented with Typer."""

from __future__ import annotations

import dataclasses
import json
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Iterator

import typer
import yaml

from actors.cli.state_store import DEFAULT_STATE_DIR, JsonStateStore
from packages.reconciler_shared.config import DEFAULT_CONFIG_PATH, load_settings
from packages.reconciler_shared.envelope import (
    Envelope,
    EnvelopeKind,
    EnvelopeMeta,
    new_meta,
)
from packages.reconciler_shared.logging import configure_logging
from resources.adapters.vault import HttpVaultAdapter, resolve_vault_adapter_settings
from services.state.approle_role import (
    AppRoleRoleService,
    RoleState,
    build_approle_role_service,
    decompose_name,
)

SUCCESS_EXIT_CODE = 0
DOMAIN_ERROR_EXIT_CODE = 3
INPUT_ERROR_EXIT_CODE = 4


@dataclass(frozen=True)
class CliConfig:
    """Global CLI runtime options propagated to every command."""

    config_path: Path
    state_dir: Path
    principal: str
    source: str
    as_json: bool


class CliInputError(ValueError):
    """Raised for unusable command input such as a malformed role file."""


def _serialize(value: Any) -> Any:
    """Convert result objects to JSON-serializable structures."""

    if isinstance(value, Enum):
        return _serialize(value.value)
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, (datetime, date, Path)):
        return str(value)
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return _serialize(dataclasses.asdict(value))
    if isinstance(value, dict):
        return {str(key): _serialize(item) for key, item in value.items()}
    if isinstance(value, (set, frozenset)):
        return sorted(_serialize(item) for item in value)
    if isinstance(value, (list, tuple)):
        return [_serialize(item) for item in value]
    if hasattr(value, "model_dump"):
        return _serialize(value.model_dump(mode="python"))
    return str(value)


def _state_view(state: RoleState) -> dict[str, Any]:
    """Flatten one role state into a display mapping."""
    if not state.exists:
        return {}
    view: dict[str, Any] = {"id": state.id}
    if state.role is not None:
        view.update(state.role.flat_dump())
    return view


def _emit_result(result: Envelope[Any], as_json: bool) -> None:
    """Render one envelope result and its diagnostics."""
    payload = result.payload.value if result.payload is not None else None
    if as_json:
        document = {
            "ok": result.ok,
            "state": _state_view(payload) if isinstance(payload, RoleState) else None,
            "errors": _serialize(result.errors),
            "warnings": _serialize(result.warnings),
        }
        typer.echo(json.dumps(document, sort_keys=True, separators=(",", ":")))
        return

    if isinstance(payload, RoleState):
        typer.echo(_render_state(payload))
    for warning in result.warnings:
        typer.echo(f"warning: {warning.code}: {warning.message}", err=True)
    for error in result.errors:
        typer.echo(f"error: {error.code}: {error.message}", err=True)


def _emit_error(exc: Exception, as_json: bool) -> None:
    """Render configuration and input errors to stderr."""

    if as_json:
        typer.echo(json.dumps({"error": str(exc)}), err=True)
        return
    typer.echo(f"error: {exc}", err=True)


def _render_state(state: RoleState) -> str:
    """Render one role state for human scanning."""
    view = _state_view(state)
    if not view:
        return "No role state."
    lines = [f"Role: {view.pop('id')}"]
    for key in sorted(view):
        value = view[key]
        if isinstance(value, list):
            value = ", ".join(value) if value else "-"
        elif value is None:
            value = "-"
        lines.append(f"  {key}: {value}")
    return "\n".join(lines)


def _meta(cfg: CliConfig) -> EnvelopeMeta:
    return new_meta(
        kind=EnvelopeKind.COMMAND,
        source=cfg.source,
        principal=cfg.principal,
    )


@contextmanager
def _open_service(cfg: CliConfig) -> Iterator[AppRoleRoleService]:
    """Load settings, configure logging and yield a wired service."""
    settings = load_settings(config_path=cfg.config_path)
    configure_logging(
        level=settings.logging.level,
        json_output=settings.logging.json_output,
        service=settings.logging.service,
        environment=settings.logging.environment,
    )
    with HttpVaultAdapter(settings=resolve_vault_adapter_settings(settings)) as adapter:
        yield build_approle_role_service(settings=settings, adapter=adapter)


def _load_declaration(role_file: Path) -> dict[str, Any]:
    """Read one YAML role declaration from disk."""
    loaded = yaml.safe_load(role_file.read_text(encoding="utf-8"))
    if not isinstance(loaded, dict):
        raise CliInputError(f"{role_file} must contain one YAML mapping")
    return loaded


def _run_command(
    cfg: CliConfig,
    invoke: Callable[[AppRoleRoleService, JsonStateStore, EnvelopeMeta], Envelope[Any]],
) -> None:
    """Execute one lifecycle call and map outputs/errors to process semantics."""
    store = JsonStateStore(cfg.state_dir)
    try:
        with _open_service(cfg) as service:
            result = invoke(service, store, _meta(cfg))
    except (ValueError, OSError, yaml.YAMLError) as exc:
        _emit_error(exc, cfg.as_json)
        raise typer.Exit(code=INPUT_ERROR_EXIT_CODE) from exc

    _emit_result(result, cfg.as_json)
    if not result.ok:
        raise typer.Exit(code=DOMAIN_ERROR_EXIT_CODE)
    raise typer.Exit(code=SUCCESS_EXIT_CODE)


def _persist(
    store: JsonStateStore, path: str, result: Envelope[RoleState]
) -> Envelope[RoleState]:
    """Save the state carried by ``result`` under ``path``."""
    if result.payload is not None:
        store.save(path, result.payload.value)
    return result


def _require_config(ctx: typer.Context) -> CliConfig:
    """Return required CLI config from Typer context."""

    config = ctx.obj
    if not isinstance(config, CliConfig):
        raise RuntimeError("CLI configuration not initialized")
    return config


app = typer.Typer(no_args_is_help=True, help="AppRole auth backend role reconciler")


@app.callback()
def main(
    ctx: typer.Context,
    config: Path = typer.Option(
        DEFAULT_CONFIG_PATH,
        "--config",
        envvar="APPROLE_CONFIG",
        help="YAML settings file",
    ),
    state_dir: Path = typer.Option(
        DEFAULT_STATE_DIR,
        "--state-dir",
        envvar="APPROLE_STATE_DIR",
        help="Directory holding local role state",
    ),
    principal: str = typer.Option("operator", help="Envelope principal"),
    source: str = typer.Option("cli", help="Envelope source"),
    as_json: bool = typer.Option(False, "--json", help="Emit JSON output"),
) -> None:
    """Store global options for all lifecycle commands."""

    ctx.obj = CliConfig(
        config_path=config,
        state_dir=state_dir,
        principal=principal,
        source=source,
        as_json=as_json,
    )


@app.command("apply")
def apply_command(
    ctx: typer.Context,
    role_file: Path = typer.Argument(
        ...,
        exists=True,
        dir_okay=False,
        readable=True,
        help="YAML role declaration",
    ),
) -> None:
    """Create or update one role to match its declaration."""
    cfg = _require_config(ctx)

    def invoke(
        service: AppRoleRoleService, store: JsonStateStore, meta: EnvelopeMeta
    ) -> Envelope[Any]:
        declared = service.declare(meta=meta, declaration=_load_declaration(role_file))
        if not declared.ok or declared.payload is None:
            return declared
        role = declared.payload.value
        state = store.load(role.path)
        if state.exists:
            result = service.update(meta=meta, state=state, role=role)
        else:
            result = service.create(meta=meta, role=role)
        return _persist(store, role.path, result)

    _run_command(cfg, invoke)


@app.command("refresh")
def refresh_command(
    ctx: typer.Context, path: str = typer.Argument(..., help="Canonical role path")
) -> None:
    """Refresh local state of one role from Vault."""
    cfg = _require_config(ctx)

    def invoke(
        service: AppRoleRoleService, store: JsonStateStore, meta: EnvelopeMeta
    ) -> Envelope[Any]:
        state = store.load(path)
        if not state.exists:
            raise CliInputError(f"no local state for {path}; import it first")
        return _persist(store, path, service.read(meta=meta, state=state))

    _run_command(cfg, invoke)


@app.command("import")
def import_command(
    ctx: typer.Context, path: str = typer.Argument(..., help="Canonical role path")
) -> None:
    """Adopt one existing remote role into local state."""
    cfg = _require_config(ctx)

    def invoke(
        service: AppRoleRoleService, store: JsonStateStore, meta: EnvelopeMeta
    ) -> Envelope[Any]:
        return _persist(store, path, service.import_role(meta=meta, path=path))

    _run_command(cfg, invoke)


@app.command("destroy")
def destroy_command(
    ctx: typer.Context, path: str = typer.Argument(..., help="Canonical role path")
) -> None:
    """Delete one role from Vault and drop its local state.

    Without local state the named path is still deleted remotely.
    """
    cfg = _require_config(ctx)

    def invoke(
        service: AppRoleRoleService, store: JsonStateStore, meta: EnvelopeMeta
    ) -> Envelope[Any]:
        state = store.load(path)
        if not state.exists:
            decompose_name(path)
            state = RoleState(id=path)
        return _persist(store, path, service.delete(meta=meta, state=state))

    _run_command(cfg, invoke)


@app.command("show")
def show_command(
    ctx: typer.Context, path: str = typer.Argument(..., help="Canonical role path")
) -> None:
    """Print local state of one role without contacting Vault."""
    cfg = _require_config(ctx)
    try:
        state = JsonStateStore(cfg.state_dir).load(path)
    except (ValueError, OSError) as exc:
        _emit_error(exc, cfg.as_json)
        raise typer.Exit(code=INPUT_ERROR_EXIT_CODE) from exc
    if cfg.as_json:
        typer.echo(json.dumps(_state_view(state), sort_keys=True, separators=(",", ":")))
    else:
        typer.echo(_render_state(state))
    raise typer.Exit(code=SUCCESS_EXIT_CODE)


if __name__ == "__main__":
    app()
