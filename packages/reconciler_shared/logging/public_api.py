"""Invocation logging for public API methods.

Every lifecycle operation is wrapped by ``public_api_instrumented`` so its
start and completion records share one stable set of structured fields.
"""

from __future__ import annotations

import logging
from functools import wraps
from time import perf_counter
from typing import Any, Callable, Mapping

from . import fields
from .context import log_context


def public_api_instrumented(
    *,
    logger: logging.Logger,
    component_id: str,
    api_name: str | None = None,
    id_fields: tuple[str, ...] = (),
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Log invocation and completion of one public API method.

    ``id_fields`` names keyword arguments whose values are attached to both
    records. A dotted name such as ``state.id`` reads one attribute from the
    keyword argument.
    """

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        method_name = api_name or func.__name__

        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            meta = kwargs.get("meta")
            invocation: dict[str, object] = {
                fields.EVENT: fields.PUBLIC_API_INVOCATION_EVENT,
                fields.COMPONENT_ID: component_id,
                fields.API_NAME: method_name,
                fields.TRACE_ID: _attr_or_none(meta, "trace_id"),
                fields.ENVELOPE_ID: _attr_or_none(meta, "envelope_id"),
                fields.PRINCIPAL: _attr_or_none(meta, "principal"),
                **_references(kwargs, id_fields),
            }
            with log_context(invocation):
                logger.info("Public API invocation")

            started = perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as exc:
                _log_completion(
                    logger,
                    invocation,
                    success=False,
                    started=started,
                    errors=[f"{type(exc).__name__}: {exc}"],
                    warnings=[],
                )
                raise

            success, errors = _result_summary(result)
            _log_completion(
                logger,
                invocation,
                success=success,
                started=started,
                errors=errors,
                warnings=_sanitize_errors(getattr(result, "warnings", [])),
            )
            return result

        return wrapper

    return decorator


def _log_completion(
    logger: logging.Logger,
    invocation: Mapping[str, object],
    *,
    success: bool,
    started: float,
    errors: list[str],
    warnings: list[str],
) -> None:
    """Emit the completion record; failures log at warning level."""
    payload = dict(invocation)
    payload.update(
        {
            fields.EVENT: fields.PUBLIC_API_COMPLETION_EVENT,
            fields.SUCCESS: success,
            fields.DURATION_MS: round((perf_counter() - started) * 1000.0, 3),
            fields.ERRORS: errors,
        }
    )
    if warnings:
        payload[fields.WARNINGS] = warnings
    with log_context(payload):
        if success:
            logger.info("Public API completion")
        else:
            logger.warning("Public API completion")


def _references(
    kwargs: Mapping[str, Any], id_fields: tuple[str, ...]
) -> dict[str, str]:
    """Resolve reference values named by ``id_fields`` from call kwargs."""
    references: dict[str, str] = {}
    for name in id_fields:
        head, _, attribute = name.partition(".")
        value = kwargs.get(head)
        if attribute:
            value = getattr(value, attribute, None)
        if value in (None, ""):
            continue
        references[attribute or head] = str(value)
    return references


def _attr_or_none(obj: object | None, name: str) -> str | None:
    """Return string attribute value from object when present."""
    if obj is None:
        return None
    value = getattr(obj, name, None)
    if value in (None, ""):
        return None
    return str(value)


def _result_summary(result: object) -> tuple[bool, list[str]]:
    """Infer success and sanitized error summaries from a result value."""
    errors = _sanitize_errors(getattr(result, "errors", []))
    ok_value = getattr(result, "ok", None)
    if isinstance(ok_value, bool):
        return ok_value, errors
    return len(errors) == 0, errors


def _sanitize_errors(errors: object) -> list[str]:
    """Return one-line ``code: message`` summaries for logs."""
    if not isinstance(errors, list):
        return []
    summaries: list[str] = []
    for item in errors:
        code = getattr(item, "code", None)
        message = getattr(item, "message", None)
        if message in (None, ""):
            continue
        summaries.append(str(message) if code in (None, "") else f"{code}: {message}")
    return summaries
