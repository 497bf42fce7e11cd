"""In-process Vault adapter implementation over the Vault HTTP API."""

from __future__ import annotations

import json
from typing import Any, Mapping
from urllib import parse as urllib_parse

import httpx
from pydantic import ValidationError

from packages.reconciler_shared.http import (
    HttpClient,
    HttpJsonDecodeError,
    HttpRequestError,
    HttpStatusError,
)
from packages.reconciler_shared.logging import get_logger, public_api_instrumented
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
from resources.adapters.vault.config import DEFAULT_ADDRESS, VaultAdapterSettings

_LOGGER = get_logger(__name__)

_API_PREFIX = "/v1/"


class HttpVaultAdapter(VaultAdapter):
    """Vault adapter backed by HTTP calls to the logical API."""

    def __init__(
        self,
        *,
        settings: VaultAdapterSettings,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._settings = settings
        self._http = HttpClient(
            base_url=(settings.address or DEFAULT_ADDRESS).rstrip("/"),
            timeout_seconds=settings.timeout_seconds,
            headers=_headers(settings),
            transport=transport,
        )

    def close(self) -> None:
        """Release the underlying HTTP client."""
        self._http.close()

    def __enter__(self) -> HttpVaultAdapter:
        return self

    def __exit__(self, *_: object) -> None:
        self.close()

    @public_api_instrumented(
        logger=_LOGGER, component_id=RESOURCE_COMPONENT_ID, id_fields=("path",)
    )
    def write(self, *, path: str, data: Mapping[str, Any]) -> VaultSecret | None:
        """Write ``data`` to ``path`` and return the response secret if any."""
        response = self._request(method="PUT", path=path, body=dict(data))
        return self._secret_or_none(response)

    @public_api_instrumented(
        logger=_LOGGER, component_id=RESOURCE_COMPONENT_ID, id_fields=("path",)
    )
    def read(self, *, path: str) -> VaultSecret | None:
        """Read ``path``; return ``None`` when the path does not exist."""
        try:
            response = self._request(method="GET", path=path)
        except VaultAdapterNotFoundError:
            return None
        return self._secret_or_none(response)

    @public_api_instrumented(
        logger=_LOGGER, component_id=RESOURCE_COMPONENT_ID, id_fields=("path",)
    )
    def delete(self, *, path: str) -> None:
        """Delete ``path``; raise ``VaultAdapterNotFoundError`` when absent."""
        self._request(method="DELETE", path=path)

    def _request(
        self,
        *,
        method: str,
        path: str,
        body: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """Issue one logical API request and map failures to adapter errors."""
        kwargs: dict[str, Any] = {}
        if body is not None:
            kwargs["json"] = body
        try:
            return self._http.request(method, _endpoint(path), **kwargs)
        except HttpStatusError as exc:
            raise _map_status_error(exc, path=path) from exc
        except HttpRequestError as exc:
            raise VaultAdapterDependencyError(
                f"vault request failed for {method} {path}: {exc}"
            ) from exc

    def _secret_or_none(self, response: httpx.Response) -> VaultSecret | None:
        """Decode one logical response body; empty bodies map to ``None``."""
        if response.status_code == 204 or not response.content:
            return None
        try:
            payload = self._http.decode_json(response)
        except HttpJsonDecodeError as exc:
            raise VaultAdapterInternalError(str(exc)) from exc
        if not isinstance(payload, Mapping):
            raise VaultAdapterInternalError("vault response must be an object")
        normalized = {key: value for key, value in payload.items() if value is not None}
        try:
            return VaultSecret.model_validate(normalized)
        except ValidationError as exc:
            raise VaultAdapterInternalError(
                f"vault response has unexpected shape: {exc.errors()[0]['msg']}"
            ) from exc


def _headers(settings: VaultAdapterSettings) -> dict[str, str]:
    """Build static request headers from adapter settings."""
    headers = {"X-Vault-Request": "true"}
    if settings.token:
        headers["X-Vault-Token"] = settings.token
    if settings.namespace:
        headers["X-Vault-Namespace"] = settings.namespace.strip("/")
    return headers


def _endpoint(path: str) -> str:
    """Return the logical API endpoint for one Vault path."""
    return _API_PREFIX + urllib_parse.quote(path.strip("/"), safe="/")


def _map_status_error(exc: HttpStatusError, *, path: str) -> VaultAdapterError:
    """Map one HTTP status failure to the matching adapter error type."""
    detail = _vault_errors(exc.response_body)
    message = f"{exc.method} {path}: HTTP {exc.status_code}"
    if detail:
        message = f"{message}: {detail}"
    if exc.status_code == 404:
        return VaultAdapterNotFoundError(message)
    if exc.status_code == 403:
        return VaultAdapterPermissionError(message)
    if exc.status_code == 400:
        return VaultAdapterInvalidRequestError(message)
    return VaultAdapterDependencyError(message)


def _vault_errors(body: str) -> str:
    """Extract Vault's ``errors`` array from an error body when present."""
    if not body:
        return ""
    try:
        payload = json.loads(body)
    except ValueError:
        return ""
    if not isinstance(payload, Mapping):
        return ""
    errors = payload.get("errors")
    if not isinstance(errors, list):
        return ""
    return "; ".join(str(item) for item in errors if str(item))
