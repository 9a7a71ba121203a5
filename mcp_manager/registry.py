"""
npm registry client used to look up the latest published package versions.

Requests go through a shared AsyncClient whose timeout bounds every lookup, so
a hanging registry cannot stall an update scan.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Protocol
from urllib.parse import quote

import httpx

from mcp_manager.settings import Settings

logger = logging.getLogger(__name__)


class RegistryError(RuntimeError):
    """Represents failures when querying the package registry."""


class Registry(Protocol):
    async def latest_version(self, package_name: str) -> str: ...


def create_registry_client(settings: Settings) -> httpx.AsyncClient:
    """Build an AsyncClient configured for the npm registry."""
    return httpx.AsyncClient(
        base_url=settings.npm_registry_url,
        timeout=settings.registry_timeout,
        headers={"Accept": "application/json"},
    )


def dist_tags_path(package_name: str) -> str:
    # Scoped names keep the leading "@" but encode the slash: @scope%2Fname
    return f"/-/package/{quote(package_name, safe='@')}/dist-tags"


@dataclass(slots=True)
class NpmRegistryClient:
    """Typed wrapper around the shared AsyncClient."""

    _client: httpx.AsyncClient

    @classmethod
    def from_settings(cls, settings: Settings) -> "NpmRegistryClient":
        """Factory that builds the client from Settings."""
        return cls(create_registry_client(settings))

    async def aclose(self) -> None:
        """Close the underlying HTTP resources."""
        await self._client.aclose()

    async def latest_version(self, package_name: str) -> str:
        """Return the version the ``latest`` dist-tag points at."""
        cleaned = package_name.strip()
        if not cleaned:
            raise ValueError("package_name must be a non-empty string.")

        data = await self._request("GET", dist_tags_path(cleaned))
        version = data.get("latest")
        if not isinstance(version, str) or not version.strip():
            raise RegistryError(f"Registry has no latest version for {cleaned}.")
        return version.strip()

    async def _request(self, method: str, path: str) -> dict[str, Any]:
        """Normalized request handler for all outgoing registry calls."""
        try:
            response = await self._client.request(method, path)
        except httpx.TimeoutException as exc:
            raise RegistryError(f"Registry request timed out ({method} {path}).") from exc
        except httpx.RequestError as exc:
            raise RegistryError(f"Registry request failed ({method} {path}): {exc!s}") from exc

        if response.status_code == 404:
            raise RegistryError(f"Package not found in registry ({method} {path}).")
        if response.is_error:
            snippet = response.text.strip()
            if len(snippet) > 512:
                snippet = f"{snippet[:512]}..."
            logger.warning(
                "Registry responded with error",
                extra={"method": method, "path": path, "status_code": response.status_code},
            )
            raise RegistryError(
                f"Registry error ({response.status_code}) during {method} {path}: {snippet or 'no body provided.'}"
            )

        try:
            data = response.json()
        except json.JSONDecodeError as exc:
            raise RegistryError(f"Registry returned invalid JSON during {method} {path}.") from exc
        if not isinstance(data, dict):
            raise RegistryError(f"Registry returned an unexpected payload during {method} {path}.")
        return data
