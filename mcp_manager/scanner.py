"""Concurrent update checks across every configured MCP server."""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any

from mcp_manager.fallback import find_by_variation
from mcp_manager.identity import resolve_identity
from mcp_manager.versions import VersionResolver, is_newer

logger = logging.getLogger(__name__)

REASON_NO_IDENTITY = "Unable to determine package name"
REASON_NO_CURRENT = "Could not determine current version"
REASON_NO_LATEST = "Could not fetch latest version"
REASON_UPDATE = "Update available"
REASON_UP_TO_DATE = "Up to date"


@dataclass(slots=True)
class UpdateInfo:
    has_update: bool
    reason: str
    package_name: str | None = None
    current_version: str | None = None
    latest_version: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "hasUpdate": self.has_update,
            "packageName": self.package_name,
            "currentVersion": self.current_version,
            "latestVersion": self.latest_version,
            "reason": self.reason,
        }


@dataclass(slots=True)
class ScanResult:
    updates: dict[str, UpdateInfo] = field(default_factory=dict)

    @property
    def total_servers(self) -> int:
        return len(self.updates)

    @property
    def servers_with_updates(self) -> int:
        return sum(1 for info in self.updates.values() if info.has_update)

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": True,
            "updates": {name: info.to_dict() for name, info in self.updates.items()},
            "totalServers": self.total_servers,
            "serversWithUpdates": self.servers_with_updates,
        }


def server_path_of(server_config: dict[str, Any]) -> str:
    """The launch path is the first argument, when there is one."""
    args = server_config.get("args")
    if isinstance(args, list) and args and isinstance(args[0], str):
        return args[0]
    return ""


def _reason(current: str | None, latest: str | None, has_update: bool) -> str:
    if not current:
        return REASON_NO_CURRENT
    if not latest:
        return REASON_NO_LATEST
    return REASON_UPDATE if has_update else REASON_UP_TO_DATE


@dataclass(slots=True)
class UpdateScanner:
    resolver: VersionResolver

    async def check_server(self, server_name: str, server_config: dict[str, Any]) -> UpdateInfo:
        """Resolve one server's package and compare installed against published."""
        server_path = server_path_of(server_config)
        identity = resolve_identity(server_path, server_config)
        if identity is None:
            return UpdateInfo(has_update=False, reason=REASON_NO_IDENTITY)

        package_name = identity.name
        latest = await self.resolver.latest_version(package_name)
        if latest is None and not identity.explicit:
            logger.info(
                "Package %s not found, trying variations",
                package_name,
                extra={"server": server_name},
            )
            match = await find_by_variation(package_name, server_path, self.resolver.latest_version)
            if match is not None:
                package_name = match.package_name
                latest = match.version

        current = None
        if latest:
            current = await self.resolver.current_version(package_name, server_path)

        has_update = is_newer(current, latest)
        return UpdateInfo(
            has_update=has_update,
            reason=_reason(current, latest, has_update),
            package_name=package_name,
            current_version=current,
            latest_version=latest,
        )

    async def _guarded_check(
        self, server_name: str, server_config: dict[str, Any]
    ) -> tuple[str, UpdateInfo]:
        try:
            return server_name, await self.check_server(server_name, server_config)
        except Exception as exc:  # noqa: BLE001
            logger.exception(
                "Error checking updates for %s",
                server_name,
                extra={"server": server_name},
            )
            return server_name, UpdateInfo(has_update=False, reason=f"Error: {exc}")

    async def scan(self, servers: dict[str, dict[str, Any]]) -> ScanResult:
        """
        Check every server concurrently.

        Each task returns its own ``(name, info)`` pair; a failure is recorded
        against that server alone and never aborts the rest of the scan.
        """
        results = await asyncio.gather(
            *(self._guarded_check(name, config) for name, config in servers.items())
        )
        scan = ScanResult(updates=dict(results))
        logger.info(
            "Found updates for %s of %s servers",
            scan.servers_with_updates,
            scan.total_servers,
        )
        return scan
