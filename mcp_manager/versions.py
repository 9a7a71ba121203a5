"""Latest/current version lookups and the dotted-numeric version comparison."""

import json
import logging
import os
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import anyio.to_thread

from mcp_manager.package_manager import PackageManager
from mcp_manager.registry import Registry

logger = logging.getLogger(__name__)

MAX_PARENT_LEVELS = 5


def _version_segments(version: str) -> list[int]:
    segments = []
    for part in version.split("."):
        try:
            segments.append(int(part))
        except ValueError:
            segments.append(0)
    return segments


def is_newer(current: str | None, latest: str | None) -> bool:
    """
    True when ``latest`` sorts after ``current``, comparing dot-separated
    integers left to right. Missing segments count as 0, so "1.2" equals
    "1.2.0". Non-numeric segments also count as 0: "2.0.0-beta" reads as
    2.0.0 with its last segment zeroed.
    """
    if not current or not latest:
        return False

    current_parts = _version_segments(current)
    latest_parts = _version_segments(latest)
    width = max(len(current_parts), len(latest_parts))
    current_parts += [0] * (width - len(current_parts))
    latest_parts += [0] * (width - len(latest_parts))

    for current_part, latest_part in zip(current_parts, latest_parts):
        if latest_part != current_part:
            return latest_part > current_part
    return False


def _read_manifest(path: Path) -> dict[str, Any] | None:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return None
    return data if isinstance(data, dict) else None


def search_dirs(server_path: str | None) -> Iterator[Path]:
    """The launch directory and its parents, at most MAX_PARENT_LEVELS, never past the root."""
    current = Path(os.path.dirname(server_path or "") or ".")
    for _ in range(MAX_PARENT_LEVELS):
        yield current
        if current.parent == current:
            return
        current = current.parent


def _manifest_versions(package_name: str, server_path: str | None) -> Iterator[str]:
    for directory in search_dirs(server_path):
        own = _read_manifest(directory / "package.json")
        if own and own.get("name") == package_name and own.get("version"):
            yield str(own["version"])

        installed = _read_manifest(directory / "node_modules" / package_name / "package.json")
        if installed and installed.get("version"):
            yield str(installed["version"])


def _first_manifest_version(package_name: str, server_path: str | None) -> str | None:
    return next(_manifest_versions(package_name, server_path), None)


@dataclass(slots=True)
class VersionResolver:
    """Looks up published and installed versions; lookups never raise."""

    registry: Registry
    package_manager: PackageManager
    working_dir: Path = field(default_factory=Path.cwd)

    async def latest_version(self, package_name: str) -> str | None:
        try:
            return await self.registry.latest_version(package_name) or None
        except Exception as exc:  # noqa: BLE001
            logger.warning(
                "Error getting latest version for %s: %s",
                package_name,
                exc,
                extra={"package": package_name},
            )
            return None

    async def current_version(self, package_name: str, server_path: str | None) -> str | None:
        """
        Installed version of ``package_name``.

        Walks up to five directories from the server's launch directory (the
        working directory when the launch argument is not a path), checking
        each level's own package.json and its node_modules copy of the package,
        then falls back to asking npm.
        """
        version = await anyio.to_thread.run_sync(_first_manifest_version, package_name, server_path)
        if version:
            return version

        try:
            return await self.package_manager.installed_version(package_name, self.working_dir)
        except Exception:  # noqa: BLE001
            logger.warning(
                "Error getting current version for %s",
                package_name,
                exc_info=True,
                extra={"package": package_name, "server_path": server_path},
            )
            return None
