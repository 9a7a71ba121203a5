from pathlib import Path
from typing import Any

from mcp_manager.registry import RegistryError


class FakeRegistry:
    """Registry double that knows a fixed set of packages and records lookups."""

    def __init__(self, versions: dict[str, str], failing: dict[str, Exception] | None = None) -> None:
        self.versions = versions
        self.failing = failing or {}
        self.calls: list[str] = []

    async def latest_version(self, package_name: str) -> str:
        self.calls.append(package_name)
        if package_name in self.failing:
            raise self.failing[package_name]
        try:
            return self.versions[package_name]
        except KeyError as exc:
            raise RegistryError(f"Package not found: {package_name}") from exc


class FakePackageManager:
    def __init__(self, installed: dict[str, str] | None = None) -> None:
        self.installed = installed or {}
        self.calls: list[tuple[str, Path]] = []

    async def installed_version(self, package_name: str, working_dir: Path) -> str | None:
        self.calls.append((package_name, working_dir))
        return self.installed.get(package_name)


def server(**fields: Any) -> dict[str, Any]:
    return {"command": "node", "args": [], **fields}
