"""Installed-version queries against the local npm installation."""

import asyncio
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from mcp_manager.settings import Settings

logger = logging.getLogger(__name__)


class PackageManager(Protocol):
    async def installed_version(self, package_name: str, working_dir: Path) -> str | None: ...


@dataclass(frozen=True, slots=True)
class NpmPackageManager:
    """Runs ``npm list <name> --depth=0 --json`` with a bounded timeout."""

    command: str = "npm"
    timeout: float = 5.0

    @classmethod
    def from_settings(cls, settings: Settings) -> "NpmPackageManager":
        return cls(command=settings.npm_command, timeout=settings.npm_list_timeout)

    async def installed_version(self, package_name: str, working_dir: Path) -> str | None:
        try:
            proc = await asyncio.create_subprocess_exec(
                self.command,
                "list",
                package_name,
                "--depth=0",
                "--json",
                cwd=str(working_dir),
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.DEVNULL,
            )
        except OSError as exc:
            logger.info("Could not run %s list for %s: %s", self.command, package_name, exc)
            return None

        try:
            stdout, _ = await asyncio.wait_for(proc.communicate(), timeout=self.timeout)
        except asyncio.TimeoutError:
            proc.kill()
            await proc.wait()
            logger.info(
                "npm list timed out",
                extra={"package": package_name, "timeout": self.timeout},
            )
            return None

        # npm exits non-zero for an empty tree but still prints JSON.
        try:
            listing = json.loads(stdout or b"{}")
        except json.JSONDecodeError:
            logger.info("Could not get version for %s via npm list", package_name)
            return None
        if not isinstance(listing, dict):
            return None

        dependency = (listing.get("dependencies") or {}).get(package_name)
        if isinstance(dependency, dict) and dependency.get("version"):
            return str(dependency["version"])
        return None
