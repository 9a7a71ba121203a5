import os
import stat
import sys
from pathlib import Path

import pytest

from mcp_manager.package_manager import NpmPackageManager

pytestmark = pytest.mark.skipif(sys.platform == "win32", reason="uses a POSIX shell script as npm")


def _fake_npm(tmp_path: Path, body: str) -> str:
    script = tmp_path / "npm"
    script.write_text(f"#!/bin/sh\n{body}\n", encoding="utf-8")
    script.chmod(script.stat().st_mode | stat.S_IXUSR)
    return str(script)


@pytest.mark.anyio
async def test_reads_version_from_npm_list(tmp_path: Path) -> None:
    npm = _fake_npm(
        tmp_path,
        """echo '{"dependencies": {"cool-tool": {"version": "1.2.3"}}}'""",
    )
    manager = NpmPackageManager(command=npm)
    assert await manager.installed_version("cool-tool", tmp_path) == "1.2.3"


@pytest.mark.anyio
async def test_empty_tree_returns_none(tmp_path: Path) -> None:
    npm = _fake_npm(tmp_path, "echo '{}'\nexit 1")
    assert await NpmPackageManager(command=npm).installed_version("cool-tool", tmp_path) is None


@pytest.mark.anyio
async def test_garbage_output_returns_none(tmp_path: Path) -> None:
    npm = _fake_npm(tmp_path, "echo 'npm ERR! something'")
    assert await NpmPackageManager(command=npm).installed_version("cool-tool", tmp_path) is None


@pytest.mark.anyio
async def test_timeout_returns_none(tmp_path: Path) -> None:
    npm = _fake_npm(tmp_path, "exec sleep 5")
    manager = NpmPackageManager(command=npm, timeout=0.2)
    assert await manager.installed_version("cool-tool", tmp_path) is None


@pytest.mark.anyio
async def test_missing_executable_returns_none(tmp_path: Path) -> None:
    manager = NpmPackageManager(command=os.fspath(tmp_path / "no-such-npm"))
    assert await manager.installed_version("cool-tool", tmp_path) is None
