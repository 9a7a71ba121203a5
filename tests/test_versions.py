import json
from pathlib import Path

import pytest

from fakes import FakePackageManager, FakeRegistry
from mcp_manager.versions import VersionResolver, is_newer, search_dirs


@pytest.mark.parametrize(
    ("current", "latest", "expected"),
    [
        ("1.2.3", "1.2.4", True),
        ("1.10.0", "1.9.9", False),
        ("1.2", "1.2.0", False),
        ("1.2.0", "1.2", False),
        ("1.2", "1.2.1", True),
        ("2.0.0", "2.0.0", False),
        ("0.9.9", "1.0.0", True),
        (None, "1.0.0", False),
        ("1.0.0", None, False),
        ("", "1.0.0", False),
    ],
)
def test_is_newer(current: str | None, latest: str | None, expected: bool) -> None:
    assert is_newer(current, latest) is expected


def test_prerelease_segments_coerce_to_zero() -> None:
    # "0-beta" is not numeric, so 2.0.0-beta reads as 2.0.0.
    assert is_newer("2.0.0-beta", "2.0.0") is False
    assert is_newer("1.9.0", "2.0.0-beta") is True


def _write_manifest(path: Path, **fields: str) -> None:
    path.mkdir(parents=True, exist_ok=True)
    (path / "package.json").write_text(json.dumps(fields), encoding="utf-8")


def _resolver(registry: FakeRegistry | None = None, installed: dict[str, str] | None = None) -> VersionResolver:
    return VersionResolver(
        registry=registry or FakeRegistry({}),
        package_manager=FakePackageManager(installed),
        working_dir=Path("/work"),
    )


@pytest.mark.anyio
async def test_latest_version_swallows_failures() -> None:
    resolver = _resolver(FakeRegistry({"known": "1.0.0"}, failing={"boom": RuntimeError("boom")}))
    assert await resolver.latest_version("known") == "1.0.0"
    assert await resolver.latest_version("unknown") is None
    assert await resolver.latest_version("boom") is None


@pytest.mark.anyio
async def test_current_version_from_project_manifest(tmp_path: Path) -> None:
    project = tmp_path / "weather-server"
    _write_manifest(project, name="weather-server", version="0.3.1")
    server_path = str(project / "build" / "index.js")

    assert await _resolver().current_version("weather-server", server_path) == "0.3.1"


@pytest.mark.anyio
async def test_current_version_ignores_manifest_for_other_package(tmp_path: Path) -> None:
    project = tmp_path / "weather-server"
    _write_manifest(project, name="something-else", version="9.9.9")
    resolver = _resolver(installed={"weather-server": "0.2.0"})

    version = await resolver.current_version("weather-server", str(project / "index.js"))

    assert version == "0.2.0"


@pytest.mark.anyio
async def test_current_version_from_node_modules(tmp_path: Path) -> None:
    _write_manifest(tmp_path / "node_modules" / "@acme" / "tool", name="@acme/tool", version="1.1.0")
    server_path = str(tmp_path / "bin" / "run.js")

    assert await _resolver().current_version("@acme/tool", server_path) == "1.1.0"


@pytest.mark.anyio
async def test_walk_stops_after_five_levels(tmp_path: Path) -> None:
    _write_manifest(tmp_path, name="deep", version="1.0.0")
    server_path = tmp_path / "a" / "b" / "c" / "d" / "e" / "index.js"
    resolver = _resolver()

    assert await resolver.current_version("deep", str(server_path)) is None
    assert resolver.package_manager.calls == [("deep", Path("/work"))]


@pytest.mark.anyio
async def test_current_version_skips_malformed_manifest(tmp_path: Path) -> None:
    (tmp_path / "package.json").write_text("{not json", encoding="utf-8")
    resolver = _resolver(installed={"tool": "3.0.0"})

    assert await resolver.current_version("tool", str(tmp_path / "index.js")) == "3.0.0"


@pytest.mark.anyio
async def test_current_version_without_path_asks_package_manager(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.chdir(tmp_path)
    resolver = _resolver(installed={"cool-tool": "1.0.0"})
    assert await resolver.current_version("cool-tool", "") == "1.0.0"


def test_search_dirs_for_non_path_argument_is_working_directory() -> None:
    assert list(search_dirs("-y")) == [Path(".")]
    assert list(search_dirs("")) == [Path(".")]
    assert list(search_dirs(None)) == [Path(".")]


def test_search_dirs_stop_at_filesystem_root(tmp_path: Path) -> None:
    root = Path(tmp_path.anchor)
    assert list(search_dirs(str(root / "index.js"))) == [root]

    nested = tmp_path / "a" / "b" / "index.js"
    assert list(search_dirs(str(nested))) == [
        tmp_path / "a" / "b",
        tmp_path / "a",
        tmp_path,
        tmp_path.parent,
        tmp_path.parent.parent,
    ]


@pytest.mark.anyio
async def test_npx_flag_path_checks_working_directory_once(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    _write_manifest(tmp_path / "node_modules" / "cool-tool", name="cool-tool", version="1.4.0")
    monkeypatch.chdir(tmp_path)
    resolver = _resolver(installed={"cool-tool": "0.0.1"})

    assert await resolver.current_version("cool-tool", "-y") == "1.4.0"
    assert resolver.package_manager.calls == []
