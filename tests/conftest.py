from pathlib import Path

import pytest

from mcp_manager.settings import Settings


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    static_dir = tmp_path / "static"
    static_dir.mkdir()
    (static_dir / "index.html").write_text("<h1>manager</h1>", encoding="utf-8")
    return Settings(
        cursor_config_path=tmp_path / "cursor" / "cline_mcp_settings.json",
        claude_config_path=tmp_path / "claude" / "claude_desktop_config.json",
        default_config_path=tmp_path / "defaults.json",
        static_dir=static_dir,
    )
