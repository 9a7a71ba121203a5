"""Per-OS default locations of the configuration files the manager reconciles."""

import os
import sys
from pathlib import Path

CLINE_SETTINGS_PARTS = (
    "Cursor",
    "User",
    "globalStorage",
    "saoudrizwan.claude-dev",
    "settings",
    "cline_mcp_settings.json",
)


def is_windows() -> bool:
    return os.name == "nt"


def is_macos() -> bool:
    return sys.platform == "darwin"


def app_config_root() -> Path:
    """Return the directory desktop apps keep their settings under.

    - macOS: ~/Library/Application Support
    - Windows: %APPDATA% (fallback to ~/AppData/Roaming)
    - Linux: ~/.config
    """
    if is_macos():
        return Path.home() / "Library" / "Application Support"
    if is_windows():
        appdata = os.environ.get("APPDATA")
        return Path(appdata) if appdata else Path.home() / "AppData" / "Roaming"
    return Path.home() / ".config"


def default_cursor_config_path() -> Path:
    """Cline's MCP settings file inside Cursor's global storage."""
    return app_config_root().joinpath(*CLINE_SETTINGS_PARTS)


def default_claude_config_path() -> Path:
    return app_config_root() / "Claude" / "claude_desktop_config.json"
