"""Environment-driven configuration utilities for the MCP manager."""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from mcp_manager.paths import default_claude_config_path, default_cursor_config_path

PACKAGE_DIR = Path(__file__).resolve().parent
DEFAULT_CONFIG_PATH = PACKAGE_DIR / "config.json"
DEFAULT_STATIC_DIR = PACKAGE_DIR / "static"
DEFAULT_REGISTRY_URL = "https://registry.npmjs.org"


def _read_positive_float(name: str, default: str) -> float:
    raw = os.getenv(name, "").strip() or default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a numeric value.") from exc
    if value <= 0:
        raise ValueError(f"{name} must be greater than zero.")
    return value


def _read_port(name: str, default: str) -> int:
    raw = os.getenv(name, "").strip() or default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer.") from exc
    if value <= 0:
        raise ValueError(f"{name} must be greater than zero.")
    return value


def _read_path(name: str, default: Path) -> Path:
    raw = os.getenv(name, "").strip()
    return Path(raw).expanduser() if raw else default


@dataclass(frozen=True, slots=True)
class Settings:
    """Container for runtime configuration."""

    cursor_config_path: Path
    claude_config_path: Path
    default_config_path: Path = DEFAULT_CONFIG_PATH
    static_dir: Path = DEFAULT_STATIC_DIR
    host: str = "0.0.0.0"
    port: int = 3116
    mcp_sse_port: int = 3117
    npm_registry_url: str = DEFAULT_REGISTRY_URL
    registry_timeout: float = 10.0
    npm_list_timeout: float = 5.0
    npm_command: str = "npm"

    @classmethod
    def load(cls) -> "Settings":
        """
        Load configuration from environment variables.

        Python-dotenv is used so developers can rely on a local .env file without
        exporting variables globally. Config file locations default to the
        per-OS locations used by Cursor (Cline) and Claude Desktop.
        """
        load_dotenv()

        npm_registry_url = os.getenv("NPM_REGISTRY_URL", "").strip() or DEFAULT_REGISTRY_URL

        return cls(
            cursor_config_path=_read_path("CURSOR_CONFIG_PATH", default_cursor_config_path()),
            claude_config_path=_read_path("CLAUDE_CONFIG_PATH", default_claude_config_path()),
            default_config_path=_read_path("DEFAULT_CONFIG_PATH", DEFAULT_CONFIG_PATH),
            static_dir=_read_path("STATIC_DIR", DEFAULT_STATIC_DIR),
            host=os.getenv("HOST", "").strip() or "0.0.0.0",
            port=_read_port("PORT", "3116"),
            mcp_sse_port=_read_port("MCP_SSE_PORT", "3117"),
            npm_registry_url=npm_registry_url.rstrip("/"),
            registry_timeout=_read_positive_float("REGISTRY_TIMEOUT", "10"),
            npm_list_timeout=_read_positive_float("NPM_LIST_TIMEOUT", "5"),
            npm_command=os.getenv("NPM_COMMAND", "").strip() or "npm",
        )
