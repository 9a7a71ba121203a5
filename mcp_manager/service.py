"""Core operations exposed to the HTTP and MCP layers."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import anyio.to_thread

from mcp_manager.merge import filter_disabled, merge_configs
from mcp_manager.scanner import ScanResult, UpdateScanner
from mcp_manager.settings import Settings
from mcp_manager.store import SERVERS_KEY, ConfigStore, servers_of

logger = logging.getLogger(__name__)

SAVE_MESSAGE = "Configurations saved successfully. Please restart Claude to apply changes."

# Tools offered by servers this manager knows about, keyed by server name.
KNOWN_TOOLS: dict[str, list[dict[str, Any]]] = {
    "mcp-manager": [
        {
            "name": "launch_manager",
            "description": "Launch the MCP Server Manager interface",
            "inputSchema": {"type": "object", "properties": {}, "required": []},
        }
    ],
}


class ConfigPayloadError(ValueError):
    """Raised when a save request does not carry a server map."""


@dataclass(slots=True)
class ManagerService:
    """
    Reconciles the Cursor (Cline) and Claude Desktop config files.

    Every call re-reads the files it needs; nothing is cached between calls.
    """

    settings: Settings
    store: ConfigStore
    scanner: UpdateScanner

    def _config_path(self, which: str) -> Path:
        paths = {
            "cursor": self.settings.cursor_config_path,
            "claude": self.settings.claude_config_path,
        }
        try:
            return paths[which]
        except KeyError as exc:
            raise ValueError(f"Unknown config '{which}', expected one of {sorted(paths)}.") from exc

    async def _read(self, path: Path) -> dict[str, Any]:
        return await anyio.to_thread.run_sync(self.store.read, path)

    async def _write(self, path: Path, document: dict[str, Any]) -> None:
        await anyio.to_thread.run_sync(self.store.write, path, document)

    async def merged_servers(self) -> dict[str, dict[str, Any]]:
        saved = await self._read(self.settings.cursor_config_path)
        defaults = await self._read(self.settings.default_config_path)
        return merge_configs(servers_of(saved), servers_of(defaults))

    async def get_merged_config(self) -> dict[str, Any]:
        """Saved Cursor entries layered over the bundled defaults."""
        servers = await self.merged_servers()
        logger.info("Returning merged config with servers: %s", sorted(servers))
        return {SERVERS_KEY: servers}

    async def get_raw_config(self, which: str) -> dict[str, Any]:
        """The document stored in the ``"cursor"`` or ``"claude"`` file, unmerged."""
        return await self._read(self._config_path(which))

    async def save_config(self, payload: Any) -> dict[str, Any]:
        """
        Write the full server map to the Cursor file and the enabled subset to
        the Claude Desktop file.

        The payload is validated and filtered before either file is touched, so
        a rejected request leaves both files as they were.
        """
        servers = payload.get(SERVERS_KEY) if isinstance(payload, dict) else None
        if not isinstance(servers, dict):
            raise ConfigPayloadError("No server configuration provided")
        malformed = sorted(name for name, entry in servers.items() if not isinstance(entry, dict))
        if malformed:
            raise ConfigPayloadError(f"Server entries must be objects: {', '.join(malformed)}")

        enabled = filter_disabled(servers)
        await self._write(self.settings.cursor_config_path, {SERVERS_KEY: servers})
        await self._write(self.settings.claude_config_path, {SERVERS_KEY: enabled})
        logger.info(
            "Configurations saved",
            extra={"servers": sorted(servers), "enabled": sorted(enabled)},
        )
        return {"success": True, "message": SAVE_MESSAGE}

    async def scan_for_updates(self) -> ScanResult:
        return await self.scanner.scan(await self.merged_servers())

    async def list_tools(self) -> list[dict[str, Any]]:
        """Tool definitions of the known servers that are currently enabled."""
        servers = await self.merged_servers()
        tools = [
            {**tool, "server": server_name}
            for server_name, server_tools in KNOWN_TOOLS.items()
            if server_name in servers and not servers[server_name].get("disabled")
            for tool in server_tools
        ]
        logger.info("Returning %s tools", len(tools))
        return tools
