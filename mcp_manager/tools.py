"""MCP tool registrations for the MCP manager."""

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from fastmcp import Context, FastMCP

from mcp_manager.service import KNOWN_TOOLS, ManagerService
from mcp_manager.store import ConfigStoreError

logger = logging.getLogger(__name__)

LAUNCH_MANAGER = KNOWN_TOOLS["mcp-manager"][0]


@dataclass
class ManagerToolDependencies:
    """Runtime dependencies required by the MCP tools."""

    service: ManagerService | None = None
    manager_url: str = ""

    def attach_service(self, service: ManagerService, manager_url: str) -> None:
        self.service = service
        self.manager_url = manager_url

    def detach_service(self) -> None:
        self.service = None

    def require_service(self) -> ManagerService:
        if self.service is None:
            raise RuntimeError("Manager service is not initialized.")
        return self.service


def register_manager_tools(
    mcp: FastMCP,
    dependencies: ManagerToolDependencies,
) -> None:
    """Register MCP tools that expose the manager's core operations."""

    def _log_tool_event(tool_name: str, event: str, **fields: object) -> None:
        logger.info(
            "manager_tool_event",
            extra={"tool": tool_name, "event": event, **fields},
        )

    async def _with_error_handling(
        tool_name: str,
        action: Callable[[], Awaitable[dict[str, Any]]],
    ) -> dict[str, Any]:
        try:
            return await action()
        except (ConfigStoreError, OSError) as exc:
            logger.warning("%s failed reading configuration", tool_name, exc_info=True)
            _log_tool_event(tool_name, "config_error", error=str(exc))
            return {"error": str(exc)}
        except Exception as exc:  # noqa: BLE001
            logger.exception("%s failed unexpectedly", tool_name)
            _log_tool_event(tool_name, "unexpected_error", error=str(exc))
            return {"error": f"Unexpected error: {exc}"}

    @mcp.tool(name=LAUNCH_MANAGER["name"], description=LAUNCH_MANAGER["description"])
    async def launch_manager(ctx: Context) -> dict[str, Any]:
        """Point the caller at the manager web interface."""

        async def _call() -> dict[str, Any]:
            url = dependencies.manager_url
            await ctx.info(f"MCP Server Manager available at {url}")
            _log_tool_event("launch_manager", "success", url=url)
            return {"url": url, "message": f"Open {url} to manage MCP servers."}

        return await _with_error_handling("launch_manager", _call)

    @mcp.tool(
        name="list_mcp_servers",
        description="Returns the merged MCP server configuration: saved Cursor entries layered over the bundled defaults.",
    )
    async def list_mcp_servers() -> dict[str, Any]:
        """Return the merged server configuration."""
        service = dependencies.require_service()

        async def _call() -> dict[str, Any]:
            config = await service.get_merged_config()
            _log_tool_event("list_mcp_servers", "success", count=len(config["mcpServers"]))
            return config

        return await _with_error_handling("list_mcp_servers", _call)

    @mcp.tool(
        name="check_server_updates",
        description="Checks the npm registry for newer versions of the packages behind every configured MCP server.",
    )
    async def check_server_updates() -> dict[str, Any]:
        """Run an update scan over the merged configuration."""
        service = dependencies.require_service()

        async def _call() -> dict[str, Any]:
            scan = await service.scan_for_updates()
            _log_tool_event(
                "check_server_updates",
                "success",
                total=scan.total_servers,
                with_updates=scan.servers_with_updates,
            )
            return scan.to_dict()

        return await _with_error_handling("check_server_updates", _call)

    logger.info("Manager MCP tools registered.")
