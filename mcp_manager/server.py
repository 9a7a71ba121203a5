"""
HTTP bootstrap for the MCP manager.

A Starlette app serves the management API and the static UI, while a FastMCP
instance exposes the same operations as MCP tools on its own SSE port.
"""

import asyncio
import json
import logging
from datetime import datetime, timezone
from pathlib import Path

import uvicorn
from fastmcp import FastMCP  # type: ignore[import-not-found]
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import FileResponse, JSONResponse, Response
from starlette.routing import Route

from mcp_manager import __version__
from mcp_manager.package_manager import NpmPackageManager
from mcp_manager.registry import NpmRegistryClient
from mcp_manager.scanner import UpdateScanner
from mcp_manager.service import ConfigPayloadError, ManagerService
from mcp_manager.settings import Settings
from mcp_manager.store import ConfigStore
from mcp_manager.tools import ManagerToolDependencies, register_manager_tools
from mcp_manager.versions import VersionResolver

logger = logging.getLogger(__name__)

SERVICE_NAME = "mcp-manager"


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


def _service(request: Request) -> ManagerService:
    return request.app.state.service


async def health_endpoint(request: Request) -> JSONResponse:
    return JSONResponse(
        {
            "status": "MCP Manager Server - Healthy",
            "port": request.app.state.settings.port,
            "service": SERVICE_NAME,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "version": __version__,
        }
    )


async def status_endpoint(request: Request) -> JSONResponse:
    return JSONResponse(
        {
            "service": SERVICE_NAME,
            "status": "operational",
            "port": request.app.state.settings.port,
            "version": __version__,
        }
    )


async def cursor_config_endpoint(request: Request) -> JSONResponse:
    try:
        return JSONResponse(await _service(request).get_merged_config())
    except Exception as exc:  # noqa: BLE001
        logger.exception("Error reading Cursor config")
        return _error(f"Failed to read Cursor config: {exc}", 500)


async def claude_config_endpoint(request: Request) -> JSONResponse:
    try:
        return JSONResponse(await _service(request).get_raw_config("claude"))
    except Exception as exc:  # noqa: BLE001
        logger.exception("Error reading Claude config")
        return _error(f"Failed to read Claude config: {exc}", 500)


async def tools_endpoint(request: Request) -> JSONResponse:
    try:
        return JSONResponse(await _service(request).list_tools())
    except Exception as exc:  # noqa: BLE001
        logger.exception("Error listing tools")
        return _error(str(exc), 500)


async def save_configs_endpoint(request: Request) -> JSONResponse:
    try:
        payload = await request.json()
    except json.JSONDecodeError as exc:
        return _error(f"Invalid JSON body: {exc.msg}", 400)

    try:
        return JSONResponse(await _service(request).save_config(payload))
    except ConfigPayloadError as exc:
        return _error(str(exc), 400)
    except Exception as exc:  # noqa: BLE001
        logger.exception("Error saving configurations")
        return _error(f"Failed to save configurations: {exc}", 500)


async def server_updates_endpoint(request: Request) -> JSONResponse:
    try:
        scan = await _service(request).scan_for_updates()
    except Exception as exc:  # noqa: BLE001
        logger.exception("Error checking for updates")
        return _error(f"Failed to check for updates: {exc}", 500)
    return JSONResponse(scan.to_dict())


async def static_endpoint(request: Request) -> Response:
    """Serve a file from the static directory, falling back to index.html."""
    static_dir: Path = request.app.state.settings.static_dir.resolve()
    requested = (static_dir / request.path_params["path"]).resolve()
    if requested.is_file() and requested.is_relative_to(static_dir):
        return FileResponse(requested)

    index = static_dir / "index.html"
    if not index.is_file():
        return _error("Not found", 404)
    logger.debug("Serving index.html for %s", request.url.path)
    return FileResponse(index)


def create_app(settings: Settings, service: ManagerService) -> Starlette:
    """Build the management API around an already-wired service."""
    app = Starlette(
        routes=[
            Route("/health", health_endpoint, methods=["GET"]),
            Route("/status", status_endpoint, methods=["GET"]),
            Route("/api/cursor-config", cursor_config_endpoint, methods=["GET"]),
            Route("/api/claude-config", claude_config_endpoint, methods=["GET"]),
            Route("/api/tools", tools_endpoint, methods=["GET"]),
            Route("/api/server-updates", server_updates_endpoint, methods=["GET"]),
            Route("/api/save-configs", save_configs_endpoint, methods=["POST"]),
            Route("/{path:path}", static_endpoint, methods=["GET"]),
        ],
    )
    app.state.settings = settings
    app.state.service = service
    return app


class ServerApp:
    """Owns the registry client and both HTTP transports."""

    def __init__(self, settings: Settings) -> None:
        self._logger = logging.getLogger(__name__)
        self._settings = settings
        self._registry_client: NpmRegistryClient | None = None
        self._service: ManagerService | None = None
        self._tool_dependencies = ManagerToolDependencies()
        self._mcp_app = FastMCP(
            name="MCP Manager",
            instructions=(
                "Inspect configured MCP servers and check their npm packages for updates."
            ),
        )
        register_manager_tools(self._mcp_app, self._tool_dependencies)

    @property
    def manager_url(self) -> str:
        return f"http://localhost:{self._settings.port}"

    def startup(self) -> None:
        """Wire the service graph used by both transports."""
        self._logger.info("Starting server bootstrap")
        self._registry_client = NpmRegistryClient.from_settings(self._settings)
        resolver = VersionResolver(
            registry=self._registry_client,
            package_manager=NpmPackageManager.from_settings(self._settings),
        )
        self._service = ManagerService(
            settings=self._settings,
            store=ConfigStore(),
            scanner=UpdateScanner(resolver),
        )
        self._tool_dependencies.attach_service(self._service, self.manager_url)

    def shutdown(self) -> None:
        """Release acquired resources."""
        self._logger.info("Shutting down server bootstrap")
        if self._registry_client is not None:
            asyncio.run(self._registry_client.aclose())
            self._registry_client = None
        self._tool_dependencies.detach_service()
        self._service = None

    def require_service(self) -> ManagerService:
        if self._service is None:
            raise RuntimeError("ServerApp.startup() must run before serving.")
        return self._service

    async def serve_async(self) -> None:
        """Run the management API and the MCP SSE transport side by side."""
        host = self._settings.host
        api_config = uvicorn.Config(
            app=create_app(self._settings, self.require_service()),
            host=host,
            port=self._settings.port,
            log_level=logging.getLevelName(logging.getLogger().level).lower(),
        )
        api_server = uvicorn.Server(api_config)
        self._logger.info(
            "Starting management API",
            extra={"host": host, "port": self._settings.port},
        )
        try:
            await asyncio.gather(
                api_server.serve(),
                self._mcp_app.run_http_async(
                    transport="sse",
                    host=host,
                    port=self._settings.mcp_sse_port,
                ),
            )
        finally:
            if self._registry_client is not None:
                await self._registry_client.aclose()
                self._registry_client = None

    def serve_forever(self) -> None:
        """Block until interrupted."""
        asyncio.run(self.serve_async())

    @property
    def mcp(self) -> FastMCP:
        """Expose the configured FastMCP instance."""
        return self._mcp_app


def build_server(settings: Settings) -> ServerApp:
    """Factory used by main.py to create the configured server instance."""
    return ServerApp(settings)
