import pytest
from fastmcp import Client, FastMCP

from fakes import FakePackageManager, FakeRegistry
from mcp_manager.scanner import UpdateScanner
from mcp_manager.service import ManagerService
from mcp_manager.settings import Settings
from mcp_manager.store import ConfigStore
from mcp_manager.tools import ManagerToolDependencies, register_manager_tools
from mcp_manager.versions import VersionResolver


def _build_mcp(settings: Settings) -> tuple[FastMCP, ManagerToolDependencies]:
    dependencies = ManagerToolDependencies()
    resolver = VersionResolver(registry=FakeRegistry({}), package_manager=FakePackageManager())
    service = ManagerService(settings=settings, store=ConfigStore(), scanner=UpdateScanner(resolver))
    dependencies.attach_service(service, "http://localhost:3116")
    mcp = FastMCP(name="MCP Manager test")
    register_manager_tools(mcp, dependencies)
    return mcp, dependencies


@pytest.mark.anyio
async def test_tools_are_registered(settings: Settings) -> None:
    mcp, _ = _build_mcp(settings)
    async with Client(mcp) as client:
        tools = await client.list_tools()
    assert {tool.name for tool in tools} == {
        "launch_manager",
        "list_mcp_servers",
        "check_server_updates",
    }


def test_require_service_after_detach(settings: Settings) -> None:
    _, dependencies = _build_mcp(settings)
    assert dependencies.require_service() is dependencies.service
    dependencies.detach_service()
    with pytest.raises(RuntimeError):
        dependencies.require_service()
