"""
MCP manager: reconciles MCP server entries between the Cursor (Cline) and
Claude Desktop configuration files and checks their npm packages for updates.
"""

__version__ = "1.0.0"

__all__ = ["__version__"]
