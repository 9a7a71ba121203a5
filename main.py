"""Entry point for the MCP manager."""

import logging
import os

from mcp_manager.server import build_server
from mcp_manager.settings import Settings


def _configure_logging() -> None:
    log_level = os.getenv("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )


def main() -> None:
    """Bootstrap and run the management API and MCP SSE server."""
    _configure_logging()
    logger = logging.getLogger("mcp-manager")
    settings = Settings.load()
    server = build_server(settings)

    try:
        server.startup()
        logger.info("MCP Manager running at %s", server.manager_url)
        logger.info("Health check available at %s/health", server.manager_url)
        logger.info("Cursor config: %s", settings.cursor_config_path)
        logger.info("Claude config: %s", settings.claude_config_path)
        logger.info(
            "MCP SSE server ready at http://localhost:%s/sse",
            settings.mcp_sse_port,
        )
        server.serve_forever()
    except KeyboardInterrupt:
        logger.info("Shutdown requested (Ctrl+C).")
    except Exception:
        logger.exception("Server stopped due to an unexpected error.")
        raise
    finally:
        server.shutdown()
        logger.info("Server shutdown complete.")


if __name__ == "__main__":
    main()
