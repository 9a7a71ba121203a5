"""Flat-file JSON storage for MCP server configuration documents."""

import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

SERVERS_KEY = "mcpServers"


class ConfigStoreError(RuntimeError):
    """Raised when a configuration file exists but cannot be decoded."""

    def __init__(self, message: str, path: Path) -> None:
        super().__init__(message)
        self.path = path


def empty_document() -> dict[str, Any]:
    return {SERVERS_KEY: {}}


class ConfigStore:
    """Reads and writes whole JSON configuration documents by path."""

    def read(self, path: Path) -> dict[str, Any]:
        """
        Load the document stored at ``path``.

        A missing file is not an error and yields ``{"mcpServers": {}}``.
        Undecodable content raises ConfigStoreError; any other OSError
        (permissions, disk) propagates unchanged.
        """
        logger.debug("Reading config file", extra={"path": str(path)})
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.info("No existing config at %s, using empty config", path)
            return empty_document()

        try:
            document = json.loads(raw)
        except json.JSONDecodeError as exc:
            logger.error("Config file contains invalid JSON", extra={"path": str(path)})
            raise ConfigStoreError(f"Invalid JSON in {path}: {exc.msg}", path) from exc

        if not isinstance(document, dict):
            raise ConfigStoreError(f"Expected a JSON object in {path}.", path)
        return document

    def write(self, path: Path, document: dict[str, Any]) -> None:
        """Persist ``document`` as indented JSON, creating parent directories."""
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(document, indent=2), encoding="utf-8")
        logger.info("Wrote config file %s", path)


def servers_of(document: dict[str, Any]) -> dict[str, Any]:
    """Return the server map of a document, tolerating a missing or null key."""
    servers = document.get(SERVERS_KEY) or {}
    if not isinstance(servers, dict):
        return {}
    return servers
