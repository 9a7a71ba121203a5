"""Reconciliation of default and user-saved MCP server entries."""

import logging
from typing import Any

logger = logging.getLogger(__name__)

ServerConfigSet = dict[str, dict[str, Any]]


def merge_configs(saved: ServerConfigSet, defaults: ServerConfigSet) -> ServerConfigSet:
    """
    Overlay saved server entries on top of the bundled defaults.

    Fields are merged one level deep: a saved entry replaces only the fields it
    carries, so anything it omits keeps the default value. Entries present on
    only one side are kept as they are. Neither input is mutated.
    """
    logger.debug(
        "Merging configs",
        extra={"saved": sorted(saved), "defaults": sorted(defaults)},
    )
    merged: ServerConfigSet = {name: dict(entry) for name, entry in defaults.items()}
    for name, entry in saved.items():
        merged[name] = {**merged.get(name, {}), **entry}
    logger.debug("Merged servers: %s", sorted(merged))
    return merged


def filter_disabled(config: ServerConfigSet) -> ServerConfigSet:
    """Drop disabled entries and strip the ``disabled`` flag from the rest."""
    enabled: ServerConfigSet = {}
    for name, entry in config.items():
        if entry.get("disabled"):
            logger.info("Filtering out disabled server: %s", name)
            continue
        enabled[name] = {key: value for key, value in entry.items() if key != "disabled"}
    return enabled
