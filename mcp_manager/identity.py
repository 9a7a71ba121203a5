"""Heuristics that map a configured server onto its npm package name."""

import re
from dataclasses import dataclass
from typing import Any

_SCOPED_SEGMENT = re.compile(r"@([^/]+)/([^/]+)")
_NODE_MODULES_SEGMENT = re.compile(r"node_modules/([^/@][^/]+)")
_MCP_SEGMENT = re.compile(r"([^/]*mcp[^/]*)/", re.IGNORECASE)


@dataclass(frozen=True, slots=True)
class PackageIdentity:
    """Best guess at the package backing a server.

    ``explicit`` marks names taken from the ``npmPackage`` field; those are
    authoritative and never replaced by fallback spellings.
    """

    name: str
    is_scoped: bool
    explicit: bool = False

    @classmethod
    def guessed(cls, name: str) -> "PackageIdentity":
        return cls(name=name, is_scoped=name.startswith("@"))


def _from_npx_args(args: Any) -> str | None:
    if not isinstance(args, list):
        return None
    for arg in args:
        if isinstance(arg, str) and not arg.startswith("-") and arg != "npx":
            return arg
    return None


def _from_path(server_path: str) -> PackageIdentity | None:
    scoped = _SCOPED_SEGMENT.search(server_path)
    if scoped:
        return PackageIdentity(name=f"@{scoped.group(1)}/{scoped.group(2)}", is_scoped=True)

    for pattern in (_NODE_MODULES_SEGMENT, _MCP_SEGMENT):
        match = pattern.search(server_path)
        if match:
            return PackageIdentity(name=match.group(1), is_scoped=False)
    return None


def resolve_identity(
    server_path: str | None,
    server_config: dict[str, Any] | None,
) -> PackageIdentity | None:
    """
    Work out which package a server runs, first match wins:

    1. an explicit ``npmPackage`` field,
    2. the first non-flag argument of an ``npx`` command,
    3. the launch path: an ``@scope/name`` segment, then the segment after
       ``node_modules/``, then any directory whose name mentions "mcp".

    Returns None when nothing matches; callers report that as "no update
    information" rather than failing.
    """
    if server_config:
        explicit_name = server_config.get("npmPackage")
        if explicit_name:
            return PackageIdentity(
                name=explicit_name,
                is_scoped=explicit_name.startswith("@"),
                explicit=True,
            )

        if server_config.get("command") == "npx":
            package_arg = _from_npx_args(server_config.get("args"))
            if package_arg:
                return PackageIdentity.guessed(package_arg)

    if server_path:
        return _from_path(server_path)
    return None
