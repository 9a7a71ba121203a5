"""Alternate package-name spellings probed when the first guess is unknown."""

import logging
import re
from collections.abc import AsyncIterator, Awaitable, Callable, Iterator
from dataclasses import dataclass

logger = logging.getLogger(__name__)

KNOWN_ORGS = ("@modelcontextprotocol", "@anthropic", "@benborla29")

_SERVER_PREFIX = re.compile(r"^mcp-?server-?", re.IGNORECASE)
_BUILD_DIR = re.compile(r"/([^/]+)/(?:dist|build|src)/")

VersionLookup = Callable[[str], Awaitable[str | None]]


@dataclass(frozen=True, slots=True)
class FallbackMatch:
    package_name: str
    version: str


def _base_variants(base_name: str) -> Iterator[str]:
    trimmed = _SERVER_PREFIX.sub("", base_name)
    yield base_name
    yield f"{KNOWN_ORGS[0]}/server-{trimmed}"
    for org in KNOWN_ORGS[1:]:
        yield f"{org}/mcp-server-{trimmed}"
    yield f"mcp-server-{trimmed}"
    yield base_name.replace("_", "-")


def _directory_variants(dir_name: str) -> Iterator[str]:
    hyphenated = dir_name.replace("_", "-")
    yield dir_name
    for org in KNOWN_ORGS:
        yield f"{org}/{dir_name}"
    yield hyphenated
    for org in KNOWN_ORGS:
        yield f"{org}/{hyphenated}"


def candidate_names(base_name: str, server_path: str | None = None) -> list[str]:
    """
    Ordered, de-duplicated package names to try for ``base_name``.

    When the launch path points into a ``dist``/``build``/``src`` directory,
    the project directory above it contributes its own spellings after the
    base-name ones.
    """
    candidates = list(_base_variants(base_name))
    if server_path:
        match = _BUILD_DIR.search(server_path)
        if match and match.group(1) != base_name:
            candidates.extend(_directory_variants(match.group(1)))
    return list(dict.fromkeys(candidates))


async def _resolved(candidates: list[str], lookup: VersionLookup) -> AsyncIterator[FallbackMatch]:
    for package_name in candidates:
        try:
            version = await lookup(package_name)
        except Exception:  # noqa: BLE001
            logger.debug("Lookup failed for candidate %s", package_name, exc_info=True)
            continue
        if version:
            yield FallbackMatch(package_name=package_name, version=version)


async def find_by_variation(
    base_name: str,
    server_path: str | None,
    lookup: VersionLookup,
) -> FallbackMatch | None:
    """
    Probe candidate names in priority order and return the first that resolves.

    Candidates are tried one at a time; later ones are never queried once an
    earlier one yields a version. A lookup that raises counts as a miss.
    """
    matches = _resolved(candidate_names(base_name, server_path), lookup)
    try:
        match = await anext(matches, None)
    finally:
        await matches.aclose()

    if match is None:
        logger.info("No package name variation of %s resolved", base_name)
    else:
        logger.info("Found package: %s -> %s", match.package_name, match.version)
    return match
