"""
Mock routes derived from file names.

``<entry dir>/users/[id].get.ts`` serves ``GET /users/{id}``; ``index``
collapses into its directory and ``[...rest]`` becomes ``{rest}``.
"""

from __future__ import annotations

import os
import re
from pathlib import Path

from ..config import MockFormat
from .results import ConfigEntry, MockRoute

ROUTE_METHODS = ("get", "post", "put", "patch", "delete", "head", "options", "trace")
ROUTE_EXTENSIONS = ("ts", "js", "mjs", "cjs", "json", "jsonc")

_ROUTE_NAME_RE = re.compile(rf"^(.*)\.({'|'.join(ROUTE_METHODS)})$")
_DYNAMIC_SEGMENT_RE = re.compile(r"^\[(\.\.\.)?(.+)\]$")
_PATH_PARAM_RE = re.compile(r"^\{(.+)\}$")


def normalize_prefix(prefix: str | None) -> str:
    if not prefix:
        return ""
    return prefix if prefix.startswith("/") else f"/{prefix}"


def to_route_segment(segment: str) -> str:
    """``[id]`` and ``[...rest]`` become ``{id}`` and ``{rest}``."""
    match = _DYNAMIC_SEGMENT_RE.match(segment)
    return f"{{{match.group(2)}}}" if match else segment


def build_route_path(segments: list[str], prefix: str | None = None) -> str:
    base = "/" + "/".join(seg for seg in (to_route_segment(s) for s in segments) if seg)
    normalized_prefix = normalize_prefix(prefix)
    if not normalized_prefix:
        return base
    if base == "/":
        return normalized_prefix
    return f"{normalized_prefix}{base}"


def route_from_file(file_path: str, entry_dir: str, prefix: str | None = None) -> MockRoute | None:
    """
    Derive the route a mock file serves.

    Args:
        file_path: Mock file path
        entry_dir: Directory of the entry the file belongs to
        prefix: Route prefix of the entry

    Returns:
        MockRoute, or None if the file name carries no HTTP method
    """
    rel = os.path.relpath(file_path, entry_dir)
    base = os.path.splitext(rel)[0]
    parts = re.split(r"[\\/]", base)
    last = parts.pop() if parts else ""
    match = _ROUTE_NAME_RE.match(last)
    if match is None:
        return None
    name, method = match.group(1), match.group(2)
    segments = parts if name == "index" else parts + [name]
    path = build_route_path(segments, prefix)
    return MockRoute(method=method, path=path if path == "/" else path.rstrip("/"), source_file=file_path)


def route_to_file_path(
    route: MockRoute,
    entry: ConfigEntry,
    package_root: str,
    format: MockFormat = MockFormat.TS,
    warnings: list[str] | None = None,
) -> str | None:
    """
    Map a route back to the mock file that would serve it.

    The entry prefix is stripped from the route path, ``{id}`` segments
    become ``[id]`` and a bare directory maps to ``index``.

    Args:
        route: Route to place
        entry: Entry whose directory receives the file
        package_root: Directory the entry dir is relative to
        format: Output format (selects the extension)
        warnings: List to append warnings to

    Returns:
        File path, or None if the entry has no dir
    """
    if not entry.dir:
        if warnings is not None:
            warnings.append(f"Missing entry dir for route {route.method.upper()} {route.path}")
        return None

    path = route.path.strip()
    if not path.startswith("/"):
        path = f"/{path}"
    prefix = normalize_prefix(entry.prefix)
    if prefix and path.startswith(prefix):
        path = path[len(prefix) :] or "/"

    segments = [_PATH_PARAM_RE.sub(r"[\1]", seg) for seg in path.rstrip("/").split("/") if seg]
    if not segments:
        segments = ["index"]
    file_name = f"{segments.pop()}.{route.method.lower()}.{MockFormat(format).value}"
    return str(Path(package_root, entry.dir, *segments, file_name))
