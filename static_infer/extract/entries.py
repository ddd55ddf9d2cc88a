"""
Entries extraction from build-tool config files.

The plugin call's options are reduced with the evaluator and then
interpreted as route-entry configurations. When no parser is available, or
the syntax tree yields nothing, the text scanner in ``fallback`` takes over.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable

from ..config import InferenceConfig
from ..evaluator import Evaluator, is_unresolved, module_environment
from ..syntax import AUTO, SourceParser, resolve_parser
from ..syntax.nodes import call_arguments, node_text, walk
from .fallback import scan_entries
from .results import ENTRY_MODES, ConfigEntry, EntriesResult

logger = logging.getLogger(__name__)

PARSER_MISSING = "TypeScript parser not available; fallback to string parsing."


def _static_string(value: Any) -> bool:
    return isinstance(value, str) and not is_unresolved(value)


def entries_from_value(value: Any, warnings: list[str]) -> list[ConfigEntry]:
    """
    Interpret a reduced plugin option value as entries.

    A string is one entry; an array is flattened; an object holding
    ``entries`` is followed into it; any other object needs a static ``dir``
    (a string or an array of strings).

    Args:
        value: Value produced by the evaluator
        warnings: List to append warnings to

    Returns:
        Entries found in the value
    """
    if value is None:
        return []
    if is_unresolved(value):
        warnings.append(f"Entries value is not static: {value}")
        return []
    if isinstance(value, str):
        return [ConfigEntry(dir=value)]
    if isinstance(value, list):
        entries: list[ConfigEntry] = []
        for item in value:
            entries.extend(entries_from_value(item, warnings))
        return entries
    if isinstance(value, dict):
        if "entries" in value:
            nested = entries_from_value(value["entries"], warnings)
            if nested:
                return nested
        dirs = _dirs(value.get("dir"))
        if not dirs:
            warnings.append("Entry object has no static dir value.")
            return []
        prefix = value.get("prefix")
        watch = value.get("watch")
        mode = value.get("mode")
        return [
            ConfigEntry(
                dir=dir_value,
                prefix=prefix if _static_string(prefix) else None,
                watch=watch if isinstance(watch, bool) else None,
                mode=mode if _static_string(mode) and mode in ENTRY_MODES else None,
            )
            for dir_value in dirs
        ]
    warnings.append("Entries value is not a supported static type.")
    return []


def _dirs(value: Any) -> list[str]:
    if _static_string(value) and value:
        return [value]
    if isinstance(value, list):
        return [item for item in value if _static_string(item) and item]
    return []


def _is_plugin_call(node: Any, names: list[str]) -> bool:
    callee = node.child_by_field_name("function")
    if callee is None:
        return False
    if callee.type == "identifier":
        return node_text(callee) in names
    if callee.type == "member_expression":
        prop = callee.child_by_field_name("property")
        return prop is not None and node_text(prop) in names
    return False


def parse_entries_ast(content: str, parser: SourceParser, config: InferenceConfig, file_name: str = "vite.config.ts") -> EntriesResult:
    """Reduce the first argument of every plugin call in the file."""
    warnings: list[str] = []
    entries: list[ConfigEntry] = []
    tree = parser.parse_file(file_name, content)
    evaluator = Evaluator(config, warnings)
    env = module_environment(tree.root)
    for node in walk(tree.root):
        if node.type != "call_expression" or not _is_plugin_call(node, config.plugin_call_names):
            continue
        args = call_arguments(node)
        if not args:
            continue
        entries.extend(entries_from_value(evaluator.evaluate(args[0], env), warnings))
    return EntriesResult(entries=entries, warnings=warnings)


def parse_entries(
    content: str,
    parser: SourceParser | str | None = AUTO,
    config: InferenceConfig | None = None,
    file_name: str = "vite.config.ts",
) -> EntriesResult:
    """
    Extract route entries from a build-tool config file.

    Args:
        content: Config file text
        parser: Parser to use, ``AUTO`` to load one, or None to scan text only
        config: Inference configuration
        file_name: Used to pick the grammar

    Returns:
        EntriesResult; warnings of the tree pass are kept when the text
        scanner has to take over
    """
    config = config or InferenceConfig()
    parser = resolve_parser(parser)
    if parser is None:
        return scan_entries(content, config.plugin_call_names, [PARSER_MISSING])
    result = parse_entries_ast(content, parser, config, file_name)
    if result.entries:
        return result
    logger.debug("no entries from the syntax tree of %s; scanning text", file_name)
    return scan_entries(content, config.plugin_call_names, result.warnings)


def detect_entries(
    files: Iterable[str],
    read_file: Callable[[str], str | None],
    parser: SourceParser | str | None = AUTO,
    config: InferenceConfig | None = None,
) -> EntriesResult:
    """
    Extract entries from several config files.

    Args:
        files: Config file paths
        read_file: Returns a file's content, or None if it cannot be read
        parser: Parser to use, ``AUTO`` to load one, or None to scan text only
        config: Inference configuration

    Returns:
        EntriesResult with all entries; each warning is prefixed with its file
    """
    parser = resolve_parser(parser)
    result = EntriesResult()
    for file in files:
        try:
            content = read_file(file)
        except OSError as e:
            logger.debug("reading %s failed: %s", file, e)
            content = None
        if not content:
            result.warnings.append(f"Failed to read config file: {file}")
            continue
        parsed = parse_entries(content, parser, config, file_name=file)
        result.entries.extend(parsed.entries)
        result.warnings.extend(f"{file}: {warning}" for warning in parsed.warnings)
    return result
