"""
Fallback text scanner for entries options.

Used when no syntax tree is available. It finds the options of the plugin
call (or an ``entries:`` / ``entries =`` assignment) by matching delimiters
while tracking string and escape state, then picks ``dir``, ``prefix``,
``watch`` and ``mode`` out of each object literal. It never evaluates
anything: values that are not literals are skipped with a warning.
"""

from __future__ import annotations

import re

from .results import ConfigEntry, EntriesResult

QUOTES = "'\"`"
OPENERS = "([{"
CLOSERS = ")]}"

NO_ENTRIES_OPTION = "No entries option found in Vite config."
NO_USABLE_DIR = "Entries detected but no usable dir values were parsed."

_ENTRIES_RE = re.compile(r"\bentries\s*[:=]\s*")
_STRING_LITERALS_RE = re.compile(r"(['\"`])([^'\"`]+)\1")
_LEADING_STRING_RE = re.compile(r"^(['\"`])([^'\"`]+)\1")
_TRUE_RE = re.compile(r"\btrue\b")
_FALSE_RE = re.compile(r"\bfalse\b")
_MODE_RES = (("server", re.compile(r"\bserver\b")), ("sw", re.compile(r"\bsw\b")))


def skip_whitespace(content: str, index: int) -> int:
    while index < len(content) and content[index].isspace():
        index += 1
    return index


def find_string_end(content: str, start: int) -> int:
    """Return the index of the quote closing the string opened at ``start``, or -1."""
    quote = content[start]
    escape = False
    for i in range(start + 1, len(content)):
        ch = content[i]
        if escape:
            escape = False
        elif ch == "\\":
            escape = True
        elif ch == quote:
            return i
    return -1


def find_matching(content: str, start: int, close_char: str) -> int:
    """Return the index of the delimiter closing the one at ``start``, or -1.

    Delimiters inside string literals are ignored.
    """
    open_char = content[start]
    depth = 0
    in_string: str | None = None
    escape = False
    for i in range(start, len(content)):
        ch = content[i]
        if in_string:
            if escape:
                escape = False
            elif ch == "\\":
                escape = True
            elif ch == in_string:
                in_string = None
            continue
        if ch in QUOTES:
            in_string = ch
        elif ch == open_char:
            depth += 1
        elif ch == close_char:
            depth -= 1
            if depth == 0:
                return i
    return -1


def split_top_level_items(text: str) -> list[str]:
    """Split the inside of an array literal at commas that are not nested."""
    items: list[str] = []
    current: list[str] = []
    depth = 0
    in_string: str | None = None
    escape = False
    for ch in text:
        if in_string:
            current.append(ch)
            if escape:
                escape = False
            elif ch == "\\":
                escape = True
            elif ch == in_string:
                in_string = None
            continue
        if ch in QUOTES:
            in_string = ch
        elif ch in OPENERS:
            depth += 1
        elif ch in CLOSERS:
            depth -= 1
        elif ch == "," and depth == 0:
            items.append("".join(current).strip())
            current = []
            continue
        current.append(ch)
    rest = "".join(current).strip()
    if rest:
        items.append(rest)
    return items


def extract_first_arg(args: str) -> str | None:
    """Return the first top-level argument of an argument list."""
    items = split_top_level_items(args)
    if not items or not items[0]:
        return None
    return items[0]


def extract_value_slice(object_literal: str, key: str) -> str | None:
    """Return the source text of ``key``'s value in an object literal."""
    match = re.search(rf"\b{re.escape(key)}\s*:\s*", object_literal)
    if match is None:
        return None
    start = skip_whitespace(object_literal, match.end())
    depth = {"(": 0, "[": 0, "{": 0}
    closing = {")": "(", "]": "[", "}": "{"}
    in_string: str | None = None
    escape = False
    for i in range(start, len(object_literal)):
        ch = object_literal[i]
        if in_string:
            if escape:
                escape = False
            elif ch == "\\":
                escape = True
            elif ch == in_string:
                in_string = None
            continue
        if ch in QUOTES:
            in_string = ch
        elif ch in depth:
            depth[ch] += 1
        elif ch in closing:
            if ch == "}" and depth["{"] == 0:
                return object_literal[start:i].strip()
            depth[closing[ch]] -= 1
        elif ch == "," and not any(depth.values()):
            return object_literal[start:i].strip()
    return object_literal[start:].strip()


def extract_string_literals(value: str | None) -> list[str]:
    if not value:
        return []
    return [match.group(2) for match in _STRING_LITERALS_RE.finditer(value)]


def parse_string_literal(value: str) -> str | None:
    match = _LEADING_STRING_RE.match(value.strip())
    return match.group(2) if match else None


def parse_boolean_literal(value: str | None) -> bool | None:
    if not value:
        return None
    if _TRUE_RE.search(value):
        return True
    if _FALSE_RE.search(value):
        return False
    return None


def parse_mode_literal(value: str | None) -> str | None:
    if not value:
        return None
    for mode, pattern in _MODE_RES:
        if pattern.search(value):
            return mode
    return None


def find_plugin_option_blocks(content: str, plugin_names: list[str]) -> list[str]:
    """Return the first-argument object literals of every plugin call."""
    blocks: list[str] = []
    names = "|".join(re.escape(name) for name in plugin_names)
    if not names:
        return blocks
    for match in re.finditer(rf"\b(?:{names})\s*\(", content):
        call_start = match.end() - 1
        call_end = find_matching(content, call_start, ")")
        if call_end == -1:
            continue
        first_arg = extract_first_arg(content[call_start + 1 : call_end])
        if first_arg and first_arg.startswith("{"):
            blocks.append(first_arg)
    return blocks


def find_entries_blocks(content: str) -> list[str]:
    """Return the literal values assigned to ``entries``."""
    blocks: list[str] = []
    for match in _ENTRIES_RE.finditer(content):
        start = skip_whitespace(content, match.end())
        if start >= len(content):
            continue
        ch = content[start]
        if ch in "[{":
            end = find_matching(content, start, "]" if ch == "[" else "}")
        elif ch in QUOTES:
            end = find_string_end(content, start)
        else:
            continue
        if end != -1:
            blocks.append(content[start : end + 1])
    return blocks


def parse_entries_block(block: str, warnings: list[str]) -> list[ConfigEntry]:
    """Parse an entries value: an array, an object or a string literal."""
    trimmed = block.strip()
    if not trimmed:
        return []
    if trimmed.startswith("["):
        return parse_entries_array(trimmed, warnings)
    if trimmed.startswith("{"):
        return parse_entry_object(trimmed, warnings)
    if trimmed[0] in QUOTES:
        dir_value = parse_string_literal(trimmed)
        return [ConfigEntry(dir=dir_value)] if dir_value else []
    warnings.append("Entries value is not a literal array/object/string, skipped.")
    return []


def parse_entries_array(array_literal: str, warnings: list[str]) -> list[ConfigEntry]:
    results: list[ConfigEntry] = []
    for item in split_top_level_items(array_literal.strip()[1:-1]):
        if not item:
            continue
        if item.startswith("{"):
            results.extend(parse_entry_object(item, warnings))
        elif item.startswith("["):
            warnings.append("Nested array entries are not supported, skipping.")
        else:
            dir_value = parse_string_literal(item)
            if dir_value:
                results.append(ConfigEntry(dir=dir_value))
            else:
                warnings.append("Array entry is not a string/object literal, skipping.")
    return results


def parse_entry_object(object_literal: str, warnings: list[str]) -> list[ConfigEntry]:
    """Parse one entry object; plugin options holding ``entries`` are followed into it."""
    inner = object_literal.strip()[1:-1]
    nested = extract_value_slice(inner, "entries")
    if nested:
        return parse_entries_block(nested, warnings)

    dirs = extract_string_literals(extract_value_slice(inner, "dir"))
    if not dirs:
        warnings.append("Entry object has no string dir literal, skipping.")
        return []
    prefixes = extract_string_literals(extract_value_slice(inner, "prefix"))
    prefix = prefixes[0] if prefixes else None
    watch = parse_boolean_literal(extract_value_slice(inner, "watch"))
    mode = parse_mode_literal(extract_value_slice(inner, "mode"))
    return [ConfigEntry(dir=dir_value, prefix=prefix, watch=watch, mode=mode) for dir_value in dirs]


def scan_entries(content: str, plugin_names: list[str] | None = None, warnings: list[str] | None = None) -> EntriesResult:
    """
    Extract entries from config text without a syntax tree.

    Args:
        content: Config file text
        plugin_names: Plugin calls whose first argument holds the options
        warnings: Warnings already collected for this file

    Returns:
        EntriesResult with every entry found and the warnings collected
    """
    warnings = list(warnings or [])
    blocks = find_plugin_option_blocks(content, plugin_names if plugin_names is not None else ["mokup"])
    if not blocks:
        blocks = find_entries_blocks(content)
    if not blocks:
        warnings.append(NO_ENTRIES_OPTION)
        return EntriesResult(entries=[], warnings=warnings)

    entries: list[ConfigEntry] = []
    for block in blocks:
        entries.extend(parse_entries_block(block, warnings))
    if not entries:
        warnings.append(NO_USABLE_DIR)
    return EntriesResult(entries=entries, warnings=warnings)
