"""
Read-only helpers over tree-sitter nodes.

Node kinds are the tree-sitter TypeScript ones. Comments are extras in the
grammar and can show up between any two children, so every helper here skips
them.
"""

from __future__ import annotations

import re
from typing import Any, Iterator

from ..utils import normalize_number

COMMENT = "comment"

# Wrappers that do not change the value of their inner expression
WRAPPER_TYPES = {
    "parenthesized_expression",
    "as_expression",
    "satisfies_expression",
    "non_null_expression",
    "type_assertion",
}

FUNCTION_TYPES = {"arrow_function", "function_expression", "function"}

# Scopes whose returns and consts belong to someone else
NESTED_SCOPE_TYPES = FUNCTION_TYPES | {
    "function_declaration",
    "generator_function",
    "generator_function_declaration",
    "method_definition",
    "class_declaration",
    "class",
}

_ESCAPE_RE = re.compile(r"\\(u\{[0-9a-fA-F]+\}|u[0-9a-fA-F]{4}|x[0-9a-fA-F]{2}|\r\n|[\s\S])")
_SIMPLE_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "b": "\b", "f": "\f", "v": "\v", "0": "\0"}
_LINE_CONTINUATIONS = {"\n", "\r", "\r\n", "\u2028", "\u2029"}
_SURROGATE_RE = re.compile("[\ud800-\udfff]")


def node_text(node: Any) -> str:
    """Return the source text covered by a node."""
    return node.text.decode("utf8")


def named_children(node: Any) -> list[Any]:
    """Return named children, without comments."""
    return [child for child in node.named_children if child.type != COMMENT]


def first_named_child(node: Any) -> Any | None:
    children = named_children(node)
    return children[0] if children else None


def has_token(node: Any, token: str) -> bool:
    """Check whether an anonymous token (e.g. ``?``) is a direct child."""
    return any(not child.is_named and child.type == token for child in node.children)


def unwrap(node: Any) -> Any:
    """Strip parentheses, ``as``/``satisfies`` casts and non-null assertions."""
    while node is not None and node.type in WRAPPER_TYPES:
        children = named_children(node)
        if not children:
            return node
        # <T>expr keeps the expression last, the other wrappers keep it first
        node = children[-1] if node.type == "type_assertion" else children[0]
    return node


def cook_string(raw: str) -> str:
    """Resolve JavaScript escape sequences in a string literal body."""

    def replace(match: re.Match) -> str:
        seq = match.group(1)
        if seq.startswith("u{"):
            return chr(int(seq[2:-1], 16))
        if seq[0] == "u" and len(seq) == 5:
            return chr(int(seq[1:], 16))
        if seq[0] == "x" and len(seq) == 3:
            return chr(int(seq[1:], 16))
        if seq in _LINE_CONTINUATIONS:
            return ""
        return _SIMPLE_ESCAPES.get(seq, seq)

    cooked = _ESCAPE_RE.sub(replace, raw)
    if _SURROGATE_RE.search(cooked):
        # Recombine \uD83D\uDE00 style pairs
        cooked = cooked.encode("utf-16", "surrogatepass").decode("utf-16", "replace")
    return cooked


def string_value(node: Any) -> str:
    """Return the cooked value of a ``string`` node."""
    return cook_string(node_text(node)[1:-1])


def number_value(text: str) -> int | float | None:
    """Parse a JavaScript numeric literal."""
    text = text.replace("_", "")
    if text.endswith("n"):
        text = text[:-1]
    lowered = text.lower()
    try:
        if lowered.startswith("0x"):
            return int(lowered[2:], 16)
        if lowered.startswith("0o"):
            return int(lowered[2:], 8)
        if lowered.startswith("0b"):
            return int(lowered[2:], 2)
        if any(ch in lowered for ch in ".e"):
            return normalize_number(float(lowered))
        return int(lowered)
    except ValueError:
        return None


def property_name(node: Any) -> str | None:
    """Return the static key of an object property or type member name."""
    if node is None:
        return None
    if node.type in ("property_identifier", "identifier", "shorthand_property_identifier", "type_identifier"):
        return node_text(node)
    if node.type == "string":
        return string_value(node)
    if node.type == "number":
        return node_text(node)
    return None


def template_parts(node: Any) -> tuple[list[str], list[Any]]:
    """Split a ``template_string`` into cooked literal chunks and substitutions.

    The chunks are sliced from the raw bytes between substitutions so the
    result does not depend on how the grammar version tokenises the literal
    text. There is always one more chunk than there are expressions.
    """
    raw = node.text
    base = node.start_byte
    chunks: list[str] = []
    expressions: list[Any] = []
    cursor = base + 1
    for child in node.children:
        if child.type != "template_substitution":
            continue
        chunks.append(cook_string(raw[cursor - base : child.start_byte - base].decode("utf8")))
        expressions.append(first_named_child(child))
        cursor = child.end_byte
    chunks.append(cook_string(raw[cursor - base : len(raw) - 1].decode("utf8")))
    return chunks, expressions


def call_arguments(node: Any) -> list[Any]:
    """Return the argument expressions of a ``call_expression``."""
    args = node.child_by_field_name("arguments")
    if args is None or args.type != "arguments":
        return []
    return named_children(args)


def member_path(node: Any) -> list[str] | None:
    """Return ``["a", "b", "c"]`` for ``a.b.c``, or ``None`` for other shapes."""
    parts: list[str] = []
    current = node
    while current is not None and current.type == "member_expression":
        prop = current.child_by_field_name("property")
        if prop is None or prop.type != "property_identifier":
            return None
        parts.insert(0, node_text(prop))
        current = current.child_by_field_name("object")
    if current is not None and current.type == "identifier":
        parts.insert(0, node_text(current))
        return parts
    return None


def callee_name(node: Any) -> str | None:
    """Return ``f`` for ``f(...)`` and ``x.f(...)``."""
    callee = node.child_by_field_name("function")
    if callee is None:
        return None
    if callee.type == "identifier":
        return node_text(callee)
    if callee.type == "member_expression":
        prop = callee.child_by_field_name("property")
        if prop is not None:
            return node_text(prop)
    return None


def is_const_declaration(node: Any) -> bool:
    """Check for ``const a = ...`` (``lexical_declaration`` with the const keyword)."""
    if node.type != "lexical_declaration":
        return False
    kind = node.child_by_field_name("kind")
    if kind is not None:
        return node_text(kind) == "const"
    return bool(node.children) and node.children[0].type == "const"


def declarators(node: Any) -> Iterator[tuple[str, Any]]:
    """Yield ``(name, initializer)`` for identifier declarators with a value."""
    for child in named_children(node):
        if child.type != "variable_declarator":
            continue
        name = child.child_by_field_name("name")
        value = child.child_by_field_name("value")
        if name is None or value is None or name.type != "identifier":
            continue
        yield node_text(name), value


def top_level_statements(root: Any) -> Iterator[Any]:
    """Yield program statements, looking through ``export`` wrappers."""
    for stmt in named_children(root):
        if stmt.type == "export_statement":
            declaration = stmt.child_by_field_name("declaration")
            if declaration is not None:
                yield declaration
                continue
        yield stmt


def walk(node: Any, stop_types: set[str] | frozenset[str] = frozenset()) -> Iterator[Any]:
    """Pre-order walk that does not descend below nodes of ``stop_types``.

    The start node itself is always descended into.
    """
    stack = list(reversed(named_children(node)))
    while stack:
        current = stack.pop()
        yield current
        if current.type in stop_types:
            continue
        stack.extend(reversed(named_children(current)))
