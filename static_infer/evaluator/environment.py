"""
Binding environments.

An environment maps a name to either an unevaluated expression node or an
already reduced value. Layers are immutable: ``extend`` returns a child layer
and lookups walk outward, so a function scope never changes the scope it was
built from.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Union

from ..syntax.nodes import declarators, is_const_declaration, named_children, walk


@dataclass(frozen=True)
class ExprBinding:
    """A name bound to an expression node, reduced lazily on lookup."""

    node: Any


@dataclass(frozen=True)
class ValueBinding:
    """A name bound to an already reduced value."""

    value: Any


Binding = Union[ExprBinding, ValueBinding]


class Environment:
    """One immutable layer of name bindings with an optional parent."""

    __slots__ = ("_bindings", "_parent")

    def __init__(self, bindings: Mapping[str, Binding] | None = None, parent: Environment | None = None):
        self._bindings = MappingProxyType(dict(bindings or {}))
        self._parent = parent

    def extend(self, bindings: Mapping[str, Binding]) -> Environment:
        """Return a child layer; ``bindings`` shadow names of this layer."""
        if not bindings:
            return self
        return Environment(bindings, parent=self)

    def lookup(self, name: str) -> Binding | None:
        found = self.resolve(name)
        return found[0] if found is not None else None

    def resolve(self, name: str) -> tuple[Binding, Environment] | None:
        """Return the binding of ``name`` together with the layer declaring it.

        An ``ExprBinding`` is reduced in its declaring layer, so names it
        mentions follow lexical scope rather than the scope of the lookup.
        """
        env: Environment | None = self
        while env is not None:
            binding = env._bindings.get(name)
            if binding is not None:
                return binding, env
            env = env._parent
        return None

    def __contains__(self, name: str) -> bool:
        return self.lookup(name) is not None

    def names(self) -> set[str]:
        """All names visible from this layer."""
        result: set[str] = set()
        env: Environment | None = self
        while env is not None:
            result.update(env._bindings)
            env = env._parent
        return result

    @property
    def depth(self) -> int:
        """Number of layers above this one."""
        depth = 0
        env = self._parent
        while env is not None:
            depth += 1
            env = env._parent
        return depth


EMPTY = Environment()


def const_bindings(statements: Iterable[Any]) -> dict[str, Binding]:
    """Collect ``const`` declarations of a statement list as expression bindings."""
    bindings: dict[str, Binding] = {}
    for stmt in statements:
        if is_const_declaration(stmt):
            for name, value in declarators(stmt):
                bindings[name] = ExprBinding(value)
    return bindings


def module_environment(root: Any) -> Environment:
    """Build the environment of a module from its top-level ``const`` declarations."""
    statements = []
    for stmt in named_children(root):
        if stmt.type == "export_statement":
            declaration = stmt.child_by_field_name("declaration")
            if declaration is not None:
                statements.append(declaration)
            continue
        statements.append(stmt)
    return EMPTY.extend(const_bindings(statements))


def body_const_bindings(body: Any, stop_types: set[str]) -> dict[str, Binding]:
    """Collect ``const`` declarations inside a function body.

    Nested functions and classes are not entered; their declarations belong to
    their own scope.
    """
    return const_bindings(node for node in walk(body, stop_types) if node.type == "lexical_declaration")
