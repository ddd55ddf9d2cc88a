"""
Schema inference from schema-builder chains and declared types.
"""

from .chain import SchemaChainBuilder
from .fragment import ChainResult, merge_object_schemas, ref_fragment
from .registry import NamedSchemaRegistry
from .type_nodes import TypeSchemaBuilder

__all__ = [
    "ChainResult",
    "NamedSchemaRegistry",
    "SchemaChainBuilder",
    "TypeSchemaBuilder",
    "merge_object_schemas",
    "ref_fragment",
]
