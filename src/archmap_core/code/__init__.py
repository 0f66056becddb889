"""
Dependency map construction.

Exports:
    AstMapGenerator: Runs collection, ingestion, flattening and caching.
    AstIngestor: Parses files into AstEntry objects and inheritance rows.
    DependencyMapBuilder: Single writer of a map under construction.
    flatten_inheritance: Transitive closure of the direct inheritance table.
"""

from archmap_core.code.ast_ingestor import AstIngestor
from archmap_core.code.ast_map_generator import AstMapGenerator
from archmap_core.code.inheritance_flattener import (
    flatten_class,
    flatten_inheritance,
    resolve_inherits,
)
from archmap_core.code.map_builder import DependencyMapBuilder

__all__ = [
    "AstIngestor",
    "AstMapGenerator",
    "DependencyMapBuilder",
    "flatten_class",
    "flatten_inheritance",
    "resolve_inherits",
]
