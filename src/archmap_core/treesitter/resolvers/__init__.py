"""
Name-resolution passes.

Exports:
    ResolvedNames: Declared and referenced fully-qualified names of a tree.
    BaseNameResolver: Abstract base class for resolvers.
    PhpNameResolver: PHP namespace and ``use`` alias resolution.
    PythonNameResolver: Python module, scope and import resolution.
"""

from archmap_core.treesitter.resolvers.base import BaseNameResolver, ResolvedNames
from archmap_core.treesitter.resolvers.php import PhpNameResolver
from archmap_core.treesitter.resolvers.python import PythonNameResolver, module_name_for

__all__ = [
    "BaseNameResolver",
    "PhpNameResolver",
    "PythonNameResolver",
    "ResolvedNames",
    "module_name_for",
]
