"""
Python inheritance extractor.

Every ``class`` statement, at any nesting depth, is a class-like
declaration. Each resolved entry of its base list becomes an ``extends``
edge; Python has no separate interface or trait syntax.

License: MIT
"""

from typing import TYPE_CHECKING, List

from tree_sitter import Node

from ...models import InheritEdge, InheritKind
from .base import BaseInheritanceExtractor

if TYPE_CHECKING:
    from ..resolvers.base import ResolvedNames


PYTHON_CLASS_TYPE = "class_definition"

# Base-list expressions that can name a class
PYTHON_BASE_EXPRESSION_TYPES = ("identifier", "attribute")


class PythonInheritanceExtractor(BaseInheritanceExtractor):
    """Inheritance extractor for Python source code."""

    @property
    def language_name(self) -> str:
        return "python"

    @property
    def supported_node_types(self) -> tuple[str, ...]:
        return (PYTHON_CLASS_TYPE,)

    def extract_edges(self, node: Node, names: "ResolvedNames") -> List[InheritEdge]:
        superclasses = node.child_by_field_name("superclasses")
        if superclasses is None:
            return []
        return self._edges_from(
            superclasses.named_children, InheritKind.EXTENDS, self._line(node), names
        )


__all__ = [
    "PYTHON_BASE_EXPRESSION_TYPES",
    "PYTHON_CLASS_TYPE",
    "PythonInheritanceExtractor",
]
