"""
PHP inheritance extractor.

Reports classes, interfaces, traits and enums with their direct
inheritance edges:
- ``extends`` for a class's parent class and an interface's parents
- ``implements`` for the interfaces of a class or enum
- ``uses`` for traits pulled into a class-like body with ``use``

License: MIT
"""

from typing import TYPE_CHECKING, Dict, List

from tree_sitter import Node

from ...models import ClassLikeKind, InheritEdge, InheritKind
from .base import BaseInheritanceExtractor

if TYPE_CHECKING:
    from ..resolvers.base import ResolvedNames


# =============================================================================
# PHP-specific AST Node Types
# =============================================================================

PHP_CLASS_LIKE_TYPES: Dict[str, ClassLikeKind] = {
    "class_declaration": ClassLikeKind.CLASS,
    "interface_declaration": ClassLikeKind.INTERFACE,
    "trait_declaration": ClassLikeKind.TRAIT,
    "enum_declaration": ClassLikeKind.ENUM,
}

# Clauses whose name children are inheritance references
PHP_INHERIT_CLAUSES: Dict[str, InheritKind] = {
    "base_clause": InheritKind.EXTENDS,
    "class_interface_clause": InheritKind.IMPLEMENTS,
    "use_declaration": InheritKind.USES,
}

PHP_NAME_TYPES = ("name", "qualified_name", "relative_name")


class PhpInheritanceExtractor(BaseInheritanceExtractor):
    """
    Inheritance extractor for PHP source code.

    Example:
        >>> names = PhpNameResolver().resolve(tree, source, path)
        >>> [d.name for d in PhpInheritanceExtractor().extract_class_likes(tree, source, path, names)]
        ['App\\\\Model\\\\User']
    """

    @property
    def language_name(self) -> str:
        return "php"

    @property
    def supported_node_types(self) -> tuple[str, ...]:
        return tuple(PHP_CLASS_LIKE_TYPES)

    def declaration_kind(self, node: Node) -> ClassLikeKind:
        return PHP_CLASS_LIKE_TYPES[node.type]

    def extract_edges(self, node: Node, names: "ResolvedNames") -> List[InheritEdge]:
        line = self._line(node)
        edges: List[InheritEdge] = []

        for clause in node.children:
            kind = PHP_INHERIT_CLAUSES.get(clause.type)
            if kind is not None and kind is not InheritKind.USES:
                edges.extend(self._edges_from(clause.named_children, kind, line, names))

        body = node.child_by_field_name("body")
        if body is not None:
            for member in body.named_children:
                if member.type == "use_declaration":
                    edges.extend(
                        self._edges_from(member.named_children, InheritKind.USES, line, names)
                    )

        return edges


__all__ = [
    "PHP_CLASS_LIKE_TYPES",
    "PHP_INHERIT_CLAUSES",
    "PHP_NAME_TYPES",
    "PhpInheritanceExtractor",
]
