"""Base classes for the name-resolution pass.

Tree-sitter nodes cannot be annotated in place, so a resolver records its
results in a ResolvedNames table keyed by node byte span. The inheritance
extractor then reads fully-qualified names from that table instead of
resolving anything itself.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Tuple

from tree_sitter import Node, Tree

Span = Tuple[int, int]


class ResolvedNames:
    """Fully-qualified names produced by one resolution pass over a tree.

    Two tables are kept: the identity of every named class-like
    declaration node, and the resolved target of every class reference
    that appears in an inheritance position.
    """

    def __init__(self) -> None:
        self._declared: Dict[Span, str] = {}
        self._referenced: Dict[Span, str] = {}

    @staticmethod
    def _span(node: Node) -> Span:
        return (node.start_byte, node.end_byte)

    def declare(self, node: Node, qualified_name: str) -> None:
        self._declared[self._span(node)] = qualified_name

    def refer(self, node: Node, qualified_name: str) -> None:
        self._referenced[self._span(node)] = qualified_name

    def declared_name(self, node: Node) -> Optional[str]:
        return self._declared.get(self._span(node))

    def resolved_name(self, node: Node) -> Optional[str]:
        return self._referenced.get(self._span(node))

    def declared_names(self) -> List[str]:
        return list(self._declared.values())

    def referenced_names(self) -> List[str]:
        return list(self._referenced.values())


class BaseNameResolver(ABC):
    """Abstract name-resolution pass for one language."""

    @property
    @abstractmethod
    def language_name(self) -> str:
        ...

    @abstractmethod
    def resolve(self, tree: Tree, source: bytes, file_path: str) -> ResolvedNames:
        """Resolve declaration and inheritance-reference names in a tree.

        Args:
            tree: Parsed tree-sitter tree (free of syntax errors).
            source: Source bytes the tree was parsed from.
            file_path: Absolute path of the file.

        Returns:
            ResolvedNames table for the extractor.
        """
        ...

    def _get_node_text(self, node: Node, source: bytes) -> str:
        return source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(language='{self.language_name}')"
