"""Base classes for inheritance extraction from syntax trees.

This module defines the abstract base class for extractors that walk a
tree-sitter tree and report every class-like declaration together with
its direct inheritance edges. Names are never resolved here: the
extractor reads them from the ResolvedNames table produced by the
language's name-resolution pass.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, List, Optional

import structlog
from tree_sitter import Node, Tree

from ...models import ClassLikeDeclaration, ClassLikeKind, InheritEdge, InheritKind

if TYPE_CHECKING:
    from ..resolvers.base import ResolvedNames

logger = structlog.get_logger(__name__)


class BaseInheritanceExtractor(ABC):
    """Abstract base class for extracting class-like declarations.

    Attributes:
        language_name: Name of the programming language this extractor handles.
        supported_node_types: Tuple of AST node types treated as class-likes.

    Example:
        >>> class PythonInheritanceExtractor(BaseInheritanceExtractor):
        ...     @property
        ...     def language_name(self) -> str:
        ...         return "python"
        ...
        ...     @property
        ...     def supported_node_types(self) -> tuple[str, ...]:
        ...         return ("class_definition",)
    """

    @property
    @abstractmethod
    def language_name(self) -> str:
        """Return the name of the programming language.

        Returns:
            Language name in lowercase (e.g., "php", "python").
        """
        ...

    @property
    @abstractmethod
    def supported_node_types(self) -> tuple[str, ...]:
        """Return the AST node types that declare class-likes."""
        ...

    @abstractmethod
    def extract_edges(self, node: Node, names: "ResolvedNames") -> List[InheritEdge]:
        """Return the direct inheritance edges of one class-like node.

        Args:
            node: A node whose type is in supported_node_types.
            names: Resolution table for the tree the node belongs to.

        Returns:
            Edges in declaration order.
        """
        ...

    def declaration_kind(self, node: Node) -> ClassLikeKind:
        return ClassLikeKind.CLASS

    def extract_class_likes(
        self,
        tree: Tree,
        source: bytes,
        file_path: str,
        names: "ResolvedNames",
    ) -> List[ClassLikeDeclaration]:
        """Extract every named class-like declaration in the tree.

        Declarations without a resolved name (anonymous classes) are skipped.

        Args:
            tree: Parsed tree-sitter AST tree.
            source: Original source code as bytes.
            file_path: Absolute path to the source file.
            names: Output of the name-resolution pass for this tree.

        Returns:
            Declarations in source order.
        """
        results: List[ClassLikeDeclaration] = []
        stack: List[Node] = [tree.root_node]

        while stack:
            node = stack.pop()
            if node.type in self.supported_node_types:
                declaration = self._extract_declaration(node, names)
                if declaration is not None:
                    results.append(declaration)
            stack.extend(reversed(node.children))

        logger.debug(
            "class_like_extraction_complete",
            language=self.language_name,
            file_path=file_path,
            count=len(results),
        )
        return results

    def _extract_declaration(
        self, node: Node, names: "ResolvedNames"
    ) -> Optional[ClassLikeDeclaration]:
        name = names.declared_name(node)
        if name is None:
            return None

        return ClassLikeDeclaration(
            name=name,
            kind=self.declaration_kind(node),
            line=self._line(node),
            inherits=tuple(self.extract_edges(node, names)),
        )

    def _edges_from(
        self,
        nodes: List[Node],
        kind: InheritKind,
        line: int,
        names: "ResolvedNames",
    ) -> List[InheritEdge]:
        """Build edges for every resolved reference among the given nodes."""
        edges: List[InheritEdge] = []
        for child in nodes:
            target = names.resolved_name(child)
            if target:
                edges.append(InheritEdge(kind=kind, target=target, line=line))
        return edges

    @staticmethod
    def _line(node: Node) -> int:
        """1-based line a node starts on."""
        return node.start_point[0] + 1

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(language='{self.language_name}')"
