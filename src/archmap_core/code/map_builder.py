"""
DependencyMapBuilder - the single writer of a dependency map under construction.

The builder collects AstEntry objects and direct inheritance rows during
ingestion, then hands out an immutable DependencyMap once the flattened
table is known. Writes after finalize() are rejected.

License: MIT
"""

from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional, Tuple

import structlog

from archmap_core.models import AstEntry, DependencyMap, InheritEdge

logger = structlog.get_logger(__name__)


class DependencyMapBuilder:
    """
    Mutable accumulator for one generation run.

    Usage:
        builder = DependencyMapBuilder()
        builder.add_file(entry)
        flattened = flatten_inheritance(builder.direct_inherits)
        dependency_map = builder.finalize(flattened, cache_key)
    """

    def __init__(self) -> None:
        self._asts: Dict[str, AstEntry] = {}
        self._direct_inherits: Dict[str, Tuple[InheritEdge, ...]] = {}
        self._finalized = False

    @property
    def direct_inherits(self) -> Mapping[str, Tuple[InheritEdge, ...]]:
        """Read-only view of the direct inheritance table."""
        return MappingProxyType(self._direct_inherits)

    @property
    def ast_count(self) -> int:
        return len(self._asts)

    @property
    def is_finalized(self) -> bool:
        return self._finalized

    def add_ast(self, entry: AstEntry) -> None:
        self._check_writable()
        self._asts[entry.path] = entry

    def set_class_inherits(self, class_name: str, edges: Iterable[InheritEdge]) -> None:
        """
        Record the direct edges of a class.

        A class declared again (in another file, or twice in one file)
        replaces the earlier row: the last declaration seen wins.
        """
        self._check_writable()
        previous = self._direct_inherits.pop(class_name, None)
        if previous is not None:
            logger.debug(
                "class_redeclared",
                class_name=class_name,
                previous_edges=len(previous),
            )
        self._direct_inherits[class_name] = tuple(edges)

    def add_file(self, entry: AstEntry) -> None:
        """Store a file's AstEntry and the rows of every class it declares."""
        self.add_ast(entry)
        for declaration in entry.declarations:
            self.set_class_inherits(declaration.name, declaration.inherits)

    def finalize(
        self,
        flattened_inherits: Mapping[str, Tuple[str, ...]],
        cache_key: Optional[str] = None,
    ) -> DependencyMap:
        """
        Freeze the builder and produce the finished map.

        Raises:
            RuntimeError: If the builder was already finalized
        """
        self._check_writable()
        self._finalized = True

        return DependencyMap(
            cache_key=cache_key,
            asts=dict(self._asts),
            direct_inherits=dict(self._direct_inherits),
            flattened_inherits=dict(flattened_inherits),
        )

    def _check_writable(self) -> None:
        if self._finalized:
            raise RuntimeError("DependencyMapBuilder is finalized; the map is read-only")


__all__ = ["DependencyMapBuilder"]
