"""
Inheritance flattening: transitive closure of the direct inheritance table.

For a class C with direct targets D(C), the flattened list is every class
reachable through D(C), deduplicated in first-seen order, minus D(C)
itself and minus C. Cycles are cut per traversal branch: a class already on
the current path is not entered again, but a class reached through two
independent paths (a diamond) is still explored down both.

Traversal uses an explicit stack, so arbitrarily deep hierarchies do not
hit the interpreter recursion limit.

License: MIT
"""

from typing import Dict, FrozenSet, Iterable, Iterator, List, Mapping, Sequence, Tuple

import structlog

from archmap_core.models import InheritEdge

logger = structlog.get_logger(__name__)

DirectInherits = Mapping[str, Sequence[InheritEdge]]


def _dedupe(names: Iterable[str]) -> List[str]:
    seen = set()
    unique: List[str] = []
    for name in names:
        if name not in seen:
            seen.add(name)
            unique.append(name)
    return unique


def resolve_inherits(
    class_name: str,
    direct_inherits: DirectInherits,
    path: FrozenSet[str] = frozenset(),
) -> List[str]:
    """
    List every class reachable from ``class_name`` through direct edges.

    Each edge target is emitted before the classes reachable from it.
    ``path`` holds the classes on the active traversal branch; an edge
    leading back into it is dropped.

    Args:
        class_name: Class to start from
        direct_inherits: Class identity -> direct edges
        path: Classes already on the branch that led here

    Returns:
        Reachable classes, deduplicated in first-seen order

    Example:
        With ``B extends C`` and ``C extends D``, ``resolve_inherits("B", ...)``
        returns ``["C", "D"]``.
    """
    if class_name in path:
        return []

    reachable: List[str] = []
    # The active branch is exactly the classes with a frame on the stack
    active = set(path)
    active.add(class_name)
    stack: List[Tuple[str, Iterator[InheritEdge]]] = [
        (class_name, iter(direct_inherits.get(class_name, ())))
    ]

    while stack:
        current, edges = stack[-1]
        edge = next(edges, None)
        if edge is None:
            stack.pop()
            active.discard(current)
            continue
        if edge.target in active:
            continue

        reachable.append(edge.target)
        active.add(edge.target)
        stack.append((edge.target, iter(direct_inherits.get(edge.target, ()))))

    return _dedupe(reachable)


def flatten_class(class_name: str, direct_inherits: DirectInherits) -> Tuple[str, ...]:
    """
    Compute the flattened (transitive-only) parents of one class.

    The result never contains a direct target of the class, nor the class
    itself.
    """
    edges = direct_inherits.get(class_name, ())
    direct_targets = {edge.target for edge in edges}

    reachable: List[str] = []
    for edge in edges:
        reachable.append(edge.target)
        reachable.extend(resolve_inherits(edge.target, direct_inherits, frozenset({class_name})))

    return tuple(
        name
        for name in _dedupe(reachable)
        if name not in direct_targets and name != class_name
    )


def flatten_inheritance(direct_inherits: DirectInherits) -> Dict[str, Tuple[str, ...]]:
    """
    Compute the flattened table for every class with a direct row.

    Args:
        direct_inherits: Complete direct inheritance table

    Returns:
        Class identity -> flattened parents, in the table's key order
    """
    flattened = {
        class_name: flatten_class(class_name, direct_inherits) for class_name in direct_inherits
    }

    logger.debug(
        "inheritance_flattened",
        classes=len(flattened),
        transitive_edges=sum(len(parents) for parents in flattened.values()),
    )
    return flattened


__all__ = ["flatten_class", "flatten_inheritance", "resolve_inherits"]
