"""
Notification points of dependency map generation.

Four events are dispatched for one generation run, in this order:

1. PreCreateAstMapEvent - before any file is processed
2. AstFileAnalyzedEvent - per file, after a successful parse and extraction
3. AstFileSyntaxErrorEvent - per file, when parsing failed (exclusive with 2)
4. PostCreateAstMapEvent - after flattening, with the finished map

Delivery is synchronous and in registration order. Listener exceptions
propagate to the code that dispatched the event.

License: MIT
"""

from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Type, TypeVar

import structlog

from archmap_core.models import DependencyMap, SourceFile

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class PreCreateAstMapEvent:
    """Generation is about to start on ``expected_file_count`` files."""

    expected_file_count: int


@dataclass(frozen=True)
class AstFileAnalyzedEvent:
    """A file was parsed and its class-like declarations recorded.

    Attributes:
        file: The analyzed file
        tree: The tree-sitter tree it was parsed into
    """

    file: SourceFile
    tree: Any


@dataclass(frozen=True)
class AstFileSyntaxErrorEvent:
    """A file could not be parsed and was skipped."""

    file: SourceFile
    syntax_error: str


@dataclass(frozen=True)
class PostCreateAstMapEvent:
    """The dependency map is complete."""

    ast_map: DependencyMap


E = TypeVar("E")
Listener = Callable[[Any], None]


class EventDispatcher:
    """
    Synchronous, caller-owned event dispatcher.

    Listeners subscribe to an event class and are invoked with the event
    instance when it is dispatched. The dispatcher never buffers: dispatch()
    returns once every listener has run.

    Example:
        >>> dispatcher = EventDispatcher()
        >>> seen = []
        >>> dispatcher.add_listener(PreCreateAstMapEvent, seen.append)
        >>> dispatcher.dispatch(PreCreateAstMapEvent(expected_file_count=3))
        >>> seen[0].expected_file_count
        3
    """

    def __init__(self) -> None:
        self._listeners: Dict[Type[Any], List[Listener]] = defaultdict(list)

    def add_listener(self, event_type: Type[E], listener: Callable[[E], None]) -> None:
        """Subscribe ``listener`` to events of exactly ``event_type``."""
        if not callable(listener):
            raise TypeError("listener must be callable")
        self._listeners[event_type].append(listener)
        logger.debug(
            "listener_added",
            event_type=event_type.__name__,
            listeners=len(self._listeners[event_type]),
        )

    def remove_listener(self, event_type: Type[E], listener: Callable[[E], None]) -> None:
        """Unsubscribe a listener; unknown listeners are ignored."""
        listeners = self._listeners.get(event_type)
        if listeners and listener in listeners:
            listeners.remove(listener)

    def get_listeners(self, event_type: Type[E]) -> List[Callable[[E], None]]:
        return list(self._listeners.get(event_type, []))

    def has_listeners(self, event_type: Type[Any]) -> bool:
        return bool(self._listeners.get(event_type))

    def dispatch(self, event: E) -> E:
        """
        Deliver ``event`` to every listener registered for its class.

        Args:
            event: Event instance

        Returns:
            The same event, for chaining
        """
        for listener in list(self._listeners.get(type(event), [])):
            listener(event)
        return event


__all__ = [
    "PreCreateAstMapEvent",
    "AstFileAnalyzedEvent",
    "AstFileSyntaxErrorEvent",
    "PostCreateAstMapEvent",
    "EventDispatcher",
]
