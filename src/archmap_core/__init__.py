"""
archmap core.

Builds the structural dependency map of a code base: class-like
declarations, their direct inheritance edges and the flattened
(transitive) inheritance of every class. Contains:
- Configuration and settings
- Exception hierarchy
- Logging service
- Map models and events
- Collection, parsing, flattening and caching

License: MIT
"""

from .config import (
    AnalysisConfig,
    ArchmapSettings,
    get_config_summary,
    settings,
)
from .events import (
    AstFileAnalyzedEvent,
    AstFileSyntaxErrorEvent,
    EventDispatcher,
    PostCreateAstMapEvent,
    PreCreateAstMapEvent,
)
from .exceptions import (
    ArchmapError,
    CacheError,
    CacheWriteError,
    CollectionError,
    NoSourceFilesError,
    ValidationError,
)
from .logging_service import (
    LoggingConfig,
    LoggingService,
)
from .models import (
    AstEntry,
    ClassLikeDeclaration,
    ClassLikeKind,
    DependencyMap,
    InheritEdge,
    InheritKind,
    SourceFile,
)


def __getattr__(name):
    """Lazy import for components that pull in tree-sitter."""
    if name == "AstMapGenerator":
        from .code.ast_map_generator import AstMapGenerator

        return AstMapGenerator
    elif name == "AstMapCache":
        from .cache.map_cache import AstMapCache

        return AstMapCache
    elif name == "FileSetCollector":
        from .collection.file_collector import FileSetCollector

        return FileSetCollector
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__version__ = "0.1.0"

__all__ = [
    # Config
    "AnalysisConfig",
    "ArchmapSettings",
    "get_config_summary",
    "settings",
    # Exceptions
    "ArchmapError",
    "ValidationError",
    "CollectionError",
    "NoSourceFilesError",
    "CacheError",
    "CacheWriteError",
    # Logging
    "LoggingConfig",
    "LoggingService",
    # Models
    "AstEntry",
    "ClassLikeDeclaration",
    "ClassLikeKind",
    "DependencyMap",
    "InheritEdge",
    "InheritKind",
    "SourceFile",
    # Events
    "AstFileAnalyzedEvent",
    "AstFileSyntaxErrorEvent",
    "EventDispatcher",
    "PostCreateAstMapEvent",
    "PreCreateAstMapEvent",
    # Lazy components
    "AstMapCache",
    "AstMapGenerator",
    "FileSetCollector",
    "__version__",
]
