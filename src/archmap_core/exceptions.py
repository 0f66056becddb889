"""
Exception hierarchy for archmap.

Every run-level failure reaches the caller as an ArchmapError subclass with
a stable error code. Per-file syntax errors are not exceptions at this level;
they are reported through AstFileSyntaxErrorEvent.

Error codes:
    VAL_001     invalid input or configuration
    COLL_001    root path missing or not a directory
    COLL_002    no readable source files found
    CACHE_001   cache directory unusable
    CACHE_002   cache artifact could not be written
    TS_001-005  tree-sitter layer (see archmap_core.treesitter.exceptions)

License: MIT
"""

import uuid
from typing import Any, ClassVar, Dict, Optional


class ArchmapError(Exception):
    """
    Base exception for all archmap errors.

    Subclasses only declare ``default_code`` (and optionally
    ``default_message``); both can still be overridden per instance.

    Attributes:
        message: Human-readable error message
        error_code: Programmatic error code (e.g., "COLL_001")
        details: Additional context
        correlation_id: Id of the generation run that failed
        original_exception: Wrapped exception, if any

    Example:
        raise CacheWriteError(
            f"Cannot write cache artifact to '{path}'",
            details={"path": str(path)},
            original_exception=exc,
        )
    """

    default_code: ClassVar[str] = "ERR_UNKNOWN"
    default_message: ClassVar[str] = "archmap operation failed"

    def __init__(
        self,
        message: Optional[str] = None,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        correlation_id: Optional[str] = None,
        original_exception: Optional[Exception] = None,
    ):
        self.message = message or self.default_message
        self.error_code = error_code or self.default_code
        self.details = dict(details or {})
        self.correlation_id = correlation_id or str(uuid.uuid4())
        self.original_exception = original_exception
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Serializable view for logging."""
        return {
            "error": type(self).__name__,
            "message": self.message,
            "error_code": self.error_code,
            "details": self.details,
            "correlation_id": self.correlation_id,
            "original_error": (
                str(self.original_exception) if self.original_exception is not None else None
            ),
        }


class ValidationError(ArchmapError):
    """Input or configuration is invalid (e.g. an unsupported file suffix)."""

    default_code = "VAL_001"
    default_message = "Invalid input"


class CollectionError(ArchmapError):
    """The source file set cannot be collected."""

    default_code = "COLL_001"
    default_message = "Source files could not be collected"


class NoSourceFilesError(CollectionError):
    """Collection finished with an empty file set."""

    default_code = "COLL_002"
    default_message = "No readable source files found"


class CacheError(ArchmapError):
    """The dependency map cache cannot be used."""

    default_code = "CACHE_001"
    default_message = "Cache directory is unusable"


class CacheWriteError(CacheError):
    """A computed map cannot be persisted to its cache artifact."""

    default_code = "CACHE_002"
    default_message = "Cache artifact could not be written"


__all__ = [
    "ArchmapError",
    "ValidationError",
    "CollectionError",
    "NoSourceFilesError",
    "CacheError",
    "CacheWriteError",
]
