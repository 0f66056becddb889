"""
File discovery and file-set fingerprinting.

Exports:
    FileSetCollector: Enumerates source files under root paths.
    calculate_cache_key: Order-independent fingerprint of a file set.
"""

from archmap_core.collection.cache_key import (
    CACHE_FORMAT_VERSION,
    calculate_cache_key,
    file_digest,
)
from archmap_core.collection.file_collector import VCS_DIRECTORIES, FileSetCollector

__all__ = [
    "CACHE_FORMAT_VERSION",
    "FileSetCollector",
    "VCS_DIRECTORIES",
    "calculate_cache_key",
    "file_digest",
]
