"""
Cache key calculation for a collected file set.

Each file contributes the MD5 digest of its path and content hash, read as
an integer, and the integers are summed. Addition is commutative, so the key
does not depend on enumeration order. A changed byte or a renamed or moved
file changes that file's digest and therefore the sum. The sum is finally
hashed together with the cache format version so artifacts written by an
incompatible format never match.

License: MIT
"""

import hashlib
import os
from typing import Iterable

from archmap_core.models import SourceFile

# Bumped whenever the serialized DependencyMap layout or the key changes
CACHE_FORMAT_VERSION = "2"


def file_digest(source_file: SourceFile) -> int:
    """
    Integer fingerprint of one file: MD5 over its path, a NUL separator and
    the raw bytes of its content hash.

    The path is part of the fingerprint because the map records paths and,
    for Python, derives class identities from them.
    """
    payload = os.fsencode(source_file.path) + b"\0" + bytes.fromhex(source_file.content_hash)
    return int(hashlib.md5(payload).hexdigest(), 16)


def calculate_cache_key(files: Iterable[SourceFile]) -> str:
    """
    Compute the order-independent fingerprint of a file set.

    Args:
        files: Collected source files

    Returns:
        40-character hex digest

    Example:
        >>> a = SourceFile.from_path("/src/A.php")
        >>> b = SourceFile.from_path("/src/B.php")
        >>> calculate_cache_key([a, b]) == calculate_cache_key([b, a])
        True
    """
    total = sum(file_digest(source_file) for source_file in files)
    return hashlib.sha1(f"{CACHE_FORMAT_VERSION}:{total}".encode("ascii")).hexdigest()


__all__ = ["CACHE_FORMAT_VERSION", "calculate_cache_key", "file_digest"]
