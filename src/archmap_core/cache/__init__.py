"""
On-disk cache of finished dependency maps.

Exports:
    AstMapCache: Content-addressed artifact store.
"""

from archmap_core.cache.map_cache import CACHE_FILE_PREFIX, AstMapCache

__all__ = ["AstMapCache", "CACHE_FILE_PREFIX"]
