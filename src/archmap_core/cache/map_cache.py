"""
AstMapCache - content-addressed on-disk cache of dependency maps.

Provides:
- One artifact per file-set fingerprint: ``astmap.cache.<digest>``
- All-or-nothing writes (temporary file + atomic rename)
- Corrupt or unreadable artifacts treated as a miss, never as a failure
- Hit/miss/write statistics

License: MIT
"""

import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional, Union

import structlog
from pydantic import ValidationError as PydanticValidationError

from archmap_core.exceptions import CacheWriteError
from archmap_core.models import DependencyMap

logger = structlog.get_logger(__name__)

CACHE_FILE_PREFIX = "astmap.cache."


class AstMapCache:
    """
    Read-through cache for finished DependencyMap objects.

    Artifacts are pydantic JSON documents. A map is reused only when its
    file name digest matches the fingerprint of the current file set, so
    no invalidation is ever needed: changed inputs simply miss.

    Attributes:
        cache_dir: Directory holding the artifacts
        stats: Cache statistics (hits, misses, writes, hit_rate)

    Example:
        ```python
        cache = AstMapCache(Path("/tmp"))
        dependency_map = cache.load(key)
        if dependency_map is None:
            dependency_map = build_map()
            cache.store(key, dependency_map)

        print(f"Hit rate: {cache.get_statistics()['hit_rate']:.1%}")
        ```
    """

    def __init__(self, cache_dir: Union[str, Path]) -> None:
        self.cache_dir = Path(cache_dir)
        self.stats: Dict[str, Any] = {
            "hits": 0,
            "misses": 0,
            "writes": 0,
            "total_requests": 0,
            "hit_rate": 0.0,
        }

        logger.debug("ast_map_cache_initialized", cache_dir=str(self.cache_dir))

    def path_for(self, cache_key: str) -> Path:
        """Artifact location for a fingerprint."""
        return self.cache_dir / f"{CACHE_FILE_PREFIX}{cache_key}"

    def load(self, cache_key: str) -> Optional[DependencyMap]:
        """
        Load the map stored under a fingerprint.

        Returns:
            The deserialized map, or None on a miss. A corrupt artifact is
            logged and reported as a miss.
        """
        self.stats["total_requests"] += 1
        path = self.path_for(cache_key)

        if not path.is_file():
            return self._miss(cache_key, reason="absent")

        try:
            dependency_map = DependencyMap.from_json(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, PydanticValidationError) as e:
            logger.warning("cache_artifact_unusable", path=str(path), error=str(e))
            return self._miss(cache_key, reason="unusable")

        self.stats["hits"] += 1
        self._update_hit_rate()
        logger.info("cache_hit", cache_key=cache_key, classes=len(dependency_map.direct_inherits))
        return dependency_map

    def store(self, cache_key: str, dependency_map: DependencyMap) -> Path:
        """
        Persist a map under a fingerprint.

        The artifact is written to a temporary file in the cache directory
        and renamed over the target, so readers never see a partial file.

        Returns:
            Path of the written artifact.

        Raises:
            CacheWriteError: If the cache directory is not writable.
        """
        path = self.path_for(cache_key)
        payload = dependency_map.to_json()
        temp_name: Optional[str] = None

        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
            fd, temp_name = tempfile.mkstemp(
                dir=str(self.cache_dir), prefix=f".{CACHE_FILE_PREFIX}", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
            os.replace(temp_name, path)
        except OSError as e:
            if temp_name is not None and os.path.exists(temp_name):
                os.unlink(temp_name)
            raise CacheWriteError(
                f"Cannot write cache artifact to '{path}': {e}",
                details={"path": str(path), "cache_dir": str(self.cache_dir)},
                original_exception=e,
            ) from e

        self.stats["writes"] += 1
        logger.info("cache_stored", cache_key=cache_key, path=str(path), size=len(payload))
        return path

    def get_statistics(self) -> Dict[str, Any]:
        """Snapshot of hits, misses, writes, total_requests and hit_rate."""
        return dict(self.stats)

    def _miss(self, cache_key: str, reason: str) -> None:
        self.stats["misses"] += 1
        self._update_hit_rate()
        logger.debug("cache_miss", cache_key=cache_key, reason=reason)
        return None

    def _update_hit_rate(self) -> None:
        if self.stats["total_requests"] > 0:
            self.stats["hit_rate"] = self.stats["hits"] / self.stats["total_requests"]
        else:
            self.stats["hit_rate"] = 0.0


__all__ = ["AstMapCache", "CACHE_FILE_PREFIX"]
