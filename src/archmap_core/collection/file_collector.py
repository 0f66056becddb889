"""
FileSetCollector for enumerating the source files of an analysis run.

Provides functionality to:
- Walk every configured root, following symbolic links
- Skip unreadable directories and files instead of failing
- Skip version-control metadata directories
- Filter by filename suffix and case-insensitive exclusion patterns
- Return a path-sorted, duplicate-free list of SourceFile objects

License: MIT
"""

import os
import re
from pathlib import Path
from typing import List, Optional, Pattern, Sequence, Set

import structlog

from archmap_core.config import settings
from archmap_core.exceptions import CollectionError
from archmap_core.models import SourceFile

logger = structlog.get_logger(__name__)

# Directories holding version-control metadata, never source code
VCS_DIRECTORIES = {
    ".git",
    ".svn",
    ".hg",
    ".bzr",
    "CVS",
    "_darcs",
    ".arch-params",
    ".monotone",
}


class FileSetCollector:
    """
    Enumerates candidate source files under a set of root paths.

    Attributes:
        file_suffix: Filename suffix a source file must end with
        exclude_patterns: Compiled exclusion patterns
        ignore_vcs_dirs: Whether VCS metadata directories are skipped

    Example:
        >>> collector = FileSetCollector(".php", exclude_files=["/vendor/"])
        >>> files = collector.collect(["/path/to/project/src"])
        >>> files[0].path
        '/path/to/project/src/Controller/HomeController.php'
    """

    def __init__(
        self,
        file_suffix: str = ".php",
        exclude_files: Optional[Sequence[str]] = None,
        ignore_vcs_dirs: Optional[bool] = None,
    ):
        """
        Initialize the collector.

        Args:
            file_suffix: Filename suffix to match, including the dot
            exclude_files: Regular expressions matched against full paths
            ignore_vcs_dirs: Skip VCS directories (default: settings.ignore_vcs_dirs)
        """
        self.file_suffix = file_suffix
        self.exclude_patterns: List[Pattern[str]] = [
            re.compile(pattern, re.IGNORECASE) for pattern in (exclude_files or [])
        ]
        self.ignore_vcs_dirs = (
            settings.ignore_vcs_dirs if ignore_vcs_dirs is None else ignore_vcs_dirs
        )

    def collect(self, root_paths: Sequence[str]) -> List[SourceFile]:
        """
        Collect every readable source file under the given roots.

        Args:
            root_paths: Root directories to walk

        Returns:
            SourceFile objects sorted by path

        Raises:
            CollectionError: If a root path does not exist or is not a directory
        """
        seen: Set[str] = set()
        files: List[SourceFile] = []

        for root in root_paths:
            root_dir = self._validate_root(root)
            for path in self._walk(root_dir):
                if path in seen:
                    continue
                seen.add(path)

                try:
                    files.append(SourceFile.from_path(path))
                except OSError as e:
                    logger.warning("file_unreadable", path=path, error=str(e))

        files.sort(key=lambda source_file: source_file.path)

        logger.info(
            "files_collected",
            roots=len(root_paths),
            count=len(files),
            suffix=self.file_suffix,
            exclusions=len(self.exclude_patterns),
        )
        return files

    def is_excluded(self, path: str) -> bool:
        """Check if a full path matches any exclusion pattern."""
        return any(pattern.search(path) for pattern in self.exclude_patterns)

    def _walk(self, root_dir: str) -> List[str]:
        candidates: List[str] = []
        # Real paths of walked directories, so symlink loops end
        visited_dirs: Set[str] = set()

        def on_error(error: OSError) -> None:
            logger.debug("directory_unreadable", path=error.filename, error=str(error))

        for dirpath, dirnames, filenames in os.walk(root_dir, onerror=on_error, followlinks=True):
            real_dir = os.path.realpath(dirpath)
            if real_dir in visited_dirs:
                dirnames[:] = []
                continue
            visited_dirs.add(real_dir)

            dirnames[:] = sorted(d for d in dirnames if self._should_descend(dirpath, d))

            for filename in filenames:
                if not filename.endswith(self.file_suffix):
                    continue
                path = os.path.join(dirpath, filename)
                if self._should_include_file(path):
                    candidates.append(path)

        return candidates

    def _should_descend(self, dirpath: str, dirname: str) -> bool:
        if self.ignore_vcs_dirs and dirname in VCS_DIRECTORIES:
            return False
        return os.access(os.path.join(dirpath, dirname), os.R_OK | os.X_OK)

    def _should_include_file(self, path: str) -> bool:
        """Check if a candidate is a readable file that is not excluded."""
        if not os.path.isfile(path) or not os.access(path, os.R_OK):
            logger.debug("file_skipped_unreadable", path=path)
            return False

        if self.is_excluded(path):
            logger.debug("file_excluded", path=path)
            return False

        return True

    def _validate_root(self, root: str) -> str:
        """
        Validate a root path and make it absolute.

        Raises:
            CollectionError: If the path does not exist or is not a directory
        """
        root_path = Path(root).expanduser()
        if not root_path.is_dir():
            raise CollectionError(
                f"Root path is not a directory: {root}",
                details={"path": str(root)},
            )
        return os.path.abspath(str(root_path))


__all__ = ["FileSetCollector", "VCS_DIRECTORIES"]
