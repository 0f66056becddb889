"""
AstIngestor - parse, resolve and extract each collected file.

For every file, in file-set order:
1. read the content
2. parse it with the language's tree-sitter parser
3. run the name-resolution pass
4. extract class-like declarations and their direct edges
5. record the AstEntry and the class rows in the builder

A file that cannot be read or parsed is reported through
AstFileSyntaxErrorEvent and skipped; nothing from it reaches the builder.

License: MIT
"""

from typing import Dict, Sequence

import structlog

from archmap_core.code.map_builder import DependencyMapBuilder
from archmap_core.events import AstFileAnalyzedEvent, AstFileSyntaxErrorEvent, EventDispatcher
from archmap_core.models import AstEntry, SourceFile
from archmap_core.treesitter.exceptions import ParseError
from archmap_core.treesitter.parser.factory import ParserFactory

logger = structlog.get_logger(__name__)


class AstIngestor:
    """
    Turns source files into AstEntry objects and direct inheritance rows.

    Attributes:
        dispatcher: Receives the per-file success and failure events
        language: Language every file is parsed as

    Example:
        ```python
        ingestor = AstIngestor(dispatcher, language="php")
        builder = DependencyMapBuilder()
        stats = ingestor.ingest(files, builder)
        print(stats["analyzed"], stats["failed"])
        ```
    """

    def __init__(self, dispatcher: EventDispatcher, language: str = "php") -> None:
        self.dispatcher = dispatcher
        self.language = language
        self._support = ParserFactory.get_support(language)

    def ingest(
        self, files: Sequence[SourceFile], builder: DependencyMapBuilder
    ) -> Dict[str, int]:
        """
        Ingest every file into the builder.

        Returns:
            Counts of analyzed and failed files
        """
        stats = {"analyzed": 0, "failed": 0}

        for source_file in files:
            if self.ingest_file(source_file, builder):
                stats["analyzed"] += 1
            else:
                stats["failed"] += 1

        logger.info("ingestion_complete", language=self.language, **stats)
        return stats

    def ingest_file(self, source_file: SourceFile, builder: DependencyMapBuilder) -> bool:
        """
        Ingest one file.

        Returns:
            True if the file was analyzed, False if it was skipped
        """
        try:
            content = self._read(source_file)
            tree = self._support.parser.parse(content, source_file.path)
        except ParseError as e:
            syntax_error = e.parse_details or e.message
            logger.warning("file_parse_failed", path=source_file.path, error=syntax_error)
            self.dispatcher.dispatch(
                AstFileSyntaxErrorEvent(file=source_file, syntax_error=syntax_error)
            )
            return False

        names = self._support.resolver.resolve(tree, content, source_file.path)
        declarations = self._support.extractor.extract_class_likes(
            tree, content, source_file.path, names
        )

        builder.add_file(
            AstEntry(
                path=source_file.path,
                content_hash=source_file.content_hash,
                language=self.language,
                declarations=tuple(declarations),
            )
        )

        logger.debug(
            "file_analyzed",
            path=source_file.path,
            declarations=len(declarations),
        )
        self.dispatcher.dispatch(AstFileAnalyzedEvent(file=source_file, tree=tree))
        return True

    @staticmethod
    def _read(source_file: SourceFile) -> bytes:
        try:
            with open(source_file.path, "rb") as handle:
                return handle.read()
        except OSError as e:
            raise ParseError(
                file_path=source_file.path,
                parse_details=f"Failed to read file: {e}",
                original_exception=e,
            ) from e


__all__ = ["AstIngestor"]
