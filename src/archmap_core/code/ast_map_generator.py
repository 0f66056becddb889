"""
AstMapGenerator - build the dependency map of a code base.

One generation run:
1. validate the source language and obtain its parser
2. collect the file set and fingerprint it
3. dispatch PreCreateAstMapEvent
4. reuse a cached map for the fingerprint, or ingest every file, flatten
   the inheritance table and persist the result
5. dispatch PostCreateAstMapEvent

Per-file syntax errors never fail the run. Failing runs raise:
- ValidationError: the file suffix maps to no language with an extractor
- ParserUnavailableError: the language's grammar cannot be loaded
- CollectionError / NoSourceFilesError: a root is missing or nothing was found
- CacheWriteError: the cache directory is not writable

License: MIT
"""

import time
import uuid
from typing import Optional

import structlog

from archmap_core.cache.map_cache import AstMapCache
from archmap_core.code.ast_ingestor import AstIngestor
from archmap_core.code.inheritance_flattener import flatten_inheritance
from archmap_core.code.map_builder import DependencyMapBuilder
from archmap_core.collection.cache_key import calculate_cache_key
from archmap_core.collection.file_collector import FileSetCollector
from archmap_core.config import AnalysisConfig, ArchmapSettings, settings as default_settings
from archmap_core.events import EventDispatcher, PostCreateAstMapEvent, PreCreateAstMapEvent
from archmap_core.exceptions import ArchmapError, NoSourceFilesError, ValidationError
from archmap_core.logging_service import LoggingService
from archmap_core.models import DependencyMap
from archmap_core.treesitter.config import LANGUAGES_WITH_EXTRACTORS, get_language_by_suffix
from archmap_core.treesitter.exceptions import (
    ExtractorNotFoundError,
    LanguageNotSupportedError,
    ParserUnavailableError,
)
from archmap_core.utils import ensure_logging

logger = structlog.get_logger(__name__)


class AstMapGenerator:
    """
    Entry point of dependency map generation.

    Attributes:
        dispatcher: Caller-owned event dispatcher
        settings: Runtime settings (cache location, VCS filtering)
        cache: Artifact cache, None when caching is disabled

    Example:
        ```python
        dispatcher = EventDispatcher()
        dispatcher.add_listener(AstFileSyntaxErrorEvent, report_syntax_error)

        generator = AstMapGenerator(dispatcher)
        dependency_map = generator.generate_ast_map(
            AnalysisConfig(paths=["src"], exclude_files=["Tests/"])
        )
        dependency_map.get_inheritance_chain("App\\\\Controller\\\\HomeController")
        ```
    """

    def __init__(
        self,
        dispatcher: Optional[EventDispatcher] = None,
        settings: Optional[ArchmapSettings] = None,
        cache: Optional[AstMapCache] = None,
    ) -> None:
        self.dispatcher = dispatcher or EventDispatcher()
        self.settings = settings or default_settings

        if cache is None and self.settings.cache_enabled:
            cache = AstMapCache(self.settings.cache_dir)
        self.cache = cache

    def generate_ast_map(self, config: AnalysisConfig) -> DependencyMap:
        """
        Build (or reuse) the dependency map for a configuration.

        Args:
            config: Root paths, exclusion patterns and file suffix

        Returns:
            The finished, immutable DependencyMap

        Raises:
            ValidationError: If the suffix has no inheritance extractor
            ParserUnavailableError: If the grammar cannot be loaded
            CollectionError: If a root path is not a directory
            NoSourceFilesError: If no readable source file was found
            CacheWriteError: If the map cannot be persisted
        """
        ensure_logging()
        correlation_id = str(uuid.uuid4())

        with LoggingService.run_context(correlation_id):
            try:
                return self._generate(config, correlation_id)
            except ArchmapError as e:
                LoggingService.log_error(
                    e,
                    correlation_id,
                    context={"operation": "generate_ast_map"},
                    logger_name=__name__,
                    include_stack_trace=False,
                )
                raise

    def _generate(self, config: AnalysisConfig, correlation_id: str) -> DependencyMap:
        start_time = time.perf_counter()

        language = self._language_for(config.file_suffix)
        ingestor = self._create_ingestor(language)

        logger.info("ast_map_generation_started", paths=config.paths, language=language)

        collector = FileSetCollector(
            file_suffix=config.file_suffix,
            exclude_files=config.exclude_files,
            ignore_vcs_dirs=self.settings.ignore_vcs_dirs,
        )
        files = collector.collect(config.paths)
        if not files:
            raise NoSourceFilesError(
                details={"paths": list(config.paths), "file_suffix": config.file_suffix},
                correlation_id=correlation_id,
            )

        cache_key = calculate_cache_key(files)
        self.dispatcher.dispatch(PreCreateAstMapEvent(expected_file_count=len(files)))

        cached = self.cache.load(cache_key) if self.cache is not None else None
        if cached is not None:
            ast_map = cached
            stats = {"analyzed": 0, "failed": 0}
        else:
            builder = DependencyMapBuilder()
            stats = ingestor.ingest(files, builder)
            ast_map = builder.finalize(flatten_inheritance(builder.direct_inherits), cache_key)
            if self.cache is not None:
                self.cache.store(cache_key, ast_map)

        self.dispatcher.dispatch(PostCreateAstMapEvent(ast_map=ast_map))

        LoggingService.log_performance(
            operation="generate_ast_map",
            duration_ms=(time.perf_counter() - start_time) * 1000,
            correlation_id=correlation_id,
            logger_name=__name__,
            metadata={
                "files": len(files),
                "classes": len(ast_map.direct_inherits),
                "cache_hit": cached is not None,
                **stats,
            },
        )
        return ast_map

    @staticmethod
    def _language_for(file_suffix: str) -> str:
        language = get_language_by_suffix(file_suffix)
        if language is None or language not in LANGUAGES_WITH_EXTRACTORS:
            raise ValidationError(
                f"No inheritance extractor for files ending in '{file_suffix}'",
                details={
                    "file_suffix": file_suffix,
                    "supported_languages": sorted(LANGUAGES_WITH_EXTRACTORS),
                },
            )
        return language

    def _create_ingestor(self, language: str) -> AstIngestor:
        try:
            return AstIngestor(self.dispatcher, language=language)
        except LanguageNotSupportedError as e:
            raise ParserUnavailableError(
                language=language,
                details={"error": e.message},
                original_exception=e,
            ) from e
        except ExtractorNotFoundError as e:
            raise ValidationError(
                e.message, details={"language": language}, original_exception=e
            ) from e


__all__ = ["AstMapGenerator"]
