"""
Construction of per-language components.

UniversalLanguageParser wraps any grammar shipped by
tree-sitter-language-pack. ParserFactory registers, for every language that
has an inheritance extractor, its parser, name-resolution pass and
extractor in the LanguageParserRegistry, and hands them out as a
LanguageSupport bundle.

License: MIT
"""

from pathlib import Path
from typing import Dict, Optional, Tuple, Type

import structlog
from tree_sitter import Parser
from tree_sitter_language_pack import get_language

from ..config import LANGUAGE_EXTENSIONS, LANGUAGES_WITH_EXTRACTORS, get_language_by_extension
from ..exceptions import ExtractorNotFoundError, LanguageNotSupportedError
from .base import BaseLanguageParser
from .registry import LanguageParserRegistry, LanguageSupport

logger = structlog.get_logger(__name__)


class UniversalLanguageParser(BaseLanguageParser):
    """
    Parser for any grammar of tree-sitter-language-pack, chosen by name.

    File extensions come from LANGUAGE_EXTENSIONS; a grammar without an
    entry there parses fine but claims no extensions.

    Example:
        >>> parser = UniversalLanguageParser("php")
        >>> parser.parse(b"<?php interface A {}").root_node.type
        'program'
    """

    def __init__(self, language_name: str):
        """
        Raises:
            ValueError: If language_name is empty.
            LanguageNotSupportedError: If the grammar is not in the pack.
        """
        if not language_name:
            raise ValueError("language_name cannot be empty")

        self._language_name = language_name
        super().__init__()

    @property
    def language_name(self) -> str:
        return self._language_name

    @property
    def file_extensions(self) -> tuple[str, ...]:
        return LANGUAGE_EXTENSIONS.get(self._language_name, ())

    def get_parser(self) -> Parser:
        if self._parser is None:
            self._parser = Parser(get_language(self._language_name))  # type: ignore[arg-type]
            self._log.debug("parser_created")
        return self._parser


def _builtin_components() -> Dict[str, Tuple[Type, Type]]:
    """Resolver and extractor classes of every language with an extractor."""
    from ..extractors.php import PhpInheritanceExtractor
    from ..extractors.python import PythonInheritanceExtractor
    from ..resolvers.php import PhpNameResolver
    from ..resolvers.python import PythonNameResolver

    return {
        "php": (PhpNameResolver, PhpInheritanceExtractor),
        "python": (PythonNameResolver, PythonInheritanceExtractor),
    }


class ParserFactory:
    """
    Class-level entry point to the language registry.

    initialize() is idempotent and runs implicitly on first lookup. A
    language whose grammar is missing from the pack still gets its resolver
    and extractor registered; asking for its parser then raises
    LanguageNotSupportedError.

    Example:
        >>> support = ParserFactory.get_support("php")
        >>> tree = support.parser.parse(source, path)
        >>> names = support.resolver.resolve(tree, source, path)
    """

    _initialized: bool = False

    @classmethod
    def initialize(cls) -> None:
        if cls._initialized:
            return

        registry = LanguageParserRegistry()
        components = _builtin_components()
        unavailable = []

        for language in sorted(LANGUAGES_WITH_EXTRACTORS):
            resolver_class, extractor_class = components[language]
            registry.register_resolver(language, resolver_class())
            registry.register_extractor(language, extractor_class())
            try:
                registry.register_parser(language, cls._build_parser(language))
            except LanguageNotSupportedError as e:
                unavailable.append(language)
                logger.warning("grammar_unavailable", language=language, error=e.message)

        cls._initialized = True
        logger.info(
            "parser_factory_initialized",
            languages=registry.list_complete_languages(),
            unavailable=unavailable,
        )

    @staticmethod
    def _build_parser(language: str) -> UniversalLanguageParser:
        parser = UniversalLanguageParser(language)
        parser.get_parser()
        return parser

    @classmethod
    def get_support(cls, language: str) -> LanguageSupport:
        """
        Return the complete component bundle of a language.

        Raises:
            ExtractorNotFoundError: If the language has no resolver or extractor.
            LanguageNotSupportedError: If its grammar cannot be loaded.
        """
        cls.initialize()
        registry = LanguageParserRegistry()

        support = registry.get_support(language)
        if support is None or support.resolver is None or support.extractor is None:
            raise ExtractorNotFoundError(language=language)
        if support.parser is None:
            registry.register_parser(language, cls._build_parser(language))
        return support

    @classmethod
    def get_parser(cls, language: str) -> BaseLanguageParser:
        """
        Parser for any pack grammar, created and registered on demand.

        Raises:
            LanguageNotSupportedError: If the grammar is not in the pack.
        """
        cls.initialize()
        registry = LanguageParserRegistry()

        parser = registry.get_parser(language)
        if parser is None:
            parser = cls._build_parser(language)
            registry.register_parser(language, parser)
        return parser

    @classmethod
    def get_resolver(cls, language: str):
        cls.initialize()
        resolver = LanguageParserRegistry().get_resolver(language)
        if resolver is None:
            raise ExtractorNotFoundError(language=language)
        return resolver

    @classmethod
    def get_extractor(cls, language: str):
        cls.initialize()
        extractor = LanguageParserRegistry().get_extractor(language)
        if extractor is None:
            raise ExtractorNotFoundError(language=language)
        return extractor

    @classmethod
    def get_parser_for_file(cls, file_path: str) -> Optional[BaseLanguageParser]:
        """Parser chosen by extension; None for unknown extensions or grammars."""
        language = get_language_by_extension(Path(file_path).suffix)
        if language is None:
            return None

        try:
            return cls.get_parser(language)
        except LanguageNotSupportedError as e:
            logger.warning("parser_for_file_unavailable", file_path=file_path, error=e.message)
            return None

    @classmethod
    def is_initialized(cls) -> bool:
        return cls._initialized

    @classmethod
    def reset(cls) -> None:
        """Forget every registered component (tests)."""
        cls._initialized = False
        LanguageParserRegistry.reset_instance()


__all__ = ["ParserFactory", "UniversalLanguageParser"]
