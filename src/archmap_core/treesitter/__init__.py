"""
Source parsing for archmap, built on tree-sitter.

A file passes through its parser, then its resolver, then its extractor.

- config: grammars and the extensions that select them
- exceptions: grammar, parse and missing-component errors
- parser: syntax-checked parsers and the per-language component registry
- resolvers: fully-qualified names for declarations and references
- extractors: class-like declarations and their direct inheritance edges
"""

from archmap_core.treesitter.config import (
    EXTENSION_TO_LANGUAGE,
    LANGUAGE_EXTENSIONS,
    LANGUAGES_WITH_EXTRACTORS,
    get_language_by_extension,
    get_language_by_suffix,
    is_supported_extension,
)
from archmap_core.treesitter.exceptions import (
    ExtractorNotFoundError,
    LanguageNotSupportedError,
    ParseError,
    ParserUnavailableError,
    TreeSitterError,
)
from archmap_core.treesitter.extractors import (
    BaseInheritanceExtractor,
    PhpInheritanceExtractor,
    PythonInheritanceExtractor,
)
from archmap_core.treesitter.parser import (
    BaseLanguageParser,
    LanguageParserRegistry,
    ParserFactory,
    UniversalLanguageParser,
)
from archmap_core.treesitter.resolvers import (
    BaseNameResolver,
    PhpNameResolver,
    PythonNameResolver,
    ResolvedNames,
)

__all__ = [
    "LANGUAGE_EXTENSIONS",
    "LANGUAGES_WITH_EXTRACTORS",
    "EXTENSION_TO_LANGUAGE",
    "get_language_by_extension",
    "get_language_by_suffix",
    "is_supported_extension",
    # Errors
    "TreeSitterError",
    "LanguageNotSupportedError",
    "ParseError",
    "ExtractorNotFoundError",
    "ParserUnavailableError",
    # Parser
    "BaseLanguageParser",
    "LanguageParserRegistry",
    "ParserFactory",
    "UniversalLanguageParser",
    # Resolvers
    "BaseNameResolver",
    "PhpNameResolver",
    "PythonNameResolver",
    "ResolvedNames",
    # Extractors
    "BaseInheritanceExtractor",
    "PhpInheritanceExtractor",
    "PythonInheritanceExtractor",
]
