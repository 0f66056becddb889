"""
Tree-sitter parser module.

Exports:
    BaseLanguageParser: Abstract base class for language parsers.
    LanguageParserRegistry: Central registry for parsers, resolvers and extractors.
    ParserFactory: Factory for creating and managing language parsers.
    UniversalLanguageParser: Universal parser for any supported language.
"""

from archmap_core.treesitter.parser.base import BaseLanguageParser
from archmap_core.treesitter.parser.factory import ParserFactory, UniversalLanguageParser
from archmap_core.treesitter.parser.registry import LanguageParserRegistry, LanguageSupport

__all__ = [
    "BaseLanguageParser",
    "LanguageParserRegistry",
    "LanguageSupport",
    "ParserFactory",
    "UniversalLanguageParser",
]
