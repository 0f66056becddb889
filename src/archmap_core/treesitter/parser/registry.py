"""
Registry of per-language components.

A language can take part in map generation once three components are known
for it: a tree-sitter parser, a name-resolution pass and an inheritance
extractor. The registry keeps them together in one LanguageSupport bundle
per language, so callers fetch everything a file needs in one lookup.

Usage:
    from archmap_core.treesitter.parser.registry import LanguageParserRegistry

    registry = LanguageParserRegistry()
    registry.register_extractor("php", PhpInheritanceExtractor())
    support = registry.get_support("php")
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, List, Optional

import structlog

from ..config import get_language_by_extension

if TYPE_CHECKING:
    from ..extractors.base import BaseInheritanceExtractor
    from ..resolvers.base import BaseNameResolver
    from .base import BaseLanguageParser

logger = structlog.get_logger(__name__)


@dataclass
class LanguageSupport:
    """Parser, resolver and extractor registered for one language."""

    language: str
    parser: Optional["BaseLanguageParser"] = None
    resolver: Optional["BaseNameResolver"] = None
    extractor: Optional["BaseInheritanceExtractor"] = None

    def missing(self) -> List[str]:
        """Names of the components not registered yet."""
        return [
            component
            for component in ("parser", "resolver", "extractor")
            if getattr(self, component) is None
        ]

    @property
    def is_complete(self) -> bool:
        return not self.missing()


class LanguageParserRegistry:
    """
    Process-wide singleton holding one LanguageSupport per language.

    Example:
        >>> registry = LanguageParserRegistry()
        >>> registry.register_resolver("php", PhpNameResolver())
        >>> registry.get_support("php").missing()
        ['parser', 'extractor']
    """

    _instance: Optional["LanguageParserRegistry"] = None
    _languages: Dict[str, LanguageSupport]

    def __new__(cls) -> "LanguageParserRegistry":
        if cls._instance is None:
            instance = super().__new__(cls)
            instance._languages = {}
            cls._instance = instance
        return cls._instance

    def _support_for(self, language: str) -> LanguageSupport:
        support = self._languages.get(language)
        if support is None:
            support = self._languages[language] = LanguageSupport(language=language)
        return support

    def _register(self, language: str, component: str, value: object) -> None:
        setattr(self._support_for(language), component, value)
        logger.debug("language_component_registered", language=language, component=component)

    def register_parser(self, language: str, parser: "BaseLanguageParser") -> None:
        self._register(language, "parser", parser)

    def register_resolver(self, language: str, resolver: "BaseNameResolver") -> None:
        self._register(language, "resolver", resolver)

    def register_extractor(self, language: str, extractor: "BaseInheritanceExtractor") -> None:
        """
        Register the inheritance extractor for a language.

        There is no generic fallback extractor: a language without one
        cannot contribute inheritance edges.
        """
        self._register(language, "extractor", extractor)

    def get_support(self, language: str) -> Optional[LanguageSupport]:
        return self._languages.get(language)

    def get_parser(self, language: str) -> Optional["BaseLanguageParser"]:
        support = self._languages.get(language)
        return support.parser if support is not None else None

    def get_resolver(self, language: str) -> Optional["BaseNameResolver"]:
        support = self._languages.get(language)
        return support.resolver if support is not None else None

    def get_extractor(self, language: str) -> Optional["BaseInheritanceExtractor"]:
        support = self._languages.get(language)
        return support.extractor if support is not None else None

    def get_language_by_extension(self, extension: str) -> Optional[str]:
        return get_language_by_extension(extension)

    def list_registered_languages(self) -> List[str]:
        """Sorted languages that have a parser."""
        return sorted(name for name, support in self._languages.items() if support.parser)

    def list_registered_extractors(self) -> List[str]:
        """Sorted languages that have an inheritance extractor."""
        return sorted(name for name, support in self._languages.items() if support.extractor)

    def list_complete_languages(self) -> List[str]:
        """Sorted languages with all three components registered."""
        return sorted(name for name, support in self._languages.items() if support.is_complete)

    def clear(self) -> None:
        self._languages.clear()
        logger.debug("language_registry_cleared")

    @classmethod
    def reset_instance(cls) -> None:
        """Drop the singleton; the next instantiation starts empty."""
        cls._instance = None


__all__ = ["LanguageParserRegistry", "LanguageSupport"]
