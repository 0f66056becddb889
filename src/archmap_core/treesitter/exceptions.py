"""
Exceptions of the tree-sitter layer.

LanguageNotSupportedError, ExtractorNotFoundError and ParserUnavailableError
describe a language that cannot be processed and carry its name; ParseError
describes one source file that cannot be read or parsed.

License: MIT
"""

from typing import Any, ClassVar, Optional

from archmap_core.exceptions import ArchmapError


class TreeSitterError(ArchmapError):
    """Base exception for the tree-sitter layer (TS_001)."""

    default_code = "TS_001"
    default_message = "Tree-sitter operation failed"


class _LanguageError(TreeSitterError):
    """A language-level failure; the message is built from ``message_template``."""

    message_template: ClassVar[str] = "Language '{language}' cannot be processed"

    def __init__(self, language: str, message: Optional[str] = None, **kwargs: Any):
        self.language = language
        details = dict(kwargs.pop("details", None) or {})
        details["language"] = language
        super().__init__(
            message or self.message_template.format(language=language),
            details=details,
            **kwargs,
        )


class LanguageNotSupportedError(_LanguageError):
    """The language has no grammar in tree-sitter-language-pack (TS_002)."""

    default_code = "TS_002"
    message_template = "Language '{language}' is not supported by tree-sitter-language-pack"


class ExtractorNotFoundError(_LanguageError):
    """No inheritance extractor is registered for the language (TS_004)."""

    default_code = "TS_004"
    message_template = "No inheritance extractor registered for language '{language}'"


class ParserUnavailableError(_LanguageError):
    """
    The parser library cannot produce a parser at run start (TS_005).

    Fatal for a generation run: no file can be analyzed without it.
    """

    default_code = "TS_005"
    message_template = "Parser for language '{language}' is unavailable"


class ParseError(TreeSitterError):
    """
    A source file cannot be read or contains syntax errors (TS_003).

    Attributes:
        file_path: Path of the file
        parse_details: Human-readable reason, e.g.
            "Syntax error, unexpected '}' on line 12"
    """

    default_code = "TS_003"

    def __init__(
        self,
        file_path: str,
        parse_details: Optional[str] = None,
        message: Optional[str] = None,
        **kwargs: Any,
    ):
        self.file_path = file_path
        self.parse_details = parse_details

        if message is None:
            message = f"Failed to parse file '{file_path}'"
            if parse_details:
                message = f"{message}: {parse_details}"

        details = dict(kwargs.pop("details", None) or {})
        details["file_path"] = file_path
        if parse_details:
            details["parse_details"] = parse_details

        super().__init__(message, details=details, **kwargs)


__all__ = [
    "TreeSitterError",
    "LanguageNotSupportedError",
    "ParseError",
    "ExtractorNotFoundError",
    "ParserUnavailableError",
]
