"""
Tree-sitter parsing with syntax errors surfaced as exceptions.

Tree-sitter is error tolerant: it always returns a tree and marks broken
regions with ERROR and MISSING nodes. Map generation needs the opposite
contract (a file either parses cleanly or is reported and skipped), so
BaseLanguageParser raises ParseError for any tree that contains an error,
with a message pointing at the first broken node.

License: MIT
"""

from abc import ABC, abstractmethod
from typing import Optional

import structlog
from tree_sitter import Node, Parser, Tree
from tree_sitter_language_pack import get_language, get_parser

from archmap_core.treesitter.exceptions import LanguageNotSupportedError, ParseError

logger = structlog.get_logger(__name__)

# Longest source excerpt quoted in a syntax error message
_ERROR_EXCERPT_LENGTH = 30


class BaseLanguageParser(ABC):
    """
    One tree-sitter grammar plus the clean-tree contract.

    Subclasses name the grammar and the extensions they claim; the
    grammar is checked when the parser is constructed and the underlying
    tree-sitter Parser is created on first use.

    Example:
        class PhpParser(BaseLanguageParser):
            @property
            def language_name(self) -> str:
                return "php"

            @property
            def file_extensions(self) -> tuple[str, ...]:
                return (".php",)

        tree = PhpParser().parse(b"<?php class A {}", "/src/A.php")
    """

    def __init__(self) -> None:
        """
        Raises:
            LanguageNotSupportedError: If tree-sitter-language-pack has no
                grammar named ``language_name``.
        """
        self._parser: Optional[Parser] = None
        self._log = logger.bind(parser=type(self).__name__, language=self.language_name)

        try:
            get_language(self.language_name)  # type: ignore[arg-type]
        except Exception as e:
            self._log.error("grammar_missing", error=str(e))
            raise LanguageNotSupportedError(
                language=self.language_name,
                details={"error": str(e)},
                original_exception=e,
            ) from e

    @property
    @abstractmethod
    def language_name(self) -> str:
        """Grammar name in tree-sitter-language-pack ("php", "python")."""
        ...

    @property
    @abstractmethod
    def file_extensions(self) -> tuple[str, ...]:
        """Extensions claimed by this parser, dot included."""
        ...

    def get_parser(self) -> Parser:
        if self._parser is None:
            self._parser = get_parser(self.language_name)  # type: ignore[arg-type]
            self._log.debug("parser_created")
        return self._parser

    def parse(self, source_code: bytes, file_path: str = "<memory>") -> Tree:
        """
        Parse source bytes into an error-free tree.

        Args:
            source_code: File content
            file_path: Path quoted in errors and logs

        Raises:
            ParseError: If tree-sitter fails or the tree contains an error node.
        """
        try:
            tree = self.get_parser().parse(source_code)
        except Exception as e:
            self._log.error("tree_sitter_failed", file_path=file_path, error=str(e))
            raise ParseError(file_path=file_path, parse_details=str(e), original_exception=e) from e

        if tree.root_node.has_error:
            parse_details = describe_syntax_error(tree.root_node, source_code)
            self._log.debug("syntax_error_found", file_path=file_path, parse_details=parse_details)
            raise ParseError(file_path=file_path, parse_details=parse_details)

        self._log.debug("source_parsed", file_path=file_path, size=len(source_code))
        return tree

    def parse_file(self, file_path: str) -> Tree:
        """
        Read a file and parse it.

        Raises:
            ParseError: If the file cannot be read or has syntax errors.
        """
        try:
            with open(file_path, "rb") as handle:
                source_code = handle.read()
        except OSError as e:
            raise ParseError(
                file_path=file_path,
                parse_details=f"Failed to read file: {e}",
                original_exception=e,
            ) from e

        return self.parse(source_code, file_path)

    def supports_extension(self, extension: str) -> bool:
        """True for a claimed extension, written with or without the dot."""
        return f".{extension.lstrip('.')}" in self.file_extensions

    def __repr__(self) -> str:
        return f"{type(self).__name__}(language='{self.language_name}')"


def find_first_error_node(node: Node) -> Optional[Node]:
    """First ERROR or MISSING node in document order, or None."""
    stack = [node]
    while stack:
        current = stack.pop()
        if current.type == "ERROR" or current.is_missing:
            return current
        stack.extend(
            child for child in reversed(current.children) if child.has_error or child.is_missing
        )
    return None


def describe_syntax_error(root: Node, source_code: bytes) -> str:
    """
    Message for the first syntax error under ``root``.

    Forms:
        "Syntax error, unexpected '<token>' on line N"
        "Syntax error, missing '<node type>' on line N"
        "Syntax error, unexpected end of file on line N"
    """
    error_node = find_first_error_node(root)
    if error_node is None:
        return "Syntax error"

    line = error_node.start_point[0] + 1
    if error_node.is_missing:
        return f"Syntax error, missing '{error_node.type}' on line {line}"

    excerpt = source_code[error_node.start_byte : error_node.end_byte]
    lines = excerpt.decode("utf-8", errors="replace").strip().splitlines()
    token = lines[0][:_ERROR_EXCERPT_LENGTH] if lines else ""
    if not token:
        return f"Syntax error, unexpected end of file on line {line}"
    return f"Syntax error, unexpected '{token}' on line {line}"


__all__ = ["BaseLanguageParser", "describe_syntax_error", "find_first_error_node"]
