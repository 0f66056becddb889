"""
Unit tests for exception hierarchy and error handling.

Tests exception creation, error codes, inheritance and serialization.
"""

import uuid

import pytest

from archmap_core.exceptions import (
    ArchmapError,
    CacheError,
    CacheWriteError,
    CollectionError,
    NoSourceFilesError,
    ValidationError,
)
from archmap_core.treesitter.exceptions import (
    ExtractorNotFoundError,
    LanguageNotSupportedError,
    ParseError,
    ParserUnavailableError,
    TreeSitterError,
)


class TestArchmapErrorBase:
    """Test base ArchmapError exception."""

    def test_base_exception_creation(self):
        """Test creating base ArchmapError."""
        error = ArchmapError(message="Test error", error_code="ERR_001")

        assert error.message == "Test error"
        assert error.error_code == "ERR_001"
        assert str(error) == "Test error"

    def test_base_exception_default_details(self):
        """Test ArchmapError with default empty details."""
        error = ArchmapError(message="Test error")

        assert error.details == {}
        assert error.error_code == "ERR_UNKNOWN"

    def test_base_exception_correlation_id(self):
        """Test ArchmapError keeps a given correlation_id."""
        correlation_id = str(uuid.uuid4())
        error = ArchmapError(message="Test error", correlation_id=correlation_id)

        assert error.correlation_id == correlation_id

    def test_base_exception_generates_correlation_id(self):
        """Test ArchmapError generates a UUID correlation_id."""
        error = ArchmapError(message="Test error")

        uuid.UUID(error.correlation_id)

    def test_to_dict(self):
        """Test serialization includes the wrapped exception."""
        original = OSError("disk full")
        error = ArchmapError(
            message="Write failed",
            error_code="ERR_002",
            details={"path": "/tmp/x"},
            original_exception=original,
        )

        data = error.to_dict()

        assert data["error"] == "ArchmapError"
        assert data["message"] == "Write failed"
        assert data["error_code"] == "ERR_002"
        assert data["details"] == {"path": "/tmp/x"}
        assert data["original_error"] == "disk full"


class TestErrorCodes:
    """Test default error codes of each exception type."""

    @pytest.mark.parametrize(
        "error, code",
        [
            (ValidationError("bad"), "VAL_001"),
            (CollectionError("missing root"), "COLL_001"),
            (NoSourceFilesError(), "COLL_002"),
            (CacheError("unusable"), "CACHE_001"),
            (CacheWriteError("read-only"), "CACHE_002"),
            (TreeSitterError(), "TS_001"),
            (LanguageNotSupportedError(language="cobol"), "TS_002"),
            (ParseError(file_path="/a.php"), "TS_003"),
            (ExtractorNotFoundError(language="go"), "TS_004"),
            (ParserUnavailableError(language="php"), "TS_005"),
        ],
    )
    def test_error_code(self, error, code):
        """Test every exception carries its documented code."""
        assert error.error_code == code

    def test_hierarchy(self):
        """Test run-level errors share the ArchmapError base."""
        assert issubclass(NoSourceFilesError, CollectionError)
        assert issubclass(CacheWriteError, CacheError)
        assert issubclass(ParseError, TreeSitterError)
        assert issubclass(TreeSitterError, ArchmapError)

    def test_no_source_files_default_message(self):
        """Test NoSourceFilesError has a readable default message."""
        assert str(NoSourceFilesError()) == "No readable source files found"


class TestTreeSitterErrors:
    """Test details carried by tree-sitter exceptions."""

    def test_parse_error_message(self):
        """Test ParseError formats the file and reason."""
        error = ParseError(
            file_path="/src/A.php",
            parse_details="Syntax error, unexpected '}' on line 3",
        )

        assert error.file_path == "/src/A.php"
        assert error.parse_details == "Syntax error, unexpected '}' on line 3"
        assert "/src/A.php" in error.message
        assert error.details["parse_details"] == "Syntax error, unexpected '}' on line 3"

    def test_parse_error_without_details(self):
        """Test ParseError without a reason."""
        error = ParseError(file_path="/src/A.php")

        assert error.message == "Failed to parse file '/src/A.php'"
        assert "parse_details" not in error.details

    def test_language_errors_record_language(self):
        """Test language-specific errors expose the language."""
        assert LanguageNotSupportedError(language="cobol").details["language"] == "cobol"
        assert ExtractorNotFoundError(language="go").language == "go"
        assert "php" in ParserUnavailableError(language="php").message
