"""
Languages archmap can read and the file extensions that select them.

Only languages listed in LANGUAGES_WITH_EXTRACTORS contribute classes to a
map.
"""

from typing import Dict, Optional, Set, Tuple


# =============================================================================
# GRAMMARS AND THEIR EXTENSIONS
# =============================================================================
# Keys are grammar names in tree-sitter-language-pack.

LANGUAGE_EXTENSIONS: Dict[str, Tuple[str, ...]] = {
    "php": (".php", ".phtml", ".inc"),
    "python": (".py", ".pyi"),
}


# =============================================================================
# LANGUAGES WITH INHERITANCE EXTRACTORS
# =============================================================================

LANGUAGES_WITH_EXTRACTORS: Set[str] = {
    "php",  # PhpInheritanceExtractor + PhpNameResolver
    "python",  # PythonInheritanceExtractor + PythonNameResolver
}


# =============================================================================
# LOOKUP BY EXTENSION
# =============================================================================

EXTENSION_TO_LANGUAGE: Dict[str, str] = {
    ext: lang
    for lang, extensions in LANGUAGE_EXTENSIONS.items()
    for ext in extensions
}


# =============================================================================
# LOOKUPS
# =============================================================================

def get_language_by_extension(extension: str) -> Optional[str]:
    """
    Grammar name selected by a file extension, case-insensitively.

    Args:
        extension: Extension with or without the dot

    Returns:
        Grammar name, or None for an unknown extension

    Examples:
        >>> get_language_by_extension(".php")
        'php'
        >>> get_language_by_extension("py")
        'python'
        >>> get_language_by_extension(".rb")
        None
    """
    if not extension.startswith("."):
        extension = f".{extension}"

    return EXTENSION_TO_LANGUAGE.get(extension.lower())


def get_language_by_suffix(suffix: str) -> Optional[str]:
    """
    Get the language for a configured source-file suffix.

    Compound suffixes such as ".class.php" resolve through their last
    extension.

    Examples:
        >>> get_language_by_suffix(".class.php")
        'php'
    """
    extension = "." + suffix.rsplit(".", 1)[-1] if "." in suffix else suffix
    return get_language_by_extension(extension)


def is_supported_extension(extension: str) -> bool:
    """
    True when the extension selects a language with an inheritance extractor.

    Examples:
        >>> is_supported_extension(".php")
        True
        >>> is_supported_extension("js")
        False
    """
    language = get_language_by_extension(extension)
    return language is not None and language in LANGUAGES_WITH_EXTRACTORS
