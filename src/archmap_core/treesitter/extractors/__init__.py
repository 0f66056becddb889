"""Inheritance extractors for the supported languages.

Classes:
    BaseInheritanceExtractor: Abstract base class for all extractors.
    PhpInheritanceExtractor: Classes, interfaces, traits and enums in PHP.
    PythonInheritanceExtractor: Class statements in Python.

Constants:
    PHP_CLASS_LIKE_TYPES: PHP declaration node types and their kinds.
    PHP_INHERIT_CLAUSES: PHP clause node types and the edge kind they produce.
    PHP_NAME_TYPES: PHP node types that spell a class name.
    PYTHON_CLASS_TYPE: Python class declaration node type.
    PYTHON_BASE_EXPRESSION_TYPES: Python base-list expressions that name a class.

License: MIT
"""

from .base import BaseInheritanceExtractor
from .php import PHP_CLASS_LIKE_TYPES, PHP_INHERIT_CLAUSES, PHP_NAME_TYPES, PhpInheritanceExtractor
from .python import PYTHON_BASE_EXPRESSION_TYPES, PYTHON_CLASS_TYPE, PythonInheritanceExtractor

__all__ = [
    "BaseInheritanceExtractor",
    "PhpInheritanceExtractor",
    "PythonInheritanceExtractor",
    "PHP_CLASS_LIKE_TYPES",
    "PHP_INHERIT_CLAUSES",
    "PHP_NAME_TYPES",
    "PYTHON_CLASS_TYPE",
    "PYTHON_BASE_EXPRESSION_TYPES",
]
