"""Pytest fixtures for treesitter tests."""

import pytest
from tree_sitter import Tree
from tree_sitter_language_pack import get_parser



@pytest.fixture
def parse_php():
    """Factory fixture to parse PHP source code."""
    parser = get_parser("php")

    def _parse(source: str) -> tuple[Tree, bytes]:
        source_bytes = source.encode("utf-8")
        return parser.parse(source_bytes), source_bytes

    return _parse


@pytest.fixture
def parse_python():
    """Factory fixture to parse Python source code."""
    parser = get_parser("python")

    def _parse(source: str) -> tuple[Tree, bytes]:
        source_bytes = source.encode("utf-8")
        return parser.parse(source_bytes), source_bytes

    return _parse


@pytest.fixture
def php_source_code():
    """Sample PHP source with namespaces, imports and every class-like kind."""
    return b"""<?php

namespace App\\Model;

use App\\Contracts\\Entity;
use Vendor\\Orm\\{BaseModel, Timestamps as HasTimestamps};

interface Named extends \\Stringable {}

trait Auditable {}

class User extends BaseModel implements Entity, Named
{
    use HasTimestamps, Auditable;
}

enum Status: string implements Named
{
    case Active = 'active';
}
"""

