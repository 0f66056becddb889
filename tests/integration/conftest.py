"""
Integration test fixtures: source trees on disk and a generator with a
private cache directory.

License: MIT
"""

import pytest

from archmap_core.code.ast_map_generator import AstMapGenerator
from archmap_core.config import ArchmapSettings
from archmap_core.events import (
    AstFileAnalyzedEvent,
    AstFileSyntaxErrorEvent,
    EventDispatcher,
    PostCreateAstMapEvent,
    PreCreateAstMapEvent,
)

EVENT_TYPES = (
    PreCreateAstMapEvent,
    AstFileAnalyzedEvent,
    AstFileSyntaxErrorEvent,
    PostCreateAstMapEvent,
)


@pytest.fixture
def settings(tmp_path):
    """Settings with caching into tmp_path/cache."""
    return ArchmapSettings(cache_enabled=True, cache_dir=tmp_path / "cache", ignore_vcs_dirs=True)


@pytest.fixture
def events():
    """List that receives every dispatched event."""
    return []


@pytest.fixture
def dispatcher(events):
    """Dispatcher recording all four event types into ``events``."""
    dispatcher = EventDispatcher()
    for event_type in EVENT_TYPES:
        dispatcher.add_listener(event_type, events.append)
    return dispatcher


@pytest.fixture
def generator(dispatcher, settings):
    return AstMapGenerator(dispatcher=dispatcher, settings=settings)


@pytest.fixture
def source_tree(tmp_path):
    """Factory fixture writing ``{relative path: content}`` under tmp_path/src."""
    root = tmp_path / "src"

    def _write(files):
        for relative, content in files.items():
            path = root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content)
        return root

    return _write
