"""
End-to-end tests for AstMapGenerator over source trees on disk.

License: MIT
"""

import pytest
import structlog

from archmap_core.code.ast_map_generator import AstMapGenerator
from archmap_core.config import AnalysisConfig, ArchmapSettings
from archmap_core.events import (
    AstFileAnalyzedEvent,
    AstFileSyntaxErrorEvent,
    PostCreateAstMapEvent,
    PreCreateAstMapEvent,
)
from archmap_core.exceptions import CollectionError, NoSourceFilesError, ValidationError
from archmap_core.logging_service import LoggingService
from archmap_core.models import InheritKind

pytestmark = pytest.mark.integration

INHERIT_FIXTURES = {
    "ClassInheritA.php": "<?php\n\n\nclass ClassInheritA extends ClassInheritB {}\n",
    "ClassInheritB.php": "<?php\n\n\n\nclass ClassInheritB extends ClassInheritC {}\n",
    "ClassInheritC.php": "<?php\n\n\n\n\nclass ClassInheritC extends ClassInheritD {}\n",
    "ClassInheritD.php": "<?php\n\nclass ClassInheritD {}\n",
}


def types_of(events):
    return [type(event) for event in events]


class TestGenerateAstMap:
    """Tests for a fresh generation run."""

    def test_inheritance_chain(self, generator, source_tree):
        """Test direct rows, flattened rows and the full chain."""
        root = source_tree(INHERIT_FIXTURES)

        ast_map = generator.generate_ast_map(AnalysisConfig(paths=[str(root)]))

        direct = ast_map.get_class_inherits("ClassInheritA")
        assert [(e.kind, e.target, e.line) for e in direct] == [
            (InheritKind.EXTENDS, "ClassInheritB", 4)
        ]
        assert ast_map.get_class_inherits("ClassInheritB")[0].line == 5
        assert ast_map.get_class_inherits("ClassInheritC")[0].line == 6
        assert ast_map.get_class_inherits("ClassInheritD") == ()

        assert ast_map.get_flattened_inherits("ClassInheritA") == ("ClassInheritC", "ClassInheritD")
        assert ast_map.get_flattened_inherits("ClassInheritC") == ()
        assert ast_map.get_inheritance_chain("ClassInheritA") == [
            "ClassInheritB",
            "ClassInheritC",
            "ClassInheritD",
        ]
        assert sorted(ast_map.class_names()) == sorted(
            ["ClassInheritA", "ClassInheritB", "ClassInheritC", "ClassInheritD"]
        )
        assert len(ast_map.asts) == 4
        assert ast_map.cache_key is not None

    def test_event_order(self, generator, source_tree, events):
        """Test pre, one event per file in path order, then post."""
        root = source_tree(INHERIT_FIXTURES)

        ast_map = generator.generate_ast_map(AnalysisConfig(paths=[str(root)]))

        assert types_of(events) == [PreCreateAstMapEvent] + [AstFileAnalyzedEvent] * 4 + [
            PostCreateAstMapEvent
        ]
        assert events[0].expected_file_count == 4
        analyzed_paths = [event.file.path for event in events[1:5]]
        assert analyzed_paths == sorted(analyzed_paths)
        assert events[-1].ast_map is ast_map

    def test_syntax_error_file_is_skipped(self, generator, source_tree, events):
        """Test a broken file is reported and the rest of the map is built."""
        files = dict(INHERIT_FIXTURES)
        files["Broken.php"] = "<?php\nclass Broken extends {\n"
        root = source_tree(files)

        ast_map = generator.generate_ast_map(AnalysisConfig(paths=[str(root)]))

        failures = [e for e in events if isinstance(e, AstFileSyntaxErrorEvent)]
        assert len(failures) == 1
        assert failures[0].file.path.endswith("Broken.php")
        assert failures[0].syntax_error.startswith("Syntax error")
        assert "Broken" not in ast_map.class_names()
        assert events[0].expected_file_count == 5
        assert len(ast_map.asts) == 4

    def test_cycle_terminates(self, generator, source_tree):
        """Test inheritance cycles are cut instead of looping."""
        root = source_tree(
            {
                "A.php": "<?php interface A extends B {}",
                "B.php": "<?php interface B extends C {}",
                "C.php": "<?php interface C extends A {}",
            }
        )

        ast_map = generator.generate_ast_map(AnalysisConfig(paths=[str(root)]))

        assert ast_map.get_flattened_inherits("A") == ("C",)
        assert ast_map.get_inheritance_chain("A") == ["B", "C"]

    def test_duplicate_class_last_declaration_wins(self, generator, source_tree):
        """Test a class declared in two files keeps the later file's row."""
        root = source_tree(
            {
                "a/Dup.php": "<?php class Dup extends First {}",
                "b/Dup.php": "<?php class Dup extends Second {}",
            }
        )

        ast_map = generator.generate_ast_map(AnalysisConfig(paths=[str(root)]))

        assert [e.target for e in ast_map.get_class_inherits("Dup")] == ["Second"]

    def test_namespaced_project(self, generator, source_tree):
        """Test names are resolved across namespaced files."""
        root = source_tree(
            {
                "Model/Entity.php": "<?php\nnamespace App\\Model;\n\ninterface Entity {}\n",
                "Model/Base.php": (
                    "<?php\nnamespace App\\Model;\n\n"
                    "abstract class Base implements Entity {}\n"
                ),
                "Model/User.php": (
                    "<?php\nnamespace App\\Model;\n\n"
                    "use App\\Model\\Base as Model;\n\n"
                    "final class User extends Model {}\n"
                ),
            }
        )

        ast_map = generator.generate_ast_map(AnalysisConfig(paths=[str(root)]))

        assert ast_map.get_inheritance_chain("App\\Model\\User") == [
            "App\\Model\\Base",
            "App\\Model\\Entity",
        ]
        assert ast_map.inherits_from("App\\Model\\User", "App\\Model\\Entity")

    def test_runs_under_host_logging(self, generator, source_tree, monkeypatch):
        """Test a run adopts an existing structlog setup instead of failing."""
        monkeypatch.setattr(LoggingService, "_configured", False)
        monkeypatch.setattr(LoggingService, "_config", None)
        processors = structlog.get_config()["processors"]
        root = source_tree(INHERIT_FIXTURES)

        ast_map = generator.generate_ast_map(AnalysisConfig(paths=[str(root)]))

        assert "ClassInheritA" in ast_map.class_names()
        assert LoggingService.is_configured()
        assert LoggingService._config is None
        assert structlog.get_config()["processors"] is processors

    def test_excluded_files(self, generator, source_tree):
        """Test exclusion patterns drop matching files."""
        files = dict(INHERIT_FIXTURES)
        files["Tests/ClassInheritTest.php"] = "<?php class ClassInheritTest extends ClassInheritA {}"
        root = source_tree(files)

        ast_map = generator.generate_ast_map(
            AnalysisConfig(paths=[str(root)], exclude_files=["/Tests/"])
        )

        assert "ClassInheritTest" not in ast_map.class_names()

    def test_python_project(self, generator, source_tree):
        """Test a Python package is mapped with module-qualified names."""
        root = source_tree(
            {
                "shop/__init__.py": "",
                "shop/base.py": "class Model:\n    pass\n",
                "shop/order.py": (
                    "from .base import Model\n\n\n"
                    "class Order(Model):\n    pass\n\n\n"
                    "class PriorityOrder(Order):\n    pass\n"
                ),
            }
        )

        ast_map = generator.generate_ast_map(
            AnalysisConfig(paths=[str(root)], file_suffix=".py")
        )

        assert ast_map.get_inheritance_chain("shop.order.PriorityOrder") == [
            "shop.order.Order",
            "shop.base.Model",
        ]
        assert ast_map.get_flattened_inherits("shop.order.PriorityOrder") == ("shop.base.Model",)


class TestGeneratorCache:
    """Tests for cache reuse across runs."""

    def test_second_run_hits_cache(self, generator, source_tree, settings, events):
        """Test an unchanged file set is served from the artifact."""
        root = source_tree(INHERIT_FIXTURES)
        config = AnalysisConfig(paths=[str(root)])

        first = generator.generate_ast_map(config)
        artifact = generator.cache.path_for(first.cache_key)
        artifact_bytes = artifact.read_bytes()
        events.clear()

        second = generator.generate_ast_map(config)

        assert second == first
        assert types_of(events) == [PreCreateAstMapEvent, PostCreateAstMapEvent]
        assert artifact.read_bytes() == artifact_bytes
        assert list(settings.cache_dir.iterdir()) == [artifact]
        assert generator.cache.get_statistics()["hits"] == 1

    def test_changed_content_misses_cache(self, generator, source_tree):
        """Test editing a file produces a new key and a fresh map."""
        root = source_tree(INHERIT_FIXTURES)
        config = AnalysisConfig(paths=[str(root)])
        first = generator.generate_ast_map(config)

        (root / "ClassInheritD.php").write_text("<?php\n\nclass ClassInheritD extends ClassInheritE {}\n")
        second = generator.generate_ast_map(config)

        assert second.cache_key != first.cache_key
        assert "ClassInheritE" in second.get_flattened_inherits("ClassInheritA")

    def test_renamed_module_misses_cache(self, generator, source_tree, events):
        """Test renaming a Python module rebuilds identities and paths."""
        root = source_tree(
            {
                "shop/__init__.py": "",
                "shop/base.py": "class Model:\n    pass\n",
                "shop/order.py": "from .base import Model\n\n\nclass Order(Model):\n    pass\n",
            }
        )
        config = AnalysisConfig(paths=[str(root)], file_suffix=".py")
        first = generator.generate_ast_map(config)

        (root / "shop" / "order.py").rename(root / "shop" / "orders.py")
        events.clear()
        second = generator.generate_ast_map(config)

        assert second.cache_key != first.cache_key
        assert "shop.orders.Order" in second.class_names()
        assert "shop.order.Order" not in second.class_names()
        assert second.get_ast(str(root / "shop" / "orders.py")) is not None
        assert second.get_ast(str(root / "shop" / "order.py")) is None
        assert types_of(events).count(AstFileAnalyzedEvent) == 3

    def test_identical_trees_at_two_roots_keep_own_paths(self, generator, tmp_path):
        """Test the same code checked out twice is mapped per location."""
        for name in ("a", "b"):
            (tmp_path / name).mkdir()
            (tmp_path / name / "X.php").write_text("<?php\n\nclass X extends Y {}\n")

        first = generator.generate_ast_map(AnalysisConfig(paths=[str(tmp_path / "a")]))
        second = generator.generate_ast_map(AnalysisConfig(paths=[str(tmp_path / "b")]))

        assert second.cache_key != first.cache_key
        assert second.get_ast(str(tmp_path / "b" / "X.php")) is not None
        assert second.get_ast(str(tmp_path / "a" / "X.php")) is None

    def test_fresh_generator_reads_artifact(self, dispatcher, settings, source_tree, events):
        """Test a new generator instance reuses a stored artifact."""
        root = source_tree(INHERIT_FIXTURES)
        config = AnalysisConfig(paths=[str(root)])
        first = AstMapGenerator(dispatcher=dispatcher, settings=settings).generate_ast_map(config)
        events.clear()

        second = AstMapGenerator(dispatcher=dispatcher, settings=settings).generate_ast_map(config)

        assert second == first
        assert AstFileAnalyzedEvent not in types_of(events)

    def test_cache_disabled(self, dispatcher, tmp_path, source_tree, events):
        """Test no artifact is written when caching is off."""
        settings = ArchmapSettings(cache_enabled=False, cache_dir=tmp_path / "cache")
        generator = AstMapGenerator(dispatcher=dispatcher, settings=settings)
        root = source_tree(INHERIT_FIXTURES)

        generator.generate_ast_map(AnalysisConfig(paths=[str(root)]))
        events.clear()
        generator.generate_ast_map(AnalysisConfig(paths=[str(root)]))

        assert generator.cache is None
        assert not (tmp_path / "cache").exists()
        assert types_of(events).count(AstFileAnalyzedEvent) == 4


class TestGeneratorErrors:
    """Tests for failing runs."""

    def test_no_source_files(self, generator, tmp_path, events):
        """Test an empty tree raises NoSourceFilesError before any event."""
        (tmp_path / "empty").mkdir()

        with pytest.raises(NoSourceFilesError):
            generator.generate_ast_map(AnalysisConfig(paths=[str(tmp_path / "empty")]))

        assert events == []

    def test_missing_root(self, generator, tmp_path):
        """Test a missing root directory raises CollectionError."""
        with pytest.raises(CollectionError):
            generator.generate_ast_map(AnalysisConfig(paths=[str(tmp_path / "missing")]))

    def test_unsupported_suffix(self, generator, source_tree, events):
        """Test a suffix without an extractor raises ValidationError."""
        root = source_tree({"notes.txt": "class A extends B {}"})

        with pytest.raises(ValidationError):
            generator.generate_ast_map(AnalysisConfig(paths=[str(root)], file_suffix=".txt"))

        assert events == []

    def test_listener_exception_aborts_run(self, generator, dispatcher, source_tree):
        """Test listener failures propagate out of generate_ast_map."""

        def explode(event):
            raise RuntimeError("listener failed")

        dispatcher.add_listener(PreCreateAstMapEvent, explode)
        root = source_tree(INHERIT_FIXTURES)

        with pytest.raises(RuntimeError, match="listener failed"):
            generator.generate_ast_map(AnalysisConfig(paths=[str(root)]))
