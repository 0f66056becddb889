"""
Python name-resolution pass.

Declared classes are named ``<module>.<qualname>``, where the module name
is derived from the file's position inside its package tree. Base-class
expressions resolve through, in order: classes visible in the enclosing
scope, module-level classes, imported names, builtins. Anything else is
taken to be a module-level name of the current module.

License: MIT
"""

import builtins
import re
from pathlib import Path
from typing import Dict, List, Tuple

import structlog
from tree_sitter import Node, Tree

from ..extractors.python import PYTHON_BASE_EXPRESSION_TYPES, PYTHON_CLASS_TYPE
from .base import BaseNameResolver, ResolvedNames

logger = structlog.get_logger(__name__)

_DOTTED_NAME = re.compile(r"^[^\W\d][\w]*(\.[^\W\d][\w]*)*$")
_PACKAGE_MARKERS = ("__init__.py", "__init__.pyi")


def module_name_for(file_path: str) -> Tuple[str, bool]:
    """
    Derive the dotted module name of a file from its package tree.

    Walks up the parent directories while they contain ``__init__.py``.

    Returns:
        Tuple of (module name, whether the file is a package ``__init__``).

    Example:
        >>> module_name_for("/src/shop/models/order.py")
        ('shop.models.order', False)
    """
    path = Path(file_path)
    is_package = path.stem == "__init__"
    parts: List[str] = [] if is_package else [path.stem]

    directory = path.parent
    while any((directory / marker).is_file() for marker in _PACKAGE_MARKERS):
        parts.insert(0, directory.name)
        if directory.parent == directory:
            break
        directory = directory.parent

    return ".".join(part for part in parts if part), is_package


class PythonNameResolver(BaseNameResolver):
    """
    Name-resolution pass for Python trees.

    Imports are collected over the whole module into a single alias table,
    so an import inside a function body also binds for base-class lookup.
    Subscripted bases (``Generic[T]``) resolve through the subscripted
    value. Keyword arguments (``metaclass=...``) and computed bases are not
    class references and are skipped.
    """

    @property
    def language_name(self) -> str:
        return "python"

    def resolve(self, tree: Tree, source: bytes, file_path: str) -> ResolvedNames:
        names = ResolvedNames()
        module, is_package = module_name_for(file_path)
        imports = self._collect_imports(tree.root_node, source, module, is_package)

        root = tree.root_node
        module_classes = self._classes_in_block(root, source, module)
        stack: List[Tuple[Node, str, Dict[str, str]]] = [
            (child, module, module_classes) for child in reversed(root.children)
        ]

        while stack:
            node, prefix, local = stack.pop()

            if node.type == PYTHON_CLASS_TYPE:
                class_name = self._field_text(node, "name", source)
                qualified = f"{prefix}.{class_name}" if prefix else class_name
                names.declare(node, qualified)

                # Bases are evaluated before the class name is bound.
                visible = {k: v for k, v in local.items() if k != class_name}
                enclosing = visible if local is module_classes else module_classes
                self._resolve_bases(node, source, names, visible, enclosing, imports, module)
                self._push_body(stack, node, source, qualified)
            elif node.type == "function_definition":
                function_name = self._field_text(node, "name", source)
                scope = f"{prefix}.{function_name}" if prefix else function_name
                self._push_body(stack, node, source, scope)
            else:
                stack.extend((child, prefix, local) for child in reversed(node.children))

        logger.debug(
            "python_names_resolved",
            file_path=file_path,
            module=module,
            declared=len(names.declared_names()),
            referenced=len(names.referenced_names()),
        )
        return names

    def _push_body(
        self,
        stack: List[Tuple[Node, str, Dict[str, str]]],
        node: Node,
        source: bytes,
        prefix: str,
    ) -> None:
        body = node.child_by_field_name("body")
        if body is None:
            return
        local = self._classes_in_block(body, source, prefix)
        stack.extend((child, prefix, local) for child in reversed(body.children))

    def _classes_in_block(self, block: Node, source: bytes, prefix: str) -> Dict[str, str]:
        """Map names of classes defined directly in a block to their qualnames."""
        classes: Dict[str, str] = {}
        for statement in block.named_children:
            if statement.type == "decorated_definition":
                statement = statement.child_by_field_name("definition") or statement
            if statement.type != PYTHON_CLASS_TYPE:
                continue
            name = self._field_text(statement, "name", source)
            if name:
                classes[name] = f"{prefix}.{name}" if prefix else name
        return classes

    def _resolve_bases(
        self,
        node: Node,
        source: bytes,
        names: ResolvedNames,
        local: Dict[str, str],
        module_classes: Dict[str, str],
        imports: Dict[str, str],
        module: str,
    ) -> None:
        superclasses = node.child_by_field_name("superclasses")
        if superclasses is None:
            return

        for argument in superclasses.named_children:
            target = argument
            if argument.type == "subscript":
                target = argument.child_by_field_name("value")
            if target is None or target.type not in PYTHON_BASE_EXPRESSION_TYPES:
                continue

            dotted = "".join(self._get_node_text(target, source).split())
            if not _DOTTED_NAME.match(dotted):
                continue

            names.refer(
                argument,
                self._qualify_reference(dotted, local, module_classes, imports, module),
            )

    @staticmethod
    def _qualify_reference(
        dotted: str,
        local: Dict[str, str],
        module_classes: Dict[str, str],
        imports: Dict[str, str],
        module: str,
    ) -> str:
        head, separator, rest = dotted.partition(".")

        if head in local:
            base = local[head]
        elif head in module_classes:
            base = module_classes[head]
        elif head in imports:
            base = imports[head]
        elif hasattr(builtins, head):
            base = f"builtins.{head}"
        else:
            base = f"{module}.{head}" if module else head

        return f"{base}.{rest}" if separator else base

    def _collect_imports(
        self, root: Node, source: bytes, module: str, is_package: bool
    ) -> Dict[str, str]:
        """Build the module-wide table of names bound by import statements."""
        imports: Dict[str, str] = {}
        stack: List[Node] = [root]

        while stack:
            node = stack.pop()

            if node.type == "import_statement":
                for child in node.children_by_field_name("name"):
                    if child.type == "aliased_import":
                        target = self._field_text(child, "name", source)
                        imports[self._field_text(child, "alias", source)] = target
                    else:
                        target = self._get_node_text(child, source)
                        head = target.split(".", 1)[0]
                        imports[head] = head
                continue

            if node.type == "import_from_statement":
                module_node = node.child_by_field_name("module_name")
                if module_node is None:
                    continue
                origin = self._absolute_module(
                    self._get_node_text(module_node, source), module, is_package
                )
                for child in node.children_by_field_name("name"):
                    if child.type == "aliased_import":
                        name = self._field_text(child, "name", source)
                        bound = self._field_text(child, "alias", source)
                    else:
                        name = self._get_node_text(child, source)
                        bound = name
                    imports[bound] = f"{origin}.{name}" if origin else name
                continue

            stack.extend(node.children)

        return imports

    @staticmethod
    def _absolute_module(module_text: str, module: str, is_package: bool) -> str:
        """Turn a possibly relative ``from`` module into an absolute dotted name."""
        module_text = "".join(module_text.split())
        level = len(module_text) - len(module_text.lstrip("."))
        relative = module_text[level:]
        if level == 0:
            return relative

        package_parts = module.split(".") if module else []
        if not is_package:
            package_parts = package_parts[:-1]
        if level > 1:
            package_parts = package_parts[: max(0, len(package_parts) - (level - 1))]

        if relative:
            package_parts.append(relative)
        return ".".join(package_parts)

    def _field_text(self, node: Node, field: str, source: bytes) -> str:
        child = node.child_by_field_name(field)
        return self._get_node_text(child, source) if child is not None else ""


__all__ = ["PythonNameResolver", "module_name_for"]
