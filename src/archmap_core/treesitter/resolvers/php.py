"""
PHP name-resolution pass.

Resolves class-like declaration names and every class referenced from an
extends / implements / trait-use clause to its fully-qualified form,
following PHP's namespace rules:

- ``\\Foo\\Bar`` is already fully qualified
- ``namespace\\Bar`` is relative to the current namespace
- ``Foo\\Bar`` and ``Bar`` expand through a matching ``use`` alias
  (aliases are case-insensitive), otherwise the current namespace is
  prepended

License: MIT
"""

from typing import Dict, List, Optional

import structlog
from tree_sitter import Node, Tree

from ..extractors.php import PHP_CLASS_LIKE_TYPES, PHP_INHERIT_CLAUSES, PHP_NAME_TYPES
from .base import BaseNameResolver, ResolvedNames

logger = structlog.get_logger(__name__)

# Clause node types of `use` statements (grammar releases differ in naming)
_USE_CLAUSE_TYPES = ("namespace_use_clause", "namespace_use_group_clause")
_IMPORTED_NAME_TYPES = ("name", "qualified_name", "namespace_name")
_NON_CLASS_IMPORT_KEYWORDS = ("function", "const")


class _NamespaceScope:
    """Current namespace and the class aliases imported into it."""

    def __init__(self, namespace: str = "") -> None:
        self.namespace = namespace.strip().strip("\\")
        self.aliases: Dict[str, str] = {}

    def qualify(self, name: str) -> str:
        return f"{self.namespace}\\{name}" if self.namespace else name

    def add_alias(self, target: str, alias: Optional[str] = None) -> None:
        target = target.strip().lstrip("\\")
        if not target:
            return
        alias = (alias or target.rsplit("\\", 1)[-1]).strip()
        self.aliases[alias.lower()] = target

    def resolve_class_name(self, raw_name: str) -> str:
        name = "".join(raw_name.split())
        if name.startswith("\\"):
            return name[1:]
        if name.lower().startswith("namespace\\"):
            return self.qualify(name[len("namespace\\"):])

        head, separator, rest = name.partition("\\")
        target = self.aliases.get(head.lower())
        if target is not None:
            return f"{target}\\{rest}" if separator else target
        return self.qualify(name)


class PhpNameResolver(BaseNameResolver):
    """
    Name-resolution pass for PHP trees.

    Both namespace forms are supported: ``namespace Foo;`` switches the
    namespace for the statements that follow it, ``namespace Foo { ... }``
    scopes it to the block. Each namespace starts with an empty alias table.

    Example:
        >>> names = PhpNameResolver().resolve(tree, source, "/src/A.php")
        >>> names.declared_names()
        ['App\\\\Model\\\\A']
    """

    @property
    def language_name(self) -> str:
        return "php"

    def resolve(self, tree: Tree, source: bytes, file_path: str) -> ResolvedNames:
        names = ResolvedNames()
        scope = _NamespaceScope()

        for child in tree.root_node.children:
            if child.type == "namespace_definition":
                namespace = self._namespace_name(child, source)
                body = child.child_by_field_name("body")
                if body is None:
                    scope = _NamespaceScope(namespace)
                else:
                    self._walk(body, _NamespaceScope(namespace), names, source)
                continue
            self._walk(child, scope, names, source)

        logger.debug(
            "php_names_resolved",
            file_path=file_path,
            declared=len(names.declared_names()),
            referenced=len(names.referenced_names()),
        )
        return names

    def _walk(self, root: Node, scope: _NamespaceScope, names: ResolvedNames, source: bytes) -> None:
        stack: List[Node] = [root]
        while stack:
            node = stack.pop()

            if node.type == "namespace_use_declaration":
                self._import_aliases(node, source, scope)
                continue

            if node.type in PHP_CLASS_LIKE_TYPES:
                name_node = node.child_by_field_name("name")
                if name_node is not None:
                    names.declare(node, scope.qualify(self._get_node_text(name_node, source)))
            elif node.type in PHP_INHERIT_CLAUSES:
                for child in node.named_children:
                    if child.type in PHP_NAME_TYPES:
                        names.refer(
                            child, scope.resolve_class_name(self._get_node_text(child, source))
                        )

            stack.extend(reversed(node.children))

    def _namespace_name(self, node: Node, source: bytes) -> str:
        name_node = node.child_by_field_name("name")
        return self._get_node_text(name_node, source) if name_node is not None else ""

    def _import_aliases(self, node: Node, source: bytes, scope: _NamespaceScope) -> None:
        """
        Register the class aliases of one ``use`` statement.

        Handles ``use A\\B;``, ``use A\\B as C, D\\E;`` and group imports
        ``use A\\{B, C as D};``. Function and constant imports are ignored.
        """
        if _imports_non_class(node):
            return

        prefix = ""
        for child in node.named_children:
            if child.type == "namespace_name":
                prefix = self._get_node_text(child, source)
            elif child.type in _USE_CLAUSE_TYPES:
                self._import_clause(child, source, scope)
            elif child.type == "namespace_use_group":
                for clause in child.named_children:
                    if clause.type in _USE_CLAUSE_TYPES and not _imports_non_class(clause):
                        self._import_clause(clause, source, scope, prefix)

    def _import_clause(
        self, clause: Node, source: bytes, scope: _NamespaceScope, prefix: str = ""
    ) -> None:
        alias_node = clause.child_by_field_name("alias")
        target: Optional[str] = None

        for child in clause.named_children:
            if child.type == "namespace_aliasing_clause" and child.named_children:
                alias_node = child.named_children[-1]
            elif (
                target is None
                and child.type in _IMPORTED_NAME_TYPES
                and (alias_node is None or child.start_byte != alias_node.start_byte)
            ):
                target = "".join(self._get_node_text(child, source).split())

        if target is None:
            return
        if prefix:
            target = prefix.strip().strip("\\") + "\\" + target
        alias = self._get_node_text(alias_node, source) if alias_node is not None else None
        scope.add_alias(target, alias)


def _imports_non_class(node: Node) -> bool:
    """True for ``use function`` / ``use const`` statements and clauses."""
    if node.child_by_field_name("type") is not None:
        return True
    return any(
        not child.is_named and child.type.lower() in _NON_CLASS_IMPORT_KEYWORDS
        for child in node.children
    )


__all__ = ["PhpNameResolver"]
