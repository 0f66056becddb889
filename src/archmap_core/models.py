"""Pydantic models for the dependency map.

The map is serialized as-is into the on-disk cache, so every model here is
frozen and JSON round-trippable.
"""

import hashlib
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator


class InheritKind(str, Enum):
    """How a class-like declaration depends on one of its parents."""

    EXTENDS = "extends"
    IMPLEMENTS = "implements"
    USES = "uses"  # PHP trait inclusion


class ClassLikeKind(str, Enum):
    """Declaration kinds that can take part in inheritance."""

    CLASS = "class"
    INTERFACE = "interface"
    TRAIT = "trait"
    ENUM = "enum"


class SourceFile(BaseModel):
    """A collected source file: absolute path plus content hash.

    Two SourceFile objects are the same file when their paths are equal.
    """

    model_config = ConfigDict(frozen=True)

    path: str = Field(..., min_length=1, description="Absolute path to the file")
    content_hash: str = Field(..., min_length=32, description="MD5 hex digest of the content")

    @classmethod
    def from_path(cls, path: str) -> "SourceFile":
        """Read a file once and fingerprint its content.

        Raises:
            OSError: If the file cannot be read.
        """
        content = Path(path).read_bytes()
        return cls(path=str(path), content_hash=hashlib.md5(content).hexdigest())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SourceFile):
            return NotImplemented
        return self.path == other.path

    def __hash__(self) -> int:
        return hash(self.path)


class InheritEdge(BaseModel):
    """A single direct inheritance dependency.

    ``kind`` and ``line`` are provenance only; flattening looks at ``target``.
    """

    model_config = ConfigDict(frozen=True)

    kind: InheritKind = Field(..., description="extends, implements or uses")
    target: str = Field(..., min_length=1, description="Fully-qualified parent name")
    line: int = Field(..., ge=1, description="Line of the declaring class (1-indexed)")


class ClassLikeDeclaration(BaseModel):
    """A class, interface, trait or enum found in a syntax tree."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Fully-qualified name")
    kind: ClassLikeKind = Field(default=ClassLikeKind.CLASS)
    line: int = Field(..., ge=1, description="Declaration line (1-indexed)")
    inherits: Tuple[InheritEdge, ...] = Field(default_factory=tuple)


class AstEntry(BaseModel):
    """Lowered syntax tree of one successfully parsed file.

    Keeps only what the map needs from the tree (the class-like
    declarations), which is what makes the map cacheable without
    re-parsing.
    """

    model_config = ConfigDict(frozen=True)

    path: str = Field(..., min_length=1)
    content_hash: str = Field(..., min_length=32)
    language: str = Field(..., min_length=1)
    declarations: Tuple[ClassLikeDeclaration, ...] = Field(default_factory=tuple)


class DependencyMap(BaseModel):
    """Finished structural map of an analyzed code base.

    Attributes:
        cache_key: Fingerprint of the file set the map was built from
        asts: One AstEntry per successfully parsed file, keyed by path
        direct_inherits: Class identity -> direct inheritance edges
        flattened_inherits: Class identity -> transitively reachable parents,
            disjoint from the direct targets of the same class

    The three tables are read-only mappings; the map cannot change once
    built.
    """

    model_config = ConfigDict(frozen=True)

    cache_key: Optional[str] = None
    asts: Mapping[str, AstEntry] = Field(default_factory=dict, validate_default=True)
    direct_inherits: Mapping[str, Tuple[InheritEdge, ...]] = Field(
        default_factory=dict, validate_default=True
    )
    flattened_inherits: Mapping[str, Tuple[str, ...]] = Field(
        default_factory=dict, validate_default=True
    )

    @field_validator("asts", "direct_inherits", "flattened_inherits", mode="after")
    @classmethod
    def freeze_table(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        """Expose every table as a read-only view."""
        return MappingProxyType(dict(value))

    @field_serializer("asts", "direct_inherits", "flattened_inherits")
    def serialize_table(self, value: Mapping[str, Any]) -> Dict[str, Any]:
        return dict(value)

    def get_ast(self, path: str) -> Optional[AstEntry]:
        return self.asts.get(path)

    def get_class_inherits(self, class_name: str) -> Tuple[InheritEdge, ...]:
        """Direct edges of a class (empty for unknown or external classes)."""
        return self.direct_inherits.get(class_name, ())

    def get_flattened_inherits(self, class_name: str) -> Tuple[str, ...]:
        return self.flattened_inherits.get(class_name, ())

    def get_all_inherits(self) -> Dict[str, Tuple[InheritEdge, ...]]:
        return dict(self.direct_inherits)

    def get_inheritance_chain(self, class_name: str) -> List[str]:
        """Every parent reachable from a class, direct ones first.

        Example:
            For ``A extends B``, ``B extends C`` this returns ``["B", "C"]``
            for ``A``.
        """
        chain: List[str] = []
        seen = set()
        direct_targets = [edge.target for edge in self.get_class_inherits(class_name)]
        for target in direct_targets + list(self.get_flattened_inherits(class_name)):
            if target not in seen:
                seen.add(target)
                chain.append(target)
        return chain

    def inherits_from(self, class_name: str, ancestor: str) -> bool:
        return ancestor in self.get_inheritance_chain(class_name)

    def class_names(self) -> List[str]:
        return list(self.direct_inherits.keys())

    def to_json(self) -> str:
        return self.model_dump_json()

    @classmethod
    def from_json(cls, data: str) -> "DependencyMap":
        return cls.model_validate_json(data)
