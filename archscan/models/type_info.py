"""
Symbol table records describing scanned types.

A TypeInfo is the ahead-of-time replacement for runtime reflection: every
repository adapter reduces its source (parsed files, hand-built tables) to
these records before any component discovery runs.
"""
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from .enums import ReferenceKind, TypeKind

class MarkerInfo(BaseModel):
    """A class decorator recorded on a type, with its literal arguments"""
    name: str
    arguments: Dict[str, str] = Field(default_factory=dict)

class TypeReference(BaseModel):
    """A type named by a declared member of another type"""
    type: str
    kind: ReferenceKind
    member: Optional[str] = None

class TypeInfo(BaseModel):
    """Introspection facts for a single fully-qualified type"""
    name: str
    kind: TypeKind = TypeKind.CLASS
    package: Optional[str] = None
    supertypes: List[str] = Field(default_factory=list)
    references: List[TypeReference] = Field(default_factory=list)
    markers: List[MarkerInfo] = Field(default_factory=list)
    source_path: Optional[str] = None
    line: Optional[int] = None

    def model_post_init(self, __context) -> None:
        if self.package is None:
            self.package = self.name.rpartition('.')[0]

    @property
    def simple_name(self) -> str:
        return self.name.rpartition('.')[2]

    @property
    def is_abstract(self) -> bool:
        return self.kind.is_abstract

    @property
    def referenced_types(self) -> List[str]:
        """Referenced type names in declaration order, without duplicates."""
        seen = {}
        for reference in self.references:
            seen.setdefault(reference.type, None)
        return list(seen)

    def get_marker(self, name: str) -> Optional[MarkerInfo]:
        for marker in self.markers:
            if marker.name == name:
                return marker
        return None

    def has_marker(self, name: str) -> bool:
        return self.get_marker(name) is not None
