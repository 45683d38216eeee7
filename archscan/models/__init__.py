from .architecture import Component, Container, Relationship, SoftwareSystem
from .code_element import CodeElement
from .enums import CodeElementRole, ReferenceKind, TypeKind
from .type_info import MarkerInfo, TypeInfo, TypeReference

__all__ = [
    "CodeElement",
    "CodeElementRole",
    "Component",
    "Container",
    "MarkerInfo",
    "ReferenceKind",
    "Relationship",
    "SoftwareSystem",
    "TypeInfo",
    "TypeKind",
    "TypeReference",
]
