"""
Core enumerations for the ArchScan component discovery engine.
"""
from enum import Enum

class CodeElementRole(str, Enum):
    """Role a type plays inside a component"""
    PRIMARY = 'primary'
    SUPPORTING = 'supporting'

class TypeKind(str, Enum):
    """Structural kind of a scanned type"""
    CLASS = 'class'
    ABSTRACT = 'abstract'
    INTERFACE = 'interface'

    @property
    def is_abstract(self) -> bool:
        return self in (TypeKind.ABSTRACT, TypeKind.INTERFACE)

class ReferenceKind(str, Enum):
    """Where a type reference was declared"""
    ATTRIBUTE = 'attribute'
    PARAMETER = 'parameter'
    RETURN_VALUE = 'return_value'
