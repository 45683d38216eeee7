from .models.enums import CodeElementRole, TypeKind
from .models.architecture import Component, Container, Relationship, SoftwareSystem
from .models.code_element import CodeElement
from .finder import (
    AnnotationComponentFinderStrategy,
    ComponentFinder,
    ComponentPackageSupportingTypesStrategy,
    FirstImplementationOfInterfaceSupportingTypesStrategy,
    NameSuffixTypeMatcher,
    ReferencedTypesSupportingTypesStrategy,
    TypeBasedComponentFinderStrategy,
)
from .repository import InMemoryTypeRepository, PythonSourceTypeRepository, TypeRepository

__version__ = "1.0.0"
__all__ = [
    "AnnotationComponentFinderStrategy",
    "CodeElement",
    "CodeElementRole",
    "Component",
    "ComponentFinder",
    "ComponentPackageSupportingTypesStrategy",
    "Container",
    "FirstImplementationOfInterfaceSupportingTypesStrategy",
    "InMemoryTypeRepository",
    "NameSuffixTypeMatcher",
    "PythonSourceTypeRepository",
    "ReferencedTypesSupportingTypesStrategy",
    "Relationship",
    "SoftwareSystem",
    "TypeBasedComponentFinderStrategy",
    "TypeKind",
    "TypeRepository",
]
