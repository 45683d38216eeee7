"""
Component discovery: matchers, supporting types strategies, finder strategies,
the component finder and relationship inference.
"""
from .component_finder import ComponentFinder
from .matchers import (
    AnnotationTypeMatcher,
    CustomTypeMatcher,
    ExtendsClassTypeMatcher,
    ImplementsInterfaceTypeMatcher,
    NameSuffixTypeMatcher,
    RegexTypeMatcher,
    TypeMatcher,
)
from .resolver import RelationshipResolver
from .strategies import (
    AnnotationComponentFinderStrategy,
    ComponentFinderStrategy,
    TypeBasedComponentFinderStrategy,
)
from .supporting_types import (
    ComponentPackageSupportingTypesStrategy,
    FirstImplementationOfInterfaceSupportingTypesStrategy,
    ReferencedTypesSupportingTypesStrategy,
    SupportingTypesStrategy,
)

__all__ = [
    "AnnotationComponentFinderStrategy",
    "AnnotationTypeMatcher",
    "ComponentFinder",
    "ComponentFinderStrategy",
    "ComponentPackageSupportingTypesStrategy",
    "CustomTypeMatcher",
    "ExtendsClassTypeMatcher",
    "FirstImplementationOfInterfaceSupportingTypesStrategy",
    "ImplementsInterfaceTypeMatcher",
    "NameSuffixTypeMatcher",
    "ReferencedTypesSupportingTypesStrategy",
    "RegexTypeMatcher",
    "RelationshipResolver",
    "SupportingTypesStrategy",
    "TypeBasedComponentFinderStrategy",
    "TypeMatcher",
]
