"""
Component finder strategies.

A component finder strategy decides which types of a scope are components,
registers them in the container, attributes supporting types to them and
finally triggers relationship inference.
"""
import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, FrozenSet, Iterable, List, Optional, Tuple

from archscan.core.config import config
from archscan.core.error_handling import InvalidParameterError, InvalidTypeError, TypeResolutionError
from archscan.finder.matchers import TypeMatcher
from archscan.finder.resolver import RelationshipResolver
from archscan.finder.supporting_types import (
    FirstImplementationOfInterfaceSupportingTypesStrategy,
    SupportingTypesStrategy,
)
from archscan.models.architecture import Component, Relationship
from archscan.models.enums import CodeElementRole
from archscan.models.type_info import TypeInfo
from archscan.repository.base import RepositoryCapability, TypeRepository

if TYPE_CHECKING:
    from archscan.finder.component_finder import ComponentFinder

logger = logging.getLogger(__name__)

class ComponentFinderStrategy(ABC):
    """
    Base class for component finder strategies.

    Subclasses only decide whether a type is a component (``match``); the
    registration, supporting types and relationship steps are shared.
    """

    required_capabilities: FrozenSet[RepositoryCapability] = frozenset()

    def __init__(self, supporting_types_strategies: Iterable[SupportingTypesStrategy] = ()):
        self.supporting_types_strategies: List[SupportingTypesStrategy] = []
        for strategy in supporting_types_strategies:
            self.add_supporting_types_strategy(strategy)

    def add_supporting_types_strategy(self, strategy: SupportingTypesStrategy) -> 'ComponentFinderStrategy':
        if not isinstance(strategy, SupportingTypesStrategy):
            raise InvalidTypeError('strategy', strategy, SupportingTypesStrategy)
        self.supporting_types_strategies.append(strategy)
        return self

    def get_required_capabilities(self) -> FrozenSet[RepositoryCapability]:
        """All repository capabilities needed by this strategy, its helpers and relationship inference."""
        required = set(self.required_capabilities) | set(RelationshipResolver.required_capabilities)
        for strategy in self.supporting_types_strategies:
            required.update(strategy.required_capabilities)
        return frozenset(required)

    def bind(self, type_repository: TypeRepository) -> None:
        """Prepare the strategy for scans against ``type_repository``."""
        pass

    @abstractmethod
    def match(self, type_name: str, type_info: TypeInfo, type_repository: TypeRepository) -> Optional[Tuple[str, str]]:
        """
        Decide whether a type is a component.

        Returns:
            Tuple of (description, technology) for a component, None otherwise
        """
        pass

    def find_components(self, component_finder: 'ComponentFinder') -> List[Component]:
        """
        Register the components of the finder's scope in its container.

        Types that already belong to a component are not registered again; the
        existing component is returned instead.

        Returns:
            Components matched in this run, in scope enumeration order
        """
        container = component_finder.container
        type_repository = component_finder.type_repository
        components: List[Component] = []
        for type_name in type_repository.list_types(component_finder.scope):
            if component_finder.is_excluded(type_name):
                continue
            type_info = type_repository.get_type(type_name)
            details = self.match(type_name, type_info, type_repository)
            if details is None:
                continue
            description, technology = details
            component = container.add_component(
                name=type_info.simple_name,
                type=type_name,
                description=description,
                technology=technology,
                source_path=type_info.source_path,
                package=type_info.package,
            )
            if not any(found is component for found in components):
                components.append(component)
        for component in components:
            self.add_supporting_types(component, component_finder)
        logger.debug(f"{self!r} found {len(components)} components in scope '{component_finder.scope}'")
        return components

    def add_supporting_types(self, component: Component, component_finder: 'ComponentFinder') -> None:
        container = component_finder.container
        type_repository = component_finder.type_repository
        for strategy in self.supporting_types_strategies:
            for type_name in strategy.find_supporting_types(component, component_finder):
                if component_finder.is_excluded(type_name):
                    continue
                try:
                    type_info = type_repository.get_type(type_name)
                except TypeResolutionError as e:
                    logger.debug(f"Skipping supporting type of '{component.name}': {e}")
                    continue
                container.add_code_element(
                    component,
                    type_name,
                    CodeElementRole.SUPPORTING,
                    package=type_info.package,
                    source_path=type_info.source_path,
                )

    def find_dependencies(self, component_finder: 'ComponentFinder') -> List[Relationship]:
        """Add relationships between all components currently in the finder's container."""
        resolver = RelationshipResolver(component_finder.container, component_finder.type_repository)
        return resolver.resolve()

    def __repr__(self) -> str:
        return f'{self.__class__.__name__}()'

class TypeBasedComponentFinderStrategy(ComponentFinderStrategy):
    """
    Finds components with type matchers.

    A type becomes a component when any matcher accepts it; the first accepting
    matcher supplies description and technology. No supporting types are
    resolved unless strategies are passed explicitly.
    """

    def __init__(self, *type_matchers: TypeMatcher,
                 supporting_types_strategies: Iterable[SupportingTypesStrategy] = ()):
        if not type_matchers:
            raise InvalidParameterError('type_matchers', type_matchers, 'at least one type matcher')
        for matcher in type_matchers:
            if not isinstance(matcher, TypeMatcher):
                raise InvalidTypeError('type_matcher', matcher, TypeMatcher)
        super().__init__(supporting_types_strategies)
        self.type_matchers: List[TypeMatcher] = list(type_matchers)

    def get_required_capabilities(self) -> FrozenSet[RepositoryCapability]:
        required = set(super().get_required_capabilities())
        for matcher in self.type_matchers:
            required.update(matcher.required_capabilities)
        return frozenset(required)

    def bind(self, type_repository: TypeRepository) -> None:
        for matcher in self.type_matchers:
            matcher.bind(type_repository)

    def match(self, type_name: str, type_info: TypeInfo, type_repository: TypeRepository) -> Optional[Tuple[str, str]]:
        for matcher in self.type_matchers:
            if matcher.matches(type_name, type_info):
                return (matcher.description, matcher.technology)
        return None

    def __repr__(self) -> str:
        return f"TypeBasedComponentFinderStrategy({', '.join(repr(m) for m in self.type_matchers)})"

class AnnotationComponentFinderStrategy(ComponentFinderStrategy):
    """
    Finds components marked with a class decorator.

    The marker's ``description`` and ``technology`` keyword arguments populate
    the component, e.g. ``@component(description="Stores orders")``. Without
    explicit supporting types strategies, the first implementation of an
    interface or abstract component type is added.
    """

    required_capabilities = frozenset({RepositoryCapability.MARKERS})

    def __init__(self, *supporting_types_strategies: SupportingTypesStrategy, marker: Optional[str] = None):
        if not supporting_types_strategies:
            supporting_types_strategies = (FirstImplementationOfInterfaceSupportingTypesStrategy(),)
        super().__init__(supporting_types_strategies)
        self.marker = marker if marker is not None else config.get('discovery', 'marker', 'component')
        if not self.marker:
            raise InvalidParameterError('marker', self.marker, 'a non-empty marker name')

    def match(self, type_name: str, type_info: TypeInfo, type_repository: TypeRepository) -> Optional[Tuple[str, str]]:
        if not type_repository.has_marker(type_name, self.marker):
            return None
        arguments = type_repository.get_marker_arguments(type_name, self.marker)
        return (arguments.get('description', arguments.get('value', '')), arguments.get('technology', ''))

    def __repr__(self) -> str:
        return f'AnnotationComponentFinderStrategy({self.marker!r})'
