"""
Supporting types strategies.

A supporting types strategy attributes additional implementation types to a
component that has already been discovered through its primary type.
"""
import logging
from abc import ABC, abstractmethod
from collections import deque
from typing import TYPE_CHECKING, FrozenSet, List

from archscan.core.error_handling import handle_type_resolution_errors
from archscan.models.architecture import Component
from archscan.repository.base import RepositoryCapability, in_scope

if TYPE_CHECKING:
    from archscan.finder.component_finder import ComponentFinder

logger = logging.getLogger(__name__)

class SupportingTypesStrategy(ABC):
    """
    Interface for supporting types strategies.

    Strategies receive the component and the finder running them, which gives
    access to the scope, the container and the type repository.
    """

    required_capabilities: FrozenSet[RepositoryCapability] = frozenset()

    @abstractmethod
    def find_supporting_types(self, component: Component, component_finder: 'ComponentFinder') -> List[str]:
        """
        Find the supporting types of a component.

        Args:
            component: Component whose primary type is registered
            component_finder: Finder currently running

        Returns:
            Fully-qualified type names, in discovery order, without duplicates
        """
        pass

    def __repr__(self) -> str:
        return f'{self.__class__.__name__}()'

class FirstImplementationOfInterfaceSupportingTypesStrategy(SupportingTypesStrategy):
    """
    Adds the first concrete implementation of an interface or abstract primary type.

    Candidates are taken from the finder's scope in enumeration order. Concrete
    primary types get no supporting types from this strategy.
    """

    required_capabilities = frozenset({RepositoryCapability.ABSTRACTNESS, RepositoryCapability.ASSIGNABILITY})

    @handle_type_resolution_errors(list)
    def find_supporting_types(self, component: Component, component_finder: 'ComponentFinder') -> List[str]:
        type_repository = component_finder.type_repository
        if not type_repository.is_interface_or_abstract(component.type):
            return []
        for candidate in type_repository.list_types(component_finder.scope):
            if candidate == component.type or component_finder.is_excluded(candidate):
                continue
            if type_repository.is_interface_or_abstract(candidate):
                continue
            if type_repository.is_assignable_to(candidate, component.type):
                logger.debug(f"First implementation of '{component.type}' is '{candidate}'")
                return [candidate]
        return []

class ComponentPackageSupportingTypesStrategy(SupportingTypesStrategy):
    """Adds every other type declared in the primary type's package."""

    @handle_type_resolution_errors(list)
    def find_supporting_types(self, component: Component, component_finder: 'ComponentFinder') -> List[str]:
        type_repository = component_finder.type_repository
        package = type_repository.get_package(component.type)
        return [
            type_name
            for type_name in type_repository.list_types(package)
            if type_name != component.type
            and not component_finder.is_excluded(type_name)
            and type_repository.get_package(type_name) == package
        ]

class ReferencedTypesSupportingTypesStrategy(SupportingTypesStrategy):
    """
    Adds the types referenced by the component's code, within the finder's scope.

    References are attribute, parameter and return annotations plus supertypes.
    The walk starts from every code element the component already has, so it
    extends what earlier strategies found. Types owned by other components are
    neither added nor followed.
    """

    required_capabilities = frozenset({RepositoryCapability.REFERENCES, RepositoryCapability.SUPERTYPES})

    def __init__(self, include_indirectly_referenced_types: bool = True):
        self.include_indirectly_referenced_types = include_indirectly_referenced_types

    def find_supporting_types(self, component: Component, component_finder: 'ComponentFinder') -> List[str]:
        type_repository = component_finder.type_repository
        container = component_finder.container
        seeds = component.types
        visited = set(seeds)
        pending = deque(seeds)
        supporting: List[str] = []
        while pending:
            type_name = pending.popleft()
            for referenced in self._referenced_types(component_finder, type_name):
                if referenced in visited:
                    continue
                visited.add(referenced)
                if not in_scope(referenced, component_finder.scope) or not type_repository.contains(referenced):
                    continue
                if component_finder.is_excluded(referenced):
                    continue
                owner = container.get_component_of_type(referenced)
                if owner is not None and owner is not component:
                    continue
                supporting.append(referenced)
                if self.include_indirectly_referenced_types:
                    pending.append(referenced)
        return supporting

    @handle_type_resolution_errors(list)
    def _referenced_types(self, component_finder: 'ComponentFinder', type_name: str) -> List[str]:
        return component_finder.type_repository.get_direct_referenced_types(type_name)

    def __repr__(self) -> str:
        return f'ReferencedTypesSupportingTypesStrategy(include_indirectly_referenced_types={self.include_indirectly_referenced_types})'
