"""
Relationship inference between discovered components.

The resolver turns raw type references into relationships. It always scans
every component of the container, not only those found by the finder that
triggered it, so the resulting relationships do not depend on the order in
which independent finders run: an edge appears as soon as both of its
endpoints are known.
"""
import logging
from collections import deque
from typing import Dict, FrozenSet, List

from archscan.core.error_handling import handle_type_resolution_errors
from archscan.models.architecture import Component, Container, Relationship
from archscan.repository.base import RepositoryCapability, TypeRepository

logger = logging.getLogger(__name__)

class RelationshipResolver:
    """
    Adds a relationship from a component to every other component whose types
    are referenced by its code elements.

    A code element's references are its own declared references and
    supertypes, plus everything inherited from its supertypes, whoever owns
    them. At most one relationship is created per ordered pair of
    components, self-references are dropped and references to types unknown
    to the container are ignored.
    """

    required_capabilities: FrozenSet[RepositoryCapability] = frozenset(
        {RepositoryCapability.REFERENCES, RepositoryCapability.SUPERTYPES}
    )

    def __init__(self, container: Container, type_repository: TypeRepository, description: str = ''):
        self.container = container
        self.type_repository = type_repository
        self.description = description

    def resolve(self) -> List[Relationship]:
        """
        Add the relationships implied by the current contents of the container.

        Returns:
            Relationships created by this call; existing ones are not repeated
        """
        added: List[Relationship] = []
        for component in list(self.container.components):
            for destination in self.find_dependencies(component):
                relationship = self.container.add_relationship(component, destination, self.description)
                if relationship is not None:
                    added.append(relationship)
        logger.debug(f'Resolved {len(added)} new relationships across {len(self.container.components)} components')
        return added

    def find_dependencies(self, component: Component) -> List[Component]:
        """Return the other components ``component`` depends on, in discovery order."""
        destinations: Dict[str, Component] = {}
        for element in component.code:
            for referenced in self.efferent_types(element.type):
                owner = self.container.get_component_of_type(referenced)
                if owner is None or owner is component:
                    continue
                destinations.setdefault(owner.type, owner)
        return list(destinations.values())

    def efferent_types(self, type_name: str) -> List[str]:
        """
        Collect the types ``type_name`` depends on, including inherited references.

        Supertypes are always followed transitively. A supertype owned by
        another component is a dependency itself and still passes on the
        references it declares.
        """
        collected: Dict[str, None] = {}
        visited = {type_name}
        pending = deque([type_name])
        while pending:
            current = pending.popleft()
            collected.update(dict.fromkeys(self._referenced_types(current)))
            for supertype in self._supertypes(current):
                if supertype not in visited:
                    visited.add(supertype)
                    pending.append(supertype)
        collected.pop(type_name, None)
        return list(collected)

    @handle_type_resolution_errors(list)
    def _referenced_types(self, type_name: str) -> List[str]:
        return self.type_repository.get_direct_referenced_types(type_name)

    @handle_type_resolution_errors(list)
    def _supertypes(self, type_name: str) -> List[str]:
        return self.type_repository.get_supertypes(type_name)
