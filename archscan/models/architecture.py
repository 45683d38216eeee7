"""
Architecture model populated by component discovery.

Holds software systems, their containers, the components discovered inside a
container and the relationships between those components. A container owns
the type-to-component index shared by every finder run against it.
"""
import logging
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, PrivateAttr

from archscan.core.error_handling import InvalidParameterError

from .code_element import CodeElement
from .enums import CodeElementRole

logger = logging.getLogger(__name__)

class Relationship(BaseModel):
    """Directed dependency between two components, identified by their primary types"""
    source: str
    destination: str
    description: str = ''

class Component(BaseModel):
    """A component identified by its fully-qualified primary type"""
    name: str
    type: str
    description: str = ''
    technology: str = ''
    code: List[CodeElement] = Field(default_factory=list)
    relationships: List[Relationship] = Field(default_factory=list)

    @property
    def primary_element(self) -> Optional[CodeElement]:
        return next((element for element in self.code if element.is_primary), None)

    @property
    def supporting_elements(self) -> List[CodeElement]:
        return [element for element in self.code if element.is_supporting]

    @property
    def types(self) -> List[str]:
        return [element.type for element in self.code]

    def get_code_element(self, type_name: str) -> Optional[CodeElement]:
        for element in self.code:
            if element.type == type_name:
                return element
        return None

    def get_relationship(self, destination: 'Component', description: Optional[str] = None) -> Optional[Relationship]:
        for relationship in self.relationships:
            if relationship.destination != destination.type:
                continue
            if description is None or relationship.description == description:
                return relationship
        return None

    def uses(self, destination: 'Component') -> bool:
        return self.get_relationship(destination) is not None

class Container(BaseModel):
    """A deployable unit whose components are discovered from code"""
    name: str
    description: str = ''
    technology: str = ''
    components: List[Component] = Field(default_factory=list)
    _components_by_type: Dict[str, Component] = PrivateAttr(default_factory=dict)
    _software_system: Any = PrivateAttr(default=None)

    @property
    def software_system(self) -> Optional['SoftwareSystem']:
        return self._software_system

    @property
    def relationships(self) -> List[Relationship]:
        return [relationship for component in self.components for relationship in component.relationships]

    def add_component(self, name: str, type: str, description: str = '', technology: str = '',
                      source_path: Optional[str] = None, package: str = '') -> Component:
        """
        Register a component for a primary type.

        Registering a type that is already a component's primary type is a
        no-op and returns that component, so repeated or overlapping finder
        runs never duplicate components. A type held by another component as
        a supporting type is taken away from it and becomes a component of
        its own. All relationships are then dropped, since some were derived
        from the old ownership; the next resolution derives them again.

        Args:
            name: Display name of the component
            type: Fully-qualified primary type
            description: Optional description
            technology: Optional technology label
            source_path: File the primary type was declared in, if known
            package: Package of the primary type

        Returns:
            The new or already existing component owning ``type``
        """
        existing = self._components_by_type.get(type)
        if existing is not None:
            if existing.type == type:
                logger.debug(f"Type '{type}' is already the component '{existing.name}', not adding it again")
                return existing
            self._release(existing, type)
        component = Component(name=name, type=type, description=description, technology=technology)
        component.code.append(CodeElement(type=type, role=CodeElementRole.PRIMARY, package=package, source_path=source_path))
        self.components.append(component)
        self._components_by_type[type] = component
        logger.debug(f"Added component '{name}' for type '{type}'")
        return component

    def _release(self, owner: Component, type: str) -> None:
        owner.code = [element for element in owner.code if element.type != type]
        del self._components_by_type[type]
        for component in self.components:
            component.relationships = []
        logger.debug(f"Type '{type}' promoted from supporting type of '{owner.name}' to a component")

    def add_code_element(self, component: Component, type: str, role: CodeElementRole = CodeElementRole.SUPPORTING,
                         package: str = '', source_path: Optional[str] = None) -> Optional[CodeElement]:
        """
        Attach a type to a component.

        Returns:
            The new code element, or None when the type is already owned by
            this or another component
        """
        owner = self._components_by_type.get(type)
        if owner is not None:
            if owner is not component:
                logger.debug(f"Type '{type}' already belongs to component '{owner.name}', not adding it to '{component.name}'")
            return None
        element = CodeElement(type=type, role=role, package=package, source_path=source_path)
        component.code.append(element)
        self._components_by_type[type] = component
        return element

    def get_component_of_type(self, type: str) -> Optional[Component]:
        """Return the component owning ``type`` as a primary or supporting code element."""
        return self._components_by_type.get(type)

    def get_component_with_name(self, name: str) -> Optional[Component]:
        for component in self.components:
            if component.name == name:
                return component
        return None

    def add_relationship(self, source: Component, destination: Component, description: str = '') -> Optional[Relationship]:
        """
        Add a relationship from ``source`` to ``destination``.

        Returns:
            The new relationship, or None for self-relationships and for
            relationships that already exist with the same description
        """
        if source is destination or source.type == destination.type:
            return None
        if source.get_relationship(destination, description) is not None:
            return None
        relationship = Relationship(source=source.type, destination=destination.type, description=description)
        source.relationships.append(relationship)
        logger.debug(f"Added relationship '{source.name}' -> '{destination.name}'")
        return relationship

class SoftwareSystem(BaseModel):
    """Top-level system grouping one or more containers"""
    name: str
    description: str = ''
    containers: List[Container] = Field(default_factory=list)

    def add_container(self, name: str, description: str = '', technology: str = '') -> Container:
        if self.get_container_with_name(name) is not None:
            raise InvalidParameterError('name', name, 'a container name unique within the software system')
        container = Container(name=name, description=description, technology=technology)
        container._software_system = self
        self.containers.append(container)
        return container

    def get_container_with_name(self, name: str) -> Optional[Container]:
        for container in self.containers:
            if container.name == name:
                return container
        return None

