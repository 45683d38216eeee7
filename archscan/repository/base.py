"""
Type repository interfaces.

A type repository is the only way the discovery engine learns about code: it
enumerates the types in a scope and answers introspection questions about a
single type. Adapters reduce their source to TypeInfo records up front, so a
scan never parses or imports anything.
"""

import logging
from abc import ABC, abstractmethod
from collections import deque
from enum import Enum
from typing import Dict, FrozenSet, Iterable, List, Optional

from archscan.core.error_handling import TypeResolutionError
from archscan.models.type_info import TypeInfo

logger = logging.getLogger(__name__)

class RepositoryCapability(str, Enum):
    """Introspection features a type repository can advertise"""
    SUPERTYPES = 'supertypes'
    REFERENCES = 'references'
    MARKERS = 'markers'
    ABSTRACTNESS = 'abstractness'
    ASSIGNABILITY = 'assignability'

ALL_CAPABILITIES: FrozenSet[RepositoryCapability] = frozenset(RepositoryCapability)

def in_scope(type_name: str, scope: str) -> bool:
    """Return True when ``type_name`` lives in the dotted ``scope`` (an empty scope holds everything)."""
    if not scope:
        return True
    return type_name == scope or type_name.startswith(scope + '.')

class TypeRepository(ABC):
    """
    Interface for type introspection.

    Every per-type operation raises TypeResolutionError for a type the
    repository cannot introspect.
    """

    @property
    @abstractmethod
    def capabilities(self) -> FrozenSet[RepositoryCapability]:
        """Capabilities this repository supports."""
        pass

    @abstractmethod
    def list_types(self, scope: str) -> List[str]:
        """
        Enumerate the types in a scope.

        Args:
            scope: Dotted package prefix, or an empty string for every type

        Returns:
            Fully-qualified type names in a stable enumeration order
        """
        pass

    @abstractmethod
    def contains(self, type_name: str) -> bool:
        """Return True when the repository can introspect ``type_name``."""
        pass

    @abstractmethod
    def get_type(self, type_name: str) -> TypeInfo:
        """Return the introspection record for ``type_name``."""
        pass

    @abstractmethod
    def get_supertypes(self, type_name: str) -> List[str]:
        """Return the direct supertypes (classes and interfaces) of a type."""
        pass

    @abstractmethod
    def get_direct_referenced_types(self, type_name: str) -> List[str]:
        """Return the types named by a type's declared members and supertypes."""
        pass

    @abstractmethod
    def has_marker(self, type_name: str, marker: str) -> bool:
        """Return True when the type carries ``marker``."""
        pass

    @abstractmethod
    def is_interface_or_abstract(self, type_name: str) -> bool:
        pass

    @abstractmethod
    def is_assignable_to(self, type_name: str, target: str) -> bool:
        """Return True when ``type_name`` is ``target`` or a (transitive) subtype of it."""
        pass

    def get_package(self, type_name: str) -> str:
        return self.get_type(type_name).package

    def get_marker_arguments(self, type_name: str, marker: str) -> Dict[str, str]:
        info = self.get_type(type_name).get_marker(marker)
        return dict(info.arguments) if info else {}

class SymbolTableTypeRepository(TypeRepository):
    """
    Type repository backed by an ordered table of TypeInfo records.

    Enumeration order is insertion order, which makes "first match" decisions
    of the discovery strategies deterministic.
    """

    def __init__(self, types: Optional[Iterable[TypeInfo]] = None,
                 capabilities: Optional[Iterable[RepositoryCapability]] = None):
        self._types: Dict[str, TypeInfo] = {}
        self._capabilities = frozenset(capabilities) if capabilities is not None else ALL_CAPABILITIES
        for type_info in types or ():
            self.add_type(type_info)

    @property
    def capabilities(self) -> FrozenSet[RepositoryCapability]:
        return self._capabilities

    def add_type(self, type_info: TypeInfo) -> TypeInfo:
        if type_info.name in self._types:
            logger.warning(f"Type '{type_info.name}' is declared more than once, keeping the last declaration")
        self._types[type_info.name] = type_info
        return type_info

    def list_types(self, scope: str) -> List[str]:
        return [name for name in self._types if in_scope(name, scope)]

    def contains(self, type_name: str) -> bool:
        return type_name in self._types

    def get_type(self, type_name: str) -> TypeInfo:
        try:
            return self._types[type_name]
        except KeyError:
            raise TypeResolutionError(type_name, 'not present in the type repository')

    def get_supertypes(self, type_name: str) -> List[str]:
        return list(self.get_type(type_name).supertypes)

    def get_direct_referenced_types(self, type_name: str) -> List[str]:
        type_info = self.get_type(type_name)
        referenced = dict.fromkeys(type_info.referenced_types)
        referenced.update(dict.fromkeys(type_info.supertypes))
        referenced.pop(type_name, None)
        return list(referenced)

    def has_marker(self, type_name: str, marker: str) -> bool:
        return self.get_type(type_name).has_marker(marker)

    def is_interface_or_abstract(self, type_name: str) -> bool:
        return self.get_type(type_name).is_abstract

    def is_assignable_to(self, type_name: str, target: str) -> bool:
        if type_name == target:
            self.get_type(type_name)
            return True
        visited = {type_name}
        pending = deque(self.get_supertypes(type_name))
        while pending:
            supertype = pending.popleft()
            if supertype == target:
                return True
            if supertype in visited:
                continue
            visited.add(supertype)
            if supertype in self._types:
                pending.extend(self._types[supertype].supertypes)
        return False
