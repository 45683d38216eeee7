"""
Type matchers deciding which scanned types become components.

A matcher is a pure predicate over a type name and its introspection record.
Matchers that need more than the record (assignability to another type) say so
through ``required_capabilities`` and receive the repository when bound by a
finder.
"""
import logging
import re
from abc import ABC, abstractmethod
from typing import Callable, FrozenSet, Optional

from archscan.core.config import config
from archscan.core.error_handling import ConfigurationError, InvalidParameterError
from archscan.models.type_info import TypeInfo
from archscan.repository.base import RepositoryCapability, TypeRepository

logger = logging.getLogger(__name__)

class TypeMatcher(ABC):
    """
    Interface for type matchers.

    Each matcher may carry a description and a technology that are applied to
    the components it produces.
    """

    required_capabilities: FrozenSet[RepositoryCapability] = frozenset()

    def __init__(self, description: str = '', technology: str = ''):
        self.description = description
        self.technology = technology
        self._type_repository: Optional[TypeRepository] = None

    def bind(self, type_repository: TypeRepository) -> None:
        """Give the matcher access to the repository it will be evaluated against."""
        self._type_repository = type_repository

    @abstractmethod
    def matches(self, type_name: str, type_info: TypeInfo) -> bool:
        """
        Decide whether a type qualifies as a component.

        Args:
            type_name: Fully-qualified type name
            type_info: Introspection record of the type

        Returns:
            True if the type is a component
        """
        pass

    def __repr__(self) -> str:
        return f'{self.__class__.__name__}()'

class NameSuffixTypeMatcher(TypeMatcher):
    """Matches types whose simple name ends with a suffix, optionally restricted by name prefixes."""

    def __init__(self, suffix: str, include_prefix: str = '', exclude_prefix: str = '',
                 description: str = '', technology: str = ''):
        if not suffix:
            raise InvalidParameterError('suffix', suffix, 'a non-empty name suffix')
        super().__init__(description, technology)
        self.suffix = suffix
        self.include_prefix = include_prefix or ''
        self.exclude_prefix = exclude_prefix or ''

    def matches(self, type_name: str, type_info: TypeInfo) -> bool:
        if not type_name.rpartition('.')[2].endswith(self.suffix):
            return False
        if self.include_prefix and not type_name.startswith(self.include_prefix):
            return False
        if self.exclude_prefix and type_name.startswith(self.exclude_prefix):
            return False
        return True

    def __repr__(self) -> str:
        return f'NameSuffixTypeMatcher({self.suffix!r})'

class AnnotationTypeMatcher(TypeMatcher):
    """Matches types decorated with a marker (``@component`` by default)."""

    required_capabilities = frozenset({RepositoryCapability.MARKERS})

    def __init__(self, marker: Optional[str] = None, description: str = '', technology: str = ''):
        marker = marker if marker is not None else config.get('discovery', 'marker', 'component')
        if not marker:
            raise InvalidParameterError('marker', marker, 'a non-empty marker name')
        super().__init__(description, technology)
        self.marker = marker

    def matches(self, type_name: str, type_info: TypeInfo) -> bool:
        return type_info.has_marker(self.marker)

    def __repr__(self) -> str:
        return f'AnnotationTypeMatcher({self.marker!r})'

class RegexTypeMatcher(TypeMatcher):
    """Matches types whose fully-qualified name matches a regular expression."""

    def __init__(self, pattern: str, description: str = '', technology: str = ''):
        try:
            self.pattern = re.compile(pattern)
        except (re.error, TypeError) as e:
            raise InvalidParameterError('pattern', pattern, f'a valid regular expression ({e})')
        super().__init__(description, technology)

    def matches(self, type_name: str, type_info: TypeInfo) -> bool:
        return self.pattern.fullmatch(type_name) is not None

    def __repr__(self) -> str:
        return f'RegexTypeMatcher({self.pattern.pattern!r})'

class _AssignableTypeMatcher(TypeMatcher):
    required_capabilities = frozenset({RepositoryCapability.ASSIGNABILITY})

    def __init__(self, target: str, description: str = '', technology: str = ''):
        if not target:
            raise InvalidParameterError('target', target, 'a fully-qualified type name')
        super().__init__(description, technology)
        self.target = target

    def matches(self, type_name: str, type_info: TypeInfo) -> bool:
        if self._type_repository is None:
            raise ConfigurationError(f'{self!r} must be bound to a type repository before use')
        if type_name == self.target or not self._accepts(type_info):
            return False
        return self._type_repository.is_assignable_to(type_name, self.target)

    def _accepts(self, type_info: TypeInfo) -> bool:
        return True

    def __repr__(self) -> str:
        return f'{self.__class__.__name__}({self.target!r})'

class ExtendsClassTypeMatcher(_AssignableTypeMatcher):
    """Matches concrete subclasses of a class."""

    def _accepts(self, type_info: TypeInfo) -> bool:
        return not type_info.is_abstract

class ImplementsInterfaceTypeMatcher(_AssignableTypeMatcher):
    """Matches types implementing an interface, abstract or not."""

class CustomTypeMatcher(TypeMatcher):
    """Wraps a caller-supplied predicate ``(type_name, type_info) -> bool``."""

    def __init__(self, predicate: Callable[[str, TypeInfo], bool], description: str = '', technology: str = ''):
        if not callable(predicate):
            raise InvalidParameterError('predicate', predicate, 'a callable')
        super().__init__(description, technology)
        self.predicate = predicate

    def matches(self, type_name: str, type_info: TypeInfo) -> bool:
        return bool(self.predicate(type_name, type_info))
