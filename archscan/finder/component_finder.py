"""
Entry point of component discovery.
"""
import logging
import re
from typing import List, Pattern

from archscan.core.error_handling import InvalidParameterError, InvalidTypeError, StrategyMisconfigurationError
from archscan.finder.strategies import ComponentFinderStrategy
from archscan.models.architecture import Component, Container
from archscan.repository.base import TypeRepository

logger = logging.getLogger(__name__)

class ComponentFinder:
    """
    Finds the components of one scope and adds them to a container.

    Several finders, configured differently and scanning different scopes, can
    populate the same container one after another. Each run resolves the
    relationships between all components known to the container at that point.
    """

    def __init__(self, container: Container, scope: str, strategy: ComponentFinderStrategy,
                 type_repository: TypeRepository):
        """
        Bind a container, a scope and a strategy.

        Args:
            container: Container receiving the components
            scope: Dotted package prefix to scan (empty for everything)
            strategy: Strategy deciding which types are components
            type_repository: Introspection source for the scope

        Raises:
            StrategyMisconfigurationError: If the strategy needs a capability
                the repository does not provide
        """
        if not isinstance(container, Container):
            raise InvalidTypeError('container', container, Container)
        if not isinstance(strategy, ComponentFinderStrategy):
            raise InvalidTypeError('strategy', strategy, ComponentFinderStrategy)
        if not isinstance(type_repository, TypeRepository):
            raise InvalidTypeError('type_repository', type_repository, TypeRepository)
        missing = strategy.get_required_capabilities() - type_repository.capabilities
        if missing:
            raise StrategyMisconfigurationError(
                repr(strategy),
                [capability.value for capability in missing],
                repository=type_repository.__class__.__name__,
            )
        self.container = container
        self.scope = scope or ''
        self.strategy = strategy
        self.type_repository = type_repository
        self._exclusions: List[Pattern] = []
        strategy.bind(type_repository)

    def exclude(self, *patterns: str) -> 'ComponentFinder':
        """
        Exclude types whose fully-qualified name matches any of the regular expressions.

        Excluded types are neither components nor supporting types.
        """
        for pattern in patterns:
            try:
                self._exclusions.append(re.compile(pattern))
            except (re.error, TypeError) as e:
                raise InvalidParameterError('pattern', pattern, f'a valid regular expression ({e})')
        return self

    @property
    def exclusions(self) -> List[str]:
        return [pattern.pattern for pattern in self._exclusions]

    def is_excluded(self, type_name: str) -> bool:
        return any(pattern.fullmatch(type_name) for pattern in self._exclusions)

    def find_components(self) -> List[Component]:
        """
        Discover the components of the scope and resolve relationships.

        Returns:
            Components matched in this run, including ones already present in
            the container from earlier runs
        """
        logger.debug(f"Finding components in scope '{self.scope}' with {self.strategy!r}")
        components = self.strategy.find_components(self)
        self.strategy.find_dependencies(self)
        return components
