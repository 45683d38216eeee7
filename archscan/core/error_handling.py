"""
Exceptions raised by ArchScan and the recovery decorator for per-type failures.

Problems with how a finder is assembled surface immediately as
ConfigurationError subclasses. A type that cannot be introspected raises
TypeResolutionError, which discovery recovers from where it happens.
"""
import functools
import logging
from typing import Any, Callable, Iterable, Optional, Tuple, Type, Union

logger = logging.getLogger('archscan')

class ArchScanError(Exception):
    """
    Base class for all ArchScan exceptions.

    Keyword arguments are kept in ``context`` and appended to the message.
    """

    def __init__(self, message: str, **kwargs):
        super().__init__(message)
        self.message = message
        self.context = dict(kwargs.pop('context', None) or {})
        self.context.update(kwargs)

    def add_context(self, key: str, value: Any) -> None:
        self.context[key] = value

    def __str__(self) -> str:
        if not self.context:
            return self.message
        details = ', '.join(f'{key}={value}' for key, value in self.context.items())
        return f'{self.message} [Context: {details}]'

# Validation

class ValidationError(ArchScanError):
    """An argument passed to a public API is unusable."""

    def __init__(self, message: str, parameter: Optional[str] = None, value: Any = None,
                 expected: Optional[str] = None, **kwargs):
        super().__init__(message, parameter=parameter, value=value, expected=expected, **kwargs)
        self.parameter = parameter
        self.value = value
        self.expected = expected

class InvalidParameterError(ValidationError):

    def __init__(self, parameter: str, value: Any, expected: str, **kwargs):
        super().__init__(f"Invalid value for parameter '{parameter}': {value}. Expected: {expected}",
                         parameter, value, expected, **kwargs)

def _type_label(expected: Union[Type, Tuple[Type, ...], str]) -> str:
    if isinstance(expected, str):
        return expected
    if isinstance(expected, tuple):
        return ', '.join(t.__name__ for t in expected)
    return expected.__name__

class InvalidTypeError(ValidationError):

    def __init__(self, parameter: str, value: Any, expected_type: Union[Type, Tuple[Type, ...], str], **kwargs):
        expected = _type_label(expected_type)
        super().__init__(f"Invalid type for parameter '{parameter}': {type(value).__name__}. Expected: {expected}",
                         parameter, value, expected, **kwargs)

# Configuration

class ConfigurationError(ArchScanError):
    """A finder, matcher or strategy cannot work as assembled. Raised before any scan starts."""

class StrategyMisconfigurationError(ConfigurationError):
    """A strategy needs a capability the type repository does not provide."""

    def __init__(self, strategy: str, missing: Iterable[str], repository: Optional[str] = None, **kwargs):
        missing = sorted(missing)
        super().__init__(
            f"Strategy '{strategy}' requires unsupported type repository capabilities: {', '.join(missing)}",
            strategy=strategy, missing=missing, repository=repository, **kwargs,
        )
        self.strategy = strategy
        self.missing = missing
        self.repository = repository

# Source and introspection

class ParsingError(ArchScanError):
    """A source tree cannot be read into a symbol table."""

    def __init__(self, message: str, path: Optional[str] = None, **kwargs):
        super().__init__(message, path=path, **kwargs)
        self.path = path

class TypeResolutionError(ArchScanError):
    """A type repository cannot introspect a type."""

    def __init__(self, type_name: str, reason: Optional[str] = None, **kwargs):
        message = f"Cannot resolve type '{type_name}'" + (f': {reason}' if reason else '')
        super().__init__(message, type_name=type_name, **kwargs)
        self.type_name = type_name
        self.reason = reason

def handle_type_resolution_errors(default_factory: Callable[[], Any]) -> Callable:
    """
    Decorator returning ``default_factory()`` when the wrapped call raises TypeResolutionError.

    One unresolvable type never aborts a whole scan; the failure is logged at
    DEBUG level and other exceptions propagate unchanged.
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except TypeResolutionError as e:
                logger.debug(f'Skipping unresolvable type during {func.__name__}: {e}')
                return default_factory()
        return wrapper
    return decorator
