"""
Type repositories: the introspection boundary of the discovery engine.
"""
from .base import ALL_CAPABILITIES, RepositoryCapability, SymbolTableTypeRepository, TypeRepository, in_scope
from .memory import InMemoryTypeRepository
from .python_source import PythonSourceTypeRepository

__all__ = [
    "ALL_CAPABILITIES",
    "InMemoryTypeRepository",
    "PythonSourceTypeRepository",
    "RepositoryCapability",
    "SymbolTableTypeRepository",
    "TypeRepository",
    "in_scope",
]
