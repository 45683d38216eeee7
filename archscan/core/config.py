"""
Process-wide settings for ArchScan.

Settings are grouped in sections (``discovery``, ``source``, ``logging``) and
read with ``config.get(section, key, default)``.
"""
import copy
from typing import Any, Dict

DEFAULTS: Dict[str, Dict[str, Any]] = {
    'discovery': {
        # class decorator marking a component for annotation discovery
        'marker': 'component',
        'interface_bases': ['Protocol', 'typing.Protocol', 'typing_extensions.Protocol'],
        'abstract_bases': ['ABC', 'abc.ABC'],
        'abstract_metaclasses': ['ABCMeta', 'abc.ABCMeta'],
        'abstract_method_decorators': ['abstractmethod', 'abc.abstractmethod'],
    },
    'source': {
        'file_extensions': ['.py'],
        'excluded_dirs': ['__pycache__', '.git', '.hg', '.tox', '.venv', 'venv', 'node_modules', 'build', 'dist'],
        'encoding': 'utf8',
    },
    'logging': {
        'level': 'WARNING',
        'file': None,
    },
}

class Configuration:
    """Singleton holding the current settings."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            instance = super().__new__(cls)
            instance._sections = copy.deepcopy(DEFAULTS)
            cls._instance = instance
        return cls._instance

    def get(self, section: str, key: str, default: Any = None) -> Any:
        return self._sections.get(section, {}).get(key, default)

    def set(self, section: str, key: str, value: Any) -> None:
        self._sections.setdefault(section, {})[key] = value

    def section(self, section: str) -> Dict[str, Any]:
        """Copy of every setting in ``section``."""
        return copy.deepcopy(self._sections.get(section, {}))

    def reset(self) -> None:
        """Restore the defaults."""
        self._sections = copy.deepcopy(DEFAULTS)

config = Configuration()
