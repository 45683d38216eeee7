"""
Type repository built by parsing Python source files with tree-sitter.

The repository walks a source root (a directory that would be placed on
``sys.path``), derives module names from file paths, extracts every class and
resolves the names used in bases and annotations to fully-qualified type names
through each module's imports. Nothing is imported or executed.
"""
import builtins
import logging
import os
from pathlib import Path
from typing import Dict, List, Optional, Union

from archscan.core.config import config
from archscan.core.error_handling import ParsingError
from archscan.models.enums import TypeKind
from archscan.models.type_info import MarkerInfo, TypeInfo, TypeReference
from archscan.repository.base import SymbolTableTypeRepository
from archscan.repository.python_extractor import PythonTypeExtractor

logger = logging.getLogger(__name__)

_BUILTIN_NAMES = frozenset(dir(builtins))
_MAX_REEXPORT_DEPTH = 10

class PythonSourceTypeRepository(SymbolTableTypeRepository):
    """
    Symbol table of the classes declared under a Python source root.

    Enumeration order follows module names, then declaration order within a
    module.
    """

    def __init__(self, root: Union[str, Path], extractor: Optional[PythonTypeExtractor] = None):
        super().__init__()
        self.root = Path(root)
        self.extractor = extractor or PythonTypeExtractor()
        self._modules: Dict[str, Dict] = {}
        self.refresh()

    @property
    def modules(self) -> List[str]:
        return list(self._modules)

    def refresh(self) -> None:
        """Re-read every source file under the root and rebuild the symbol table."""
        if not self.root.is_dir():
            raise ParsingError(f'Source root does not exist or is not a directory: {self.root}', path=str(self.root))
        self._types.clear()
        self._modules = {}
        for path in self._source_files():
            module_name = self._module_name(path)
            if module_name is None:
                continue
            try:
                code = path.read_text(encoding=config.get('source', 'encoding', 'utf8'))
            except (OSError, UnicodeDecodeError) as e:
                logger.warning(f'Skipping unreadable source file {path}: {e}')
                continue
            module = self.extractor.extract_module(code)
            module['path'] = str(path.relative_to(self.root))
            module['is_package'] = path.stem == '__init__'
            module['class_names'] = {class_info['name'] for class_info in module['classes']}
            self._modules[module_name] = module
        self._modules = dict(sorted(self._modules.items()))
        for module_name, module in self._modules.items():
            for class_info in module['classes']:
                self.add_type(self._build_type_info(module_name, module, class_info))
        logger.debug(f'Indexed {len(self._types)} types from {len(self._modules)} modules under {self.root}')

    def _source_files(self) -> List[Path]:
        extensions = tuple(config.get('source', 'file_extensions', ['.py']))
        excluded = set(config.get('source', 'excluded_dirs', []))
        files = []
        for directory, dirnames, filenames in os.walk(self.root):
            dirnames[:] = sorted(d for d in dirnames if d not in excluded and not d.startswith('.'))
            for filename in sorted(filenames):
                if filename.endswith(extensions):
                    files.append(Path(directory) / filename)
        return files

    def _module_name(self, path: Path) -> Optional[str]:
        parts = list(path.relative_to(self.root).with_suffix('').parts)
        if parts and parts[-1] == '__init__':
            parts = parts[:-1]
        if not parts or not all(part.isidentifier() for part in parts):
            logger.debug(f'Skipping {path}: not importable as a module')
            return None
        return '.'.join(parts)

    def _package_of(self, module_name: str) -> str:
        module = self._modules.get(module_name)
        if module is not None and module['is_package']:
            return module_name
        return module_name.rpartition('.')[0]

    def _build_type_info(self, module_name: str, module: Dict, class_info: Dict) -> TypeInfo:
        type_name = f"{module_name}.{class_info['name']}"
        supertypes = []
        for base in class_info['bases']:
            resolved = self.resolve_name(base, module_name)
            if resolved not in _BUILTIN_NAMES and resolved not in supertypes:
                supertypes.append(resolved)
        references = []
        for reference in class_info['references']:
            resolved = self.resolve_name(reference['type'], module_name, class_info['name'])
            if resolved in _BUILTIN_NAMES or resolved == type_name:
                continue
            references.append(TypeReference(type=resolved, kind=reference['kind'], member=reference['member']))
        markers = [
            MarkerInfo(name=decorator['name'].rpartition('.')[2], arguments=decorator['arguments'])
            for decorator in class_info.get('decorators', [])
        ]
        return TypeInfo(
            name=type_name,
            kind=self._kind(class_info, module_name),
            package=self._package_of(module_name),
            supertypes=supertypes,
            references=references,
            markers=markers,
            source_path=module['path'],
            line=class_info['line'],
        )

    def _kind(self, class_info: Dict, module_name: str) -> TypeKind:
        def matches(name: Optional[str], configured_key: str) -> bool:
            if not name:
                return False
            configured = set(config.get('discovery', configured_key, []))
            return name in configured or self.resolve_name(name, module_name) in configured

        if any(matches(base, 'interface_bases') for base in class_info['bases']):
            return TypeKind.INTERFACE
        if any(matches(base, 'abstract_bases') for base in class_info['bases']):
            return TypeKind.ABSTRACT
        if matches(class_info['metaclass'], 'abstract_metaclasses'):
            return TypeKind.ABSTRACT
        abstract_decorators = set(config.get('discovery', 'abstract_method_decorators', []))
        for method in class_info['methods']:
            if abstract_decorators.intersection(method['decorators']):
                return TypeKind.ABSTRACT
        return TypeKind.CLASS

    def resolve_name(self, name: str, module_name: str, enclosing_class: str = '') -> str:
        """
        Resolve a name as written in ``module_name`` to a fully-qualified type name.

        Inside the body of ``enclosing_class`` (dotted for nested classes) the
        classes nested in it and its outer classes are tried first. Names that
        cannot be traced to an import or a local class are returned unchanged.
        """
        module = self._modules.get(module_name)
        if module is None:
            return name
        outer = enclosing_class
        while outer:
            if f'{outer}.{name}' in module['class_names']:
                return f'{module_name}.{outer}.{name}'
            outer = outer.rpartition('.')[0]
        head, _, rest = name.partition('.')
        if head in module['class_names']:
            return self._canonical(f'{module_name}.{name}')
        if head in module['imports']:
            target = self._absolute(module['imports'][head], module_name)
            return self._canonical(f'{target}.{rest}' if rest else target)
        for star_module in module['star_imports']:
            candidate = self._canonical(f'{self._absolute(star_module, module_name)}.{name}')
            if candidate in self._types or self._is_declared(candidate):
                return candidate
        return name

    def _absolute(self, target: str, module_name: str) -> str:
        if not target.startswith('.'):
            return target
        level = len(target) - len(target.lstrip('.'))
        package = self._package_of(module_name)
        for _ in range(level - 1):
            package = package.rpartition('.')[0]
        remainder = target[level:]
        if not package:
            return remainder
        return f'{package}.{remainder}' if remainder else package

    def _is_declared(self, type_name: str) -> bool:
        parts = type_name.split('.')
        for index in range(len(parts) - 1, 0, -1):
            module = self._modules.get('.'.join(parts[:index]))
            if module is not None:
                return '.'.join(parts[index:]) in module['class_names']
        return False

    def _canonical(self, type_name: str, depth: int = 0) -> str:
        """Follow re-exports (``from .impl import Thing`` in a package) to the declaring module."""
        if depth > _MAX_REEXPORT_DEPTH:
            return type_name
        parts = type_name.split('.')
        for index in range(len(parts) - 1, 0, -1):
            module_name = '.'.join(parts[:index])
            module = self._modules.get(module_name)
            if module is None:
                continue
            head = parts[index]
            rest = '.'.join(parts[index + 1:])
            if head in module['class_names']:
                return type_name
            if head in module['imports']:
                target = self._absolute(module['imports'][head], module_name)
                return self._canonical(f'{target}.{rest}' if rest else target, depth + 1)
            return type_name
        return type_name
