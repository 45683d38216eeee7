"""
Python-specific type extractor.

Extracts classes, their bases, decorators and the types named by their
declared members from a Python syntax tree. Names are returned exactly as
written in the source; resolving them to fully-qualified type names is the
job of the source type repository.
"""
import logging
import re
from typing import Dict, List, Optional

from tree_sitter import Node

from archscan.core.engine.ast_handler import ASTHandler
from archscan.models.enums import ReferenceKind

logger = logging.getLogger(__name__)

_DOTTED_NAME = re.compile(r'[A-Za-z_][A-Za-z0-9_]*(?:\.[A-Za-z_][A-Za-z0-9_]*)*')
_LITERAL_TYPES = ('none', 'true', 'false', 'integer', 'float', 'ellipsis', 'comment')
_SCOPE_NODES = ('function_definition', 'class_definition', 'lambda')

class PythonTypeExtractor:
    """
    Extracts raw class declarations from Python source code.

    The result of ``extract_module`` is a dictionary with ``imports`` (local
    name to imported dotted path, relative paths keep their leading dots),
    ``star_imports`` and ``classes`` (list of class data dictionaries).
    """

    def __init__(self, ast_handler: Optional[ASTHandler] = None):
        self.ast_handler = ast_handler or ASTHandler('python')

    def extract_module(self, code: str) -> Dict:
        root, code_bytes = self.ast_handler.parse(code)
        if root.has_error:
            logger.debug('Syntax errors found while parsing module, extracting what is available')
        imports, star_imports = self.extract_imports(root, code_bytes)
        return {
            'imports': imports,
            'star_imports': star_imports,
            'classes': self.extract_classes(root, code_bytes),
        }

    def extract_imports(self, root: Node, code_bytes: bytes):
        """
        Extract module level imports, including those nested in ``if`` and ``try`` blocks.

        Returns:
            Tuple of (imports mapping, list of star-imported modules)
        """
        imports: Dict[str, str] = {}
        star_imports: List[str] = []
        for node in self.ast_handler.walk(root, stop_at=_SCOPE_NODES):
            if node.type == 'import_statement':
                for child in node.named_children:
                    if child.type == 'dotted_name':
                        dotted = self._text(child, code_bytes)
                        head = dotted.split('.')[0]
                        imports[head] = head
                    elif child.type == 'aliased_import':
                        name_node = child.child_by_field_name('name')
                        alias_node = child.child_by_field_name('alias')
                        if name_node is not None and alias_node is not None:
                            imports[self._text(alias_node, code_bytes)] = self._text(name_node, code_bytes)
            elif node.type == 'import_from_statement':
                module_node = node.child_by_field_name('module_name')
                if module_node is None:
                    continue
                module = self._text(module_node, code_bytes)
                if any(child.type == 'wildcard_import' for child in node.named_children):
                    star_imports.append(module)
                    continue
                for child in node.children_by_field_name('name'):
                    if child.type == 'aliased_import':
                        name_node = child.child_by_field_name('name')
                        alias_node = child.child_by_field_name('alias')
                        if name_node is None or alias_node is None:
                            continue
                        local_name = self._text(alias_node, code_bytes)
                        imported = self._text(name_node, code_bytes)
                    else:
                        imported = self._text(child, code_bytes)
                        local_name = imported.split('.')[0]
                    imports[local_name] = self._join(module, imported)
        return imports, star_imports

    def extract_classes(self, root: Node, code_bytes: bytes) -> List[Dict]:
        """
        Extract classes, including nested ones, in declaration order.

        Returns:
            List of class data dictionaries
        """
        logger.debug('Extracting Python classes')
        classes: List[Dict] = []
        for node in self.ast_handler.walk(root, stop_at=('function_definition', 'lambda')):
            if node.type != 'class_definition':
                continue
            try:
                class_info = self._extract_class(node, code_bytes)
            except Exception as e:
                logger.error(f'Error extracting Python class: {e}', exc_info=True)
                continue
            if class_info is not None:
                classes.append(class_info)
        logger.debug(f'Extracted {len(classes)} Python classes')
        return classes

    def _extract_class(self, node: Node, code_bytes: bytes) -> Optional[Dict]:
        name_node = self.ast_handler.field(node, 'name')
        if name_node is None:
            return None
        qualified_name = self._text(name_node, code_bytes)
        outer = self.ast_handler.enclosing(node, ['class_definition', 'function_definition'])
        while outer is not None:
            if outer.type == 'function_definition':
                # classes local to a function are not part of the module's API
                return None
            outer_name = outer.child_by_field_name('name')
            if outer_name is None:
                return None
            qualified_name = f'{self._text(outer_name, code_bytes)}.{qualified_name}'
            outer = self.ast_handler.enclosing(outer, ['class_definition', 'function_definition'])

        bases: List[str] = []
        metaclass = None
        bases_node = self.ast_handler.field(node, 'superclasses')
        if bases_node is not None:
            for base_node in bases_node.named_children:
                if base_node.type == 'keyword_argument':
                    keyword = base_node.child_by_field_name('name')
                    value = base_node.child_by_field_name('value')
                    if keyword is not None and value is not None and self._text(keyword, code_bytes) == 'metaclass':
                        metaclass = self._text(value, code_bytes)
                    continue
                if base_node.type == 'subscript':
                    base_node = base_node.child_by_field_name('value') or base_node
                if base_node.type in ('identifier', 'attribute'):
                    bases.append(self._text(base_node, code_bytes))

        references: List[Dict] = []
        methods: List[Dict] = []
        body = self.ast_handler.field(node, 'body')
        for statement in body.named_children if body is not None else []:
            definition = statement
            if statement.type == 'decorated_definition':
                definition = statement.child_by_field_name('definition')
            if definition is None:
                continue
            if definition.type == 'expression_statement':
                references.extend(self._annotated_assignments(definition, code_bytes, self_attribute=False))
            elif definition.type == 'function_definition':
                method = self._extract_method(definition, code_bytes)
                methods.append(method)
                references.extend(method['references'])

        start_line = self.ast_handler.line(node)
        return {
            'name': qualified_name,
            'bases': bases,
            'metaclass': metaclass,
            'decorators': self._extract_decorators(node, code_bytes),
            'methods': methods,
            'references': references,
            'line': start_line,
        }

    def _extract_method(self, node: Node, code_bytes: bytes) -> Dict:
        name_node = node.child_by_field_name('name')
        method_name = self._text(name_node, code_bytes) if name_node is not None else ''
        references: List[Dict] = []
        parameters = node.child_by_field_name('parameters')
        for param_node in parameters.named_children if parameters is not None else []:
            if param_node.type not in ('typed_parameter', 'typed_default_parameter'):
                continue
            type_node = param_node.child_by_field_name('type')
            for type_name in self.type_names(type_node, code_bytes):
                references.append({'type': type_name, 'kind': ReferenceKind.PARAMETER, 'member': method_name})
        return_node = node.child_by_field_name('return_type')
        for type_name in self.type_names(return_node, code_bytes):
            references.append({'type': type_name, 'kind': ReferenceKind.RETURN_VALUE, 'member': method_name})
        body = node.child_by_field_name('body')
        if body is not None:
            for inner in self.ast_handler.walk(body, stop_at=_SCOPE_NODES):
                if inner.type == 'expression_statement':
                    references.extend(self._annotated_assignments(inner, code_bytes, self_attribute=True))
        return {
            'name': method_name,
            'decorators': [decorator['name'] for decorator in self._extract_decorators(node, code_bytes)],
            'references': references,
        }

    def _annotated_assignments(self, statement: Node, code_bytes: bytes, self_attribute: bool) -> List[Dict]:
        references = []
        for assignment in self.ast_handler.children_of_type(statement, 'assignment'):
            left = assignment.child_by_field_name('left')
            type_node = assignment.child_by_field_name('type')
            if left is None or type_node is None:
                continue
            target = self._text(left, code_bytes)
            if self_attribute:
                if left.type != 'attribute' or not target.startswith('self.'):
                    continue
                target = target[len('self.'):]
            elif left.type != 'identifier':
                continue
            for type_name in self.type_names(type_node, code_bytes):
                references.append({'type': type_name, 'kind': ReferenceKind.ATTRIBUTE, 'member': target})
        return references

    def _extract_decorators(self, definition: Node, code_bytes: bytes) -> List[Dict]:
        parent = definition.parent
        if parent is None or parent.type != 'decorated_definition':
            return []
        decorators = []
        for decorator in self.ast_handler.children_of_type(parent, 'decorator'):
            if not decorator.named_children:
                continue
            expression = decorator.named_children[0]
            arguments: Dict[str, str] = {}
            if expression.type == 'call':
                argument_list = expression.child_by_field_name('arguments')
                expression = expression.child_by_field_name('function')
                positional = 0
                for argument in argument_list.named_children if argument_list is not None else []:
                    if argument.type == 'keyword_argument':
                        key = argument.child_by_field_name('name')
                        value = argument.child_by_field_name('value')
                        if key is not None and value is not None:
                            arguments[self._text(key, code_bytes)] = self._literal(value, code_bytes)
                    elif argument.type != 'comment':
                        arguments['value' if positional == 0 else f'arg{positional}'] = self._literal(argument, code_bytes)
                        positional += 1
            if expression is None or expression.type not in ('identifier', 'attribute'):
                continue
            decorators.append({'name': self._text(expression, code_bytes), 'arguments': arguments})
        return decorators

    def type_names(self, node: Optional[Node], code_bytes: bytes) -> List[str]:
        """
        Collect the dotted names mentioned by a type annotation.

        Handles subscripted generics, unions written with ``|`` and string
        (forward reference) annotations.
        """
        names: List[str] = []
        if node is None:
            return names
        pending = [node]
        while pending:
            current = pending.pop()
            if current.type in _LITERAL_TYPES:
                continue
            if current.type in ('identifier', 'attribute'):
                text = self._text(current, code_bytes)
                if _DOTTED_NAME.fullmatch(text):
                    names.append(text)
                    continue
            if current.type == 'string':
                names.extend(_DOTTED_NAME.findall(self._string_content(current, code_bytes)))
                continue
            pending.extend(reversed(current.named_children))
        return list(dict.fromkeys(names))

    def _literal(self, node: Node, code_bytes: bytes) -> str:
        if node.type == 'string':
            return self._string_content(node, code_bytes)
        return self._text(node, code_bytes)

    def _string_content(self, node: Node, code_bytes: bytes) -> str:
        text = self._text(node, code_bytes).lstrip('rRbBuUfF')
        for quote in ('"""', "'''", '"', "'"):
            if text.startswith(quote) and text.endswith(quote) and len(text) >= 2 * len(quote):
                return text[len(quote):-len(quote)]
        return text

    def _text(self, node: Node, code_bytes: bytes) -> str:
        text = self.ast_handler.text(node, code_bytes)
        if node.type in ('attribute', 'dotted_name'):
            # dotted names may be split over lines inside parentheses
            return re.sub(r'\s+', '', text)
        return text

    @staticmethod
    def _join(module: str, name: str) -> str:
        if module.endswith('.'):
            return module + name
        return f'{module}.{name}'
