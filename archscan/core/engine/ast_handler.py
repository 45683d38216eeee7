"""
Thin tree-sitter wrapper used by the source extractors.
"""
import logging
from functools import lru_cache
from typing import Iterable, Iterator, List, Optional, Tuple, Union

from tree_sitter import Node

from archscan.core.engine.languages import LANGUAGES, get_parser

logger = logging.getLogger(__name__)

class ASTHandler:
    """
    Parses source code and navigates the resulting syntax tree.

    Parse results are memoized per source text, so re-scanning an unchanged
    tree does not parse its files again.
    """

    def __init__(self, language_code: str = 'python'):
        self.language_code = language_code
        self.parser = get_parser(language_code)
        self.language = LANGUAGES[language_code]
        self._parse = lru_cache(maxsize=512)(self._parse_uncached)

    def _parse_uncached(self, code: str) -> Tuple[Node, bytes]:
        source = code.encode('utf8')
        return (self.parser.parse(source).root_node, source)

    def parse(self, code: str) -> Tuple[Node, bytes]:
        """
        Parse ``code``.

        Returns:
            Tuple of (root node, encoded source); node offsets index into the latter
        """
        return self._parse(code)

    def text(self, node: Node, source: bytes) -> str:
        return source[node.start_byte:node.end_byte].decode('utf8')

    def line(self, node: Node) -> int:
        """1-based line on which ``node`` starts."""
        return node.start_point[0] + 1

    def field(self, node: Optional[Node], name: str) -> Optional[Node]:
        return node.child_by_field_name(name) if node is not None else None

    def enclosing(self, node: Node, node_types: Union[str, Iterable[str]]) -> Optional[Node]:
        """Closest ancestor of ``node`` with one of ``node_types``."""
        wanted = {node_types} if isinstance(node_types, str) else set(node_types)
        ancestor = node.parent
        while ancestor is not None and ancestor.type not in wanted:
            ancestor = ancestor.parent
        return ancestor

    def children_of_type(self, node: Optional[Node], *node_types: str) -> List[Node]:
        """Direct named children of ``node`` whose type is one of ``node_types``."""
        if node is None:
            return []
        return [child for child in node.named_children if child.type in node_types]

    def walk(self, node: Node, stop_at: Tuple[str, ...] = ()) -> Iterator[Node]:
        """
        Yield ``node`` and its named descendants depth-first, in source order.

        Nodes listed in ``stop_at`` are yielded but not descended into
        (``node`` itself is always descended into).
        """
        stack = [node]
        while stack:
            current = stack.pop()
            yield current
            if current is not node and current.type in stop_at:
                continue
            stack.extend(reversed(current.named_children))
