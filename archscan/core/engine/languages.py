"""
Tree-sitter language objects and parser construction.
"""
import logging

import tree_sitter_python
from tree_sitter import Language, Parser

from archscan.core.error_handling import ArchScanError

logger = logging.getLogger(__name__)

PY_LANGUAGE = Language(tree_sitter_python.language())

LANGUAGES = {
    'python': PY_LANGUAGE,
}

def get_parser(language_code: str) -> Parser:
    """Return a new tree-sitter parser for ``language_code``."""
    language = LANGUAGES.get(language_code.lower())
    if language is None:
        raise ArchScanError(f"Unsupported language: '{language_code}'", language=language_code)
    logger.debug(f'Creating tree-sitter parser for {language_code}')
    return Parser(language)
