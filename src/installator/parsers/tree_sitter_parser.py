"""Tree-sitter based Lua parser."""

import time
import logging
import importlib
import threading
from typing import Optional

from tree_sitter import Language, Parser

from .base import BaseParser, ParseResult, ParserCapability
from ..exceptions import ParsingError, LanguageNotSupportedError


logger = logging.getLogger(__name__)


class TreeSitterParser(BaseParser):
    """Parser backed by a tree-sitter grammar binding."""

    # Language to tree-sitter binding mapping
    LANGUAGE_BINDINGS = {
        'lua': 'tree_sitter_lua',
    }

    def __init__(self, language: str = 'lua'):
        super().__init__(language)

        if language not in self.LANGUAGE_BINDINGS:
            raise LanguageNotSupportedError(language)

        self.capabilities = {
            ParserCapability.SYNTAX_TREE,
            ParserCapability.ERROR_RECOVERY,
            ParserCapability.BYTE_SPANS,
        }

        self._initialize_parser()

    def _initialize_parser(self) -> None:
        """Initialize tree-sitter parser for the language."""
        binding_name = self.LANGUAGE_BINDINGS[self.language]
        try:
            binding_module = importlib.import_module(binding_name)
        except ImportError as e:
            raise LanguageNotSupportedError(
                self.language,
                details={"error": str(e), "required_binding": binding_name}
            )

        try:
            ts_language = binding_module.language()
            if not isinstance(ts_language, Language):
                ts_language = Language(ts_language)
            self._parser_instance = Parser(ts_language)
        except Exception as e:
            raise ParsingError(f"Failed to initialize parser for {self.language}: {e}")

        logger.debug(f"Tree-sitter parser initialized for {self.language}")

    def parse(self, source_code: str) -> ParseResult:
        """Parse source code using tree-sitter."""
        start_time = time.time()

        if self._parser_instance is None:
            raise ParsingError(f"Parser not initialized for language {self.language}")

        result = ParseResult(tree=None, language=self.language, source_code=source_code)
        try:
            result.tree = self._parser_instance.parse(result.source_bytes)
        except Exception as e:
            raise ParsingError(f"Failed to parse {self.language} code: {e}", source=source_code)

        result.parse_time_ms = (time.time() - start_time) * 1000
        return result


_local = threading.local()


def get_lua_parser() -> TreeSitterParser:
    """Per-thread Lua parser.

    tree-sitter parsers keep internal state while parsing, so each worker
    thread gets its own instance.
    """
    parser: Optional[TreeSitterParser] = getattr(_local, 'lua_parser', None)
    if parser is None:
        parser = TreeSitterParser('lua')
        _local.lua_parser = parser
    return parser


def parse_lua(source_code: str) -> ParseResult:
    return get_lua_parser().parse(source_code)


def is_valid_lua(source_code: str) -> bool:
    """True when the source parses as a complete Lua chunk."""
    return get_lua_parser().is_valid_syntax(source_code)
