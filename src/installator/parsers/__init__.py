"""Structural source parsers."""

from .base import BaseParser, ParseResult, ParserCapability
from .tree_sitter_parser import TreeSitterParser, get_lua_parser, parse_lua, is_valid_lua

__all__ = [
    "BaseParser",
    "ParseResult",
    "ParserCapability",
    "TreeSitterParser",
    "get_lua_parser",
    "parse_lua",
    "is_valid_lua",
]
