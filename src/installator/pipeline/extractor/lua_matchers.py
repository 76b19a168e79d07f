"""Ordered node matchers for lazy.nvim and packer.nvim declarations.

Both managers declare a plugin either as a table whose first entry is the
plugin name or as the bare name string, so one matcher chain serves both.
"""

from dataclasses import dataclass
from typing import Any, Callable, Optional

from ...parsers import ParseResult
from ...parsers.lua import first_positional, is_table, quote_string, string_value, unwrap


@dataclass(frozen=True)
class LuaMatcher:
    name: str
    description: str
    match: Callable[[Any, ParseResult, str], Optional[str]]


def _names_repo(table: Any, result: ParseResult, repo_name: str) -> bool:
    field = first_positional(table, result)
    if field is None:
        return False
    value = string_value(field.value, result)
    return value is not None and value.lower() == repo_name.lower()


def match_plugin_table(node: Any, result: ParseResult, repo_name: str) -> Optional[str]:
    """``{ "owner/name", ... }`` or ``{ { "owner/name", ... } }``."""
    if node.type != "table_constructor":
        return None

    if _names_repo(node, result, repo_name):
        return result.node_text(node)

    field = first_positional(node, result)
    if field is not None and is_table(field.value):
        inner = unwrap(field.value)
        if _names_repo(inner, result, repo_name):
            return result.node_text(inner)

    return None


def match_plugin_string(node: Any, result: ParseResult, repo_name: str) -> Optional[str]:
    """A bare ``"owner/name"`` literal."""
    value = string_value(node, result)
    if value is None or value.lower() != repo_name.lower():
        return None
    return quote_string(repo_name)


LUA_MATCHERS = (
    LuaMatcher("plugin_table", "Table whose first entry names the plugin", match_plugin_table),
    LuaMatcher("plugin_string", "String literal naming the plugin", match_plugin_string),
)
