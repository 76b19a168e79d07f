"""Helpers for reading tree-sitter Lua syntax trees."""

from dataclasses import dataclass
from typing import Any, Iterator, List, Optional, Tuple

from .base import ParseResult


# Wrapper nodes that carry no meaning of their own when measuring depth
TRANSPARENT_NODES = frozenset({"expression_list", "arguments", "parenthesized_expression"})

BOOLEAN_NODES = frozenset({"true", "false"})


@dataclass(frozen=True)
class TableField:
    """One field of a Lua table constructor.

    ``key`` is the identifier (``key = v``) or string (``["key"] = v``)
    naming the field, or None for positional entries. ``computed`` marks
    bracketed keys that are not plain strings.
    """

    key: Optional[str]
    value: Any
    node: Any
    computed: bool = False

    @property
    def is_positional(self) -> bool:
        return self.key is None and not self.computed


def named_children(node: Any) -> List[Any]:
    """Named children without comments."""
    return [child for child in node.named_children if child.type != "comment"]


def walk_with_depth(root: Any, max_depth: int) -> Iterator[Tuple[Any, int]]:
    """Pre-order traversal that never yields nodes deeper than ``max_depth``.

    The root is at depth 0. Wrapper nodes listed in TRANSPARENT_NODES and
    positional table fields are skipped and their children counted at the
    wrapper's own level, so a list of tables costs one level, not two.
    """
    stack = [(root, 0)]
    while stack:
        node, depth = stack.pop()
        yield node, depth
        if depth >= max_depth:
            continue
        children = list(_descend(node, depth))
        stack.extend(reversed(children))


def _descend(node: Any, depth: int) -> Iterator[Tuple[Any, int]]:
    for child in named_children(node):
        if child.type in TRANSPARENT_NODES or _is_positional_field(child):
            yield from _descend(child, depth)
        else:
            yield child, depth + 1


def _is_positional_field(node: Any) -> bool:
    return node.type == "field" and node.child_by_field_name("name") is None


def unwrap(node: Any) -> Any:
    """Strip parentheses around an expression."""
    while node is not None and node.type == "parenthesized_expression":
        inner = named_children(node)
        if len(inner) != 1:
            break
        node = inner[0]
    return node


def string_value(node: Any, result: ParseResult) -> Optional[str]:
    """Raw content of a string literal, escapes left as written."""
    node = unwrap(node)
    if node is None or node.type != "string":
        return None
    content = node.child_by_field_name("content")
    if content is None:
        return ""
    return result.node_text(content)


def boolean_value(node: Any) -> Optional[bool]:
    node = unwrap(node)
    if node is None or node.type not in BOOLEAN_NODES:
        return None
    return node.type == "true"


def is_table(node: Any) -> bool:
    node = unwrap(node)
    return node is not None and node.type == "table_constructor"


def table_fields(table: Any, result: ParseResult) -> List[TableField]:
    """Fields of a table constructor in source order."""
    fields = []
    for child in named_children(unwrap(table)):
        if child.type != "field":
            continue
        name = child.child_by_field_name("name")
        value = child.child_by_field_name("value")
        bracketed = bool(child.children) and child.children[0].type == "["
        if name is None:
            fields.append(TableField(key=None, value=value, node=child))
        elif name.type == "identifier" and not bracketed:
            fields.append(TableField(key=result.node_text(name), value=value, node=child))
        else:
            key = string_value(name, result)
            if key is not None:
                fields.append(TableField(key=key, value=value, node=child))
            else:
                fields.append(TableField(key=result.node_text(name), value=value, node=child, computed=True))
    return fields


def first_positional(table: Any, result: ParseResult) -> Optional[TableField]:
    """The first field of a table, when it is positional."""
    fields = table_fields(table, result)
    if not fields or not fields[0].is_positional:
        return None
    return fields[0]


def function_body(function: Any) -> Optional[Any]:
    """Block node of a function definition, None for an empty body."""
    function = unwrap(function)
    if function is None or function.type != "function_definition":
        return None
    return function.child_by_field_name("body")


def quote_string(value: str) -> str:
    """Double-quoted Lua string literal for a raw string content.

    Content taken from a literal keeps its escapes, so only bare quotes
    and line breaks need escaping.
    """
    escaped = []
    previous_backslash = False
    for char in value:
        if char == '"' and not previous_backslash:
            escaped.append('\\"')
        elif char == "\n":
            escaped.append("\\n")
        else:
            escaped.append(char)
        previous_backslash = char == "\\" and not previous_backslash
    return '"' + "".join(escaped) + '"'
