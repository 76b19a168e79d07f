"""Deterministic Lua pretty-printer over tree-sitter syntax trees.

Tables, calls and functions are laid out from the tree: a construct is
printed on one line when it fits the line width and broken one entry per
line otherwise. Every other statement or expression keeps its source text,
re-indented to its new nesting level.
"""

from typing import Any, List, Optional

from ...exceptions import FormattingError
from ...parsers import ParseResult, parse_lua
from ...parsers.lua import named_children


SKIPPED_STATEMENTS = frozenset({"empty_statement", "hash_bang_line"})

HUGGED_ARGUMENTS = frozenset({"table_constructor", "function_definition", "string"})


class LuaPrinter:
    """Prints one parsed Lua chunk within a line width."""

    def __init__(self, result: ParseResult, width: int, indent_width: int = 2):
        self.result = result
        self.width = width
        self.indent_width = indent_width
        self._source_lines = result.source_code.split("\n")

    def indent(self, level: int) -> str:
        return " " * (self.indent_width * level)

    def print_chunk(self) -> str:
        return self.print_statements(list(self.result.root_node.named_children), 0)

    # Statements

    def print_statements(self, statements: List[Any], level: int) -> str:
        lines = []
        previous = None
        prefix = self.indent(level)
        for statement in statements:
            if statement.type in SKIPPED_STATEMENTS:
                continue
            if previous is not None and statement.start_point[0] > previous.end_point[0] + 1:
                lines.append("")
            lines.append(prefix + self.format(statement, len(prefix), level))
            previous = statement
        return "\n".join(lines)

    # Layout

    def format(self, node: Any, column: int, level: int) -> str:
        """Text for a node starting at ``column`` with nesting ``level``."""
        flat = self.flat(node)
        if flat is not None and column + len(flat) <= self.width:
            return flat
        return self.broken(node, column, level)

    def flat(self, node: Any) -> Optional[str]:
        """Single-line form of a node, None when it cannot be one line."""
        kind = node.type

        if kind == "comment":
            return None

        if kind == "table_constructor":
            children = list(node.named_children)
            if any(child.type == "comment" for child in children):
                return None
            if not children:
                return "{}"
            items = [self.flat(child) for child in children]
            if any(item is None for item in items):
                return None
            return "{ " + ", ".join(items) + " }"

        if kind == "field":
            value = self.flat(node.child_by_field_name("value"))
            if value is None:
                return None
            key = self.field_key(node)
            return value if key is None else f"{key} = {value}"

        if kind == "function_call":
            arguments = self.call_arguments(node)
            if arguments is None:
                return self.single_line_text(node)
            items = [self.flat(argument) for argument in arguments]
            if any(item is None for item in items):
                return None
            return self.call_name(node) + "(" + ", ".join(items) + ")"

        if kind == "function_definition":
            body = node.child_by_field_name("body")
            if body is not None and named_children(body):
                return None
            return f"function{self.parameters(node)} end"

        if kind == "return_statement":
            expressions = self.return_expressions(node)
            if not expressions:
                return "return"
            items = [self.flat(expression) for expression in expressions]
            if any(item is None for item in items):
                return None
            return "return " + ", ".join(items)

        return self.single_line_text(node)

    def broken(self, node: Any, column: int, level: int) -> str:
        kind = node.type

        if kind == "table_constructor":
            return self.broken_table(node, level)

        if kind == "field":
            key = self.field_key(node)
            value = node.child_by_field_name("value")
            if key is None:
                return self.format(value, column, level)
            prefix = f"{key} = "
            return prefix + self.format(value, column + len(prefix), level)

        if kind == "function_call":
            return self.broken_call(node, column, level)

        if kind == "function_definition":
            head = f"function{self.parameters(node)}"
            body = node.child_by_field_name("body")
            statements = list(body.named_children) if body is not None else []
            if not statements:
                return f"{head} end"
            return head + "\n" + self.print_statements(statements, level + 1) + "\n" + self.indent(level) + "end"

        if kind == "return_statement":
            expressions = self.return_expressions(node)
            if not expressions:
                return "return"
            return "return " + self.format_list(expressions, column + len("return "), level)

        if kind == "variable_declaration":
            inner = list(node.named_children)
            if len(inner) == 1 and inner[0].type == "assignment_statement":
                return "local " + self.format(inner[0], column + len("local "), level)

        if kind == "assignment_statement":
            targets = node.named_children[0]
            values = node.named_children[-1]
            if targets.type == "variable_list" and values.type == "expression_list":
                prefix = self.reindent(targets, level) + " = "
                return prefix + self.format_list(named_children(values), column + len(prefix), level)

        return self.reindent(node, level)

    def broken_table(self, node: Any, level: int) -> str:
        children = list(node.named_children)
        if not children:
            return "{}"
        inner = self.indent(level + 1)
        lines = ["{"]
        for child in children:
            if child.type == "comment":
                lines.append(inner + self.reindent(child, level + 1))
            else:
                lines.append(inner + self.format(child, len(inner), level + 1) + ",")
        lines.append(self.indent(level) + "}")
        return "\n".join(lines)

    def broken_call(self, node: Any, column: int, level: int) -> str:
        arguments = self.call_arguments(node)
        if arguments is None:
            return self.reindent(node, level)

        name = self.call_name(node)
        if not arguments:
            return name + "()"

        # A lone table, function or string hugs the parentheses
        if len(arguments) == 1 and arguments[0].type in HUGGED_ARGUMENTS:
            return name + "(" + self.format(arguments[0], column + len(name) + 1, level) + ")"

        inner = self.indent(level + 1)
        lines = [name + "("]
        for index, argument in enumerate(arguments):
            separator = "," if index < len(arguments) - 1 else ""
            lines.append(inner + self.format(argument, len(inner), level + 1) + separator)
        lines.append(self.indent(level) + ")")
        return "\n".join(lines)

    def format_list(self, nodes: List[Any], column: int, level: int) -> str:
        parts = []
        for node in nodes:
            text = self.format(node, column, level)
            parts.append(text)
            if "\n" in text:
                column = len(text.rsplit("\n", 1)[-1]) + 2
            else:
                column += len(text) + 2
        return ", ".join(parts)

    # Node pieces

    def field_key(self, field: Any) -> Optional[str]:
        name = field.child_by_field_name("name")
        if name is None:
            return None
        if field.children and field.children[0].type == "[":
            return "[" + self.result.node_text(name) + "]"
        return self.result.node_text(name)

    def call_name(self, node: Any) -> str:
        name = node.child_by_field_name("name")
        return self.single_line_text(name) or self.reindent(name, 0)

    def call_arguments(self, node: Any) -> Optional[List[Any]]:
        """Argument expressions, None when comments sit between them."""
        arguments = node.child_by_field_name("arguments")
        if arguments is None:
            return None
        children = list(arguments.named_children)
        if any(child.type == "comment" for child in children):
            return None
        return children

    def parameters(self, node: Any) -> str:
        parameters = node.child_by_field_name("parameters")
        if parameters is None:
            return "()"
        return " ".join(self.result.node_text(parameters).split())

    def return_expressions(self, node: Any) -> List[Any]:
        expressions = []
        for child in named_children(node):
            if child.type == "expression_list":
                expressions.extend(named_children(child))
            else:
                expressions.append(child)
        return expressions

    # Source text

    def single_line_text(self, node: Any) -> Optional[str]:
        text = self.result.node_text(node)
        return None if "\n" in text else text

    def reindent(self, node: Any, level: int) -> str:
        """Source text of a node with continuation lines moved to ``level``.

        Text spanning a multi-line string or comment is returned untouched,
        since shifting its lines would change the literal.
        """
        text = self.result.node_text(node)
        lines = text.split("\n")
        if len(lines) == 1 or has_multiline_literal(node):
            return text

        source_line = self._source_lines[node.start_point[0]]
        base = len(source_line) - len(source_line.lstrip())
        prefix = self.indent(level)

        moved = [lines[0]]
        for line in lines[1:]:
            if not line.strip():
                moved.append("")
                continue
            leading = len(line) - len(line.lstrip())
            moved.append(prefix + " " * max(leading - base, 0) + line.lstrip())
        return "\n".join(moved)


LITERAL_NODES = frozenset({"string", "comment"})

# Separators the printer may add or drop without changing the program
LAYOUT_TOKENS = frozenset({",", ";", "(", ")"})


def has_multiline_literal(node: Any) -> bool:
    stack = [node]
    while stack:
        current = stack.pop()
        if current.type in LITERAL_NODES:
            if current.start_point[0] != current.end_point[0]:
                return True
            continue
        stack.extend(current.children)
    return False


def significant_tokens(result: ParseResult) -> List[str]:
    """Leaf tokens of a tree without comments and layout punctuation."""
    tokens = []
    stack = [result.root_node]
    while stack:
        node = stack.pop()
        if node.type == "comment":
            continue
        if node.type == "string":
            tokens.append(result.node_text(node))
            continue
        if node.child_count == 0:
            if node.type not in LAYOUT_TOKENS:
                tokens.append(result.node_text(node))
            continue
        stack.extend(reversed(node.children))
    return tokens


def format_lua(source: str, width: int, indent_width: int = 2) -> str:
    """Pretty-print Lua source and check the result.

    Raises FormattingError when the input or the printed output does not
    parse, or when printing changed anything but layout.
    """
    result = parse_lua(source)
    if result.has_errors:
        raise FormattingError("Source to format does not parse", details={"source": source})

    printed = LuaPrinter(result, width, indent_width).print_chunk()

    reparsed = parse_lua(printed)
    if reparsed.has_errors:
        raise FormattingError("Formatted source does not parse", details={"source": printed})

    if significant_tokens(reparsed) != significant_tokens(result):
        raise FormattingError("Formatting changed the program", details={"source": printed})

    return printed
