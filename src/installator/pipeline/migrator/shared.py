"""Rules shared by every migration path."""

import logging
from typing import Any, List, Optional, Sequence, Set, Tuple

from ...core.models import Repository
from ...exceptions import GenerationDefectError, MigrationRejectedError
from ...parsers import ParseResult, parse_lua, is_valid_lua
from ...parsers.lua import (
    TableField,
    boolean_value,
    first_positional,
    function_body,
    named_children,
    quote_string,
    string_value,
    table_fields,
    unwrap,
)


logger = logging.getLogger(__name__)


# Keys whose presence means lazy.nvim will not load the plugin eagerly
LAZY_LOADING_TRIGGERS = frozenset({"cmd", "ft", "event", "keys", "lazy"})

# Node types that can be called directly to run a config hook
CALLABLE_REFERENCES = frozenset({"identifier", "dot_index_expression"})


def parse_declaration(extracted: str, manager: str) -> Tuple[ParseResult, Any]:
    """Parse an extracted declaration and return its expression node."""
    result = parse_lua(f"return {extracted.strip()}")
    if result.has_errors:
        raise MigrationRejectedError("Extracted declaration does not parse", manager=manager)

    statements = named_children(result.root_node)
    if len(statements) != 1 or statements[0].type != "return_statement":
        raise MigrationRejectedError("Extracted declaration is not a single expression", manager=manager)

    expressions = [
        node
        for child in named_children(statements[0])
        for node in (named_children(child) if child.type == "expression_list" else [child])
    ]
    if len(expressions) != 1:
        raise MigrationRejectedError("Extracted declaration is not a single expression", manager=manager)

    return result, unwrap(expressions[0])


def find_field(fields: Sequence[TableField], key: str) -> Optional[TableField]:
    for field in fields:
        if field.key == key and not field.computed:
            return field
    return None


def has_lazy_loading(keys: Sequence[str]) -> bool:
    return any(key in LAZY_LOADING_TRIGGERS for key in keys)


def default_event_field(event: str) -> str:
    return f"event = {quote_string(event)}"


def _plugin_name(node: Any, result: ParseResult) -> Optional[str]:
    """Plugin name from ``"owner/name"`` or ``{ "owner/name", ... }``."""
    name = string_value(node, result)
    if name is not None:
        return name or None
    if unwrap(node).type == "table_constructor":
        field = first_positional(unwrap(node), result)
        if field is not None:
            return string_value(field.value, result) or None
    return None


def extract_dependencies(value: Optional[Any], result: ParseResult) -> List[str]:
    """Dependency names from a single spec or a list of specs.

    Entries that do not name a plugin (functions, variables) are skipped.
    """
    if value is None:
        return []
    value = unwrap(value)

    single = string_value(value, result)
    if single is not None:
        return [single] if single else []

    if value.type != "table_constructor":
        return []

    dependencies = []
    for field in table_fields(value, result):
        if not field.is_positional:
            continue
        name = _plugin_name(field.value, result)
        if name:
            dependencies.append(name)
        else:
            logger.debug(f"Skipping dependency entry that names no plugin: {result.node_text(field.node)}")
    return dependencies


def _literal_rows(block: Any) -> Set[int]:
    """Rows continuing a multi-line string or comment inside ``block``."""
    rows = set()
    stack = [block]
    while stack:
        node = stack.pop()
        if node.type in ("string", "comment"):
            start, end = node.start_point[0], node.end_point[0]
            rows.update(range(start + 1, end + 1))
            continue
        stack.extend(node.children)
    return rows


def dedent_block(block: Any, result: ParseResult) -> str:
    """Source of a block with its common indentation removed.

    Lines inside multi-line strings and comments are kept as written.
    """
    lines = (" " * block.start_point[1] + result.node_text(block)).split("\n")
    first_row = block.start_point[0]
    literal = {row - first_row for row in _literal_rows(block)}

    shiftable = [index for index, line in enumerate(lines) if index not in literal and line.strip()]
    margin = min((len(lines[index]) - len(lines[index].lstrip()) for index in shiftable), default=0)

    dedented = []
    for index, line in enumerate(lines):
        if index in literal:
            dedented.append(line)
        elif line.strip():
            dedented.append(line[margin:])
        else:
            dedented.append("")
    return "\n".join(dedented).strip()


def _config_statements(field: TableField, result: ParseResult, repository: Repository,
                       manager: str) -> Optional[str]:
    value = unwrap(field.value)

    flag = boolean_value(value)
    if flag is True:
        return f"require({quote_string(repository.module_name)}).setup()"
    if flag is False:
        return None

    if value.type == "function_definition":
        body = function_body(value)
        return dedent_block(body, result) if body is not None else None

    code = string_value(value, result)
    if code is not None:
        if not code.strip():
            return None
        if not is_valid_lua(code):
            raise MigrationRejectedError(
                "String config hook is not valid Lua",
                manager=manager,
                details={"config": code},
            )
        return code.strip()

    if value.type == "function_call":
        return result.node_text(value)

    if value.type in CALLABLE_REFERENCES:
        return f"{result.node_text(value)}()"

    raise MigrationRejectedError(
        f"Config hook of type '{value.type}' cannot be expressed as statements",
        manager=manager,
    )


def extract_setup_call(fields: Sequence[TableField], result: ParseResult, repository: Repository,
                       manager: str) -> Optional[str]:
    """Statements that configure the plugin after it is added.

    ``opts`` becomes ``require("<module>").setup(<opts>)`` and wins over
    ``config``. ``config = true`` becomes a bare setup call and a config
    function has its body spliced in.
    """
    opts = find_field(fields, "opts")
    if opts is not None:
        return f"require({quote_string(repository.module_name)}).setup({result.node_text(opts.value)})"

    config = find_field(fields, "config")
    if config is not None:
        return _config_statements(config, result, repository, manager)

    return None


def ensure_parses(source: str, manager: str, target: str) -> str:
    """Raise GenerationDefectError unless generated source parses."""
    if not is_valid_lua(source):
        raise GenerationDefectError(manager=manager, target=target, source=source)
    return source
