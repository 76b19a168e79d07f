"""lazy.nvim specs: passed through, with vim.pack derived from their fields."""

import logging
from typing import Tuple

from ...core.models import ExtractedChunk, PluginManager, Repository
from ...exceptions import MigrationRejectedError
from ...parsers.lua import quote_string, string_value, table_fields
from .shared import (
    default_event_field,
    extract_dependencies,
    extract_setup_call,
    find_field,
    has_lazy_loading,
    parse_declaration,
)
from .vim_pack import generate_vim_pack


logger = logging.getLogger(__name__)

MANAGER = PluginManager.LAZY.value


def migrate_lazy(chunk: ExtractedChunk, repository: Repository, default_event: str) -> Tuple[str, str]:
    """Return ``(lazy source, vim.pack source)`` for a lazy.nvim declaration."""
    result, declaration = parse_declaration(chunk.extracted, MANAGER)

    name = string_value(declaration, result)
    if name is not None:
        lazy = f"return {{ {quote_string(name)}, {default_event_field(default_event)} }}"
        return lazy, generate_vim_pack(repository)

    if declaration.type != "table_constructor":
        raise MigrationRejectedError(
            f"Unsupported lazy.nvim declaration: {declaration.type}",
            manager=MANAGER,
        )

    fields = table_fields(declaration, result)
    if not fields:
        raise MigrationRejectedError("Empty lazy.nvim spec", manager=MANAGER)
    table_text = result.node_text(declaration)

    keys = [field.key for field in fields if field.key is not None and not field.computed]
    if not has_lazy_loading(keys):
        # After the last field, ahead of any trailing separator or comment
        offset = fields[-1].node.end_byte - declaration.start_byte
        table_bytes = table_text.encode("utf-8")
        insertion = f", {default_event_field(default_event)}".encode("utf-8")
        table_text = (table_bytes[:offset] + insertion + table_bytes[offset:]).decode("utf-8")
        logger.debug(f"[{repository.full_name}] lazy.nvim spec has no lazy-loading trigger, adding default event")

    dependencies_field = find_field(fields, "dependencies")
    dependencies = extract_dependencies(
        dependencies_field.value if dependencies_field is not None else None,
        result,
    )
    setup_call = extract_setup_call(fields, result, repository, MANAGER)

    return f"return {table_text}", generate_vim_pack(repository, dependencies, setup_call)
