"""packer.nvim ``use`` declarations translated key by key to lazy.nvim."""

import logging
from types import MappingProxyType
from typing import List, Optional, Tuple

from ...core.models import ExtractedChunk, PluginManager, Repository
from ...exceptions import IncompatibleFieldError, MigrationRejectedError
from ...parsers.lua import boolean_value, is_table, quote_string, string_value, table_fields, unwrap
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

MANAGER = PluginManager.PACKER.value

# packer key -> lazy.nvim key
PACKER_TO_LAZY_FIELDS = MappingProxyType({
    "requires": "dependencies",
    "dependencies": "dependencies",
    "opt": "lazy",
    "lazy": "lazy",
    "run": "build",
    "build": "build",
    "setup": "init",
    "cmd": "cmd",
    "ft": "ft",
    "keys": "keys",
    "event": "event",
    "config": "config",
    "tag": "tag",
    "branch": "branch",
    "commit": "commit",
    "version": "version",
    "opts": "opts",
    "priority": "priority",
})

# Translated with its boolean value inverted
INVERTED_FIELDS = MappingProxyType({
    "disable": "enabled",
})

# Keys with no faithful lazy.nvim counterpart; any of them rejects the chunk
INCOMPATIBLE_FIELDS = frozenset({
    "as",
    "rocks",
    "module",
    "module_pattern",
    "fn",
    "after",
    "installer",
    "updater",
    "rtp",
})


def translate_fields(declaration, result, repository: Repository, default_event: Optional[str]) -> List[str]:
    """lazy.nvim fields for a packer table, in source order.

    Nested dependency specs go through the same rules with their own
    name kept and no default event. ``default_event`` is None for them.
    """
    fields = table_fields(declaration, result)
    positional = [field for field in fields if field.is_positional]
    if len(positional) > 1:
        raise MigrationRejectedError("packer spec has more than one positional entry", manager=MANAGER)

    if default_event is not None:
        translated = [quote_string(repository.full_name)]
    else:
        translated = [result.node_text(field.value) for field in positional]
    emitted = set()

    for field in fields:
        if field.is_positional:
            continue
        if field.computed:
            raise MigrationRejectedError(
                f"Computed key {field.key} cannot be translated",
                manager=MANAGER,
            )

        key = field.key
        if key in INCOMPATIBLE_FIELDS:
            raise IncompatibleFieldError(key, manager=MANAGER)

        if key in INVERTED_FIELDS:
            flag = boolean_value(field.value)
            if flag is None:
                raise MigrationRejectedError(
                    f"'{key}' must be a boolean literal to be inverted",
                    manager=MANAGER,
                )
            target, value = INVERTED_FIELDS[key], "false" if flag else "true"
        elif key in PACKER_TO_LAZY_FIELDS:
            target = PACKER_TO_LAZY_FIELDS[key]
            if target == "dependencies":
                value = translate_dependencies(field.value, result, repository)
            else:
                value = result.node_text(field.value)
        else:
            logger.debug(f"[{repository.full_name}] Dropping packer field '{key}' with no lazy.nvim mapping")
            continue

        if target in emitted:
            logger.debug(f"[{repository.full_name}] Dropping duplicate '{target}' from packer field '{key}'")
            continue
        emitted.add(target)
        translated.append(f"{target} = {value}")

    if default_event is not None and not has_lazy_loading(emitted):
        translated.append(default_event_field(default_event))

    return translated


def _nested_spec(table, result, repository: Repository) -> str:
    return "{ " + ", ".join(translate_fields(table, result, repository, None)) + " }"


def translate_dependencies(value, result, repository: Repository) -> str:
    """lazy.nvim source for a ``requires`` value.

    A table with keyed fields is one dependency spec; any other table is a
    list whose table entries are specs of their own.
    """
    value = unwrap(value)
    if value.type != "table_constructor":
        return result.node_text(value)

    fields = table_fields(value, result)
    if any(not field.is_positional for field in fields):
        return _nested_spec(value, result, repository)

    entries = []
    for field in fields:
        if is_table(field.value):
            entries.append(_nested_spec(unwrap(field.value), result, repository))
        else:
            entries.append(result.node_text(field.value))
    return "{ " + ", ".join(entries) + " }"


def migrate_packer(chunk: ExtractedChunk, repository: Repository, default_event: str) -> Tuple[str, str]:
    """Return ``(lazy source, vim.pack source)`` for a packer declaration."""
    result, declaration = parse_declaration(chunk.extracted, MANAGER)

    if string_value(declaration, result) is not None:
        lazy = f"return {{ {quote_string(repository.full_name)}, {default_event_field(default_event)} }}"
        return lazy, generate_vim_pack(repository)

    if declaration.type != "table_constructor":
        raise MigrationRejectedError(
            f"Unsupported packer declaration: {declaration.type}",
            manager=MANAGER,
        )

    lazy = "return { " + ", ".join(translate_fields(declaration, result, repository, default_event)) + " }"

    fields = table_fields(declaration, result)
    requires = find_field(fields, "requires") or find_field(fields, "dependencies")
    dependencies = extract_dependencies(requires.value if requires is not None else None, result)
    setup_call = extract_setup_call(fields, result, repository, MANAGER)

    return lazy, generate_vim_pack(repository, dependencies, setup_call)
