"""vim-plug directives: the target plugin plus the other Plug lines as dependencies."""

from typing import List, Tuple

from ...core.models import ExtractedChunk, PluginManager, Repository
from ...exceptions import MigrationRejectedError
from ...parsers.lua import quote_string
from .shared import default_event_field
from .vim_pack import generate_vim_pack


MANAGER = PluginManager.VIM_PLUG.value


def split_directives(extracted: str, repo_name: str) -> Tuple[str, List[str]]:
    """Main plugin name and dependency names from quoted Plug arguments."""
    names = [line.strip()[1:-1] for line in extracted.splitlines() if line.strip()]
    if repo_name not in names:
        raise MigrationRejectedError(f"No Plug directive for {repo_name}", manager=MANAGER)
    return repo_name, [name for name in names if name != repo_name]


def generate_lazy_spec(main: str, dependencies: List[str], default_event: str) -> str:
    parts = [quote_string(main)]
    if dependencies:
        parts.append("dependencies = { " + ", ".join(quote_string(d) for d in dependencies) + " }")
    parts.append(default_event_field(default_event))
    return "return { " + ", ".join(parts) + " }"


def migrate_vim_plug(chunk: ExtractedChunk, repository: Repository, default_event: str) -> Tuple[str, str]:
    """Return ``(lazy source, vim.pack source)`` for vim-plug directives."""
    main, dependencies = split_directives(chunk.extracted, repository.full_name)
    lazy = generate_lazy_spec(main, dependencies, default_event)
    return lazy, generate_vim_pack(repository, dependencies)
