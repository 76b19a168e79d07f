"""Generation of Neovim's built-in ``vim.pack.add`` statements."""

from typing import List, Optional, Sequence

from ...core.models import Repository
from ...parsers.lua import quote_string


GITHUB_URL = "https://github.com"


def lua_single_quoted(value: str) -> str:
    """Single-quoted literal where possible, double-quoted otherwise."""
    if "'" in value or "\\" in value or "\n" in value:
        return quote_string(value)
    return f"'{value}'"


def dependency_url(dependency: str) -> str:
    """``owner/name`` shorthands resolve to GitHub, URLs are kept."""
    name = dependency.strip().strip("'\"")
    if "/" in name and "://" not in name and not name.startswith("git@"):
        return f"{GITHUB_URL}/{name}"
    return name


def vim_pack_add(url: str) -> str:
    return f"vim.pack.add({{ {{ src = {lua_single_quoted(url)} }} }})"


def generate_vim_pack(repository: Repository, dependencies: Sequence[str] = (),
                      setup_call: Optional[str] = None) -> str:
    """One add statement per dependency, then the plugin, then its setup."""
    lines: List[str] = []
    seen = set()
    for dependency in dependencies:
        url = dependency_url(dependency)
        if url in seen or url == repository.url:
            continue
        seen.add(url)
        lines.append(vim_pack_add(url))

    lines.append(vim_pack_add(repository.url))

    if setup_call:
        lines.extend(["", setup_call])

    return "\n".join(lines)
