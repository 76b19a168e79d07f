"""Line-oriented extraction of vim-plug ``Plug`` directives."""

import re
from typing import List

from ...exceptions import ExtractionError
from ...core.models import PluginManager


PLUG_DIRECTIVE = re.compile(r"""^\s*Plug\s+(['"][^'"]+['"])""", re.MULTILINE)


def collect_plug_directives(code: str) -> List[str]:
    """Quoted arguments of every ``Plug`` line, first occurrence kept."""
    directives = []
    for match in PLUG_DIRECTIVE.finditer(code):
        argument = match.group(1)
        if argument not in directives:
            directives.append(argument)
    return directives


def extract_from_vim_plug(code: str, repo_name: str) -> List[str]:
    directives = collect_plug_directives(code)
    if not directives:
        raise ExtractionError("No Plug directives found", manager=PluginManager.VIM_PLUG.value)

    if not any(directive[1:-1] == repo_name for directive in directives):
        raise ExtractionError(
            f"Target plugin '{repo_name}' not found among Plug directives",
            manager=PluginManager.VIM_PLUG.value,
            details={"directives": directives},
        )
    return directives
