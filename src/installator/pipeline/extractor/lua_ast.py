"""Depth-bounded matching over a parsed Lua snippet."""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from ...exceptions import ExtractionError
from ...parsers import parse_lua, ParseResult
from ...parsers.lua import walk_with_depth
from .lua_matchers import LuaMatcher


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LuaMatch:
    """A node picked out by a matcher."""

    matcher: str
    depth: int
    start_byte: int
    extracted: str


def normalize(code: str) -> str:
    """Make a README snippet that is a bare table parse as a Lua chunk.

    When the first line that is neither blank nor a comment opens a table,
    it is prefixed with ``return`` and everything after the last closing
    brace is cut (trailing commas and prose would not parse).
    """
    lines = code.split("\n")
    for index, line in enumerate(lines):
        stripped = line.strip()
        if not stripped or stripped.startswith("--"):
            continue
        if not stripped.startswith("{"):
            return code
        lines[index] = f"return {line}"
        normalized = "\n".join(lines)
        last_brace = normalized.rfind("}")
        return normalized[:last_brace + 1] if last_brace != -1 else normalized
    return code


def find_matches(result: ParseResult, matchers: Sequence[LuaMatcher],
                 repo_name: str, max_depth: int) -> List[LuaMatch]:
    """Apply matchers to every node within ``max_depth``.

    For each node the first matcher that accepts it wins. Nodes inside an
    earlier match are not matched again. Matches are returned in traversal
    order.
    """
    matches = []
    matched_end = -1
    for node, depth in walk_with_depth(result.root_node, max_depth):
        if node.end_byte <= matched_end:
            continue
        for matcher in matchers:
            extracted = matcher.match(node, result, repo_name)
            if extracted is not None:
                matches.append(LuaMatch(
                    matcher=matcher.name,
                    depth=depth,
                    start_byte=node.start_byte,
                    extracted=extracted,
                ))
                matched_end = node.end_byte
                break
    return matches


def extract_from_lua(code: str, matchers: Sequence[LuaMatcher], repo_name: str,
                     max_depth: int = 3, manager: Optional[str] = None) -> str:
    """Isolate the declaration of ``repo_name`` from a Lua snippet.

    Raises ExtractionError when the snippet does not parse or nothing in it
    declares the repository.
    """
    if not code.strip():
        raise ExtractionError("Empty Lua snippet", manager=manager)

    result = parse_lua(normalize(code))
    if result.has_errors:
        raise ExtractionError(
            "Lua snippet does not parse",
            manager=manager,
            details={"errors": result.error_locations()[:5]},
        )

    matches = find_matches(result, matchers, repo_name, max_depth)
    if not matches:
        raise ExtractionError(f"No declaration of {repo_name} found", manager=manager)

    if len(matches) > 1:
        logger.warning(
            f"[{repo_name}] Expected 1 {manager or 'Lua'} declaration, found {len(matches)}. Using first match."
        )
    return matches[0].extracted
