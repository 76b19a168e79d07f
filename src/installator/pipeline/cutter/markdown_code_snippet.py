"""Inline single-backtick code spans mentioning the repository."""

import re
from typing import List

from ...core.models import Chunk


INLINE_SNIPPET = re.compile(r"`([^`]+)`")


def cut_markdown_code_snippets(lines: List[str], repo_name: str) -> List[Chunk]:
    """Take the first inline span of each line when it names the repository.

    The rest of the line before and after the span becomes the context.
    """
    chunks = []
    needle = repo_name.lower()

    for line in lines:
        match = INLINE_SNIPPET.search(line)
        if not match or needle not in match.group(1).lower():
            continue
        chunks.append(Chunk(
            prev=line[:match.start()].rstrip(),
            content=match.group(1),
            after=line[match.end():].lstrip(),
        ))

    return chunks
