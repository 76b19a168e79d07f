"""Cut README text into candidate code chunks."""

import logging
from typing import List, Optional

from ...core.config import CutterConfig
from ...core.models import Chunk
from .markdown_code_block import cut_markdown_code_blocks, find_markdown_code_blocks
from .xml_code_block import cut_xml_code_blocks, find_xml_code_blocks
from .markdown_code_snippet import cut_markdown_code_snippets


logger = logging.getLogger(__name__)


class Cutter:
    """Produces chunks that mention a target repository.

    Pure text function: no parsing, no I/O, same output for same input.
    """

    def __init__(self, config: Optional[CutterConfig] = None):
        self.config = config or CutterConfig()

    def cut(self, repo_name: str, readme: str) -> List[Chunk]:
        lines = readme.replace("\r\n", "\n").split("\n")
        before = self.config.context_lines_before
        after = self.config.context_lines_after

        chunks = cut_markdown_code_blocks(lines, before, after)
        chunks.extend(cut_xml_code_blocks(lines, before, after))
        if self.config.include_inline_snippets:
            chunks.extend(cut_markdown_code_snippets(lines, repo_name))

        needle = repo_name.lower()
        kept = [chunk for chunk in chunks if needle in chunk.content.strip().lower()]

        logger.debug(f"[{repo_name}] cut {len(kept)} of {len(chunks)} chunks mentioning the repository")
        return kept


def cut_chunks(repo_name: str, readme: str, config: Optional[CutterConfig] = None) -> List[Chunk]:
    return Cutter(config).cut(repo_name, readme)


__all__ = [
    "Cutter",
    "cut_chunks",
    "find_markdown_code_blocks",
    "find_xml_code_blocks",
    "cut_markdown_code_snippets",
]
