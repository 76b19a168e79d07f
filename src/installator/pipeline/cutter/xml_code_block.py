"""Collapsible ``<details>`` sections in README text."""

from typing import List

from ...core.models import Chunk
from .markdown_code_block import BlockSpan, collect_context


def find_xml_code_blocks(lines: List[str]) -> List[BlockSpan]:
    """Find bodies between ``</summary>`` and ``</details>``.

    A section without a summary has its body start right after the
    ``<details>`` line. Unterminated sections are ignored.
    """
    blocks = []
    index = 0

    while index < len(lines):
        if "<details>" not in lines[index]:
            index += 1
            continue

        closing = None
        for candidate in range(index + 1, len(lines)):
            if "</details>" in lines[candidate]:
                closing = candidate
                break

        if closing is None:
            index += 1
            continue

        summary_end = index
        for candidate in range(index, closing):
            if "</summary>" in lines[candidate]:
                summary_end = candidate
                break

        if summary_end + 1 <= closing - 1:
            blocks.append(BlockSpan(summary_end + 1, closing - 1))
        index = closing + 1

    return blocks


def cut_xml_code_blocks(lines: List[str], lines_before: int, lines_after: int) -> List[Chunk]:
    chunks = []
    for block in find_xml_code_blocks(lines):
        chunks.append(Chunk(
            prev=collect_context(lines, block.start - 1, -1, lines_before),
            content="\n".join(lines[block.start:block.end + 1]),
            after=collect_context(lines, block.end + 1, 1, lines_after),
        ))
    return chunks
