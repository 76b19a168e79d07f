"""Fenced code blocks (``` or ''') in README text."""

from typing import List, NamedTuple

from ...core.models import Chunk


FENCE_MARKERS = ("```", "'''")


class BlockSpan(NamedTuple):
    """Inclusive line range of a block's content."""

    start: int
    end: int


def is_fence_line(line: str) -> bool:
    return line.strip().startswith(FENCE_MARKERS)


def find_markdown_code_blocks(lines: List[str]) -> List[BlockSpan]:
    """Find fenced blocks, skipping fences with nothing between them."""
    blocks = []
    open_fence = None

    for index, line in enumerate(lines):
        if not is_fence_line(line):
            continue
        if open_fence is None:
            open_fence = index
            continue
        if open_fence < index - 1:
            blocks.append(BlockSpan(open_fence + 1, index - 1))
        open_fence = None

    return blocks


def collect_context(lines: List[str], start_index: int, step: int, max_lines: int) -> str:
    """Walk outward from a block collecting up to ``max_lines`` non-blank lines.

    Blank lines in between are kept but not counted. The walk stops at a
    fence line so context never bleeds into a neighbouring block.
    """
    collected = []
    non_blank = 0
    index = start_index

    while non_blank < max_lines and 0 <= index < len(lines):
        line = lines[index]
        if is_fence_line(line):
            break
        if line.strip():
            non_blank += 1
        collected.append(line)
        index += step

    if step < 0:
        collected.reverse()
    return "\n".join(collected).strip()


def cut_markdown_code_blocks(lines: List[str], lines_before: int, lines_after: int) -> List[Chunk]:
    chunks = []
    for block in find_markdown_code_blocks(lines):
        chunks.append(Chunk(
            prev=collect_context(lines, block.start - 2, -1, lines_before),
            content="\n".join(lines[block.start:block.end + 1]),
            after=collect_context(lines, block.end + 2, 1, lines_after),
        ))
    return chunks
