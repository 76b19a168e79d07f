"""Pretty-print migrated source and validate it."""

import logging
from typing import List, Optional

from ...core.config import FormatterConfig
from ...core.models import FormattedChunk, MigratedChunk
from ...exceptions import ChunkRejectedError, FormattingError
from .lua_printer import LuaPrinter, format_lua


logger = logging.getLogger(__name__)


class Formatter:
    """Narrow layout for lazy.nvim specs, wide layout for vim.pack code."""

    def __init__(self, config: Optional[FormatterConfig] = None):
        self.config = config or FormatterConfig()

    def format_lazy(self, source: str) -> str:
        return format_lua(source, self.config.lazy_line_width, self.config.indent_width)

    def format_vim_pack(self, source: str) -> str:
        return format_lua(source, self.config.vim_pack_line_width, self.config.indent_width)

    def format(self, chunk: MigratedChunk) -> FormattedChunk:
        """Format both targets; raises FormattingError if either fails."""
        try:
            formatted_lazy = self.format_lazy(chunk.migrated_lazy)
            formatted_vim_pack = self.format_vim_pack(chunk.migrated_vim_pack)
        except FormattingError as e:
            e.manager = chunk.plugin_manager.value
            e.details["manager"] = e.manager
            raise

        return FormattedChunk(
            **chunk.model_dump(),
            formatted_lazy=formatted_lazy,
            formatted_vim_pack=formatted_vim_pack,
        )

    def format_chunks(self, chunks: List[MigratedChunk], repo_name: str,
                      rejections: Optional[List[ChunkRejectedError]] = None) -> List[FormattedChunk]:
        """Drop every chunk whose output cannot be formatted and re-validated."""
        formatted = []
        for chunk in chunks:
            try:
                formatted.append(self.format(chunk))
            except FormattingError as e:
                logger.warning(f"[{repo_name}] Dropping {chunk.plugin_manager.value} chunk: {e.message}")
                if rejections is not None:
                    rejections.append(e)
        return formatted


__all__ = ["Formatter", "LuaPrinter", "format_lua"]
