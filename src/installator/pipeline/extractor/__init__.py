"""Isolate the target plugin's declaration from high-rated chunks."""

import logging
from typing import Dict, List, Optional

from ...core.config import ExtractorConfig
from ...core.models import ExtractedChunk, PluginManager, RatedChunk, Verdict, DETECTABLE_MANAGERS
from ...exceptions import ChunkRejectedError, ExtractionError
from .lua_ast import extract_from_lua, normalize
from .lua_matchers import LUA_MATCHERS
from .vim_plug import extract_from_vim_plug, collect_plug_directives


logger = logging.getLogger(__name__)


class Extractor:
    """Narrows rated chunks to one plugin manager and its declaration."""

    def __init__(self, config: Optional[ExtractorConfig] = None):
        self.config = config or ExtractorConfig()

    def extract_chunk(self, chunk: RatedChunk, manager: PluginManager, repo_name: str) -> ExtractedChunk:
        """Extract for one manager; raises ExtractionError on failure."""
        if manager == PluginManager.LAZY or manager == PluginManager.PACKER:
            extracted = extract_from_lua(
                chunk.content,
                LUA_MATCHERS,
                repo_name,
                max_depth=self.config.max_depth,
                manager=manager.value,
            )
        elif manager == PluginManager.VIM_PLUG:
            extracted = "\n".join(extract_from_vim_plug(chunk.content, repo_name))
        else:
            raise ExtractionError(f"{manager.value} is not a detectable plugin manager", manager=manager.value)

        rating = chunk.rating(manager)
        return ExtractedChunk(
            prev=chunk.prev,
            content=chunk.content,
            after=chunk.after,
            plugin_manager=manager,
            scores=list(rating.scores),
            verdict=rating.verdict,
            extracted=extracted,
        )

    def extract_chunks(self, chunks: List[RatedChunk], repo_name: str,
                       rejections: Optional[List[ChunkRejectedError]] = None) -> List[ExtractedChunk]:
        """Keep the first successful extraction per manager.

        The first example in a README is usually the minimal one. Failures
        only drop the chunk for that manager.
        """
        failures = rejections if rejections is not None else []
        failed = 0
        first_per_manager: Dict[PluginManager, ExtractedChunk] = {}

        for chunk in chunks:
            for manager in DETECTABLE_MANAGERS:
                if chunk.rating(manager).verdict != Verdict.HIGH:
                    continue
                if manager in first_per_manager:
                    continue
                try:
                    first_per_manager[manager] = self.extract_chunk(chunk, manager, repo_name)
                except ExtractionError as e:
                    logger.debug(f"[{repo_name}] Failed to extract {manager.value} declaration: {e.message}")
                    failures.append(e)
                    failed += 1

        if failed:
            logger.debug(f"[{repo_name}] Failed to extract {failed} declarations")

        return [first_per_manager[m] for m in DETECTABLE_MANAGERS if m in first_per_manager]


__all__ = [
    "Extractor",
    "LUA_MATCHERS",
    "collect_plug_directives",
    "extract_from_lua",
    "extract_from_vim_plug",
    "normalize",
]
