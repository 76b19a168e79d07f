"""Translate extracted declarations to lazy.nvim and vim.pack source."""

import logging
from typing import List, Optional, Tuple

from ...core.config import MigratorConfig
from ...core.models import ExtractedChunk, MigratedChunk, PluginManager, Repository
from ...exceptions import ChunkRejectedError, MigrationRejectedError
from .lazy import migrate_lazy
from .packer import migrate_packer, PACKER_TO_LAZY_FIELDS, INCOMPATIBLE_FIELDS, INVERTED_FIELDS
from .shared import LAZY_LOADING_TRIGGERS, ensure_parses
from .vim_pack import generate_vim_pack, dependency_url
from .vim_plug import migrate_vim_plug, generate_lazy_spec


logger = logging.getLogger(__name__)

LAZY_TARGET = "lazy.nvim"
VIM_PACK_TARGET = "vim.pack"


class Migrator:
    """One translation function per source plugin manager."""

    def __init__(self, config: Optional[MigratorConfig] = None):
        self.config = config or MigratorConfig()

    def translate(self, chunk: ExtractedChunk, repository: Repository) -> Tuple[str, str]:
        manager = chunk.plugin_manager
        event = self.config.default_event
        if manager == PluginManager.LAZY:
            return migrate_lazy(chunk, repository, event)
        elif manager == PluginManager.PACKER:
            return migrate_packer(chunk, repository, event)
        elif manager == PluginManager.VIM_PLUG:
            return migrate_vim_plug(chunk, repository, event)
        elif manager == PluginManager.VIM_PACK:
            raise MigrationRejectedError("vim.pack is a generation target, not a source", manager=manager.value)
        raise MigrationRejectedError(f"Unknown plugin manager: {manager}", manager=str(manager))

    def migrate(self, chunk: ExtractedChunk, repository: Repository) -> MigratedChunk:
        """Translate one chunk.

        Raises MigrationRejectedError for input that cannot be translated and
        GenerationDefectError when a rule produced source that does not parse.
        """
        lazy, vim_pack = self.translate(chunk, repository)
        manager = chunk.plugin_manager.value
        return MigratedChunk(
            **chunk.model_dump(),
            migrated_lazy=ensure_parses(lazy, manager, LAZY_TARGET),
            migrated_vim_pack=ensure_parses(vim_pack, manager, VIM_PACK_TARGET),
        )

    def migrate_chunks(self, chunks: List[ExtractedChunk], repository: Repository,
                       rejections: Optional[List[ChunkRejectedError]] = None) -> List[MigratedChunk]:
        migrated = []
        for chunk in chunks:
            try:
                migrated.append(self.migrate(chunk, repository))
            except MigrationRejectedError as e:
                logger.debug(f"[{repository.full_name}] Failed to migrate {chunk.plugin_manager.value} chunk: {e.message}")
                if rejections is not None:
                    rejections.append(e)
        return migrated


__all__ = [
    "Migrator",
    "INCOMPATIBLE_FIELDS",
    "INVERTED_FIELDS",
    "LAZY_LOADING_TRIGGERS",
    "PACKER_TO_LAZY_FIELDS",
    "dependency_url",
    "generate_lazy_spec",
    "generate_vim_pack",
]
