"""Per-repository orchestration of the installation pipeline."""

import time
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Dict, Iterable, List, Optional, Protocol

from .config import Config
from .models import (
    FormattedChunk,
    Installation,
    InstallSource,
    PluginManager,
    ReadmeDocument,
    Repository,
    RepositoryInstallation,
    DETECTABLE_MANAGERS,
)
from ..cache import InstallationCache
from ..exceptions import ChunkRejectedError, GenerationDefectError, ReadmeFetchError
from ..parsers.lua import quote_string
from ..pipeline import Cutter, Rater, Extractor, Migrator, Formatter
from ..pipeline.migrator.vim_pack import generate_vim_pack
from ..utils.metrics import MetricsCollector, get_metrics_collector


logger = logging.getLogger(__name__)


class ReadmeFetcher(Protocol):
    """Anything that can look up a repository's README."""

    def fetch_readme(self, repository: Repository) -> Optional[ReadmeDocument]:
        ...


_INSTALL_SOURCES = {
    PluginManager.LAZY: InstallSource.LAZY,
    PluginManager.PACKER: InstallSource.PACKER,
    PluginManager.VIM_PLUG: InstallSource.VIM_PLUG,
}


class InstallationEngine:
    """Runs cutter, rater, extractor, migrator and formatter over one README.

    The pipeline itself is synchronous and keeps no state between calls, so
    one engine can serve many worker threads.
    """

    def __init__(self, config: Optional[Config] = None, metrics: Optional[MetricsCollector] = None):
        self.config = config or Config.get_default_config()
        self.metrics = metrics or get_metrics_collector(self.config.monitoring)

        self.cutter = Cutter(self.config.cutter)
        self.rater = Rater()
        self.extractor = Extractor(self.config.extractor)
        self.migrator = Migrator(self.config.migrator)
        self.formatter = Formatter(self.config.formatter)

    def process_readme(self, repository: Repository, readme: str) -> List[FormattedChunk]:
        """Formatted chunks for a README, at most one per plugin manager.

        Rejected chunks are dropped and counted. A GenerationDefectError
        propagates to the caller.
        """
        name = repository.full_name
        rejections: List[ChunkRejectedError] = []

        try:
            start = time.time()
            chunks = self.cutter.cut(name, readme)
            self.metrics.record_stage("cutter", len(chunks), time.time() - start)
            if not chunks:
                logger.debug(f"[{name}] No chunks mention the repository")
                return []

            start = time.time()
            rated = self.rater.rate_chunks(chunks)
            candidates = [chunk for chunk in rated if chunk.high_managers()]
            self.metrics.record_stage("rater", len(candidates), time.time() - start)
            for chunk in candidates:
                for manager in chunk.high_managers():
                    self.metrics.record_high_rating(manager.value)
            logger.debug(f"[{name}] {len(candidates)} of {len(rated)} chunks rated high")
            if not candidates:
                return []

            start = time.time()
            extracted = self.extractor.extract_chunks(candidates, name, rejections)
            self.metrics.record_stage("extractor", len(extracted), time.time() - start)
            if not extracted:
                return []

            start = time.time()
            try:
                migrated = self.migrator.migrate_chunks(extracted, repository, rejections)
            except GenerationDefectError as e:
                self.metrics.record_generation_defect(e.manager, e.target)
                raise
            self.metrics.record_stage("migrator", len(migrated), time.time() - start)
            if not migrated:
                return []

            start = time.time()
            formatted = self.formatter.format_chunks(migrated, name, rejections)
            self.metrics.record_stage("formatter", len(formatted), time.time() - start)

            logger.debug(
                f"[{name}] Produced {len(formatted)} installation(s): "
                + ", ".join(chunk.plugin_manager.value for chunk in formatted)
            )
            return formatted
        finally:
            for rejection in rejections:
                self.metrics.record_rejection(rejection.stage, rejection.manager)

    def select_installation(self, chunks: List[FormattedChunk]) -> Optional[Installation]:
        """Pick lazy.nvim, then packer.nvim, then vim-plug."""
        by_manager: Dict[PluginManager, FormattedChunk] = {}
        for chunk in chunks:
            by_manager.setdefault(chunk.plugin_manager, chunk)

        for manager in DETECTABLE_MANAGERS:
            chunk = by_manager.get(manager)
            if chunk is not None:
                return Installation(
                    source=_INSTALL_SOURCES[manager],
                    lazy=chunk.formatted_lazy,
                    vimpack=chunk.formatted_vim_pack,
                )
        return None

    def default_installation(self, repository: Repository) -> Installation:
        """Synthesized installation used when no README example survives."""
        event = quote_string(self.config.migrator.default_event)
        lazy = f"return {{ {quote_string(repository.full_name)}, event = {event} }}"
        vim_pack = generate_vim_pack(repository)
        return Installation(
            source=InstallSource.DEFAULT,
            lazy=self.formatter.format_lazy(lazy),
            vimpack=self.formatter.format_vim_pack(vim_pack),
        )

    def process_repository(self, repository: Repository, fetcher: ReadmeFetcher) -> RepositoryInstallation:
        """Fetch, process and select one repository's installation."""
        name = repository.full_name
        try:
            document = fetcher.fetch_readme(repository)
        except ReadmeFetchError as e:
            logger.warning(f"[{name}] {e.message}; using default installation")
            return RepositoryInstallation(
                repository=repository,
                installation=self.default_installation(repository),
                error=e.message,
            )

        chunks: List[FormattedChunk] = []
        if document is None:
            logger.info(f"[{name}] No README found; using default installation")
        else:
            chunks = self.process_readme(repository, document.text)

        installation = self.select_installation(chunks)
        if installation is None:
            installation = self.default_installation(repository)
        self.metrics.record_installation(installation.source.value)
        logger.info(f"[{name}] Installation source: {installation.source.value}")

        return RepositoryInstallation(
            repository=repository,
            installation=installation,
            readme_path=document.path if document else None,
            chunks=chunks,
        )

    def _process_safely(self, repository: Repository, fetcher: ReadmeFetcher) -> RepositoryInstallation:
        try:
            return self.process_repository(repository, fetcher)
        except GenerationDefectError as e:
            logger.error(
                f"[{repository.full_name}] Generation defect in {e.manager} -> {e.target} migration:\n{e.source}",
                exc_info=True,
            )
            self.metrics.record_installation(InstallSource.DEFAULT.value)
            return RepositoryInstallation(
                repository=repository,
                installation=self.default_installation(repository),
                error=e.message,
            )

    def generate_installations(self, repositories: Iterable[Repository], fetcher: ReadmeFetcher,
                               cache: Optional[InstallationCache] = None) -> List[RepositoryInstallation]:
        """Process repositories concurrently, reusing fresh cache entries.

        Results come back in input order. Results carrying an error are not
        written to the cache.
        """
        repositories = list(repositories)
        results: Dict[int, RepositoryInstallation] = {}
        pending = []

        for index, repository in enumerate(repositories):
            entry = cache.get(repository.full_name) if cache is not None else None
            fresh = entry is not None and cache.is_fresh(repository)
            if cache is not None:
                self.metrics.record_cache_lookup(fresh)
            if fresh:
                logger.debug(f"[{repository.full_name}] Using cached installation")
                results[index] = RepositoryInstallation(
                    repository=repository,
                    installation=entry.to_installation(),
                    from_cache=True,
                )
            else:
                pending.append((index, repository))

        logger.info(f"Processing {len(pending)} repositories ({len(results)} cached)")

        with ThreadPoolExecutor(max_workers=self.config.pipeline.max_concurrency) as executor:
            futures = {
                executor.submit(self._process_safely, repository, fetcher): index
                for index, repository in pending
            }
            for future in as_completed(futures):
                index = futures[future]
                result = future.result()
                results[index] = result
                if cache is not None and result.error is None:
                    cache.set(result.repository, result.installation)

        self.metrics.update_memory_usage()
        return [results[index] for index in range(len(repositories))]
