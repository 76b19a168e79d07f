"""Prometheus metrics for the installation pipeline."""

import logging
import threading
from datetime import datetime
from typing import Dict, Any, Optional

import psutil
from prometheus_client import Counter, Histogram, Gauge, start_http_server

from ..core.config import MonitoringConfig


logger = logging.getLogger(__name__)


STAGE_PROCESSING_TIME = Histogram(
    'installator_stage_seconds',
    'Time spent in each pipeline stage',
    ['stage']
)

CHUNKS_PROCESSED = Counter(
    'installator_chunks_total',
    'Chunks surviving each pipeline stage',
    ['stage']
)

HIGH_RATINGS = Counter(
    'installator_high_ratings_total',
    'Chunks rated high per plugin manager',
    ['manager']
)

CHUNK_REJECTIONS = Counter(
    'installator_chunk_rejections_total',
    'Chunk rejections per stage and plugin manager',
    ['stage', 'manager']
)

GENERATION_DEFECTS = Counter(
    'installator_generation_defects_total',
    'Generated snippets that failed to parse',
    ['manager', 'target']
)

INSTALLATIONS = Counter(
    'installator_installations_total',
    'Canonical installations by source',
    ['source']
)

CACHE_OPERATIONS = Counter(
    'installator_cache_operations_total',
    'Installation cache lookups',
    ['result']
)

README_FETCHES = Counter(
    'installator_readme_fetches_total',
    'README fetch attempts',
    ['platform', 'result']
)

MEMORY_USAGE = Gauge(
    'installator_memory_usage_bytes',
    'Resident memory of the process'
)


class MetricsCollector:
    """Records pipeline metrics and keeps in-process totals for summaries."""

    def __init__(self, config: Optional[MonitoringConfig] = None):
        self.config = config or MonitoringConfig()
        self.start_time = datetime.now()

        self._counts: Dict[str, int] = {}
        self._lock = threading.RLock()

        if self.config.enable_prometheus:
            try:
                start_http_server(self.config.metrics_port)
                logger.info(f"Prometheus metrics server started on port {self.config.metrics_port}")
            except OSError as e:
                logger.error(f"Failed to start Prometheus server: {e}")

    def _bump(self, key: str, amount: int = 1) -> None:
        with self._lock:
            self._counts[key] = self._counts.get(key, 0) + amount

    def record_stage(self, stage: str, surviving: int, seconds: float) -> None:
        STAGE_PROCESSING_TIME.labels(stage=stage).observe(seconds)
        CHUNKS_PROCESSED.labels(stage=stage).inc(surviving)
        self._bump(f"chunks_{stage}", surviving)

    def record_high_rating(self, manager: str) -> None:
        HIGH_RATINGS.labels(manager=manager).inc()
        self._bump(f"high_{manager}")

    def record_rejection(self, stage: str, manager: Optional[str]) -> None:
        CHUNK_REJECTIONS.labels(stage=stage, manager=manager or "unknown").inc()
        self._bump(f"rejected_{stage}")

    def record_generation_defect(self, manager: str, target: str) -> None:
        GENERATION_DEFECTS.labels(manager=manager, target=target).inc()
        self._bump("generation_defects")

    def record_installation(self, source: str) -> None:
        INSTALLATIONS.labels(source=source).inc()
        self._bump(f"installation_{source}")

    def record_cache_lookup(self, hit: bool) -> None:
        CACHE_OPERATIONS.labels(result="hit" if hit else "miss").inc()
        self._bump("cache_hits" if hit else "cache_misses")

    def record_readme_fetch(self, platform: str, found: bool) -> None:
        README_FETCHES.labels(platform=platform, result="found" if found else "missing").inc()

    def update_memory_usage(self) -> int:
        rss = psutil.Process().memory_info().rss
        MEMORY_USAGE.set(rss)
        return rss

    def get_summary(self) -> Dict[str, Any]:
        with self._lock:
            counts = dict(self._counts)
        return {
            "uptime_seconds": (datetime.now() - self.start_time).total_seconds(),
            "memory_usage_mb": self.update_memory_usage() / (1024 * 1024),
            "counts": counts,
        }


_default_collector: Optional[MetricsCollector] = None
_default_lock = threading.Lock()


def get_metrics_collector(config: Optional[MonitoringConfig] = None) -> MetricsCollector:
    """Process-wide collector, created on first use.

    The first configuration wins; a different one passed later is ignored.
    """
    global _default_collector
    with _default_lock:
        if _default_collector is None:
            _default_collector = MetricsCollector(config)
        elif config is not None and config != _default_collector.config:
            logger.debug("Metrics collector already configured; ignoring new monitoring config")
        return _default_collector
