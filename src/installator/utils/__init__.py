"""Utility helpers: metrics and output rendering."""

from .metrics import MetricsCollector, get_metrics_collector
from .output import OutputFormatter

__all__ = ["MetricsCollector", "OutputFormatter", "get_metrics_collector"]
