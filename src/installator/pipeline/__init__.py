"""The five-stage README pipeline: cut, rate, extract, migrate, format."""

from .cutter import Cutter
from .rater import Rater
from .extractor import Extractor
from .migrator import Migrator
from .formatter import Formatter

__all__ = ["Cutter", "Rater", "Extractor", "Migrator", "Formatter"]
