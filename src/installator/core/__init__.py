"""Core module for installator."""

from .models import (
    PluginManager,
    Verdict,
    RepositorySource,
    InstallSource,
    Repository,
    Chunk,
    Rating,
    RatedChunk,
    ExtractedChunk,
    MigratedChunk,
    FormattedChunk,
    ReadmeDocument,
    Installation,
    RepositoryInstallation,
    DETECTABLE_MANAGERS,
)

from .config import (
    Config,
    CutterConfig,
    ExtractorConfig,
    MigratorConfig,
    FormatterConfig,
    PipelineConfig,
    GitHubConfig,
    MonitoringConfig,
    OutputConfig,
)

__all__ = [
    # Models
    "PluginManager",
    "Verdict",
    "RepositorySource",
    "InstallSource",
    "Repository",
    "Chunk",
    "Rating",
    "RatedChunk",
    "ExtractedChunk",
    "MigratedChunk",
    "FormattedChunk",
    "ReadmeDocument",
    "Installation",
    "RepositoryInstallation",
    "DETECTABLE_MANAGERS",
    # Configuration
    "Config",
    "CutterConfig",
    "ExtractorConfig",
    "MigratorConfig",
    "FormatterConfig",
    "PipelineConfig",
    "GitHubConfig",
    "MonitoringConfig",
    "OutputConfig",
]
