"""Configuration management for installator."""

import os
import tomllib
import yaml
from pathlib import Path
from typing import Dict, List, Optional, Any
from pydantic import BaseModel, Field, field_validator, model_validator
from dotenv import load_dotenv


DEFAULT_README_NAMES = [
    "README.md",
    "readme.md",
    "Readme.md",
    "README.markdown",
    "README.mkd",
    "readme.mkd",
    "README.adoc",
    "store.md",
]


class CutterConfig(BaseModel):
    """Configuration for cutting README text into chunks."""

    context_lines_before: int = Field(default=3, ge=0)
    context_lines_after: int = Field(default=3, ge=0)
    include_inline_snippets: bool = True


class ExtractorConfig(BaseModel):
    """Configuration for isolating plugin declarations."""

    max_depth: int = Field(default=3, ge=1, le=16)


class MigratorConfig(BaseModel):
    """Configuration for translating declarations."""

    default_event: str = "VeryLazy"

    @field_validator('default_event')
    @classmethod
    def validate_event(cls, v: str) -> str:
        if not v or '"' in v or '\\' in v or '\n' in v:
            raise ValueError(f"Invalid default event name: {v!r}")
        return v


class FormatterConfig(BaseModel):
    """Configuration for pretty-printing generated Lua."""

    lazy_line_width: int = Field(default=30, ge=10)
    vim_pack_line_width: int = Field(default=80, ge=10)
    indent_width: int = Field(default=2, ge=1, le=8)


class PipelineConfig(BaseModel):
    """Configuration for batch processing of repositories."""

    max_concurrency: int = Field(default=8, ge=1)
    cache_enabled: bool = True
    cache_file: Path = Field(default_factory=lambda: Path(".installator") / "installation_cache.json")


class GitHubConfig(BaseModel):
    """Configuration for fetching READMEs from hosting platforms."""

    token: Optional[str] = Field(default=None, validate_default=True)
    timeout_seconds: int = Field(default=15, ge=1)
    max_retries: int = Field(default=3, ge=1)
    readme_names: List[str] = Field(default_factory=lambda: list(DEFAULT_README_NAMES))
    readme_cache_size: int = Field(default=512, ge=0)
    readme_cache_ttl: int = Field(default=3600, ge=0)  # seconds

    @field_validator('token')
    @classmethod
    def load_token(cls, v: Optional[str]) -> Optional[str]:
        """Load token from environment if not provided."""
        if v is None:
            return os.getenv('GITHUB_TOKEN') or os.getenv('GH_TOKEN')
        return v


class MonitoringConfig(BaseModel):
    """Configuration for logging and metrics."""

    enable_prometheus: bool = False
    metrics_port: int = Field(default=8000, ge=1024, le=65535)
    log_level: str = "INFO"

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


class OutputConfig(BaseModel):
    """Configuration for rendering results."""

    format: str = "text"
    output_file: Optional[Path] = None
    show_all_chunks: bool = False

    @field_validator('format')
    @classmethod
    def validate_format(cls, v: str) -> str:
        if v not in {"text", "json", "yaml"}:
            raise ValueError(f"Unknown output format: {v}")
        return v


class Config(BaseModel):
    """Main configuration class for installator."""

    cutter: CutterConfig = Field(default_factory=CutterConfig)
    extractor: ExtractorConfig = Field(default_factory=ExtractorConfig)
    migrator: MigratorConfig = Field(default_factory=MigratorConfig)
    formatter: FormatterConfig = Field(default_factory=FormatterConfig)
    pipeline: PipelineConfig = Field(default_factory=PipelineConfig)
    github: GitHubConfig = Field(default_factory=GitHubConfig)
    monitoring: MonitoringConfig = Field(default_factory=MonitoringConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    @model_validator(mode='after')
    def validate_widths(self) -> 'Config':
        if self.formatter.indent_width * 2 >= self.formatter.lazy_line_width:
            raise ValueError("Indent width is too large for the lazy.nvim line width")
        return self

    @classmethod
    def load_from_file(cls, config_path: Path) -> "Config":
        """Load configuration from a YAML file or a pyproject.toml."""
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")
        load_dotenv()

        if config_path.name == "pyproject.toml":
            return cls.load_from_pyproject(config_path)

        with open(config_path, 'r', encoding='utf-8') as f:
            config_data = yaml.safe_load(f) or {}

        return cls(**config_data)

    @classmethod
    def load_from_dict(cls, config_dict: Dict[str, Any]) -> "Config":
        """Load configuration from dictionary."""
        return cls(**config_dict)

    @classmethod
    def get_default_config(cls) -> "Config":
        """Get default configuration."""
        load_dotenv()
        return cls()

    @classmethod
    def find_config_file(cls, start_path: Optional[Path] = None) -> Optional[Path]:
        """Find configuration file in current directory or parent directories."""
        if start_path is None:
            start_path = Path.cwd()

        config_names = [
            ".installator.yaml",
            ".installator.yml",
            "installator.yaml",
            "installator.yml",
            "pyproject.toml",  # [tool.installator] section
        ]

        current_path = start_path.resolve()

        while current_path != current_path.parent:
            for config_name in config_names:
                config_file = current_path / config_name
                if config_file.exists():
                    if config_name == "pyproject.toml":
                        if cls._has_installator_config(config_file):
                            return config_file
                    else:
                        return config_file
            current_path = current_path.parent

        return None

    @classmethod
    def _has_installator_config(cls, pyproject_path: Path) -> bool:
        """Check if pyproject.toml has an installator section."""
        try:
            with open(pyproject_path, 'rb') as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError):
            return False
        return "installator" in data.get("tool", {})

    @classmethod
    def load_from_pyproject(cls, pyproject_path: Path) -> "Config":
        """Load configuration from the [tool.installator] table."""
        with open(pyproject_path, 'rb') as f:
            data = tomllib.load(f)

        if "installator" not in data.get("tool", {}):
            raise ValueError("No [tool.installator] section found in pyproject.toml")

        return cls(**data["tool"]["installator"])

    def save_to_file(self, config_path: Path) -> None:
        """Save configuration to YAML file."""
        config_path.parent.mkdir(parents=True, exist_ok=True)

        config_dict = self.model_dump(mode='json')
        # Tokens stay in the environment
        config_dict['github'].pop('token', None)

        with open(config_path, 'w', encoding='utf-8') as f:
            yaml.safe_dump(config_dict, f, default_flow_style=False, indent=2, sort_keys=False)

    def validate_config(self) -> List[str]:
        """Validate configuration and return list of issues."""
        issues = []

        if self.github.token is None:
            issues.append("GitHub token not configured; unauthenticated requests are rate limited")

        if not self.github.readme_names:
            issues.append("No README file names configured")

        if self.formatter.lazy_line_width > self.formatter.vim_pack_line_width:
            issues.append("lazy.nvim line width is wider than the vim.pack line width")

        if self.pipeline.cache_enabled and self.pipeline.cache_file.is_dir():
            issues.append(f"Cache file points to a directory: {self.pipeline.cache_file}")

        if self.output.output_file and not self.output.output_file.parent.exists():
            issues.append(f"Output directory does not exist: {self.output.output_file.parent}")

        return issues

    def merge_with_cli_args(self, **cli_args) -> "Config":
        """Merge configuration with CLI arguments."""
        config_dict = self.model_dump()

        cli_mapping = {
            'format': 'output.format',
            'output': 'output.output_file',
            'show_all': 'output.show_all_chunks',
            'max_concurrency': 'pipeline.max_concurrency',
            'cache_file': 'pipeline.cache_file',
            'no_cache': 'pipeline.cache_enabled',
            'max_depth': 'extractor.max_depth',
            'log_level': 'monitoring.log_level',
        }

        for cli_key, cli_value in cli_args.items():
            if cli_value is None or cli_key not in cli_mapping:
                continue
            if cli_key == 'no_cache':
                cli_value = not cli_value

            config_path = cli_mapping[cli_key].split('.')
            current = config_dict
            for path_part in config_path[:-1]:
                current = current[path_part]
            current[config_path[-1]] = cli_value

        return Config(**config_dict)
