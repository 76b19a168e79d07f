"""Test configuration management."""

import pytest
from pathlib import Path
from pydantic import ValidationError

from installator.core.config import Config, CutterConfig, ExtractorConfig, GitHubConfig, MigratorConfig


class TestConfig:
    """Test configuration management."""

    def test_default_config_creation(self, no_github_token):
        """Test creating default configuration."""
        config = Config()

        assert isinstance(config.cutter, CutterConfig)
        assert isinstance(config.extractor, ExtractorConfig)
        assert config.cutter.context_lines_before == 3
        assert config.cutter.context_lines_after == 3
        assert config.extractor.max_depth == 3
        assert config.migrator.default_event == "VeryLazy"
        assert config.formatter.lazy_line_width == 30
        assert config.formatter.vim_pack_line_width == 80
        assert config.pipeline.max_concurrency == 8
        assert config.github.readme_names[0] == "README.md"
        assert config.github.token is None

    def test_config_from_dict(self):
        """Test creating config from dictionary."""
        config_dict = {
            'extractor': {
                'max_depth': 5,
            },
            'formatter': {
                'lazy_line_width': 60,
            }
        }

        config = Config.load_from_dict(config_dict)

        assert config.extractor.max_depth == 5
        assert config.formatter.lazy_line_width == 60
        assert config.formatter.vim_pack_line_width == 80

    def test_config_save_and_load(self, temp_dir):
        """Test saving and loading configuration."""
        config = Config()
        config.migrator.default_event = "BufReadPost"
        config.cutter.include_inline_snippets = False

        config_file = temp_dir / 'test_config.yaml'
        config.save_to_file(config_file)

        assert config_file.exists()

        # Load and verify
        loaded_config = Config.load_from_file(config_file)
        assert loaded_config.migrator.default_event == "BufReadPost"
        assert loaded_config.cutter.include_inline_snippets is False
        assert loaded_config.pipeline.cache_file == config.pipeline.cache_file

    def test_token_not_saved(self, temp_dir):
        """Test that tokens never end up in configuration files."""
        config = Config(github=GitHubConfig(token="secret-token"))
        config_file = temp_dir / 'config.yaml'
        config.save_to_file(config_file)

        assert "secret-token" not in config_file.read_text()

    def test_token_from_environment(self, monkeypatch):
        """Test that the GitHub token is read from the environment."""
        monkeypatch.setenv('GITHUB_TOKEN', 'env-token')
        assert GitHubConfig().token == 'env-token'

    def test_load_from_pyproject(self, temp_dir):
        """Test the [tool.installator] table."""
        pyproject = temp_dir / 'pyproject.toml'
        pyproject.write_text('[tool.installator.extractor]\nmax_depth = 4\n')

        assert Config.find_config_file(temp_dir) == pyproject.resolve()
        assert Config.load_from_file(pyproject).extractor.max_depth == 4

    def test_find_config_file(self, temp_dir):
        """Test discovery of YAML configuration in parent directories."""
        (temp_dir / '.installator.yaml').write_text('extractor:\n  max_depth: 2\n')
        nested = temp_dir / 'a' / 'b'
        nested.mkdir(parents=True)

        assert Config.find_config_file(nested) == (temp_dir / '.installator.yaml').resolve()

    def test_missing_file(self, temp_dir):
        """Test that loading a missing file fails clearly."""
        with pytest.raises(FileNotFoundError):
            Config.load_from_file(temp_dir / 'missing.yaml')

    def test_invalid_values_rejected(self):
        """Test field validation."""
        with pytest.raises(ValidationError):
            ExtractorConfig(max_depth=0)
        with pytest.raises(ValidationError):
            MigratorConfig(default_event='Bad"Event')
        with pytest.raises(ValidationError):
            Config.load_from_dict({'output': {'format': 'html'}})
        with pytest.raises(ValidationError):
            Config.load_from_dict({'formatter': {'lazy_line_width': 10, 'indent_width': 5}})

    def test_config_validation(self, no_github_token):
        """Test configuration validation."""
        config = Config()

        issues = config.validate_config()
        assert any('token' in issue for issue in issues)

        config.github.readme_names = []
        config.formatter.lazy_line_width = 100
        issues = config.validate_config()
        assert any('README' in issue for issue in issues)
        assert any('line width' in issue for issue in issues)

    def test_merge_with_cli_args(self):
        """Test merging config with CLI arguments."""
        config = Config()

        merged = config.merge_with_cli_args(
            format='json',
            show_all=True,
            max_concurrency=2,
            no_cache=True,
            output=Path('out.json'),
            unknown='ignored',
        )

        assert merged.output.format == 'json'
        assert merged.output.show_all_chunks is True
        assert merged.output.output_file == Path('out.json')
        assert merged.pipeline.max_concurrency == 2
        assert merged.pipeline.cache_enabled is False
        assert config.pipeline.cache_enabled is True

    def test_merge_skips_none(self):
        """Test that unset CLI options keep configured values."""
        config = Config.load_from_dict({'output': {'format': 'yaml'}})
        assert config.merge_with_cli_args(format=None).output.format == 'yaml'
