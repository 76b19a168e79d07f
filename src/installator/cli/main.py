"""Command-line interface for installator."""

import click
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

import yaml

from ..cache import InstallationCache
from ..core import Config, Repository, RepositoryInstallation
from ..core.engine import InstallationEngine
from ..exceptions import InstallatorError
from ..sources import FileReadmeFetcher, LocalReadmeFetcher, PlatformReadmeFetcher
from ..utils.output import OutputFormatter


logger = logging.getLogger(__name__)


def setup_logging(verbose: bool, quiet: bool, level_name: str = "INFO") -> None:
    """Setup logging configuration."""
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        level = getattr(logging, level_name.upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )


def load_repositories(path: Path) -> List[Repository]:
    """Read a JSON or YAML list of repositories.

    Items are either "owner/name" strings (or repository URLs) or mappings
    with the Repository fields.
    """
    text = path.read_text(encoding='utf-8')
    if path.suffix.lower() == '.json':
        data = json.loads(text)
    else:
        data = yaml.safe_load(text)

    if isinstance(data, dict):
        data = data.get('repositories', [])
    if not isinstance(data, list):
        raise click.BadParameter(f"{path} must contain a list of repositories")

    repositories = []
    for item in data:
        if isinstance(item, str):
            repositories.append(Repository.from_identifier(item))
        else:
            repositories.append(Repository.model_validate(item))
    return repositories


def emit(config: Config, text: str) -> None:
    if config.output.output_file:
        config.output.output_file.parent.mkdir(parents=True, exist_ok=True)
        config.output.output_file.write_text(text + "\n", encoding='utf-8')
        click.echo(f"Results written to {config.output.output_file}", err=True)
    else:
        click.echo(text)


@click.group()
@click.version_option(version='0.1.0')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.option('--quiet', '-q', is_flag=True, help='Suppress output except errors')
@click.option('--config', '-c', type=click.Path(exists=True, path_type=Path),
              help='Configuration file path')
@click.pass_context
def cli(ctx, verbose: bool, quiet: bool, config: Optional[Path]):
    """installator - lazy.nvim and vim.pack installations from plugin READMEs."""
    ctx.ensure_object(dict)

    # Load configuration
    if config:
        ctx.obj['config'] = Config.load_from_file(config)
    else:
        # Try to find config file automatically
        config_file = Config.find_config_file()
        if config_file:
            ctx.obj['config'] = Config.load_from_file(config_file)
        else:
            ctx.obj['config'] = Config.get_default_config()

    setup_logging(verbose, quiet, ctx.obj['config'].monitoring.log_level)
    ctx.obj['verbose'] = verbose

    for issue in ctx.obj['config'].validate_config():
        logger.debug(f"Configuration: {issue}")


def _report(ctx, result: RepositoryInstallation, strict: bool) -> None:
    config = ctx.obj['config']
    formatter = OutputFormatter(config.output)
    emit(config, formatter.format_result(result))

    if strict and result.is_default:
        click.echo(f"No installation example found for {result.repository.full_name}", err=True)
        sys.exit(1)


@cli.command()
@click.argument('repo')
@click.argument('readme_file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option('--format', '-f', 'output_format', type=click.Choice(['text', 'json', 'yaml']),
              help='Output format')
@click.option('--output', '-o', type=click.Path(path_type=Path), help='Output file path')
@click.option('--all', 'show_all', is_flag=True,
              help='Show every surviving chunk, not only the chosen installation')
@click.option('--strict', is_flag=True, help='Exit with 1 when only the default was produced')
@click.pass_context
def extract(ctx, repo: str, readme_file: Path, output_format: Optional[str],
            output: Optional[Path], show_all: bool, strict: bool):
    """Derive REPO's installation from a local README file."""
    config = ctx.obj['config'].merge_with_cli_args(format=output_format, output=output, show_all=show_all or None)
    ctx.obj['config'] = config

    try:
        repository = Repository.from_identifier(repo)
        engine = InstallationEngine(config)
        result = engine.process_repository(repository, FileReadmeFetcher(readme_file))
    except (InstallatorError, ValueError) as e:
        click.echo(f"Error: {e}", err=True)
        if ctx.obj['verbose']:
            import traceback
            traceback.print_exc()
        sys.exit(1)

    _report(ctx, result, strict)


@cli.command()
@click.argument('repo')
@click.option('--source', type=click.Choice(['github', 'gitlab']), help='Hosting platform')
@click.option('--branch', '-b', help='Branch holding the README')
@click.option('--format', '-f', 'output_format', type=click.Choice(['text', 'json', 'yaml']),
              help='Output format')
@click.option('--output', '-o', type=click.Path(path_type=Path), help='Output file path')
@click.option('--all', 'show_all', is_flag=True,
              help='Show every surviving chunk, not only the chosen installation')
@click.option('--strict', is_flag=True, help='Exit with 1 when only the default was produced')
@click.pass_context
def fetch(ctx, repo: str, source: Optional[str], branch: Optional[str], output_format: Optional[str],
          output: Optional[Path], show_all: bool, strict: bool):
    """Fetch REPO's README and derive its installation."""
    config = ctx.obj['config'].merge_with_cli_args(format=output_format, output=output, show_all=show_all or None)
    ctx.obj['config'] = config

    overrides = {}
    if source:
        overrides['source'] = source
    if branch:
        overrides['branch'] = branch

    try:
        repository = Repository.from_identifier(repo, **overrides)
        engine = InstallationEngine(config)
        result = engine.process_repository(repository, PlatformReadmeFetcher(config.github, engine.metrics))
    except (InstallatorError, ValueError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if result.error:
        click.echo(f"Warning: {result.error}", err=True)
    _report(ctx, result, strict)


@cli.command()
@click.argument('repos_file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option('--readmes-dir', type=click.Path(exists=True, file_okay=False, path_type=Path),
              help='Read READMEs from <dir>/<owner>/<name>/ instead of the network')
@click.option('--output', '-o', type=click.Path(path_type=Path), help='Output file path')
@click.option('--no-cache', is_flag=True, help='Ignore and do not update the cache')
@click.option('--cache-file', type=click.Path(path_type=Path), help='Installation cache file')
@click.option('--max-concurrency', type=int, help='Repositories processed at once')
@click.pass_context
def batch(ctx, repos_file: Path, readmes_dir: Optional[Path], output: Optional[Path],
          no_cache: bool, cache_file: Optional[Path], max_concurrency: Optional[int]):
    """Derive installations for every repository listed in REPOS_FILE."""
    config = ctx.obj['config'].merge_with_cli_args(
        output=output,
        no_cache=no_cache or None,
        cache_file=cache_file,
        max_concurrency=max_concurrency,
    )

    try:
        repositories = load_repositories(repos_file)
    except (OSError, ValueError, yaml.YAMLError) as e:
        click.echo(f"Error: could not read {repos_file}: {e}", err=True)
        sys.exit(1)

    engine = InstallationEngine(config)
    if readmes_dir:
        fetcher = LocalReadmeFetcher(readmes_dir, config.github.readme_names)
    else:
        fetcher = PlatformReadmeFetcher(config.github, engine.metrics)

    cache = None
    if config.pipeline.cache_enabled:
        cache = InstallationCache(config.pipeline.cache_file).load()

    results = engine.generate_installations(repositories, fetcher, cache)
    logger.debug(f"Metrics summary: {engine.metrics.get_summary()}")

    if cache is not None and cache.dirty:
        cache.save()

    formatter = OutputFormatter(config.output)
    emit(config, formatter.format_batch(results))

    defaults = sum(1 for result in results if result.is_default)
    cached = sum(1 for result in results if result.from_cache)
    click.echo(
        f"Processed {len(results)} repositories: {len(results) - defaults} from README examples, "
        f"{defaults} default, {cached} from cache",
        err=True,
    )


@cli.command()
@click.option('--output', '-o', type=click.Path(path_type=Path),
              default=Path('.installator.yaml'),
              help='Output configuration file path')
@click.pass_context
def init(ctx, output: Path):
    """Initialize a new configuration file."""
    try:
        if output.exists():
            if not click.confirm(f"Configuration file {output} already exists. Overwrite?"):
                click.echo("Cancelled.")
                return

        config = Config.get_default_config()
        config.save_to_file(output)

        click.echo(f"Configuration file created: {output}")
        click.echo("Edit this file to customize extraction and formatting settings.")

    except OSError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


def main():
    """Main entry point."""
    cli()


if __name__ == '__main__':
    main()
