"""README lookups in a local directory tree."""

import logging
from pathlib import Path
from typing import Iterable, Optional

from ..core.config import DEFAULT_README_NAMES
from ..core.models import ReadmeDocument, Repository


logger = logging.getLogger(__name__)


class LocalReadmeFetcher:
    """Reads ``<directory>/<owner>/<name>/<readme>`` for each repository."""

    def __init__(self, directory: Path, readme_names: Optional[Iterable[str]] = None):
        self.directory = Path(directory)
        self.readme_names = list(readme_names or DEFAULT_README_NAMES)

    def fetch_readme(self, repository: Repository) -> Optional[ReadmeDocument]:
        repo_dir = self.directory.joinpath(*repository.full_name.split('/'))
        for filename in self.readme_names:
            path = repo_dir / filename
            if path.is_file():
                logger.debug(f"[{repository.full_name}] Reading {path}")
                return ReadmeDocument(
                    text=path.read_text(encoding='utf-8', errors='replace'),
                    path=str(path.relative_to(self.directory)),
                )
        return None


class FileReadmeFetcher:
    """Serves one README file regardless of the repository asked for."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def fetch_readme(self, repository: Repository) -> Optional[ReadmeDocument]:
        if not self.path.is_file():
            return None
        return ReadmeDocument(
            text=self.path.read_text(encoding='utf-8', errors='replace'),
            path=self.path.name,
        )
