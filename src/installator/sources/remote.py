"""README fetchers for GitHub and GitLab hosted repositories."""

import logging
import threading
from typing import Dict, List, Optional

import requests
from cachetools import TTLCache
from tenacity import RetryError, Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from ..core.config import GitHubConfig
from ..core.models import ReadmeDocument, Repository, RepositorySource
from ..exceptions import ReadmeFetchError
from ..utils.metrics import MetricsCollector, get_metrics_collector


logger = logging.getLogger(__name__)


class TransientFetchError(Exception):
    """A response worth retrying: server error or rate limiting."""

    def __init__(self, url: str, status_code: int):
        super().__init__(f"HTTP {status_code} from {url}")
        self.url = url
        self.status_code = status_code


RETRYABLE_EXCEPTIONS = (TransientFetchError, requests.ConnectionError, requests.Timeout)


class RawContentFetcher:
    """Looks up a README by trying candidate file names on raw-content URLs.

    A 404 for every candidate means the repository has no README. Network
    failures and 5xx/429 responses are retried with exponential backoff;
    when retries run out a ReadmeFetchError is raised.
    """

    platform: RepositorySource = RepositorySource.GITHUB

    def __init__(self, config: Optional[GitHubConfig] = None,
                 session: Optional[requests.Session] = None,
                 metrics: Optional[MetricsCollector] = None):
        self.config = config or GitHubConfig()
        self.session = session or requests.Session()
        self.metrics = metrics or get_metrics_collector()
        self.session.headers.update(self.default_headers())

        self._documents: TTLCache = TTLCache(
            maxsize=max(self.config.readme_cache_size, 1),
            ttl=max(self.config.readme_cache_ttl, 1),
        )
        self._cache_lock = threading.Lock()

    def default_headers(self) -> Dict[str, str]:
        return {"User-Agent": "installator"}

    def raw_url(self, repository: Repository, filename: str) -> str:
        raise NotImplementedError

    def candidate_urls(self, repository: Repository) -> List[tuple]:
        return [(name, self.raw_url(repository, name)) for name in self.config.readme_names]

    def _get(self, url: str) -> Optional[str]:
        """Body of ``url``, or None on 404."""
        response = self.session.get(url, timeout=self.config.timeout_seconds)
        if response.status_code == 404:
            return None
        if response.status_code == 429 or response.status_code >= 500:
            raise TransientFetchError(url, response.status_code)
        response.raise_for_status()
        return response.text

    def _get_with_retries(self, repository: Repository, url: str) -> Optional[str]:
        retrying = Retrying(
            stop=stop_after_attempt(self.config.max_retries),
            wait=wait_exponential(multiplier=1, min=1, max=30),
            retry=retry_if_exception_type(RETRYABLE_EXCEPTIONS),
        )
        try:
            return retrying(self._get, url)
        except RetryError as e:
            cause = e.last_attempt.exception()
            logger.warning(f"[{repository.full_name}] Giving up on {url}: {cause}")
            status_code = cause.status_code if isinstance(cause, TransientFetchError) else None
            raise ReadmeFetchError(repository.full_name, url=url, status_code=status_code) from cause
        except requests.HTTPError as e:
            status_code = e.response.status_code if e.response is not None else None
            raise ReadmeFetchError(repository.full_name, url=url, status_code=status_code) from e

    def fetch_readme(self, repository: Repository) -> Optional[ReadmeDocument]:
        """First README found on the repository branch, or None."""
        for filename, url in self.candidate_urls(repository):
            with self._cache_lock:
                cached = self._documents.get(url)
            if cached is not None:
                return cached

            text = self._get_with_retries(repository, url)
            if text is None:
                continue

            document = ReadmeDocument(text=text, path=f"{repository.branch}/{filename}")
            with self._cache_lock:
                self._documents[url] = document
            self.metrics.record_readme_fetch(self.platform.value, True)
            logger.debug(f"[{repository.full_name}] Fetched {document.path}")
            return document

        self.metrics.record_readme_fetch(self.platform.value, False)
        logger.debug(f"[{repository.full_name}] No README among {len(self.config.readme_names)} candidates")
        return None


class GitHubReadmeFetcher(RawContentFetcher):
    """README lookups through raw.githubusercontent.com."""

    platform = RepositorySource.GITHUB
    RAW_HOST = "https://raw.githubusercontent.com"

    def default_headers(self) -> Dict[str, str]:
        headers = super().default_headers()
        if self.config.token:
            headers["Authorization"] = f"token {self.config.token}"
        return headers

    def raw_url(self, repository: Repository, filename: str) -> str:
        return f"{self.RAW_HOST}/{repository.full_name}/{repository.branch}/{filename}"


class GitLabReadmeFetcher(RawContentFetcher):
    """README lookups through gitlab.com raw file URLs."""

    platform = RepositorySource.GITLAB
    HOST = "https://gitlab.com"

    def raw_url(self, repository: Repository, filename: str) -> str:
        return f"{self.HOST}/{repository.full_name}/-/raw/{repository.branch}/{filename}"


class PlatformReadmeFetcher:
    """Dispatches to the fetcher matching each repository's platform."""

    def __init__(self, config: Optional[GitHubConfig] = None,
                 metrics: Optional[MetricsCollector] = None):
        self.fetchers = {
            RepositorySource.GITHUB: GitHubReadmeFetcher(config, metrics=metrics),
            RepositorySource.GITLAB: GitLabReadmeFetcher(config, metrics=metrics),
        }

    def fetch_readme(self, repository: Repository) -> Optional[ReadmeDocument]:
        return self.fetchers[repository.source].fetch_readme(repository)
