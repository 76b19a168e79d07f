"""README fetchers consumed by the installation engine."""

from .local import FileReadmeFetcher, LocalReadmeFetcher
from .remote import (
    GitHubReadmeFetcher,
    GitLabReadmeFetcher,
    PlatformReadmeFetcher,
    RawContentFetcher,
    TransientFetchError,
)

__all__ = [
    "FileReadmeFetcher",
    "GitHubReadmeFetcher",
    "GitLabReadmeFetcher",
    "LocalReadmeFetcher",
    "PlatformReadmeFetcher",
    "RawContentFetcher",
    "TransientFetchError",
]
