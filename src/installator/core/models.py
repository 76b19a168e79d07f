"""Core data models for installation snippet extraction."""

from enum import Enum
from typing import List, Optional, Dict
from datetime import datetime, timezone
from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator, model_validator


class PluginManager(str, Enum):
    """Plugin manager formats known to the pipeline."""

    LAZY = "lazy.nvim"
    PACKER = "packer.nvim"
    VIM_PLUG = "vim-plug"
    VIM_PACK = "vim.pack"  # generation target only

    @property
    def is_detectable(self) -> bool:
        return self in DETECTABLE_MANAGERS


# Canonical priority order, used for selection and tie resolution
DETECTABLE_MANAGERS = (PluginManager.LAZY, PluginManager.PACKER, PluginManager.VIM_PLUG)


class Verdict(str, Enum):
    """Confidence that a chunk demonstrates a plugin manager's syntax."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return _VERDICT_RANKS[self]

    def __lt__(self, other):
        if not isinstance(other, Verdict):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if not isinstance(other, Verdict):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other):
        if not isinstance(other, Verdict):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):
        if not isinstance(other, Verdict):
            return NotImplemented
        return self.rank >= other.rank


_VERDICT_RANKS = {Verdict.LOW: 0, Verdict.MEDIUM: 1, Verdict.HIGH: 2}


class RepositorySource(str, Enum):
    """Hosting platforms a repository can live on."""

    GITHUB = "github"
    GITLAB = "gitlab"


class InstallSource(str, Enum):
    """Where a canonical installation came from."""

    DEFAULT = "default"
    LAZY = "lazy.nvim"
    PACKER = "packer.nvim"
    VIM_PLUG = "vim-plug"


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Timestamps without a zone are taken to be UTC so they stay comparable."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


_HOSTS = {
    RepositorySource.GITHUB: "https://github.com",
    RepositorySource.GITLAB: "https://gitlab.com",
}


class Repository(BaseModel):
    """Identity of a plugin repository."""

    full_name: str
    source: RepositorySource = RepositorySource.GITHUB
    url: Optional[str] = None
    branch: str = "main"
    description: Optional[str] = None
    updated_at: Optional[datetime] = None

    @field_validator('full_name')
    @classmethod
    def validate_full_name(cls, v: str) -> str:
        v = v.strip().strip('/')
        parts = v.split('/')
        if len(parts) < 2 or not all(parts):
            raise ValueError(f"Repository name must look like 'owner/name', got '{v}'")
        return v

    @field_validator('updated_at')
    @classmethod
    def validate_updated_at(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(v)

    @model_validator(mode='after')
    def default_url(self) -> 'Repository':
        if self.url is None:
            self.url = f"{_HOSTS[self.source]}/{self.full_name}"
        return self

    @computed_field
    @property
    def name(self) -> str:
        """Repository name without the owner."""
        return self.full_name.rsplit('/', 1)[1]

    @computed_field
    @property
    def module_name(self) -> str:
        """Lua module name conventionally exposed by the plugin."""
        name = self.name
        if name.endswith('.nvim'):
            name = name[:-len('.nvim')]
        return name

    @classmethod
    def from_identifier(cls, identifier: str, **kwargs) -> 'Repository':
        """Build a repository from 'owner/name' or a GitHub/GitLab URL."""
        value = identifier.strip()
        for source, host in _HOSTS.items():
            if value.startswith(host + '/'):
                kwargs.setdefault('source', source)
                value = value[len(host) + 1:]
                break
        if value.endswith('.git'):
            value = value[:-len('.git')]
        return cls(full_name=value, **kwargs)


class Chunk(BaseModel):
    """A candidate code region cut out of a README with its context."""

    model_config = ConfigDict(frozen=True)

    prev: str = ""
    content: str
    after: str = ""


class Rating(BaseModel):
    """Matched token weights and the verdict derived from them."""

    model_config = ConfigDict(frozen=True)

    scores: List[int] = Field(default_factory=list)
    verdict: Verdict = Verdict.LOW

    @computed_field
    @property
    def total(self) -> int:
        """Summed weight of all matched tokens."""
        return sum(self.scores)


class RatedChunk(Chunk):
    """A chunk rated against every detectable plugin manager."""

    rates: Dict[PluginManager, Rating] = Field(default_factory=dict)

    def rating(self, manager: PluginManager) -> Rating:
        return self.rates.get(manager, Rating())

    def high_managers(self) -> List[PluginManager]:
        """Managers rated high, in canonical priority order."""
        return [m for m in DETECTABLE_MANAGERS if self.rating(m).verdict == Verdict.HIGH]

    def to_chunk(self) -> Chunk:
        return Chunk(prev=self.prev, content=self.content, after=self.after)


class ExtractedChunk(Chunk):
    """A chunk narrowed to one winning plugin manager."""

    plugin_manager: PluginManager
    scores: List[int] = Field(default_factory=list)
    verdict: Verdict = Verdict.HIGH
    extracted: str


class MigratedChunk(ExtractedChunk):
    """An extracted chunk translated to lazy.nvim and vim.pack source."""

    migrated_lazy: str
    migrated_vim_pack: str


class FormattedChunk(MigratedChunk):
    """A migrated chunk whose outputs are pretty-printed and parse-validated."""

    formatted_lazy: str
    formatted_vim_pack: str


class ReadmeDocument(BaseModel):
    """README text together with where it was found."""

    text: str
    path: str


class Installation(BaseModel):
    """The canonical installation recommended for a repository."""

    source: InstallSource
    lazy: str
    vimpack: str


class RepositoryInstallation(BaseModel):
    """Everything produced while deriving one repository's installation."""

    repository: Repository
    installation: Installation
    readme_path: Optional[str] = None
    chunks: List[FormattedChunk] = Field(default_factory=list)
    from_cache: bool = False
    error: Optional[str] = None

    @computed_field
    @property
    def is_default(self) -> bool:
        return self.installation.source == InstallSource.DEFAULT
