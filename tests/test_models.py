"""Test core data models."""

import pytest
from datetime import datetime, timezone
from pydantic import ValidationError

from installator.core.models import (
    Chunk,
    InstallSource,
    Installation,
    PluginManager,
    RatedChunk,
    Rating,
    Repository,
    RepositoryInstallation,
    RepositorySource,
    Verdict,
    DETECTABLE_MANAGERS,
)


class TestRepository:
    """Test Repository data model."""

    def test_repository_creation(self):
        """Test derived names and default URL."""
        repository = Repository(full_name="folke/which-key.nvim")

        assert repository.name == "which-key.nvim"
        assert repository.module_name == "which-key"
        assert repository.url == "https://github.com/folke/which-key.nvim"
        assert repository.source == RepositorySource.GITHUB
        assert repository.branch == "main"

    def test_gitlab_url(self):
        """Test the default URL for GitLab repositories."""
        repository = Repository(full_name="group/plug", source="gitlab")
        assert repository.url == "https://gitlab.com/group/plug"

    @pytest.mark.parametrize("name", ["plug", "/plug", "me/", ""])
    def test_invalid_full_name(self, name):
        """Test that names must look like owner/name."""
        with pytest.raises(ValidationError):
            Repository(full_name=name)

    def test_from_identifier(self):
        """Test building repositories from URLs."""
        github = Repository.from_identifier("https://github.com/me/plug.git")
        gitlab = Repository.from_identifier("https://gitlab.com/me/plug")

        assert github.full_name == "me/plug"
        assert github.source == RepositorySource.GITHUB
        assert gitlab.source == RepositorySource.GITLAB
        assert Repository.from_identifier("me/plug", branch="master").branch == "master"

    def test_updated_at_is_utc(self):
        """Test that naive timestamps are taken as UTC."""
        repository = Repository(full_name="me/plug", updated_at=datetime(2024, 1, 1))
        assert repository.updated_at.tzinfo == timezone.utc


class TestRatings:
    """Test rating models."""

    def test_rating_total(self):
        """Test the summed score."""
        assert Rating(scores=[4, 2, 2], verdict=Verdict.HIGH).total == 8

    def test_missing_rating_is_low(self):
        """Test that managers without a rating count as low."""
        chunk = RatedChunk(content="x")
        assert chunk.rating(PluginManager.LAZY).verdict == Verdict.LOW
        assert chunk.high_managers() == []

    def test_chunks_are_immutable(self):
        """Test that chunks cannot be changed after creation."""
        chunk = Chunk(content="x")
        with pytest.raises(ValidationError):
            chunk.content = "y"

    def test_to_chunk(self):
        """Test dropping ratings from a rated chunk."""
        chunk = RatedChunk(prev="p", content="c", after="a")
        assert chunk.to_chunk() == Chunk(prev="p", content="c", after="a")

    def test_detectable_managers(self):
        """Test that vim.pack is only a target."""
        assert PluginManager.VIM_PACK not in DETECTABLE_MANAGERS
        assert not PluginManager.VIM_PACK.is_detectable
        assert DETECTABLE_MANAGERS[0] == PluginManager.LAZY


class TestRepositoryInstallation:
    """Test installation results."""

    def test_is_default(self):
        """Test the default flag."""
        result = RepositoryInstallation(
            repository=Repository(full_name="me/plug"),
            installation=Installation(source=InstallSource.DEFAULT, lazy="", vimpack=""),
        )
        assert result.is_default
        assert result.model_dump(mode='json')['installation']['source'] == "default"
