"""Test declaration extraction."""

import pytest

from installator.core.config import ExtractorConfig
from installator.core.models import PluginManager, RatedChunk, Rating, Verdict
from installator.exceptions import ChunkRejectedError, ExtractionError
from installator.pipeline.extractor import (
    Extractor,
    LUA_MATCHERS,
    collect_plug_directives,
    extract_from_lua,
    extract_from_vim_plug,
    normalize,
)


def rated(content: str, *managers: PluginManager) -> RatedChunk:
    rates = {manager: Rating(scores=[4], verdict=Verdict.HIGH) for manager in managers}
    return RatedChunk(content=content, rates=rates)


class TestNormalize:
    """Test turning bare tables into Lua chunks."""

    def test_bare_table_gets_return(self):
        """Test that a leading table is returned."""
        assert normalize('{ "me/plug" }') == 'return { "me/plug" }'

    def test_trailing_text_after_table_is_cut(self):
        """Test that trailing commas after the last brace are dropped."""
        assert normalize('{ "me/plug" },') == 'return { "me/plug" }'

    def test_leading_comments_skipped(self):
        """Test that comment lines before the table are kept as they are."""
        assert normalize('-- lazy.nvim\n{ "me/plug" }') == '-- lazy.nvim\nreturn { "me/plug" }'

    def test_statements_untouched(self):
        """Test that code not starting with a table is unchanged."""
        code = 'use "me/plug"'
        assert normalize(code) == code


class TestLuaExtraction:
    """Test depth-bounded extraction from Lua snippets."""

    def test_bare_table(self):
        """Test extracting a bare lazy.nvim spec."""
        assert extract_from_lua('{ "me/plug" }', LUA_MATCHERS, "me/plug") == '{ "me/plug" }'

    def test_packer_use_table(self):
        """Test extracting the table from a use call."""
        code = 'use { "me/plug", requires = "dep/x" }'
        assert extract_from_lua(code, LUA_MATCHERS, "me/plug") == '{ "me/plug", requires = "dep/x" }'

    def test_packer_use_string(self):
        """Test that a bare string declaration is normalized to double quotes."""
        assert extract_from_lua("use 'me/plug'", LUA_MATCHERS, "me/plug") == '"me/plug"'

    def test_nested_spec(self):
        """Test a spec wrapped in a list of specs."""
        code = '{\n  { "me/plug", opts = {} },\n}'
        assert extract_from_lua(code, LUA_MATCHERS, "me/plug") == '{ "me/plug", opts = {} }'

    def test_spec_among_others(self):
        """Test picking the target out of a list of plugins."""
        code = 'return {\n  { "other/plug" },\n  { "me/plug", event = "BufRead" },\n}'
        assert extract_from_lua(code, LUA_MATCHERS, "me/plug") == '{ "me/plug", event = "BufRead" }'

    def test_dependency_mention_is_not_a_declaration(self):
        """Test that naming the plugin only as a dependency is not enough."""
        code = '{ "other/plug", dependencies = { "me/plug" } }'
        with pytest.raises(ExtractionError):
            extract_from_lua(code, LUA_MATCHERS, "me/plug")

    def test_declaration_beyond_depth_limit(self):
        """Test that deeply nested declarations are out of reach."""
        code = 'require("packer").startup(function(use)\n  use "me/plug"\nend)'
        with pytest.raises(ExtractionError):
            extract_from_lua(code, LUA_MATCHERS, "me/plug", max_depth=3)

    def test_invalid_lua(self):
        """Test that unparsable snippets are rejected."""
        with pytest.raises(ExtractionError) as exc_info:
            extract_from_lua('{ "me/plug", = }', LUA_MATCHERS, "me/plug", manager="lazy.nvim")
        assert exc_info.value.manager == "lazy.nvim"
        assert exc_info.value.stage == "extractor"

    def test_empty_snippet(self):
        """Test that blank snippets are rejected."""
        with pytest.raises(ExtractionError):
            extract_from_lua("   \n", LUA_MATCHERS, "me/plug")

    def test_extraction_is_deterministic(self):
        """Test that the same snippet always yields the same declaration."""
        code = '{ "me/plug", config = function() require("plug").setup() end }'
        first = extract_from_lua(code, LUA_MATCHERS, "me/plug")
        assert first == extract_from_lua(code, LUA_MATCHERS, "me/plug")


class TestVimPlugExtraction:
    """Test Plug directive extraction."""

    def test_collects_directives(self):
        """Test that each quoted argument is collected once."""
        code = "Plug 'a/b'\nPlug 'me/plug', { 'do': ':Update' }\nPlug 'a/b'"
        assert collect_plug_directives(code) == ["'a/b'", "'me/plug'"]

    def test_target_required(self):
        """Test that directives without the target are rejected."""
        with pytest.raises(ExtractionError):
            extract_from_vim_plug("Plug 'a/b'", "me/plug")

    def test_no_directives(self):
        """Test that code without Plug lines is rejected."""
        with pytest.raises(ExtractionError):
            extract_from_vim_plug("call plug#begin()", "me/plug")

    def test_returns_all_directives(self):
        """Test that dependencies are kept alongside the target."""
        code = "Plug 'nvim-lua/plenary.nvim'\nPlug 'me/plug'"
        assert extract_from_vim_plug(code, "me/plug") == ["'nvim-lua/plenary.nvim'", "'me/plug'"]


class TestExtractor:
    """Test extraction across rated chunks."""

    def test_only_high_managers_are_tried(self):
        """Test that non-high ratings are ignored."""
        chunk = RatedChunk(
            content='{ "me/plug" }',
            rates={PluginManager.LAZY: Rating(scores=[3], verdict=Verdict.MEDIUM)},
        )
        assert Extractor().extract_chunks([chunk], "me/plug") == []

    def test_first_chunk_per_manager_wins(self):
        """Test that later examples for the same manager are ignored."""
        chunks = [
            rated('{ "me/plug" }', PluginManager.LAZY),
            rated('{ "me/plug", lazy = true }', PluginManager.LAZY),
        ]
        extracted = Extractor().extract_chunks(chunks, "me/plug")

        assert len(extracted) == 1
        assert extracted[0].extracted == '{ "me/plug" }'
        assert extracted[0].plugin_manager == PluginManager.LAZY
        assert extracted[0].scores == [4]

    def test_failures_are_collected(self):
        """Test that failed extractions are reported and skipped."""
        chunks = [
            rated("not lua at all {", PluginManager.LAZY),
            rated('{ "me/plug" }', PluginManager.LAZY),
        ]
        rejections = []
        extracted = Extractor().extract_chunks(chunks, "me/plug", rejections)

        assert [chunk.extracted for chunk in extracted] == ['{ "me/plug" }']
        assert len(rejections) == 1
        assert isinstance(rejections[0], ChunkRejectedError)

    def test_results_in_priority_order(self):
        """Test that results come back as lazy.nvim, packer.nvim, vim-plug."""
        chunks = [
            rated("Plug 'me/plug'", PluginManager.VIM_PLUG),
            rated('use "me/plug"', PluginManager.PACKER),
        ]
        extracted = Extractor().extract_chunks(chunks, "me/plug")

        assert [chunk.plugin_manager for chunk in extracted] == [PluginManager.PACKER, PluginManager.VIM_PLUG]
        assert extracted[1].extracted == "'me/plug'"

    def test_depth_is_configurable(self):
        """Test that a larger depth reaches nested declarations."""
        code = 'require("packer").startup(function(use)\n  use "me/plug"\nend)'
        chunk = rated(code, PluginManager.PACKER)

        assert Extractor().extract_chunks([chunk], "me/plug") == []
        extracted = Extractor(ExtractorConfig(max_depth=6)).extract_chunks([chunk], "me/plug")
        assert extracted[0].extracted == '"me/plug"'
