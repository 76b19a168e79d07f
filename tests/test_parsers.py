"""Test tree-sitter Lua parsing helpers."""

import logging
import threading

import pytest

from installator.exceptions import LanguageNotSupportedError
from installator.parsers import ParserCapability, is_valid_lua, parse_lua
from installator.parsers.lua import quote_string, string_value, table_fields, walk_with_depth
from installator.parsers.tree_sitter_parser import TreeSitterParser, get_lua_parser
from installator.core.config import MonitoringConfig
from installator.utils.metrics import MetricsCollector, get_metrics_collector


def first_table(result):
    for node in result.walk():
        if node.type == "table_constructor":
            return node
    raise AssertionError("no table in source")


class TestTreeSitterParser:
    """Test the parser wrapper."""

    def test_valid_and_invalid(self):
        """Test error detection including missing nodes."""
        assert is_valid_lua('return { "me/plug" }')
        assert not is_valid_lua('return { "me/plug"')
        assert not is_valid_lua('use {')

    def test_error_locations(self):
        """Test that errors come with line and column."""
        locations = parse_lua('local x = {\n').error_locations()
        assert locations
        assert all(":" in location for location in locations)

    def test_unknown_language(self):
        """Test that only Lua is available."""
        with pytest.raises(LanguageNotSupportedError):
            TreeSitterParser('python')

    def test_capabilities(self):
        """Test declared parser capabilities."""
        assert get_lua_parser().supports_capability(ParserCapability.BYTE_SPANS)

    def test_parser_per_thread(self):
        """Test that worker threads get their own parser."""
        parsers = []
        thread = threading.Thread(target=lambda: parsers.append(get_lua_parser()))
        thread.start()
        thread.join()

        assert parsers[0] is not get_lua_parser()

    def test_node_text_is_byte_accurate(self):
        """Test spans over multi-byte characters."""
        result = parse_lua('local s = "héllo"\nreturn { "me/plug" }')
        table = first_table(result)
        assert result.node_text(table) == '{ "me/plug" }'


class TestLuaHelpers:
    """Test syntax tree helpers."""

    def test_table_fields(self):
        """Test positional, named, string and computed keys."""
        result = parse_lua('return { "me/plug", lazy = true, ["opt"] = 1, [key] = 2 }')
        fields = table_fields(first_table(result), result)

        assert [field.key for field in fields] == [None, "lazy", "opt", "key"]
        assert fields[0].is_positional
        assert string_value(fields[0].value, result) == "me/plug"
        assert fields[3].computed
        assert not fields[2].computed

    def test_depth_limit(self):
        """Test that nodes beyond the limit are never visited."""
        result = parse_lua('return { a = { b = { c = { "deep" } } } }')
        depths = [depth for _, depth in walk_with_depth(result.root_node, 3)]

        assert max(depths) == 3
        assert not any(
            node.type == "string" for node, _ in walk_with_depth(result.root_node, 3)
        )

    def test_positional_entries_are_transparent(self):
        """Test that list entries cost one level, not two."""
        result = parse_lua('return { { "a/b" }, { "c/d" } }')
        tables = [depth for node, depth in walk_with_depth(result.root_node, 3)
                  if node.type == "table_constructor"]

        assert tables == [2, 3, 3]

    @pytest.mark.parametrize("raw,quoted", [
        ("me/plug", '"me/plug"'),
        ('say "hi"', '"say \\"hi\\""'),
        ('already \\"escaped\\"', '"already \\"escaped\\""'),
        ("two\nlines", '"two\\nlines"'),
    ])
    def test_quote_string(self, raw, quoted):
        """Test quoting raw literal content."""
        assert quote_string(raw) == quoted
        assert is_valid_lua(f"return {quote_string(raw)}")


class TestMetricsCollector:
    """Test in-process metric totals."""

    def test_summary_counts(self):
        """Test that recorded events show up in the summary."""
        metrics = MetricsCollector()
        metrics.record_stage("cutter", 3, 0.01)
        metrics.record_installation("default")
        metrics.record_cache_lookup(False)

        summary = metrics.get_summary()
        assert summary["counts"]["chunks_cutter"] == 3
        assert summary["counts"]["installation_default"] == 1
        assert summary["counts"]["cache_misses"] == 1
        assert summary["memory_usage_mb"] > 0

    def test_first_config_wins(self, caplog):
        """Test that the shared collector keeps its first configuration."""
        collector = get_metrics_collector()
        other = MonitoringConfig(log_level="CRITICAL")

        with caplog.at_level(logging.DEBUG, logger="installator.utils.metrics"):
            assert get_metrics_collector(other) is collector

        assert collector.config != other
        assert "already configured" in caplog.text
