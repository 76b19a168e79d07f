"""Base parser interface for structural source parsing."""

from abc import ABC, abstractmethod
from typing import Any, Iterator, List, Optional
from enum import Enum


class ParserCapability(str, Enum):
    """Capabilities that a parser can support."""

    SYNTAX_TREE = "syntax_tree"
    ERROR_RECOVERY = "error_recovery"
    BYTE_SPANS = "byte_spans"


class ParseResult:
    """Result of parsing operation."""

    def __init__(self, tree: Any, language: str, source_code: str):
        self.tree = tree
        self.language = language
        self.source_code = source_code
        self.source_bytes = source_code.encode('utf-8')
        self.parse_time_ms: Optional[float] = None

    @property
    def root_node(self) -> Any:
        return self.tree.root_node

    @property
    def has_errors(self) -> bool:
        """True when the tree contains ERROR or MISSING nodes."""
        root = self.root_node
        if root.has_error:
            return True
        return any(node.is_missing for node in self.walk())

    def node_text(self, node: Any) -> str:
        """Exact source text covered by a node."""
        return self.source_bytes[node.start_byte:node.end_byte].decode('utf-8')

    def walk(self) -> Iterator[Any]:
        """Iterate over every node in document order."""
        stack = [self.root_node]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def error_locations(self) -> List[str]:
        """Human-readable positions of syntax errors."""
        locations = []
        for node in self.walk():
            if node.type == 'ERROR' or node.is_missing:
                row, column = node.start_point
                kind = f"missing '{node.type}'" if node.is_missing else "error"
                locations.append(f"{kind} at {row + 1}:{column + 1}")
        return locations


class BaseParser(ABC):
    """Abstract base class for source parsers."""

    def __init__(self, language: str):
        self.language = language
        self.capabilities: set = set()
        self._parser_instance: Optional[Any] = None

    @abstractmethod
    def parse(self, source_code: str) -> ParseResult:
        """Parse source code into a syntax tree."""
        pass

    def is_valid_syntax(self, source_code: str) -> bool:
        """Check whether source code parses without errors."""
        return not self.parse(source_code).has_errors

    def supports_capability(self, capability: ParserCapability) -> bool:
        return capability in self.capabilities
