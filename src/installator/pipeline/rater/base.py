"""Weighted token matching shared by every plugin manager suite."""

import re
from dataclasses import dataclass
from typing import Pattern, Sequence, Tuple

from ...core.models import Chunk, Rating, Verdict


PREV = "prev"
CONTENT = "content"
AFTER = "after"

WEIGHTS = (2, 3, 4)


@dataclass(frozen=True)
class TokenMatcher:
    """One heuristic signal for a plugin manager.

    ``scope`` names the chunk fields joined (with spaces) before the
    pattern is searched. ``requires_table`` additionally demands a ``{`` in
    the chunk content, for keys that only make sense inside a Lua table.
    """

    description: str
    weight: int
    pattern: Pattern
    scope: Tuple[str, ...] = (CONTENT,)
    requires_table: bool = False
    single_line: bool = False

    def __post_init__(self):
        if self.weight not in WEIGHTS:
            raise ValueError(f"Token weight must be one of {WEIGHTS}, got {self.weight}")

    def matches(self, chunk: Chunk) -> bool:
        if self.requires_table and "{" not in chunk.content:
            return False
        text = " ".join(getattr(chunk, field) for field in self.scope)
        if self.single_line:
            text = text.replace("\n", " ")
        return self.pattern.search(text) is not None


def token(description: str, weight: int, pattern: str, *scope: str,
          flags: int = 0, single_line: bool = False) -> TokenMatcher:
    return TokenMatcher(
        description=description,
        weight=weight,
        pattern=re.compile(pattern, flags),
        scope=scope or (CONTENT,),
        single_line=single_line,
    )


def table_key(key: str, weight: int, description: str, value: str = "") -> TokenMatcher:
    """``key =`` (optionally followed by ``value``) inside a Lua table."""
    return TokenMatcher(
        description=description,
        weight=weight,
        pattern=re.compile(rf"\b{re.escape(key)}\s*=\s*{value}" if value else rf"\b{re.escape(key)}\s*="),
        requires_table=True,
    )


def word(text: str, weight: int, description: str, *scope: str, ignore_case: bool = False) -> TokenMatcher:
    """Standalone word, not part of a longer identifier or hyphenated name."""
    return token(
        description,
        weight,
        rf"(?<![\w-]){re.escape(text)}(?![\w-])",
        *scope,
        flags=re.IGNORECASE if ignore_case else 0,
    )


def match_tokens(chunk: Chunk, tokens: Sequence[TokenMatcher]) -> list:
    """Weights of the matched tokens, in suite order."""
    return [t.weight for t in tokens if t.matches(chunk)]


def calculate_verdict(scores: Sequence[int]) -> Verdict:
    """Decision table over the counts of weight-4, weight-3 and weight-2 hits."""
    strong = scores.count(4)
    medium = scores.count(3)
    weak = scores.count(2)

    if strong >= 1:
        return Verdict.HIGH
    if medium >= 2:
        return Verdict.HIGH
    if medium == 1 and weak >= 1:
        return Verdict.HIGH
    if medium == 1:
        return Verdict.MEDIUM
    return Verdict.LOW


def rate_with_tokens(chunk: Chunk, tokens: Sequence[TokenMatcher]) -> Rating:
    scores = match_tokens(chunk, tokens)
    return Rating(scores=scores, verdict=calculate_verdict(scores))
