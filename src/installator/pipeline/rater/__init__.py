"""Rate chunks against every detectable plugin manager."""

import logging
from typing import Dict, List, Optional, Sequence

from ...core.models import Chunk, RatedChunk, Rating, Verdict, PluginManager, DETECTABLE_MANAGERS
from .base import TokenMatcher, calculate_verdict, rate_with_tokens
from .lazy import LAZY_TOKENS
from .packer import PACKER_TOKENS
from .vim_plug import VIM_PLUG_TOKENS


logger = logging.getLogger(__name__)


TOKEN_SUITES: Dict[PluginManager, Sequence[TokenMatcher]] = {
    PluginManager.LAZY: LAZY_TOKENS,
    PluginManager.PACKER: PACKER_TOKENS,
    PluginManager.VIM_PLUG: VIM_PLUG_TOKENS,
}


def resolve_ties(rates: Dict[PluginManager, Rating]) -> Dict[PluginManager, Rating]:
    """Keep ``high`` for at most one manager.

    Among managers rated high, the one with the greatest summed score wins;
    equal sums go to the earlier manager in priority order. Every other
    high rating is demoted to medium. Applying this twice changes nothing.
    """
    contenders = [m for m in DETECTABLE_MANAGERS if m in rates and rates[m].verdict == Verdict.HIGH]
    if len(contenders) <= 1:
        return dict(rates)

    winner = max(contenders, key=lambda m: (rates[m].total, -DETECTABLE_MANAGERS.index(m)))

    resolved = {}
    for manager, rating in rates.items():
        if manager in contenders and manager != winner:
            resolved[manager] = Rating(scores=list(rating.scores), verdict=Verdict.MEDIUM)
        else:
            resolved[manager] = rating
    return resolved


class Rater:
    """Scores chunks with one independent token suite per manager."""

    def __init__(self, suites: Optional[Dict[PluginManager, Sequence[TokenMatcher]]] = None):
        self.suites = suites or TOKEN_SUITES

    def rate(self, chunk: Chunk) -> RatedChunk:
        rates = {manager: rate_with_tokens(chunk, tokens) for manager, tokens in self.suites.items()}
        return RatedChunk(prev=chunk.prev, content=chunk.content, after=chunk.after, rates=resolve_ties(rates))

    def rate_chunks(self, chunks: List[Chunk]) -> List[RatedChunk]:
        rated = [self.rate(chunk) for chunk in chunks]
        for index, chunk in enumerate(rated):
            summary = ", ".join(
                f"{manager.value}={rating.verdict.value}{rating.scores}"
                for manager, rating in chunk.rates.items()
            )
            logger.debug(f"chunk {index}: {summary}")
        return rated


def rate_chunks(chunks: List[Chunk]) -> List[RatedChunk]:
    return Rater().rate_chunks(chunks)


__all__ = [
    "Rater",
    "TokenMatcher",
    "TOKEN_SUITES",
    "calculate_verdict",
    "rate_chunks",
    "resolve_ties",
]
