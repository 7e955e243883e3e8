"""
Candidate Ranking

Scores a candidate set with one calculator and orders it best-first.
"""

from dataclasses import dataclass
from typing import Callable, Iterable, List, Tuple

from standardization.schema import NormalizedProduct


@dataclass(frozen=True)
class SimilarityCandidatePair:
    similarity: float
    candidate: NormalizedProduct

    def to_tuple(self) -> Tuple[float, str, str]:
        """(score, candidate name, candidate url) as handed to sinks."""
        return (self.similarity, self.candidate.name, self.candidate.url)


def _rank_key(pair: SimilarityCandidatePair):
    # Descending score; equal scores ordered by name, then url
    return (-pair.similarity, pair.candidate.name, pair.candidate.url)


def rank_candidates(
    product: NormalizedProduct,
    candidates: Iterable[NormalizedProduct],
    score: Callable[[NormalizedProduct, NormalizedProduct], float],
) -> List[SimilarityCandidatePair]:
    """Score every candidate against the product, highest similarity first."""
    scored = [SimilarityCandidatePair(score(product, candidate), candidate) for candidate in candidates]
    scored.sort(key=_rank_key)
    return scored
