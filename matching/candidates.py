"""
Candidate Generation

For a product of one catalog, collect every product of the other catalog
sharing at least one indexable name token. This prunes the full
cross-product of the two catalogs down to plausible pairs.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Set, Tuple

from standardization.schema import NormalizedProduct

from .errors import PreconditionViolation
from .index import CatalogIndex, is_indexable

logger = logging.getLogger(__name__)


def candidates_for(product: NormalizedProduct, other_index: CatalogIndex) -> Set[NormalizedProduct]:
    """
    Candidate set of a product within another catalog's index.

    A product without tokens of 3+ characters gets an empty set.
    """
    if other_index.eshop is not None and other_index.eshop == product.eshop:
        raise PreconditionViolation(
            f"Candidates of {product.eshop.value} product '{product.name}' "
            f"requested from its own catalog index"
        )

    candidates: Set[NormalizedProduct] = set()
    for token in product.name_tokens:
        if is_indexable(token):
            candidates.update(other_index.lookup(token))
    return candidates


@dataclass
class CandidateStatistics:
    """How well the index pruned one catalog pair."""
    pair_id: str
    smaller_size: int
    larger_size: int
    frequencies: Counter = field(default_factory=Counter)  # candidate count -> products

    def record(self, candidate_count: int) -> None:
        self.frequencies[candidate_count] += 1

    @property
    def products(self) -> int:
        return sum(self.frequencies.values())

    @property
    def candidates_sum(self) -> int:
        return sum(count * freq for count, freq in self.frequencies.items())

    @property
    def average_candidates(self) -> float:
        return self.candidates_sum / self.products if self.products else 0.0

    @property
    def possible_pairs(self) -> int:
        return self.smaller_size * self.larger_size

    @property
    def pruned_ratio_percent(self) -> float:
        if not self.possible_pairs:
            return 0.0
        return self.candidates_sum / self.possible_pairs * 100

    def to_dict(self) -> Dict:
        return {
            'pair_id': self.pair_id,
            'smaller_size': self.smaller_size,
            'larger_size': self.larger_size,
            'products': self.products,
            'candidates_sum': self.candidates_sum,
            'average_candidates': round(self.average_candidates, 2),
            'possible_pairs': self.possible_pairs,
            'pruned_ratio_percent': round(self.pruned_ratio_percent, 2),
            'frequencies': dict(sorted(self.frequencies.items())),
        }

    def format(self) -> str:
        lines = [
            f"Equal candidates frequencies of {self.pair_id.replace('_to_', ' -> ')}",
            "Format -- Equal candidates count : frequency",
        ]
        for count, freq in sorted(self.frequencies.items()):
            lines.append(f"{count} : {freq}")
        lines += [
            f"Products from smaller eshop: {self.products:,} should be equal to {self.smaller_size:,}",
            f"Sum of all candidates: {self.candidates_sum:,}",
            f"Average candidates per product of smaller eshop: {self.average_candidates:.2f}",
            f"Smaller eshop has {self.smaller_size:,} products and larger eshop has "
            f"{self.larger_size:,} products.",
            f"Meaning there are {self.possible_pairs:,} possible pairs of equal products.",
            f"Candidate generation narrowed the candidate list down to {self.candidates_sum:,}",
            f"Which is {self.pruned_ratio_percent:.2f} % of possible pairs.",
        ]
        return "\n".join(lines) + "\n"


def find_candidates_of_products(
    smaller: CatalogIndex,
    larger: CatalogIndex,
    pair_id: str,
) -> Tuple[List[Tuple[NormalizedProduct, Set[NormalizedProduct]]], CandidateStatistics]:
    """Candidate sets for every product of the smaller catalog, in catalog order."""
    stats = CandidateStatistics(pair_id=pair_id, smaller_size=len(smaller), larger_size=len(larger))
    results = []

    for product in smaller.products:
        candidates = candidates_for(product, larger)
        stats.record(len(candidates))
        results.append((product, candidates))

    logger.info(
        f"[{pair_id}] {stats.candidates_sum:,} candidates for {stats.products:,} products "
        f"({stats.pruned_ratio_percent:.2f}% of {stats.possible_pairs:,} pairs)"
    )
    return results, stats
