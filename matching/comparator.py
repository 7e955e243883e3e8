"""
Pairwise Catalog Comparator

For one pair of catalogs: take the smaller one, generate candidates for
each of its products from the larger one, rank the candidates under every
similarity metric and hand the rankings to the result sink.
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .candidates import find_candidates_of_products
from .config import DEFAULT_LIMIT_PROCESSED_PRODUCTS
from .errors import ComparisonCancelled
from .index import CatalogIndex
from .ranking import rank_candidates
from .similarity import SimilarityCalculator, get_similarity_calculators
from .sink import ResultSink

logger = logging.getLogger(__name__)


def order_by_size(index_a: CatalogIndex, index_b: CatalogIndex) -> Tuple[CatalogIndex, CatalogIndex]:
    """
    (smaller, larger) of two catalog indices.

    Equal sizes are resolved by e-shop declaration order so the choice
    does not depend on argument order.
    """
    def key(index: CatalogIndex):
        eshop_order = index.eshop.order if index.eshop is not None else -1
        return (len(index), eshop_order)

    smaller, larger = sorted((index_a, index_b), key=key)
    return smaller, larger


def pair_id_for(smaller: CatalogIndex, larger: CatalogIndex) -> str:
    return f"{smaller.label}_to_{larger.label}"


@dataclass
class ComparisonSummary:
    pair_id: str
    smaller_size: int
    larger_size: int
    processed_products: int
    rankings_written: int
    elapsed: float


class CatalogPairComparator:
    """
    Compares two catalogs.

    Usage:
        comparator = CatalogPairComparator(kosik_index, tesco_index, sink)
        summary = comparator.run()
    """

    def __init__(
        self,
        index_a: CatalogIndex,
        index_b: CatalogIndex,
        sink: ResultSink,
        calculators: Optional[Sequence[SimilarityCalculator]] = None,
        limit_processed_products: int = DEFAULT_LIMIT_PROCESSED_PRODUCTS,
        cancel_event: Optional[threading.Event] = None,
    ):
        self.smaller, self.larger = order_by_size(index_a, index_b)
        self.pair_id = pair_id_for(self.smaller, self.larger)
        self.sink = sink
        self.calculators: List[SimilarityCalculator] = (
            list(calculators) if calculators is not None else get_similarity_calculators()
        )
        self.limit_processed_products = limit_processed_products
        self.cancel_event = cancel_event

    def _check_cancelled(self):
        if self.cancel_event is not None and self.cancel_event.is_set():
            raise ComparisonCancelled(f"[{self.pair_id}] comparison cancelled")

    def run(self) -> ComparisonSummary:
        start_time = time.time()
        logger.info(
            f"[{self.pair_id}] Comparing {len(self.smaller)} products against {len(self.larger)}"
        )

        self._check_cancelled()
        candidates_of_products, statistics = find_candidates_of_products(
            self.smaller, self.larger, self.pair_id
        )
        self.sink.write_statistics(self.pair_id, statistics)

        limit = min(self.limit_processed_products, len(candidates_of_products))
        rankings_written = 0

        for product, candidates in candidates_of_products[:limit]:
            self._check_cancelled()
            logger.debug(f"[{self.pair_id}] {product.name}: {len(candidates)} candidates")

            for calculator in self.calculators:
                ranked = rank_candidates(product, candidates, calculator.calculate)
                self.sink.write(calculator.name, self.pair_id, product, ranked)
                rankings_written += 1

        elapsed = time.time() - start_time
        logger.info(
            f"[{self.pair_id}] Done: {limit} products, {rankings_written} rankings in {elapsed:.2f}s"
        )

        return ComparisonSummary(
            pair_id=self.pair_id,
            smaller_size=len(self.smaller),
            larger_size=len(self.larger),
            processed_products=limit,
            rankings_written=rankings_written,
            elapsed=elapsed,
        )
