"""
Comparison Scheduler

Builds one index per e-shop, then runs the three catalog-pair comparisons
on a fixed thread pool and waits for all of them. Failures are collected
from the futures and raised together once every comparison has finished.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Dict, List, Sequence

from standardization.schema import Eshop, NormalizedProduct

from .comparator import CatalogPairComparator, ComparisonSummary
from .config import MatchingConfig
from .errors import ComparisonFailed, PreconditionViolation
from .index import CatalogIndex
from .similarity import SIMILARITY_TYPES
from .sink import ResultSink

logger = logging.getLogger(__name__)

# Unordered e-shop pairs, one comparison each
ESHOP_PAIRS = [
    (Eshop.KOSIK, Eshop.ROHLIK),
    (Eshop.KOSIK, Eshop.TESCO),
    (Eshop.ROHLIK, Eshop.TESCO),
]


def assert_products_from_eshop(products: Sequence[NormalizedProduct], eshop: Eshop) -> None:
    for product in products:
        if product.eshop != eshop:
            raise PreconditionViolation(
                f"Product '{product.name}' is expected to be normalized from eshop "
                f"{eshop.value}, but instead it is from {product.eshop.value}."
            )


class ComparisonScheduler:
    """
    Runs KOSIK-ROHLIK, KOSIK-TESCO and ROHLIK-TESCO concurrently.

    Usage:
        scheduler = ComparisonScheduler(MatchingConfig(), FileResultSink(out_dir))
        summaries = scheduler.run(kosik, rohlik, tesco)
    """

    def __init__(self, config: MatchingConfig, sink: ResultSink):
        self.config = config
        self.sink = sink
        self._cancel_event = threading.Event()

    def cancel(self) -> None:
        """Ask running comparisons to stop at the next product."""
        logger.warning("Cancellation requested")
        self._cancel_event.set()

    @property
    def cancelled(self) -> bool:
        return self._cancel_event.is_set()

    def build_indices(
        self,
        kosik: Sequence[NormalizedProduct],
        rohlik: Sequence[NormalizedProduct],
        tesco: Sequence[NormalizedProduct],
    ) -> Dict[Eshop, CatalogIndex]:
        catalogs = {Eshop.KOSIK: kosik, Eshop.ROHLIK: rohlik, Eshop.TESCO: tesco}
        for eshop, products in catalogs.items():
            assert_products_from_eshop(products, eshop)

        indices = {eshop: CatalogIndex(products, eshop) for eshop, products in catalogs.items()}

        if self.config.mapping_view_dir is not None:
            for index in indices.values():
                index.write_mapping_view(self.config.mapping_view_dir)

        return indices

    def run(
        self,
        kosik: Sequence[NormalizedProduct],
        rohlik: Sequence[NormalizedProduct],
        tesco: Sequence[NormalizedProduct],
    ) -> List[ComparisonSummary]:
        """
        Compare all three catalog pairs.

        Raises:
            PreconditionViolation: a product list contains foreign products
            ComparisonFailed: at least one comparison raised
        """
        indices = self.build_indices(kosik, rohlik, tesco)

        comparators = [
            CatalogPairComparator(
                indices[a],
                indices[b],
                self.sink,
                limit_processed_products=self.config.limit_processed_products,
                cancel_event=self._cancel_event,
            )
            for a, b in ESHOP_PAIRS
        ]
        self.sink.prepare([c.pair_id for c in comparators], SIMILARITY_TYPES)

        with ThreadPoolExecutor(max_workers=self.config.workers, thread_name_prefix='compare') as executor:
            futures = {executor.submit(c.run): c.pair_id for c in comparators}
            wait(futures)

        summaries: List[ComparisonSummary] = []
        failures: Dict[str, BaseException] = {}
        for future, pair_id in futures.items():
            exc = future.exception()
            if exc is not None:
                logger.error(f"[{pair_id}] Comparison failed: {exc!r}")
                failures[pair_id] = exc
            else:
                summaries.append(future.result())

        if failures:
            raise ComparisonFailed(failures)

        return summaries
