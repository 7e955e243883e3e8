"""
Cross-E-shop Matching Pipeline

Loads the three normalized catalogs, runs the pairwise comparisons and
writes ranked candidate lists for every processed product.

Output per catalog pair (smaller e-shop first):
- candidatesStats<PAIR>.txt: how much the token index pruned the pair space
- <PAIR>/<metric>/<product>.txt: candidates ranked by one similarity metric
"""

import logging
import time
from pathlib import Path
from typing import Dict, Optional, Sequence, Union

from standardization.loader import load_catalog
from standardization.schema import Eshop, NormalizedProduct

from .config import MatchingConfig
from .scheduler import ComparisonScheduler
from .sink import FileResultSink, ResultSink

logger = logging.getLogger(__name__)


def run_matching(
    kosik: Sequence[NormalizedProduct],
    rohlik: Sequence[NormalizedProduct],
    tesco: Sequence[NormalizedProduct],
    config: Optional[MatchingConfig] = None,
    sink: Optional[ResultSink] = None,
) -> Dict:
    """Compare already-loaded catalogs. Returns run statistics."""
    config = config or MatchingConfig()
    sink = sink or FileResultSink(config.output_dir)

    start_time = time.time()
    scheduler = ComparisonScheduler(config, sink)
    summaries = scheduler.run(kosik, rohlik, tesco)

    return {
        'by_store': {
            Eshop.KOSIK.value: len(kosik),
            Eshop.ROHLIK.value: len(rohlik),
            Eshop.TESCO.value: len(tesco),
        },
        'pairs': {
            s.pair_id: {
                'smaller_size': s.smaller_size,
                'larger_size': s.larger_size,
                'processed_products': s.processed_products,
                'rankings_written': s.rankings_written,
                'elapsed': round(s.elapsed, 2),
            }
            for s in sorted(summaries, key=lambda s: s.pair_id)
        },
        'elapsed': round(time.time() - start_time, 2),
    }


def run_matching_pipeline(
    kosik_path: Union[str, Path],
    rohlik_path: Union[str, Path],
    tesco_path: Union[str, Path],
    config: Optional[MatchingConfig] = None,
    sink: Optional[ResultSink] = None,
) -> Dict:
    """Load catalog files and compare them."""
    kosik = load_catalog(kosik_path, Eshop.KOSIK)
    rohlik = load_catalog(rohlik_path, Eshop.ROHLIK)
    tesco = load_catalog(tesco_path, Eshop.TESCO)
    logger.info("Normalized products have been loaded to same product estimator")

    return run_matching(kosik, rohlik, tesco, config=config, sink=sink)
