"""
Result Sinks

Where ranked candidate lists go once a product has been scored. The
comparator never builds paths itself; it hands every ranking to a sink.

- FileResultSink: one text file per (pair, metric, product)
- InMemoryResultSink: keeps everything in a dict, for tests and embedding
"""

import logging
import threading
from abc import ABC, abstractmethod
from collections import defaultdict
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from standardization.schema import NormalizedProduct

from .candidates import CandidateStatistics
from .ranking import SimilarityCandidatePair

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RankedResult:
    """One product's ranking under one metric."""
    metric_name: str
    pair_id: str
    product_name: str
    product_url: str
    ranked: Tuple[Tuple[float, str, str], ...]  # (score, candidate name, candidate url)


class ResultSink(ABC):
    """Accepts one ranked sequence at a time."""

    def prepare(self, pair_ids: Iterable[str], metric_names: Iterable[str]) -> None:
        """Called once before any comparison starts."""

    @abstractmethod
    def write(
        self,
        metric_name: str,
        pair_id: str,
        product: NormalizedProduct,
        ranked: List[SimilarityCandidatePair],
    ) -> None:
        pass

    def write_statistics(self, pair_id: str, statistics: CandidateStatistics) -> None:
        """Optional: candidate pruning statistics of a pair."""


class InMemoryResultSink(ResultSink):
    def __init__(self):
        self._lock = threading.Lock()
        self.results: Dict[Tuple[str, str], List[RankedResult]] = defaultdict(list)
        self.statistics: Dict[str, CandidateStatistics] = {}

    def write(self, metric_name, pair_id, product, ranked):
        result = RankedResult(
            metric_name=metric_name,
            pair_id=pair_id,
            product_name=product.name,
            product_url=product.url,
            ranked=tuple(pair.to_tuple() for pair in ranked),
        )
        with self._lock:
            self.results[(metric_name, pair_id)].append(result)

    def write_statistics(self, pair_id, statistics):
        with self._lock:
            self.statistics[pair_id] = statistics

    def get(self, metric_name: str, pair_id: str) -> List[RankedResult]:
        with self._lock:
            return list(self.results.get((metric_name, pair_id), []))

    def pair_ids(self) -> List[str]:
        with self._lock:
            return sorted({pair_id for _, pair_id in self.results})


class FileResultSink(ResultSink):
    """
    Writes rankings below output_dir:

        <output_dir>/<pair_id>/<metric>/<file_safe_key>.txt
        <output_dir>/candidatesStats<pair_id>.txt
    """

    def __init__(self, output_dir: Path):
        self.output_dir = Path(output_dir)
        self._lock = threading.Lock()

    def prepare(self, pair_ids, metric_names):
        """Create output directories and drop .txt files of a previous run."""
        self.output_dir.mkdir(parents=True, exist_ok=True)
        removed = 0
        metric_names = list(metric_names)
        for pair_id in pair_ids:
            for metric_name in metric_names:
                directory = self.output_dir / pair_id / metric_name
                directory.mkdir(parents=True, exist_ok=True)
                for stale in directory.glob('*.txt'):
                    stale.unlink()
                    removed += 1
        if removed:
            logger.info(f"Removed {removed} stale result files from {self.output_dir}")

    def _unique_path(self, directory: Path, key: str) -> Path:
        # Caller holds the lock
        path = directory / f"{key}.txt"
        suffix = 0
        while path.exists():
            suffix += 1
            path = directory / f"{key}_{suffix}.txt"
        # Reserve the name before releasing the lock
        path.touch()
        return path

    def write(self, metric_name, pair_id, product, ranked):
        directory = self.output_dir / pair_id / metric_name
        directory.mkdir(parents=True, exist_ok=True)

        lines = [f"Equal candidates of {product.name}, to be found at url: {product.url}"]
        for pair in ranked:
            lines.append(f"{pair.similarity:.4f}\t{pair.candidate.name}\t{pair.candidate.url}")

        with self._lock:
            path = self._unique_path(directory, product.file_safe_key)

        with open(path, 'w', encoding='utf-8') as f:
            f.write("\n".join(lines) + "\n")

    def write_statistics(self, pair_id, statistics):
        self.output_dir.mkdir(parents=True, exist_ok=True)
        path = self.output_dir / f"candidatesStats{pair_id}.txt"
        with open(path, 'w', encoding='utf-8') as f:
            f.write(statistics.format())
        logger.debug(f"Wrote candidate statistics to {path}")

    def result_path(self, pair_id: str, metric_name: str, key: str) -> Optional[Path]:
        """Path of a written ranking, None if nothing was written under that key."""
        path = self.output_dir / pair_id / metric_name / f"{key}.txt"
        return path if path.exists() else None
