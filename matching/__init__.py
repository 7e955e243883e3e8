"""
Matching Module

Cross-e-shop product matching: token index, candidate generation,
four name-similarity metrics and the concurrent pair scheduler.
"""

from .candidates import CandidateStatistics, candidates_for, find_candidates_of_products
from .comparator import CatalogPairComparator, ComparisonSummary
from .config import MatchingConfig
from .errors import (
    ComparisonCancelled,
    ComparisonFailed,
    InvariantViolation,
    MatchingError,
    PreconditionViolation,
)
from .index import CatalogIndex
from .pipeline import run_matching, run_matching_pipeline
from .ranking import SimilarityCandidatePair, rank_candidates
from .scheduler import ComparisonScheduler
from .similarity import (
    LengthAdjustedEditDistanceCalculator,
    LongestCommonSubsequenceCalculator,
    PrefixSimilarityCalculator,
    SimilarityCalculator,
    SubstringSimilarityCalculator,
    get_similarity_calculators,
)
from .sink import FileResultSink, InMemoryResultSink, RankedResult, ResultSink

__all__ = [
    # Index + candidates
    'CatalogIndex',
    'candidates_for',
    'find_candidates_of_products',
    'CandidateStatistics',

    # Similarity
    'SimilarityCalculator',
    'SubstringSimilarityCalculator',
    'PrefixSimilarityCalculator',
    'LongestCommonSubsequenceCalculator',
    'LengthAdjustedEditDistanceCalculator',
    'get_similarity_calculators',
    'SimilarityCandidatePair',
    'rank_candidates',

    # Orchestration
    'CatalogPairComparator',
    'ComparisonSummary',
    'ComparisonScheduler',
    'MatchingConfig',
    'run_matching',
    'run_matching_pipeline',

    # Sinks
    'ResultSink',
    'FileResultSink',
    'InMemoryResultSink',
    'RankedResult',

    # Errors
    'MatchingError',
    'PreconditionViolation',
    'InvariantViolation',
    'ComparisonCancelled',
    'ComparisonFailed',
]
