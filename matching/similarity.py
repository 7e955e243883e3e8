"""
Name Similarity Calculators

Four independent scores over a (product, candidate) pair, each roughly in
[0, 1] with 1.0 for identical names:

1. substringSimilarity: shared name tokens / tokens of the shorter name
2. prefixSimilarity: common prefix / shorter name
3. LongestCommonSubsequenceSimilarity: LCS / shorter name (whitespace removed)
4. LengthAdjustedEditationDistance: 1 - (edit distance minus length gap) / shorter name

All calculators are stateless and safe to share between threads.
"""

from abc import ABC, abstractmethod
from typing import List

import numpy as np

from standardization.name_normalizer import strip_whitespace
from standardization.schema import NormalizedProduct

from .errors import InvariantViolation, PreconditionViolation


# ============================================
# Dynamic programming kernels
# ============================================

def _char_codes(text: str) -> np.ndarray:
    return np.fromiter(map(ord, text), dtype=np.int64, count=len(text))


def longest_common_subsequence(x: str, y: str) -> int:
    """
    Length of the longest common subsequence of two strings.

    Row by row: a cell is the best of the cell above and the diagonal plus
    one on a match, then a running maximum carries values to the right.
    """
    y_codes = _char_codes(y)
    previous = np.zeros(len(y) + 1, dtype=np.int32)

    for ch in x:
        matched = np.where(y_codes == ord(ch), previous[:-1] + 1, 0)
        row = np.zeros_like(previous)
        row[1:] = np.maximum.accumulate(np.maximum(previous[1:], matched))
        previous = row

    return int(previous[-1])


def edit_distance(x: str, y: str) -> int:
    """
    Levenshtein distance, unit cost for insertion, deletion and substitution.

    Deletions and substitutions come from the previous row; insertions are
    resolved in one pass with a running minimum over (cell - column).
    """
    y_codes = _char_codes(y)
    columns = np.arange(len(y) + 1, dtype=np.int32)
    previous = columns.copy()

    for i, ch in enumerate(x, start=1):
        cost = (y_codes != ord(ch)).astype(np.int32)
        row = np.empty_like(previous)
        row[0] = i
        row[1:] = np.minimum(previous[1:] + 1, previous[:-1] + cost)
        previous = np.minimum.accumulate(row - columns) + columns

    return int(previous[-1])


def length_adjusted_edit_distance(x: str, y: str) -> int:
    """
    Edit distance without the edits forced by the length difference.

    Raises:
        InvariantViolation: distance came out smaller than the length gap
    """
    result = edit_distance(x, y) - abs(len(x) - len(y))
    if result < 0:
        raise InvariantViolation(
            f"Adjusted edit distance of '{x}' and '{y}' is negative ({result})"
        )
    return result


def common_prefix_length(x: str, y: str) -> int:
    length = 0
    for a, b in zip(x, y):
        if a != b:
            break
        length += 1
    return length


# ============================================
# Calculators
# ============================================

class SimilarityCalculator(ABC):
    """Scores how likely a candidate is the same product."""

    name: str = ""

    @abstractmethod
    def calculate(self, product: NormalizedProduct, candidate: NormalizedProduct) -> float:
        pass

    def __call__(self, product: NormalizedProduct, candidate: NormalizedProduct) -> float:
        return self.calculate(product, candidate)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


def _stripped_names(product: NormalizedProduct, candidate: NormalizedProduct):
    x = strip_whitespace(product.name).lower()
    y = strip_whitespace(candidate.name).lower()
    if not x or not y:
        raise PreconditionViolation(
            f"Names without non-whitespace characters cannot be compared: "
            f"'{product.name}' / '{candidate.name}'"
        )
    return x, y


class SubstringSimilarityCalculator(SimilarityCalculator):
    """
    Shared token ratio.

    Only valid for pairs that share a token, which the candidate generator
    guarantees. The precondition is checked here but callers outside the
    generator are responsible for it.
    """

    name = "substringSimilarity"

    def calculate(self, product: NormalizedProduct, candidate: NormalizedProduct) -> float:
        product_tokens = set(product.name_tokens)
        candidate_tokens = set(candidate.name_tokens)

        shared = len(product_tokens & candidate_tokens)
        if shared == 0:
            raise PreconditionViolation(
                f"'{product.name}' and '{candidate.name}' share no token; "
                f"only candidate pairs may be scored by substring similarity"
            )

        return shared / min(len(product_tokens), len(candidate_tokens))


class PrefixSimilarityCalculator(SimilarityCalculator):
    name = "prefixSimilarity"

    def calculate(self, product: NormalizedProduct, candidate: NormalizedProduct) -> float:
        x = product.name.lower()
        y = candidate.name.lower()
        if not x or not y:
            raise PreconditionViolation("Product names may not be empty at this point")

        return common_prefix_length(x, y) / min(len(x), len(y))


class LongestCommonSubsequenceCalculator(SimilarityCalculator):
    name = "LongestCommonSubsequenceSimilarity"

    def calculate(self, product: NormalizedProduct, candidate: NormalizedProduct) -> float:
        x, y = _stripped_names(product, candidate)
        return longest_common_subsequence(x, y) / min(len(x), len(y))


class LengthAdjustedEditDistanceCalculator(SimilarityCalculator):
    name = "LengthAdjustedEditationDistance"

    def calculate(self, product: NormalizedProduct, candidate: NormalizedProduct) -> float:
        x, y = _stripped_names(product, candidate)
        min_length = min(len(x), len(y))
        return (min_length - length_adjusted_edit_distance(x, y)) / min_length


def get_similarity_calculators() -> List[SimilarityCalculator]:
    """The four calculators in fixed output order."""
    return [
        SubstringSimilarityCalculator(),
        PrefixSimilarityCalculator(),
        LongestCommonSubsequenceCalculator(),
        LengthAdjustedEditDistanceCalculator(),
    ]


SIMILARITY_TYPES = [calculator.name for calculator in get_similarity_calculators()]
