#!/usr/bin/env python3
"""
Tests for the four name-similarity calculators and their DP kernels.
"""

import itertools
import unittest
from decimal import Decimal

from matching.errors import PreconditionViolation
from matching.similarity import (
    LengthAdjustedEditDistanceCalculator,
    LongestCommonSubsequenceCalculator,
    PrefixSimilarityCalculator,
    SubstringSimilarityCalculator,
    common_prefix_length,
    edit_distance,
    get_similarity_calculators,
    length_adjusted_edit_distance,
    longest_common_subsequence,
)
from standardization.schema import Eshop, NormalizedProduct


def product(name, eshop=Eshop.KOSIK, url=None):
    return NormalizedProduct(name=name, url=url or f"https://{eshop.value.lower()}.cz/{name}",
                             price=Decimal("10"), eshop=eshop)


def full_table_lcs(x, y):
    table = [[0] * (len(y) + 1) for _ in range(len(x) + 1)]
    for i in range(1, len(x) + 1):
        for j in range(1, len(y) + 1):
            if x[i - 1] == y[j - 1]:
                table[i][j] = table[i - 1][j - 1] + 1
            else:
                table[i][j] = max(table[i - 1][j], table[i][j - 1])
    return table[len(x)][len(y)]


def full_table_edit_distance(x, y):
    table = [[0] * (len(y) + 1) for _ in range(len(x) + 1)]
    for i in range(len(x) + 1):
        table[i][0] = i
    for j in range(len(y) + 1):
        table[0][j] = j
    for i in range(1, len(x) + 1):
        for j in range(1, len(y) + 1):
            substitution = 0 if x[i - 1] == y[j - 1] else 1
            table[i][j] = min(table[i - 1][j] + 1, table[i][j - 1] + 1,
                              table[i - 1][j - 1] + substitution)
    return table[len(x)][len(y)]


SAMPLE_NAMES = [
    "Jablka Gala 1kg",
    "Jablka Gala 1 kg",
    "Mleko polotucne 1l",
    "Polotucne mleko Tatra 1 l",
    "Kuracie prsia",
    "Rohlik tukovy 43g",
    "a",
]


class TestKernels(unittest.TestCase):

    def test_lcs_known_values(self):
        self.assertEqual(longest_common_subsequence("abcbdab", "bdcaba"), 4)
        self.assertEqual(longest_common_subsequence("abc", "abc"), 3)
        self.assertEqual(longest_common_subsequence("abc", "xyz"), 0)
        self.assertEqual(longest_common_subsequence("", "abc"), 0)

    def test_edit_distance_known_values(self):
        self.assertEqual(edit_distance("kitten", "sitting"), 3)
        self.assertEqual(edit_distance("", "abc"), 3)
        self.assertEqual(edit_distance("flaw", "lawn"), 2)
        self.assertEqual(edit_distance("same", "same"), 0)

    def test_length_adjusted_edit_distance(self):
        # 3 edits, one of them forced by the length gap
        self.assertEqual(length_adjusted_edit_distance("kitten", "sitting"), 2)
        # pure length difference costs nothing
        self.assertEqual(length_adjusted_edit_distance("mleko", "mlekotatra"), 0)

    def test_symmetry(self):
        for a, b in itertools.product(SAMPLE_NAMES, repeat=2):
            x, y = a.lower(), b.lower()
            self.assertEqual(longest_common_subsequence(x, y), longest_common_subsequence(y, x))
            self.assertEqual(edit_distance(x, y), edit_distance(y, x))

    def test_adjusted_distance_never_negative(self):
        for a, b in itertools.product(SAMPLE_NAMES, repeat=2):
            self.assertGreaterEqual(edit_distance(a, b) - abs(len(a) - len(b)), 0)
            self.assertGreaterEqual(length_adjusted_edit_distance(a, b), 0)

    def test_kernels_agree_with_full_table(self):
        words = ["", "a", "ab", "ba", "abcbdab", "bdcaba", "kitten", "sitting",
                 "jablkagala1kg", "jablkagala1kg", "polotucnemlekotatra1l", "mleko\xa0tatra", "žluťoučký"]
        for a, b in itertools.product(words, repeat=2):
            self.assertEqual(longest_common_subsequence(a, b), full_table_lcs(a, b), (a, b))
            self.assertEqual(edit_distance(a, b), full_table_edit_distance(a, b), (a, b))

    def test_common_prefix_length(self):
        self.assertEqual(common_prefix_length("jablka gala", "jablka zlata"), 7)
        self.assertEqual(common_prefix_length("abc", "xbc"), 0)
        self.assertEqual(common_prefix_length("ab", "abc"), 2)


class TestCalculators(unittest.TestCase):

    def test_identical_names_score_one(self):
        a = product("Jablka Gala 1kg", Eshop.KOSIK)
        b = product("Jablka Gala 1kg", Eshop.TESCO)
        for calculator in get_similarity_calculators():
            self.assertEqual(calculator.calculate(a, b), 1.0, calculator.name)

    def test_split_quantity(self):
        a = product("Jablka Gala 1kg", Eshop.KOSIK)
        b = product("Jablka Gala 1 kg", Eshop.ROHLIK)

        # jablka, gala shared out of min(3, 4) tokens
        self.assertAlmostEqual(SubstringSimilarityCalculator().calculate(a, b), 2 / 3)
        # "jablka gala 1" is the common prefix of a 15 character name
        self.assertAlmostEqual(PrefixSimilarityCalculator().calculate(a, b), 13 / 15)
        # whitespace removed, the names are identical
        self.assertEqual(LongestCommonSubsequenceCalculator().calculate(a, b), 1.0)
        self.assertEqual(LengthAdjustedEditDistanceCalculator().calculate(a, b), 1.0)

    def test_substring_requires_shared_token(self):
        a = product("Mleko", Eshop.KOSIK)
        b = product("Kuracie prsia", Eshop.TESCO)
        with self.assertRaises(PreconditionViolation):
            SubstringSimilarityCalculator().calculate(a, b)

    def test_substring_uses_token_sets(self):
        a = product("mleko mleko tatra", Eshop.KOSIK)
        b = product("mleko", Eshop.TESCO)
        self.assertEqual(SubstringSimilarityCalculator().calculate(a, b), 1.0)

    def test_prefix_is_case_insensitive(self):
        a = product("MLEKO Tatra", Eshop.KOSIK)
        b = product("mleko tatra", Eshop.ROHLIK)
        self.assertEqual(PrefixSimilarityCalculator().calculate(a, b), 1.0)

    def test_whitespace_only_name_is_rejected(self):
        a = product("   ", Eshop.KOSIK)
        b = product("mleko", Eshop.ROHLIK)
        with self.assertRaises(PreconditionViolation):
            LongestCommonSubsequenceCalculator().calculate(a, b)
        with self.assertRaises(PreconditionViolation):
            LengthAdjustedEditDistanceCalculator().calculate(a, b)

    def test_scores_within_unit_interval(self):
        products = [product(name, Eshop.KOSIK) for name in SAMPLE_NAMES]
        others = [product(name, Eshop.TESCO) for name in SAMPLE_NAMES]

        for a, b in itertools.product(products, others):
            shares_token = bool(set(a.name_tokens) & set(b.name_tokens))
            for calculator in get_similarity_calculators():
                if calculator.name == SubstringSimilarityCalculator.name and not shares_token:
                    continue
                score = calculator.calculate(a, b)
                self.assertGreaterEqual(score, 0.0, f"{calculator.name} {a.name} / {b.name}")
                self.assertLessEqual(score, 1.0, f"{calculator.name} {a.name} / {b.name}")

    def test_calculator_names_and_order(self):
        names = [c.name for c in get_similarity_calculators()]
        self.assertEqual(names, [
            "substringSimilarity",
            "prefixSimilarity",
            "LongestCommonSubsequenceSimilarity",
            "LengthAdjustedEditationDistance",
        ])

    def test_calculators_do_not_mutate_inputs(self):
        a = product("Jablka Gala 1kg", Eshop.KOSIK)
        b = product("Jablka Gala 1 kg", Eshop.ROHLIK)
        before = (a.name, a.name_tokens, b.name, b.name_tokens)
        for calculator in get_similarity_calculators():
            calculator(a, b)
        self.assertEqual(before, (a.name, a.name_tokens, b.name, b.name_tokens))


if __name__ == '__main__':
    unittest.main()
