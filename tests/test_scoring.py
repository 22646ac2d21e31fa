"""Tests for the binary expression matrix and the binomial enrichment score."""

import math

import numpy as np
import pandas as pd
import pytest
from scipy import stats

from snpspec.enrich.expression import ExpressionMatrix, is_binary
from snpspec.enrich.scoring import binomial_score, count_active, score_binary
from snpspec.errors import ConfigurationError, MalformedInputError


@pytest.fixture
def ten_of_hundred():
    """One condition with genes 0-9 active out of 100 (n=10, p=0.1)."""
    values = np.zeros((100, 1))
    values[:10, 0] = 1
    frame = pd.DataFrame(values, index=[f"g{i}" for i in range(100)], columns=["cond"])
    return ExpressionMatrix.from_frame(frame)


class TestExpressionMatrix:
    """Test matrix construction and success statistics."""

    def test_success_statistics(self, matrix):
        assert matrix.condition_names == ("cond_a", "cond_empty", "cond_b")
        assert list(matrix.success_counts) == [10, 0, 10]
        assert matrix.success_probs[0] == pytest.approx(10 / 60)
        assert matrix.n_genes == 60
        assert matrix.n_conditions == 3

    def test_values_read_only(self, matrix):
        with pytest.raises(ValueError):
            matrix.values[0, 0] = False

    def test_continuous_rejected(self):
        frame = pd.DataFrame({"c": [0.5, 1.2, 3.0]}, index=["a", "b", "c"])
        with pytest.raises(ConfigurationError, match="not binary"):
            ExpressionMatrix.from_frame(frame)

    def test_missing_values_rejected(self):
        frame = pd.DataFrame({"c": [0.0, np.nan, 1.0]}, index=["a", "b", "c"])
        with pytest.raises(MalformedInputError):
            ExpressionMatrix.from_frame(frame)

    def test_empty_rejected(self):
        with pytest.raises(MalformedInputError):
            ExpressionMatrix.from_frame(pd.DataFrame(index=["a", "b"]))

    def test_is_binary(self):
        assert is_binary(np.array([[0, 1], [1, 1]]))
        assert not is_binary(np.array([[0, 2]]))


class TestBinomialScore:
    """Test the per-condition enrichment score."""

    def test_more_active_scores_higher(self, ten_of_hundred):
        all_active = score_binary(0, [np.array([0, 1, 2])], ten_of_hundred)
        none_active = score_binary(0, [np.array([50, 51, 52])], ten_of_hundred)
        assert all_active > none_active > 0

    def test_matches_binomial_pmf(self, ten_of_hundred):
        score = score_binary(0, [np.array([0, 1, 2])], ten_of_hundred)
        assert score == pytest.approx(-math.log10(stats.binom.pmf(3, 10, 0.1)))

    def test_additive(self, ten_of_hundred):
        a = [np.array([0, 1, 2])]
        b = [np.array([3, 60, 61])]
        c = [np.array([70, 71, 72, 73])]
        total = score_binary(0, a + b + c, ten_of_hundred)
        parts = sum(score_binary(0, g, ten_of_hundred) for g in (a, b, c))
        assert total == pytest.approx(parts)

    def test_empty_collection(self, ten_of_hundred):
        assert score_binary(0, [], ten_of_hundred) == 0.0

    def test_condition_without_active_genes(self, matrix):
        assert score_binary(1, [np.array([0, 1])], matrix) == 0.0

    def test_non_finite_becomes_zero(self):
        # every gene active: p = 1, so k < n has probability zero
        frame = pd.DataFrame({"c": [1.0] * 5}, index=list("abcde"))
        all_on = ExpressionMatrix.from_frame(frame)
        assert score_binary(0, [np.array([0, 1])], all_on) == 0.0

    def test_count_active(self):
        active = np.array([True, False, True, True])
        k = count_active(active, [np.array([0, 1]), np.array([1]), np.array([0, 2, 3])])
        assert list(k) == [1, 0, 3]

    def test_binomial_score_degenerate(self):
        assert binomial_score(np.array([4]), 3, 0.5) == 0.0
