"""Binomial enrichment score of a collection of genesets for one condition."""

import math
from typing import Sequence

import numpy as np
from scipy import stats

from snpspec.enrich.expression import ExpressionMatrix


def count_active(active: np.ndarray, genesets: Sequence[np.ndarray]) -> np.ndarray:
    """Number of active genes in each geneset."""
    return np.fromiter(
        (np.count_nonzero(active[geneset]) for geneset in genesets),
        dtype=np.int64,
        count=len(genesets),
    )


def binomial_score(k: np.ndarray, n: int, p: float) -> float:
    """
    Sum of -log10 binomial probabilities of k successes out of n at rate p.

    Returns 0.0 when the sum is not finite, for example when a term has
    probability zero.
    """
    with np.errstate(divide="ignore"):
        terms = -np.log10(stats.binom.pmf(k, n, p))
    score = float(np.sum(terms))
    return score if math.isfinite(score) else 0.0


def score_binary(column: int, genesets: Sequence[np.ndarray], matrix: ExpressionMatrix) -> float:
    """
    Enrichment score of genesets for one condition of a binary matrix.

    Each geneset contributes -log10 Binomial(k; n, p), where k is its number
    of active genes, n the number of active genes in the condition and p the
    fraction of active genes in the condition.

    Args:
        column: Condition column index
        genesets: Gene index arrays, one per SNP
        matrix: Binary expression matrix

    Returns:
        Score >= 0, or 0.0 if the score is not finite
    """
    n = int(matrix.success_counts[column])
    p = float(matrix.success_probs[column])
    k = count_active(matrix.values[:, column], genesets)
    return binomial_score(k, n, p)
