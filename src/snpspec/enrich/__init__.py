"""Enrichment scoring, null sampling and permutation testing."""

from snpspec.enrich.expression import ExpressionMatrix
from snpspec.enrich.scoring import score_binary
from snpspec.enrich.sampling import NullSampler, sample_null_genesets
from snpspec.enrich.permtest import PermutationEngine, PermutationResult

__all__ = [
    "ExpressionMatrix",
    "score_binary",
    "NullSampler",
    "sample_null_genesets",
    "PermutationEngine",
    "PermutationResult",
]
