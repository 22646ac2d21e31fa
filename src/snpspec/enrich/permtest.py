"""
Per-condition permutation test of SNP geneset enrichment.

For every condition the user's genesets are scored. A non-positive score
cannot be exceeded by chance, so the condition is reported with p = 1.0 and
no trials. Otherwise a fixed number of size-matched null SNP sets is scored
and the p-value is the fraction whose score meets or exceeds the user's.
Conditions are tested one after another, in matrix column order; the trials
of one condition run in parallel.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np
import pandas as pd

from snpspec.enrich.expression import ExpressionMatrix
from snpspec.enrich.parallel import (
    TrialPool,
    TrialState,
    column_seeds,
    get_optimal_workers,
    make_seed_sequence,
    split_trials,
)
from snpspec.enrich.sampling import NullSampler
from snpspec.enrich.scoring import score_binary
from snpspec.errors import ConfigurationError
from snpspec.genome.genesets import GenesetCatalog
from snpspec.utils.config import DEFAULT_CHUNK_SIZE, DEFAULT_PERMUTATIONS

logger = logging.getLogger(__name__)

PVALUES_COLUMNS = ["name", "pvalue", "nulls_observed", "nulls_tested"]


@dataclass(frozen=True)
class PermutationResult:
    """Outcome of the permutation test for one condition."""

    name: str
    pvalue: float
    nulls_observed: int
    nulls_tested: int

    @classmethod
    def skipped(cls, name: str) -> "PermutationResult":
        return cls(name=name, pvalue=1.0, nulls_observed=0, nulls_tested=0)


def results_frame(results: Sequence[PermutationResult]) -> pd.DataFrame:
    """Results as a DataFrame with one row per condition."""
    return pd.DataFrame(
        [(r.name, r.pvalue, r.nulls_observed, r.nulls_tested) for r in results],
        columns=PVALUES_COLUMNS,
    )


class PermutationEngine:
    """
    Empirical enrichment p-values for every condition of a binary matrix.

    Args:
        matrix: Binary expression matrix
        catalog: Background genesets binned by size
        user_genesets: The user's genesets, one per SNP with genes
        target_sizes: Clamped size of each user geneset
        n_trials: Null SNP sets scored per condition
        processes: Requested worker processes, 0 for automatic
        seed: Root random seed, None for fresh entropy
        chunk_size: Trials per worker task

    Raises:
        ConfigurationError: If a user geneset size has no background genesets
            or n_trials or chunk_size is below 1
    """

    def __init__(
        self,
        matrix: ExpressionMatrix,
        catalog: GenesetCatalog,
        user_genesets: Sequence[np.ndarray],
        target_sizes: Sequence[int],
        n_trials: int = DEFAULT_PERMUTATIONS,
        processes: int = 1,
        seed: Optional[int] = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ):
        if len(user_genesets) != len(target_sizes):
            raise ValueError(
                f"Got {len(user_genesets)} genesets but {len(target_sizes)} sizes"
            )
        if n_trials < 1 or chunk_size < 1:
            raise ConfigurationError(
                f"n_trials and chunk_size must be >= 1 (got {n_trials} and {chunk_size})"
            )
        self.matrix = matrix
        self.user_genesets = list(user_genesets)
        self.sampler = NullSampler(target_sizes, catalog)
        self.n_trials = n_trials
        self.processes = get_optimal_workers(processes)
        self.chunk_size = chunk_size
        self._root_seed = make_seed_sequence(seed)

    def observed_score(self, column: int) -> float:
        return score_binary(column, self.user_genesets, self.matrix)

    def test_column(self, column: int, pool: TrialPool) -> PermutationResult:
        """Run the permutation test for one condition."""
        name = self.matrix.condition_names[column]
        user_score = self.observed_score(column)

        if user_score <= 0:
            logger.debug(f"{name}: observed score {user_score:.4g}, skipping trials")
            return PermutationResult.skipped(name)

        chunks = split_trials(self.n_trials, self.chunk_size)
        seeds = column_seeds(self._root_seed, column, len(chunks))
        observed = pool.run(column, user_score, chunks, seeds)

        result = PermutationResult(
            name=name,
            pvalue=observed / self.n_trials,
            nulls_observed=observed,
            nulls_tested=self.n_trials,
        )
        logger.debug(
            f"{name}: observed score {user_score:.4g}, "
            f"{observed}/{self.n_trials} null sets at or above"
        )
        return result

    def run(self) -> List[PermutationResult]:
        """Test every condition, in matrix column order."""
        n_conditions = self.matrix.n_conditions
        logger.info(
            f"Computing scores for null SNP sets with {self.processes} processes..."
        )
        state = TrialState(matrix=self.matrix, sampler=self.sampler)
        results = []
        with TrialPool(state, self.processes) as pool:
            for column in range(n_conditions):
                results.append(self.test_column(column, pool))
                done = column + 1
                if done == n_conditions or done % max(1, n_conditions // 10) == 0:
                    logger.info(f"Tested {done}/{n_conditions} conditions")
        logger.info("done.")
        return results
