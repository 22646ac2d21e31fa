"""
Parallel execution of permutation trials.

Trials of one condition are split into fixed-size chunks. Every chunk gets
its own random generator spawned from the condition's seed sequence, so the
hit count does not depend on how many workers run the chunks. Workers receive
the read-only trial state once, at pool start-up, and return a private hit
count per chunk; the counts are summed by the caller.
"""

import logging
import multiprocessing as mp
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np

from snpspec.enrich.expression import ExpressionMatrix
from snpspec.enrich.sampling import NullSampler
from snpspec.enrich.scoring import binomial_score, count_active

logger = logging.getLogger(__name__)

_TRIAL_STATE = None


@dataclass(frozen=True)
class TrialState:
    """Everything a worker needs to run trials, shared read-only."""
    matrix: ExpressionMatrix
    sampler: NullSampler


def get_optimal_workers(requested: int = 0) -> int:
    """
    Number of worker processes to use.

    Args:
        requested: Requested number of workers, 0 for automatic

    Returns:
        Worker count clamped to [1, number of CPUs]
    """
    cpu_count = mp.cpu_count()

    if requested <= 0:
        return max(1, cpu_count - 1)
    return min(max(1, requested), cpu_count)


def split_trials(n_trials: int, chunk_size: int) -> List[int]:
    """Split n_trials into chunks of chunk_size, the last one possibly smaller."""
    full, remainder = divmod(n_trials, chunk_size)
    chunks = [chunk_size] * full
    if remainder:
        chunks.append(remainder)
    return chunks


def column_seeds(
    root: np.random.SeedSequence,
    column: int,
    n_chunks: int,
) -> List[np.random.SeedSequence]:
    """Independent seed sequences for the trial chunks of one column."""
    column_seq = np.random.SeedSequence(root.entropy, spawn_key=(column,))
    return column_seq.spawn(n_chunks)


def count_hits(
    state: TrialState,
    column: int,
    observed_score: float,
    n_trials: int,
    seed: np.random.SeedSequence,
) -> int:
    """
    Run n_trials null trials and count scores reaching the observed score.

    A tie with the observed score counts as a hit.
    """
    rng = np.random.default_rng(seed)
    matrix = state.matrix
    active = np.ascontiguousarray(matrix.values[:, column])
    n = int(matrix.success_counts[column])
    p = float(matrix.success_probs[column])

    hits = 0
    for _ in range(n_trials):
        surrogate = state.sampler.sample(rng)
        if binomial_score(count_active(active, surrogate), n, p) >= observed_score:
            hits += 1
    return hits


def _init_trial_worker(state: TrialState):
    global _TRIAL_STATE
    _TRIAL_STATE = state


def _worker_count_hits(column, observed_score, n_trials, seed):
    if _TRIAL_STATE is None:
        raise RuntimeError("Trial state not initialized in worker process")
    return count_hits(_TRIAL_STATE, column, observed_score, n_trials, seed)


class TrialPool:
    """
    Persistent worker pool for permutation trials.

    With a single worker the trials run in the calling process.
    """

    def __init__(self, state: TrialState, num_workers: int):
        self.state = state
        self.num_workers = max(1, num_workers)
        self._pool = None
        if self.num_workers > 1:
            self._pool = mp.Pool(
                self.num_workers,
                initializer=_init_trial_worker,
                initargs=(state,),
            )

    def run(
        self,
        column: int,
        observed_score: float,
        chunks: Sequence[int],
        seeds: Sequence[np.random.SeedSequence],
    ) -> int:
        """Run every chunk of trials for one column and return the total hit count."""
        tasks = [
            (column, observed_score, n_trials, seed)
            for n_trials, seed in zip(chunks, seeds)
        ]
        if self._pool is None:
            counts = [count_hits(self.state, *task) for task in tasks]
        else:
            counts = self._pool.starmap(_worker_count_hits, tasks)
        return int(sum(counts))

    def close(self):
        if self._pool is not None:
            self._pool.close()
            self._pool.join()
            self._pool = None

    def terminate(self):
        if self._pool is not None:
            self._pool.terminate()
            self._pool.join()
            self._pool = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is not None:
            self.terminate()
        else:
            self.close()


def make_seed_sequence(seed: Optional[int]) -> np.random.SeedSequence:
    """Root seed sequence; None draws fresh entropy."""
    return np.random.SeedSequence(seed)
