"""Size-matched null SNP sets drawn from binned background genesets."""

from typing import List, Sequence

import numpy as np

from snpspec.genome.genesets import GenesetCatalog


class NullSampler:
    """
    Draw surrogate geneset collections matching the user's size template.

    For every entry of the template one geneset is drawn uniformly, with
    replacement, from the bin of the same size. Template order and
    multiplicity are preserved.
    """

    def __init__(self, target_sizes: Sequence[int], catalog: GenesetCatalog):
        catalog.require(target_sizes)
        self.target_sizes = tuple(target_sizes)
        self._pools = [catalog[size] for size in self.target_sizes]
        self._pool_sizes = np.array([len(pool) for pool in self._pools], dtype=np.int64)

    def __len__(self) -> int:
        return len(self.target_sizes)

    def sample(self, rng: np.random.Generator) -> List[np.ndarray]:
        """Draw one surrogate collection with len(target_sizes) genesets."""
        if not self._pools:
            return []
        picks = rng.integers(0, self._pool_sizes)
        return [pool[i] for pool, i in zip(self._pools, picks)]


def sample_null_genesets(
    target_sizes: Sequence[int],
    catalog: GenesetCatalog,
    rng: np.random.Generator,
) -> List[np.ndarray]:
    """
    Draw one size-matched surrogate collection.

    Args:
        target_sizes: Clamped geneset size of each user SNP
        catalog: Background genesets binned by size
        rng: Random generator owned by the caller

    Returns:
        One geneset per entry of target_sizes

    Raises:
        ConfigurationError: If a size has no background genesets
    """
    return NullSampler(target_sizes, catalog).sample(rng)
