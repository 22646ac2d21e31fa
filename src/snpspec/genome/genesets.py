"""
Genesets of SNPs: the genes overlapping each SNP interval.

The user's SNPs are resolved into an ordered collection of genesets whose
sizes form the sampling template. Background SNPs are resolved the same way
and their genesets are binned by size, keeping only the sizes the user's SNPs
actually need.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Set, Tuple

import numpy as np
import pandas as pd

from snpspec.errors import ConfigurationError
from snpspec.genome.intervals import GenomicInterval, IntervalIndex
from snpspec.utils.config import MAX_GENESET_SIZE

logger = logging.getLogger(__name__)

SNP_GENES_COLUMNS = ["chrom", "start", "end", "name", "n_genes", "genes"]


def _as_geneset(gene_indices: Sequence[int]) -> np.ndarray:
    geneset = np.asarray(gene_indices, dtype=np.intp)
    geneset.setflags(write=False)
    return geneset


def clamp_size(size: int, max_size: int = MAX_GENESET_SIZE) -> int:
    """Cap a geneset size at max_size; larger genesets share the top bin."""
    return min(size, max_size)


@dataclass(frozen=True)
class SnpGenes:
    """Genes resolved for one user SNP (interval is None if the SNP is unknown)."""

    name: str
    interval: Optional[GenomicInterval]
    genes: Tuple[int, ...] = ()


@dataclass(frozen=True)
class UserGenesets:
    """
    The user's SNPs resolved to genesets.

    Attributes:
        genesets: One geneset per user SNP overlapping at least one gene
        sizes: Clamped size of each geneset, in the same order
        snps: Every user SNP, including unknown and gene-less ones
    """

    genesets: Tuple[np.ndarray, ...]
    sizes: Tuple[int, ...]
    snps: Tuple[SnpGenes, ...]

    def __len__(self) -> int:
        return len(self.genesets)

    def report(self, gene_names: Sequence[str]) -> pd.DataFrame:
        """
        Overlap report with one row per user SNP.

        Unknown SNPs have NA in every column except name.
        """
        rows = []
        for snp in self.snps:
            if snp.interval is None:
                rows.append({"chrom": None, "start": None, "end": None,
                             "name": snp.name, "n_genes": None, "genes": None})
                continue
            rows.append({
                "chrom": snp.interval.chrom,
                "start": snp.interval.start,
                "end": snp.interval.end,
                "name": snp.name,
                "n_genes": len(snp.genes),
                "genes": ",".join(gene_names[g] for g in snp.genes) if snp.genes else None,
            })
        df = pd.DataFrame(rows, columns=SNP_GENES_COLUMNS)
        for col in ("start", "end", "n_genes"):
            df[col] = df[col].astype("Int64")
        return df


def resolve_user_genesets(
    user_snp_names: Iterable[str],
    snp_intervals: Mapping[str, GenomicInterval],
    index: IntervalIndex,
    slop: int,
    max_size: int = MAX_GENESET_SIZE,
) -> UserGenesets:
    """
    Resolve the genes overlapping each of the user's SNPs.

    Args:
        user_snp_names: Names of the user's SNPs
        snp_intervals: Reference SNP intervals by name
        index: Gene interval index
        slop: Expansion window used when a SNP overlaps no gene
        max_size: Cap applied to geneset sizes

    Returns:
        UserGenesets ordered by SNP name
    """
    genesets = []
    sizes = []
    snps = []
    missing = 0
    for name in sorted(set(user_snp_names)):
        interval = snp_intervals.get(name)
        if interval is None:
            missing += 1
            snps.append(SnpGenes(name=name, interval=None))
            continue
        genes = index.resolve_overlaps(interval.chrom, interval.start, interval.end, slop)
        snps.append(SnpGenes(name=name, interval=interval, genes=tuple(genes)))
        if genes:
            genesets.append(_as_geneset(genes))
            sizes.append(clamp_size(len(genes), max_size))

    if missing:
        logger.warning(f"{missing} user SNPs are absent from the SNP intervals file")
    logger.info(
        f"{len(genesets)} of {len(snps)} user SNPs overlap at least one gene"
    )
    return UserGenesets(genesets=tuple(genesets), sizes=tuple(sizes), snps=tuple(snps))


def filter_background(
    snp_intervals: Mapping[str, GenomicInterval],
    null_snp_names: Set[str],
) -> Dict[str, GenomicInterval]:
    """Keep only the SNP intervals whose names belong to the null set."""
    kept = {name: iv for name, iv in snp_intervals.items() if name in null_snp_names}
    dropped = len(snp_intervals) - len(kept)
    logger.info(
        f"Dropped {dropped} SNP intervals that do not belong to the provided null set"
    )
    return kept


class GenesetCatalog:
    """
    Background genesets binned by clamped size.

    Bins exist only for sizes requested at build time. The catalog is
    read-only once built.
    """

    def __init__(self, bins: Mapping[int, Sequence[np.ndarray]], max_size: int = MAX_GENESET_SIZE):
        self._bins = {size: tuple(genesets) for size, genesets in bins.items()}
        self.max_size = max_size

    @classmethod
    def build(
        cls,
        snp_intervals: Mapping[str, GenomicInterval],
        index: IntervalIndex,
        sizes: Iterable[int],
        slop: int,
        max_size: int = MAX_GENESET_SIZE,
    ) -> "GenesetCatalog":
        """
        Resolve every background SNP and bin its geneset by clamped size.

        Args:
            snp_intervals: Background SNP intervals by name
            index: Gene interval index
            sizes: Clamped sizes observed among the user's genesets
            slop: Expansion window used when a SNP overlaps no gene
            max_size: Cap applied to geneset sizes

        Returns:
            GenesetCatalog with a bin for each needed size that has members
        """
        needed = set(sizes)
        bins: Dict[int, List[np.ndarray]] = {}
        for name in sorted(snp_intervals):
            interval = snp_intervals[name]
            genes = index.resolve_overlaps(interval.chrom, interval.start, interval.end, slop)
            if not genes:
                continue
            size = clamp_size(len(genes), max_size)
            if size not in needed:
                continue
            bins.setdefault(size, []).append(_as_geneset(genes))

        catalog = cls(bins, max_size)
        for size, count in catalog.counts().items():
            logger.info(f"Gene sets with size {size}: {count}")
        return catalog

    def __getitem__(self, size: int) -> Tuple[np.ndarray, ...]:
        return self._bins[size]

    def __contains__(self, size: int) -> bool:
        return size in self._bins

    def __len__(self) -> int:
        return len(self._bins)

    @property
    def sizes(self) -> List[int]:
        return sorted(self._bins)

    def counts(self) -> Dict[int, int]:
        """Number of genesets in each bin, by size."""
        return {size: len(self._bins[size]) for size in self.sizes}

    def require(self, sizes: Iterable[int]) -> None:
        """
        Check that every size has a non-empty bin.

        Raises:
            ConfigurationError: Naming the first size without background genesets
        """
        for size in sorted(set(sizes)):
            if not self._bins.get(size):
                raise ConfigurationError(
                    f"No background SNPs have a geneset of size {size}; "
                    f"cannot sample null SNP sets matching the user's SNPs"
                )
