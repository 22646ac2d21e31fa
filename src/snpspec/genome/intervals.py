"""
Genomic intervals and per-chromosome interval trees.

Gene intervals are stored as interval trees keyed by chromosome. The value
attached to every stored interval is the gene's row index in the expression
matrix, so that downstream code never compares gene names.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Sequence, Tuple

from intervaltree import IntervalTree

from snpspec.errors import MalformedInputError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenomicInterval:
    """A half-open range [start, end) on one chromosome."""

    chrom: str
    start: int
    end: int

    def __post_init__(self):
        if self.start < 0:
            raise MalformedInputError(
                f"Interval start must be >= 0: {self.chrom}:{self.start}-{self.end}"
            )
        if self.end < self.start:
            raise MalformedInputError(
                f"Interval end precedes start: {self.chrom}:{self.start}-{self.end}"
            )

    def __len__(self) -> int:
        return self.end - self.start


def _span(start: int, end: int) -> Tuple[int, int]:
    # intervaltree rejects null intervals; a zero-width range covers one base
    if end <= start:
        return start, start + 1
    return start, end


class IntervalIndex:
    """
    Overlap queries against gene intervals, one interval tree per chromosome.

    The index is built once and never mutated afterwards, so it can be shared
    by concurrent readers.
    """

    def __init__(self, trees: Mapping[str, IntervalTree]):
        self._trees: Dict[str, IntervalTree] = dict(trees)

    @classmethod
    def build(cls, intervals: Iterable[Tuple[str, int, int, int]]) -> "IntervalIndex":
        """
        Build an index from (chrom, start, end, gene_index) tuples.

        Args:
            intervals: Gene intervals with their expression-matrix row index

        Returns:
            IntervalIndex over all given intervals
        """
        trees: Dict[str, IntervalTree] = {}
        for chrom, start, end, gene_index in intervals:
            begin, stop = _span(int(start), int(end))
            trees.setdefault(chrom, IntervalTree()).addi(begin, stop, int(gene_index))
        return cls(trees)

    @classmethod
    def from_genes(
        cls,
        gene_records: Iterable[Tuple[str, GenomicInterval]],
        gene_names: Sequence[str],
    ) -> "IntervalIndex":
        """
        Build an index from named gene intervals, keeping only matrix genes.

        Args:
            gene_records: (gene name, interval) pairs; a gene may repeat
            gene_names: Ordered row names of the expression matrix

        Returns:
            IntervalIndex whose values are row indices into gene_names
        """
        row_index = {name: i for i, name in enumerate(gene_names)}
        kept = []
        skipped = 0
        for name, interval in gene_records:
            i = row_index.get(name)
            if i is None:
                skipped += 1
                continue
            kept.append((interval.chrom, interval.start, interval.end, i))

        logger.info(
            f"Skipped loading {skipped} gene intervals because they are "
            f"absent from the expression file"
        )
        index = cls.build(kept)
        logger.info(
            f"Indexed {len(index)} gene intervals on {len(index.chromosomes)} chromosomes"
        )
        return index

    @property
    def chromosomes(self) -> List[str]:
        return sorted(self._trees)

    def __len__(self) -> int:
        return sum(len(tree) for tree in self._trees.values())

    def query(self, chrom: str, start: int, end: int) -> List[Tuple[int, int, int]]:
        """
        Find stored intervals overlapping [start, end).

        Returns:
            (start, end, gene_index) tuples sorted by position then gene index
        """
        tree = self._trees.get(chrom)
        if tree is None:
            return []
        begin, stop = _span(start, end)
        return sorted((iv.begin, iv.end, iv.data) for iv in tree.overlap(begin, stop))

    def resolve_overlaps(self, chrom: str, start: int, end: int, slop: int) -> List[int]:
        """
        Gene indices overlapping an interval, widening it by slop if none do.

        The widened query is [max(1, start - slop), end + slop). There is no
        further retry.
        """
        hits = self.query(chrom, start, end)
        if not hits:
            hits = self.query(chrom, max(1, start - slop), end + slop)
        return [gene_index for _, _, gene_index in hits]
