"""Genomic intervals, gene overlap resolution and geneset bins."""

from snpspec.genome.intervals import GenomicInterval, IntervalIndex
from snpspec.genome.genesets import (
    GenesetCatalog,
    SnpGenes,
    UserGenesets,
    clamp_size,
    filter_background,
    resolve_user_genesets,
)

__all__ = [
    "GenomicInterval",
    "IntervalIndex",
    "GenesetCatalog",
    "SnpGenes",
    "UserGenesets",
    "clamp_size",
    "filter_background",
    "resolve_user_genesets",
]
