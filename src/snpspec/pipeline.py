"""
End-to-end enrichment analysis.

run_enrichment works on in-memory inputs; run_snpspec reads the input files,
runs the analysis and writes the output folder:

    snp_genes.txt     genes overlapping each user SNP
    pvalues.txt       one p-value per condition
    config_used.yaml  parameters of the run
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Mapping, Optional, Sequence, Set, Tuple

import pandas as pd

from snpspec.enrich.expression import ExpressionMatrix
from snpspec.enrich.permtest import PermutationEngine, PermutationResult, results_frame
from snpspec.errors import ConfigurationError
from snpspec.genome.genesets import (
    GenesetCatalog,
    UserGenesets,
    filter_background,
    resolve_user_genesets,
)
from snpspec.genome.intervals import GenomicInterval, IntervalIndex
from snpspec.utils.config import (
    CONFIG_USED_FILENAME,
    PVALUES_FILENAME,
    SNP_GENES_FILENAME,
    SnpspecConfig,
)
from snpspec.utils.io import (
    read_bed_intervals,
    read_bed_records,
    read_gct,
    read_names,
    write_pvalues,
    write_snp_genes,
)
from snpspec.utils.logging_utils import log_parameters
from snpspec.utils.validation import require_conditions

logger = logging.getLogger(__name__)


@dataclass
class EnrichmentRun:
    """Results of one analysis."""

    results: List[PermutationResult]
    user_genesets: UserGenesets
    catalog: GenesetCatalog
    gene_names: Tuple[str, ...]

    def pvalues(self) -> pd.DataFrame:
        return results_frame(self.results)

    def snp_genes(self) -> pd.DataFrame:
        return self.user_genesets.report(self.gene_names)


def _check_config(config: SnpspecConfig) -> None:
    problems = config.validate()
    if problems:
        raise ConfigurationError("Invalid parameters: " + "; ".join(problems))


def resolve_snp_genes(
    user_snp_names: Iterable[str],
    snp_intervals: Mapping[str, GenomicInterval],
    gene_records: Iterable[Tuple[str, GenomicInterval]],
    gene_names: Sequence[str],
    config: SnpspecConfig,
) -> Tuple[IntervalIndex, UserGenesets]:
    """Index the matrix genes and resolve the user's SNPs against them."""
    index = IntervalIndex.from_genes(gene_records, gene_names)
    user = resolve_user_genesets(
        user_snp_names, snp_intervals, index, config.slop, config.max_geneset_size
    )
    return index, user


def score_conditions(
    user: UserGenesets,
    index: IntervalIndex,
    snp_intervals: Mapping[str, GenomicInterval],
    null_snp_names: Set[str],
    matrix: ExpressionMatrix,
    config: SnpspecConfig,
) -> Tuple[GenesetCatalog, List[PermutationResult]]:
    """Bin the background SNPs and run the permutation test on every condition."""
    background = filter_background(snp_intervals, null_snp_names)
    catalog = GenesetCatalog.build(
        background, index, user.sizes, config.slop, config.max_geneset_size
    )
    engine = PermutationEngine(
        matrix,
        catalog,
        user.genesets,
        user.sizes,
        n_trials=config.permutations,
        processes=config.processes,
        seed=config.seed,
        chunk_size=config.chunk_size,
    )
    return catalog, engine.run()


def run_enrichment(
    user_snp_names: Iterable[str],
    null_snp_names: Set[str],
    snp_intervals: Mapping[str, GenomicInterval],
    gene_records: Iterable[Tuple[str, GenomicInterval]],
    matrix: ExpressionMatrix,
    config: Optional[SnpspecConfig] = None,
    condition_names: Optional[Iterable[str]] = None,
) -> EnrichmentRun:
    """
    Test the genes near the user's SNPs for enrichment in every condition.

    Args:
        user_snp_names: Names of the user's SNPs
        null_snp_names: Names of SNPs eligible for null SNP sets
        snp_intervals: Reference SNP intervals by name
        gene_records: (gene name, interval) pairs
        matrix: Binary expression matrix
        config: Run parameters (default: SnpspecConfig())
        condition_names: Conditions that must be present in the matrix

    Returns:
        EnrichmentRun with one result per matrix column, in column order

    Raises:
        ConfigurationError: On invalid parameters, missing conditions or a
            user geneset size without background genesets
    """
    config = config or SnpspecConfig()
    _check_config(config)
    if condition_names is not None:
        require_conditions(condition_names, matrix.condition_names)

    index, user = resolve_snp_genes(
        user_snp_names, snp_intervals, gene_records, matrix.gene_names, config
    )
    catalog, results = score_conditions(
        user, index, snp_intervals, null_snp_names, matrix, config
    )
    return EnrichmentRun(
        results=results, user_genesets=user, catalog=catalog, gene_names=matrix.gene_names
    )


def run_snpspec(
    user_snps_file: str,
    expression_file: str,
    gene_intervals_file: str,
    snp_intervals_file: str,
    null_snps_file: str,
    output_dir: str,
    condition_file: Optional[str] = None,
    config: Optional[SnpspecConfig] = None,
) -> EnrichmentRun:
    """
    Run the full analysis from input files and write the output folder.

    Args:
        user_snps_file: Names of the user's SNPs
        expression_file: GCT file with a binary gene by condition matrix
        gene_intervals_file: BED file of gene intervals named like the GCT rows
        snp_intervals_file: BED file of reference SNP intervals
        null_snps_file: Names of SNPs eligible for null SNP sets
        output_dir: Output directory
        condition_file: Optional names of conditions that must be present
        config: Run parameters (default: SnpspecConfig())

    Returns:
        EnrichmentRun
    """
    config = config or SnpspecConfig()
    _check_config(config)

    log_parameters(logger, "snpspec enrichment analysis", {
        "User SNPs": user_snps_file,
        "Expression": expression_file,
        "Gene intervals": gene_intervals_file,
        "SNP intervals": snp_intervals_file,
        "Null SNPs": null_snps_file,
        "Conditions": condition_file,
        "Output": output_dir,
        "Slop": config.slop,
        "Processes": config.processes,
        "Permutations": config.permutations,
        "Max geneset size": config.max_geneset_size,
        "Seed": config.seed,
    })

    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)
    config.to_yaml(output_path / CONFIG_USED_FILENAME)

    logger.info("Reading files...")
    user_snp_names = read_names(user_snps_file)
    null_snp_names = read_names(null_snps_file)
    condition_names = read_names(condition_file) if condition_file else None
    snp_intervals = read_bed_intervals(snp_intervals_file)
    matrix = ExpressionMatrix.from_frame(read_gct(expression_file))
    gene_records = read_bed_records(gene_intervals_file)
    logger.info("done.")

    if condition_names is not None:
        require_conditions(condition_names, matrix.condition_names)

    index, user = resolve_snp_genes(
        user_snp_names, snp_intervals, gene_records, matrix.gene_names, config
    )
    write_snp_genes(user.report(matrix.gene_names), output_path / SNP_GENES_FILENAME)

    catalog, results = score_conditions(
        user, index, snp_intervals, null_snp_names, matrix, config
    )
    write_pvalues(results_frame(results), output_path / PVALUES_FILENAME)

    return EnrichmentRun(
        results=results, user_genesets=user, catalog=catalog, gene_names=matrix.gene_names
    )


def run_snp_genes(
    user_snps_file: str,
    expression_file: str,
    gene_intervals_file: str,
    snp_intervals_file: str,
    output_file: str,
    slop: int,
) -> pd.DataFrame:
    """
    Write only the report of genes overlapping each user SNP.

    The expression file supplies the gene names; its values are not used.
    """
    config = SnpspecConfig(slop=slop)
    _check_config(config)

    gene_names = tuple(str(name) for name in read_gct(expression_file).index)
    _, user = resolve_snp_genes(
        read_names(user_snps_file),
        read_bed_intervals(snp_intervals_file),
        read_bed_records(gene_intervals_file),
        gene_names,
        config,
    )
    report = user.report(gene_names)
    write_snp_genes(report, output_file)
    return report
