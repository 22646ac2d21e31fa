"""
snpspec CLI - Command Line Interface for SNP geneset enrichment.

Usage:
    snpspec <command> [options]
"""

import click

from snpspec import __version__
from snpspec.errors import SnpspecError
from snpspec.utils.config import DEFAULT_SLOP, SnpspecConfig
from snpspec.utils.logging_utils import setup_logger


def _setup_logging(log_file, verbose):
    setup_logger("snpspec", log_file=log_file, verbose=verbose)


@click.group()
@click.version_option(version=__version__, prog_name="snpspec")
def main():
    """snpspec - test genes near SNPs for condition-specific enrichment.

    Use 'snpspec <command> --help' for detailed usage of each command.
    """
    pass


@main.command()
@click.option("--snps", "user_snps", required=True, help="User SNP names (first column)")
@click.option("--expression", required=True, help="Binary gene expression GCT file")
@click.option("--gene-intervals", required=True, help="Gene intervals BED file")
@click.option("--snp-intervals", required=True, help="Reference SNP intervals BED file")
@click.option("--null-snps", required=True, help="Names of SNPs eligible for null sets")
@click.option("--condition", help="Condition names that must be present in the GCT")
@click.option("-o", "--out", "output", required=True, help="Output directory")
@click.option("-c", "--config", "config_file", help="YAML or JSON parameter file")
@click.option("--slop", type=int, help=f"Expansion window for SNPs without genes [default: {DEFAULT_SLOP}]")
@click.option("-t", "--processes", type=int, help="Number of processes; 0 uses all cores but one [default: 1]")
@click.option("-n", "--permutations", type=int, help="Null SNP sets per condition [default: 1000]")
@click.option("--max-geneset-size", type=int, help="Cap on geneset size bins [default: 10]")
@click.option("--seed", type=int, help="Random seed")
@click.option("--log-file", help="Also write the log to this file")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging")
def run(user_snps, expression, gene_intervals, snp_intervals, null_snps, condition, output,
        config_file, slop, processes, permutations, max_geneset_size, seed, log_file, verbose):
    """Compute an enrichment p-value for every condition.

    Writes snp_genes.txt, pvalues.txt and config_used.yaml to the output directory.
    """
    from snpspec.pipeline import run_snpspec

    _setup_logging(log_file, verbose)
    try:
        config = SnpspecConfig.from_file(config_file) if config_file else SnpspecConfig()
        overrides = {
            "slop": slop,
            "processes": processes,
            "permutations": permutations,
            "max_geneset_size": max_geneset_size,
            "seed": seed,
        }
        for key, value in overrides.items():
            if value is not None:
                setattr(config, key, value)

        run_snpspec(user_snps, expression, gene_intervals, snp_intervals, null_snps,
                    output, condition, config)
    except SnpspecError as e:
        raise click.ClickException(str(e))


@main.command("snp-genes")
@click.option("--snps", "user_snps", required=True, help="User SNP names (first column)")
@click.option("--expression", required=True, help="GCT file providing gene names")
@click.option("--gene-intervals", required=True, help="Gene intervals BED file")
@click.option("--snp-intervals", required=True, help="Reference SNP intervals BED file")
@click.option("-o", "--output", required=True, help="Output TSV file")
@click.option("--slop", type=int, default=DEFAULT_SLOP, show_default=True,
              help="Expansion window for SNPs without genes")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging")
def snp_genes(user_snps, expression, gene_intervals, snp_intervals, output, slop, verbose):
    """Report the genes overlapping each user SNP."""
    from snpspec.pipeline import run_snp_genes

    _setup_logging(None, verbose)
    try:
        run_snp_genes(user_snps, expression, gene_intervals, snp_intervals, output, slop)
    except SnpspecError as e:
        raise click.ClickException(str(e))


if __name__ == "__main__":
    main()
