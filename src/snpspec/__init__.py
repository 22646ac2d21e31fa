"""
snpspec: condition-specific enrichment of genes near SNPs.

This package provides tools for:
- Resolving the genes that overlap each SNP interval
- Binning background SNP genesets by size
- Sampling size-matched null SNP sets
- Binomial enrichment scoring against a binary expression matrix
- Parallel permutation testing per condition
"""

__version__ = "0.3.0"
__author__ = "snpspec Team"
