"""Utility modules for snpspec."""

from snpspec.utils.config import (
    DEFAULT_CHUNK_SIZE,
    DEFAULT_PERMUTATIONS,
    DEFAULT_PROCESSES,
    DEFAULT_SLOP,
    MAX_GENESET_SIZE,
    SnpspecConfig,
)
from snpspec.utils.logging_utils import log_parameters, setup_logger
from snpspec.utils.validation import (
    find_missing_conditions,
    require_conditions,
    validate_file_exists,
)
from snpspec.utils.io import (
    load_bed,
    read_bed_intervals,
    read_bed_records,
    read_gct,
    read_names,
    write_pvalues,
    write_snp_genes,
)
