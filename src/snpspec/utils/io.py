"""File I/O utilities for snpspec."""

import gzip
import logging
from pathlib import Path
from typing import Dict, List, Set, TextIO, Tuple, Union

import pandas as pd

from snpspec.errors import MalformedInputError
from snpspec.genome.intervals import GenomicInterval
from snpspec.utils.validation import validate_file_exists

logger = logging.getLogger(__name__)

BED_COLS = ["chrom", "start", "end", "name"]


def open_text(filepath: Union[str, Path]) -> TextIO:
    """Open a text file for reading, transparently decompressing .gz files."""
    filepath = Path(filepath)
    if filepath.suffix == ".gz":
        return gzip.open(filepath, "rt")
    return open(filepath, "r")


def read_names(filepath: Union[str, Path]) -> Set[str]:
    """
    Read the first whitespace-delimited column of every line into a set.

    Args:
        filepath: Plain or gzipped text file

    Returns:
        Set of names
    """
    validate_file_exists(filepath, "Names file")
    names = set()
    with open_text(filepath) as f:
        for line in f:
            fields = line.split()
            if fields:
                names.add(fields[0])
    logger.info(f'"{filepath}" has {len(names)} items')
    return names


def load_bed(filepath: Union[str, Path]) -> pd.DataFrame:
    """
    Load the chrom, start, end and name columns of a BED file.

    Args:
        filepath: Plain or gzipped BED file

    Returns:
        DataFrame with columns chrom, start, end, name

    Raises:
        InputUnavailableError: If the file doesn't exist
        MalformedInputError: If rows lack a name or coordinates are not integers
    """
    validate_file_exists(filepath, "BED file")
    try:
        df = pd.read_csv(filepath, sep="\t", header=None, comment="#", dtype=str)
    except pd.errors.EmptyDataError:
        return pd.DataFrame(columns=BED_COLS)
    except pd.errors.ParserError as e:
        raise MalformedInputError(f"Cannot parse BED file {filepath}: {e}") from e

    if df.shape[1] < len(BED_COLS):
        raise MalformedInputError(
            f"BED file {filepath} needs at least {len(BED_COLS)} columns, found {df.shape[1]}"
        )
    df = df.iloc[:, : len(BED_COLS)].copy()
    df.columns = BED_COLS
    if df.isna().any().any():
        raise MalformedInputError(f"BED file {filepath} has empty fields")
    try:
        df["start"] = df["start"].astype(int)
        df["end"] = df["end"].astype(int)
    except ValueError as e:
        raise MalformedInputError(f"Non-integer coordinates in {filepath}: {e}") from e
    return df


def _intervals(df: pd.DataFrame) -> List[Tuple[str, GenomicInterval]]:
    return [
        (name, GenomicInterval(chrom, int(start), int(end)))
        for chrom, start, end, name in df.itertuples(index=False, name=None)
    ]


def read_bed_intervals(filepath: Union[str, Path]) -> Dict[str, GenomicInterval]:
    """
    Read a BED file into a mapping of name to interval.

    A name that appears more than once keeps its last interval.
    """
    intervals = dict(_intervals(load_bed(filepath)))
    logger.info(f'"{filepath}" has {len(intervals)} items')
    return intervals


def read_bed_records(filepath: Union[str, Path]) -> List[Tuple[str, GenomicInterval]]:
    """Read a BED file into (name, interval) pairs, keeping repeated names."""
    records = _intervals(load_bed(filepath))
    logger.info(f'"{filepath}" has {len(records)} items')
    return records


def read_gct(filepath: Union[str, Path]) -> pd.DataFrame:
    """
    Read a GCT 1.2 expression file.

    Args:
        filepath: Plain or gzipped GCT file

    Returns:
        DataFrame of floats indexed by gene name, one column per condition

    Raises:
        InputUnavailableError: If the file doesn't exist
        MalformedInputError: If the header is wrong or dimensions disagree
    """
    validate_file_exists(filepath, "Expression file")
    with open_text(filepath) as f:
        version = f.readline().strip()
        dims = f.readline().split()

    if not version.startswith("#1.2"):
        raise MalformedInputError(f"Not a GCT file: {filepath}")
    try:
        n_rows, n_cols = int(dims[0]), int(dims[1])
    except (IndexError, ValueError):
        n_rows = n_cols = 0
    if n_rows <= 0 or n_cols <= 0:
        raise MalformedInputError(f"Line 2 of GCT file is malformed: {filepath}")
    logger.info(f'"{filepath}" has {n_rows} rows, {n_cols} columns')

    df = pd.read_csv(filepath, sep="\t", skiprows=2, header=0, dtype=str)
    if df.shape != (n_rows, n_cols + 2):
        raise MalformedInputError(
            f"GCT file {filepath} declares {n_rows}x{n_cols} values "
            f"but has {df.shape[0]}x{max(df.shape[1] - 2, 0)}"
        )

    try:
        data = df.iloc[:, 2:].astype(float)
    except ValueError as e:
        raise MalformedInputError(f"Non-numeric expression values in {filepath}: {e}") from e
    data.index = pd.Index(df.iloc[:, 0], name="Name")
    data.columns = [str(c) for c in data.columns]

    duplicated = data.index.duplicated().sum()
    if duplicated:
        logger.warning(f"{duplicated} gene names are repeated in {filepath}")
    return data


def write_pvalues(results: pd.DataFrame, filepath: Union[str, Path]) -> None:
    """Write per-condition p-values as a tab-delimited table."""
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)
    results.to_csv(filepath, sep="\t", index=False)
    logger.info(f"Saved {len(results)} records to {filepath.name}")


def write_snp_genes(report: pd.DataFrame, filepath: Union[str, Path]) -> None:
    """Write the user SNP overlap report, with NA for unknown SNPs."""
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)
    report.to_csv(filepath, sep="\t", index=False, na_rep="NA")
    logger.info(f"Saved {len(report)} records to {filepath.name}")
