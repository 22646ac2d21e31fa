"""Shared fixtures: a small genome with 60 genes on chr1 and a binary matrix."""

import numpy as np
import pandas as pd
import pytest

from snpspec.enrich.expression import ExpressionMatrix
from snpspec.genome.intervals import GenomicInterval, IntervalIndex

N_GENES = 60
GENE_NAMES = [f"g{i}" for i in range(N_GENES)]


def gene_interval(i: int) -> GenomicInterval:
    """Gene i occupies [i*1000, i*1000+100) on chr1."""
    return GenomicInterval("chr1", i * 1000, i * 1000 + 100)


def snp_over_genes(first: int, count: int) -> GenomicInterval:
    """A SNP interval overlapping genes first .. first+count-1 and no others."""
    return GenomicInterval("chr1", first * 1000 + 10, (first + count - 1) * 1000 + 20)


def make_frame(active_by_condition: dict) -> pd.DataFrame:
    data = {}
    for condition, active in active_by_condition.items():
        column = np.zeros(N_GENES)
        column[list(active)] = 1
        data[condition] = column
    return pd.DataFrame(data, index=GENE_NAMES)


@pytest.fixture
def gene_records():
    return [(name, gene_interval(i)) for i, name in enumerate(GENE_NAMES)]


@pytest.fixture
def gene_index(gene_records):
    return IntervalIndex.from_genes(gene_records, GENE_NAMES)


@pytest.fixture
def expression_frame():
    return make_frame({
        "cond_a": range(0, 10),
        "cond_empty": [],
        "cond_b": range(30, 40),
    })


@pytest.fixture
def matrix(expression_frame):
    return ExpressionMatrix.from_frame(expression_frame)


@pytest.fixture
def snp_intervals():
    """
    User SNPs u1, u2 (2 genes each) and u3 (5 genes); u_desert overlaps no
    gene even with a small slop. Background SNPs have 2, 3 or 5 genes;
    x2 is a reference SNP outside the null set.
    """
    intervals = {
        "u1": snp_over_genes(0, 2),
        "u2": snp_over_genes(2, 2),
        "u3": snp_over_genes(4, 5),
        "u_desert": GenomicInterval("chr2", 5000, 5001),
        "x2": snp_over_genes(0, 2),
    }
    for j in range(10, 50, 2):
        intervals[f"b2_{j}"] = snp_over_genes(j, 2)
    for j in range(10, 50, 5):
        intervals[f"b5_{j}"] = snp_over_genes(j, 5)
    for j in range(10, 40, 3):
        intervals[f"b3_{j}"] = snp_over_genes(j, 3)
    return intervals


@pytest.fixture
def user_snp_names():
    return {"u1", "u2", "u3", "u_desert", "u_unknown"}


@pytest.fixture
def null_snp_names(snp_intervals):
    return {name for name in snp_intervals if name.startswith("b")}


def write_gct(path, frame: pd.DataFrame) -> None:
    lines = ["#1.2", f"{frame.shape[0]}\t{frame.shape[1]}"]
    lines.append("\t".join(["Name", "Description"] + list(frame.columns)))
    for name, row in frame.iterrows():
        lines.append("\t".join([name, "na"] + [str(int(v)) for v in row]))
    path.write_text("\n".join(lines) + "\n")


def write_bed(path, records) -> None:
    path.write_text("".join(
        f"{interval.chrom}\t{interval.start}\t{interval.end}\t{name}\n"
        for name, interval in records
    ))


@pytest.fixture
def input_files(tmp_path, expression_frame, gene_records, snp_intervals,
                user_snp_names, null_snp_names):
    """The shared fixtures written out as the files the command line reads."""
    files = {
        "user_snps": tmp_path / "user_snps.txt",
        "expression": tmp_path / "expression.gct",
        "gene_intervals": tmp_path / "genes.bed",
        "snp_intervals": tmp_path / "snps.bed",
        "null_snps": tmp_path / "null_snps.txt",
    }
    files["user_snps"].write_text("".join(f"{n}\n" for n in sorted(user_snp_names)))
    files["null_snps"].write_text("".join(f"{n}\n" for n in sorted(null_snp_names)))
    write_gct(files["expression"], expression_frame)
    write_bed(files["gene_intervals"], gene_records)
    write_bed(files["snp_intervals"], snp_intervals.items())
    return files
