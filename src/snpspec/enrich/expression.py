"""Binary gene expression matrix with per-condition success statistics."""

import logging
from dataclasses import dataclass
from typing import Tuple

import numpy as np
import pandas as pd

from snpspec.errors import ConfigurationError, MalformedInputError

logger = logging.getLogger(__name__)


def is_binary(values: np.ndarray) -> bool:
    """True if every value is exactly 0 or 1."""
    return bool(np.isin(values, (0, 1)).all())


@dataclass(frozen=True)
class ExpressionMatrix:
    """
    Genes by conditions, where a positive value marks a gene as active.

    Attributes:
        values: Boolean array of shape (n_genes, n_conditions)
        gene_names: Row names, indexed by gene index
        condition_names: Column names, in output order
        success_counts: Number of active genes per condition
        success_probs: success_counts divided by the number of genes
    """

    values: np.ndarray
    gene_names: Tuple[str, ...]
    condition_names: Tuple[str, ...]
    success_counts: np.ndarray
    success_probs: np.ndarray

    @classmethod
    def from_frame(cls, df: pd.DataFrame) -> "ExpressionMatrix":
        """
        Build a matrix from a gene-by-condition DataFrame.

        Raises:
            MalformedInputError: If the frame is empty or has missing values
            ConfigurationError: If the values are not binary
        """
        if df.shape[0] == 0 or df.shape[1] == 0:
            raise MalformedInputError("Expression matrix has no rows or no columns")

        raw = df.to_numpy(dtype=float)
        if np.isnan(raw).any():
            raise MalformedInputError("Expression matrix contains missing values")
        if not is_binary(raw):
            raise ConfigurationError(
                "Expression matrix is not binary; only 0/1 matrices can be scored"
            )
        logger.info("Expression is binary")

        values = raw > 0
        counts = values.sum(axis=0).astype(np.int64)
        probs = counts / values.shape[0]
        for arr in (values, counts, probs):
            arr.setflags(write=False)

        return cls(
            values=values,
            gene_names=tuple(str(name) for name in df.index),
            condition_names=tuple(str(name) for name in df.columns),
            success_counts=counts,
            success_probs=probs,
        )

    @property
    def n_genes(self) -> int:
        return self.values.shape[0]

    @property
    def n_conditions(self) -> int:
        return self.values.shape[1]
