"""Input validation utilities for snpspec."""

import logging
from pathlib import Path
from typing import Iterable, List, Sequence, Union

from snpspec.errors import ConfigurationError, InputUnavailableError

logger = logging.getLogger(__name__)


def validate_file_exists(filepath: Union[str, Path], description: str = "File") -> None:
    """
    Validate that a file exists.

    Args:
        filepath: Path to check
        description: Description for error message

    Raises:
        InputUnavailableError: If file doesn't exist
    """
    if not Path(filepath).is_file():
        raise InputUnavailableError(f"{description} not found: {filepath}")


def find_missing_conditions(
    condition_names: Iterable[str],
    columns: Sequence[str],
) -> List[str]:
    """Return the requested condition names absent from the matrix columns, sorted."""
    available = set(columns)
    return sorted(name for name in set(condition_names) if name not in available)


def require_conditions(
    condition_names: Iterable[str],
    columns: Sequence[str],
) -> None:
    """
    Require every requested condition to be a column of the expression matrix.

    Raises:
        ConfigurationError: Listing every missing condition name
    """
    missing = find_missing_conditions(condition_names, columns)
    if missing:
        for name in missing:
            logger.error(f"Condition not found in expression file: {name}")
        raise ConfigurationError(
            f"Conditions not found in expression file: {', '.join(missing)}"
        )
