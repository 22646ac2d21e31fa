"""Configuration constants and run parameters for snpspec."""

import json
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import List, Optional, Union

import yaml

from snpspec.errors import ConfigurationError, MalformedInputError
from snpspec.utils.validation import validate_file_exists

# Default parameters
DEFAULT_SLOP = 10_000
DEFAULT_PROCESSES = 1
DEFAULT_PERMUTATIONS = 1000
DEFAULT_CHUNK_SIZE = 50
MAX_GENESET_SIZE = 10

# Output file names
PVALUES_FILENAME = "pvalues.txt"
SNP_GENES_FILENAME = "snp_genes.txt"
CONFIG_USED_FILENAME = "config_used.yaml"


@dataclass
class SnpspecConfig:
    """Parameters of one enrichment run."""

    slop: int = DEFAULT_SLOP
    processes: int = DEFAULT_PROCESSES
    max_geneset_size: int = MAX_GENESET_SIZE
    permutations: int = DEFAULT_PERMUTATIONS
    chunk_size: int = DEFAULT_CHUNK_SIZE
    seed: Optional[int] = None

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: dict) -> "SnpspecConfig":
        """Create a config from a dict, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(d) - known)
        if unknown:
            raise ConfigurationError(f"Unknown configuration keys: {unknown}")
        for key, value in d.items():
            if key == "seed" and value is None:
                continue
            # bool is an int subclass but never a valid count
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigurationError(
                    f"Configuration value {key} must be an integer (got {value!r})"
                )
        return cls(**d)

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "SnpspecConfig":
        with open(path, "r") as f:
            try:
                d = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise MalformedInputError(f"Cannot parse config file {path}: {e}") from e
        if not isinstance(d, dict):
            raise MalformedInputError(f"Config file {path} must hold a mapping of parameters")
        return cls.from_dict(d)

    def to_yaml(self, path: Union[str, Path]):
        with open(path, "w") as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False)

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> "SnpspecConfig":
        with open(path, "r") as f:
            try:
                d = json.load(f)
            except json.JSONDecodeError as e:
                raise MalformedInputError(f"Cannot parse config file {path}: {e}") from e
        if not isinstance(d, dict):
            raise MalformedInputError(f"Config file {path} must hold a mapping of parameters")
        return cls.from_dict(d)

    def to_json(self, path: Union[str, Path]):
        with open(path, "w") as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "SnpspecConfig":
        """Load YAML or JSON depending on the file suffix."""
        validate_file_exists(path, "Config file")
        if Path(path).suffix.lower() == ".json":
            return cls.from_json(path)
        return cls.from_yaml(path)

    def validate(self) -> List[str]:
        """Check parameter ranges and return a list of problems."""
        problems = []
        if self.slop < 0:
            problems.append(f"slop must be >= 0 (got {self.slop})")
        if self.processes < 0:
            problems.append(f"processes must be >= 0 (got {self.processes})")
        if self.max_geneset_size < 1:
            problems.append(f"max_geneset_size must be >= 1 (got {self.max_geneset_size})")
        if self.permutations < 1:
            problems.append(f"permutations must be >= 1 (got {self.permutations})")
        if self.chunk_size < 1:
            problems.append(f"chunk_size must be >= 1 (got {self.chunk_size})")
        if self.seed is not None and self.seed < 0:
            problems.append(f"seed must be >= 0 (got {self.seed})")
        return problems
