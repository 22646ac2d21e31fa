"""Tests for run configuration."""

import pytest

from snpspec.errors import ConfigurationError, InputUnavailableError, MalformedInputError
from snpspec.utils.config import (
    DEFAULT_PERMUTATIONS,
    DEFAULT_SLOP,
    MAX_GENESET_SIZE,
    SnpspecConfig,
)


class TestSnpspecConfig:
    """Test configuration defaults and serialization."""

    def test_defaults(self):
        config = SnpspecConfig()
        assert config.slop == DEFAULT_SLOP == 10_000
        assert config.processes == 1
        assert config.max_geneset_size == MAX_GENESET_SIZE == 10
        assert config.permutations == DEFAULT_PERMUTATIONS
        assert config.seed is None
        assert config.validate() == []

    def test_validate_reports_every_problem(self):
        config = SnpspecConfig(slop=-1, permutations=0, chunk_size=0, seed=-5)
        problems = config.validate()
        assert len(problems) == 4
        assert any("slop" in p for p in problems)
        assert any("seed" in p for p in problems)

    def test_yaml_round_trip(self, tmp_path):
        config = SnpspecConfig(slop=500, processes=4, seed=42)
        path = tmp_path / "config.yaml"
        config.to_yaml(path)
        assert SnpspecConfig.from_yaml(path) == config

    def test_json_round_trip(self, tmp_path):
        config = SnpspecConfig(permutations=250, max_geneset_size=5)
        path = tmp_path / "config.json"
        config.to_json(path)
        assert SnpspecConfig.from_file(path) == config

    def test_partial_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("slop: 2000\n")
        config = SnpspecConfig.from_file(path)
        assert config.slop == 2000
        assert config.permutations == DEFAULT_PERMUTATIONS

    def test_empty_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("")
        assert SnpspecConfig.from_yaml(path) == SnpspecConfig()

    def test_unknown_key(self):
        with pytest.raises(ConfigurationError, match="min_observations"):
            SnpspecConfig.from_dict({"slop": 10, "min_observations": 3})

    def test_non_integer_value(self):
        with pytest.raises(ConfigurationError, match="slop"):
            SnpspecConfig.from_dict({"slop": "ten"})

    def test_bool_value(self):
        with pytest.raises(ConfigurationError, match="processes"):
            SnpspecConfig.from_dict({"processes": True})

    def test_null_seed_allowed(self):
        assert SnpspecConfig.from_dict({"seed": None}).seed is None

    def test_null_slop_rejected(self):
        with pytest.raises(ConfigurationError, match="slop"):
            SnpspecConfig.from_dict({"slop": None})

    def test_missing_file(self, tmp_path):
        with pytest.raises(InputUnavailableError, match="Config file"):
            SnpspecConfig.from_file(tmp_path / "absent.yaml")

    def test_malformed_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("slop: [1, 2\n")
        with pytest.raises(MalformedInputError):
            SnpspecConfig.from_file(path)

    def test_malformed_json(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{\"slop\": 10,")
        with pytest.raises(MalformedInputError):
            SnpspecConfig.from_file(path)

    def test_yaml_not_a_mapping(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("- slop\n- 10\n")
        with pytest.raises(MalformedInputError, match="mapping"):
            SnpspecConfig.from_file(path)
