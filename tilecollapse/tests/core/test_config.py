"""Tests for SolverConfig."""

import pytest
from pydantic import ValidationError

from tilecollapse.core import SolverConfig, parse_dimensions


class TestSolverConfig:
    """Test configuration validation."""

    def test_defaults(self):
        config = SolverConfig()
        assert config.dimensions == (8, 8)
        assert config.seed == 0
        assert config.stop_policy == "success"
        assert config.retries_on_failure

    def test_first_failure_policy(self):
        config = SolverConfig(stop_policy="first_failure")
        assert not config.retries_on_failure

    def test_rejects_bad_dimensions(self):
        with pytest.raises(ValidationError):
            SolverConfig(dimensions=())
        with pytest.raises(ValidationError):
            SolverConfig(dimensions=(1, 2, 3, 4))
        with pytest.raises(ValidationError):
            SolverConfig(dimensions=(4, 0))

    def test_rejects_unknown_policy(self):
        with pytest.raises(ValidationError):
            SolverConfig(stop_policy="never")

    def test_rejects_non_positive_budget(self):
        with pytest.raises(ValidationError):
            SolverConfig(max_attempts=0)

    def test_is_frozen(self):
        config = SolverConfig()
        with pytest.raises(ValidationError):
            config.seed = 3


class TestFromEnv:
    """Test building config from TILECOLLAPSE_* variables."""

    def test_reads_environment(self):
        env = {
            "TILECOLLAPSE_DIMENSIONS": "4x5x2",
            "TILECOLLAPSE_SEED": "42",
            "TILECOLLAPSE_STOP_POLICY": "first_failure",
            "TILECOLLAPSE_MAX_ATTEMPTS": "7",
        }
        config = SolverConfig.from_env(env)
        assert config.dimensions == (4, 5, 2)
        assert config.seed == 42
        assert config.stop_policy == "first_failure"
        assert config.max_attempts == 7

    def test_overrides_win(self):
        env = {"TILECOLLAPSE_SEED": "42"}
        config = SolverConfig.from_env(env, seed=3, max_attempts=None)
        assert config.seed == 3
        assert config.max_attempts is None

    def test_empty_environment_gives_defaults(self):
        assert SolverConfig.from_env({}) == SolverConfig()


def test_parse_dimensions():
    assert parse_dimensions("8x8") == (8, 8)
    assert parse_dimensions("3,4,5") == (3, 4, 5)
    with pytest.raises(ValueError):
        parse_dimensions("axb")
