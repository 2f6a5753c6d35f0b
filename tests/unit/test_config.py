"""
Unit tests for MoverConfig

Tests defaults, environment overrides and validation.
"""

import os
from unittest.mock import patch

import pytest

from mc_slab_mover.config import MoverConfig


class TestMoverConfig:
    """Test suite for MoverConfig."""

    def test_defaults(self):
        config = MoverConfig()
        assert config.sleep_interval == 10.0
        assert config.loops_threshold == 3
        assert config.automove_enabled is False
        assert config.metric == "evictions"
        assert config.clamp_negative_deltas is False
        assert config.validate() is config

    def test_from_env(self):
        env = {
            "MC_SLAB_MOVER_HOST": "cache-7",
            "MC_SLAB_MOVER_PORT": "22122",
            "MC_SLAB_MOVER_SLEEP": "2.5",
            "MC_SLAB_MOVER_LOOPS": "5",
            "MC_SLAB_MOVER_AUTOMOVE": "yes",
            "MC_SLAB_MOVER_METRIC": "evictions_per_item",
            "MC_SLAB_MOVER_CLAMP_NEGATIVE": "1",
            "MC_SLAB_MOVER_REPORT": "false",
        }
        config = MoverConfig.from_env(env)
        assert config.host == "cache-7"
        assert config.port == 22122
        assert config.sleep_interval == 2.5
        assert config.loops_threshold == 5
        assert config.automove_enabled is True
        assert config.metric == "evictions_per_item"
        assert config.clamp_negative_deltas is True
        assert config.report_enabled is False

    def test_from_env_reads_os_environ(self):
        with patch.dict(os.environ, {"MC_SLAB_MOVER_LOOPS": "7"}, clear=True):
            assert MoverConfig.from_env().loops_threshold == 7

    def test_unparseable_numbers_fall_back(self):
        config = MoverConfig.from_env(
            {"MC_SLAB_MOVER_SLEEP": "soon", "MC_SLAB_MOVER_PORT": "x"}
        )
        assert config.sleep_interval == 10.0
        assert config.port == 11211

    @pytest.mark.parametrize(
        "overrides, message",
        [
            ({"sleep_interval": 0}, "sleep_interval"),
            ({"loops_threshold": 0}, "loops_threshold"),
            ({"port": 70000}, "port"),
            ({"host": ""}, "host"),
            ({"metric": "hits"}, "metric"),
            ({"connect_timeout": -1}, "connect_timeout"),
            ({"sleep_interval": float("nan")}, "sleep_interval"),
            ({"sleep_interval": float("inf")}, "sleep_interval"),
            ({"connect_timeout": float("nan")}, "connect_timeout"),
            ({"connect_timeout": float("inf")}, "connect_timeout"),
        ],
    )
    def test_validate_rejects(self, overrides, message):
        with pytest.raises(ValueError, match=message):
            MoverConfig(**overrides).validate()
