"""
Unit tests for the command-line entry point.
"""

import logging
import os
import signal
from unittest.mock import patch

import pytest

from mc_slab_mover import cli
from mc_slab_mover.errors import ConnectionFailure
from mc_slab_mover.win_histogram import WinHistogram


@pytest.fixture(autouse=True)
def isolated_env():
    with (
        patch.dict(os.environ, {}, clear=True),
        patch("mc_slab_mover.cli.signal.signal"),
    ):
        yield


class TestConfigFromArgs:
    """Flags override environment settings."""

    def test_flags_override_env(self):
        os.environ["MC_SLAB_MOVER_LOOPS"] = "9"
        os.environ["MC_SLAB_MOVER_HOST"] = "cache-env"
        args = cli.build_parser().parse_args(
            ["--loops", "4", "--automove", "--metric", "evictions_per_item", "--quiet"]
        )
        config = cli.config_from_args(args)
        assert config.loops_threshold == 4
        assert config.host == "cache-env"
        assert config.automove_enabled is True
        assert config.metric == "evictions_per_item"
        assert config.report_enabled is False
        assert config.clamp_negative_deltas is False

    def test_env_kept_without_flags(self):
        os.environ["MC_SLAB_MOVER_AUTOMOVE"] = "true"
        config = cli.config_from_args(cli.build_parser().parse_args([]))
        assert config.automove_enabled is True
        assert config.report_enabled is True

    def test_unknown_metric_rejected_by_parser(self):
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args(["--metric", "hits"])


class TestMain:
    """Exit codes and wiring of main()."""

    def test_invalid_configuration(self):
        assert cli.main(["--sleep", "0"]) == 2

    @pytest.mark.parametrize("value", ["nan", "inf"])
    def test_non_finite_sleep_is_invalid(self, value):
        assert cli.main(["--sleep", value]) == 2
        os.environ["MC_SLAB_MOVER_SLEEP"] = value
        assert cli.main([]) == 2

    def test_connection_failure(self):
        with patch("mc_slab_mover.cli.MemcachedConnection") as mock_conn:
            mock_conn.return_value.__enter__.side_effect = ConnectionFailure("refused")
            assert cli.main(["--port", "1"]) == 1

    def test_normal_run(self):
        with (
            patch("mc_slab_mover.cli.MemcachedConnection") as mock_conn,
            patch("mc_slab_mover.cli.DriverLoop") as mock_loop,
        ):
            connection = mock_conn.return_value
            assert cli.main(["--automove", "--loops", "5", "--cycles", "2"]) == 0

            mock_conn.assert_called_once_with("127.0.0.1", 11211, 5.0)
            args, kwargs = mock_loop.call_args
            assert args[0] is connection and args[1] is connection
            assert args[2].automove_enabled is True
            assert args[2].loops_threshold == 5
            assert isinstance(kwargs["histogram"], WinHistogram)
            mock_loop.return_value.run.assert_called_once_with(max_cycles=2)

    def test_keyboard_interrupt_exits_cleanly(self, caplog):
        with (
            patch("mc_slab_mover.cli.MemcachedConnection") as mock_conn,
            patch("mc_slab_mover.cli.DriverLoop") as mock_loop,
            caplog.at_level(logging.INFO, logger="mc_slab_mover"),
        ):
            mock_conn.return_value.__exit__.return_value = False
            mock_loop.return_value.run.side_effect = KeyboardInterrupt
            assert cli.main([]) == 0
        assert "Interrupted" in caplog.text
        assert "=== WIN HISTOGRAM ===" in caplog.text


class TestDumpHandler:
    """SIGUSR1 logs the win histogram."""

    def test_handler_logs_histogram_copy(self, caplog):
        histogram = WinHistogram()
        histogram.record(4)
        with patch("mc_slab_mover.cli.signal.signal") as mock_signal:
            cli.install_dump_handler(histogram)

        signum, handler = mock_signal.call_args[0]
        assert signum == signal.SIGUSR1
        with caplog.at_level(logging.INFO, logger="mc_slab_mover"):
            handler(signum, None)
        assert "=== WIN HISTOGRAM ===" in caplog.text
        assert "cycles: 1" in caplog.text


class TestConfigureLogging:
    """Logging setup."""

    def test_verbose_sets_debug(self):
        cli.configure_logging(verbose=True)
        assert logging.getLogger("mc_slab_mover").level == logging.DEBUG
        cli.configure_logging()
        assert logging.getLogger("mc_slab_mover").level == logging.INFO
        assert len(logging.getLogger("mc_slab_mover").handlers) == 1
