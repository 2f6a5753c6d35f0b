import argparse
import logging
import signal
import sys

from .config import MoverConfig
from .driver import DriverLoop
from .errors import ConnectionFailure
from .memcached_client import MemcachedConnection
from .slab_types import RankMetric
from .utils.report_utils import summarize_win_histogram
from .win_histogram import WinHistogram

logger = logging.getLogger("mc_slab_mover")


def configure_logging(verbose: bool = False) -> None:
    # Ensure logs are visible even if the embedding process configured nothing
    if not logger.handlers:
        _handler = logging.StreamHandler(sys.stdout)
        _formatter = logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")
        _handler.setFormatter(_formatter)
        logger.addHandler(_handler)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mc-slab-mover",
        description="Watch memcached slab evictions and move pages to the "
        "slab classes under pressure.",
    )
    parser.add_argument("--host", help="memcached host")
    parser.add_argument("--port", type=int, help="memcached port")
    parser.add_argument(
        "--sleep", type=float, dest="sleep_interval", help="seconds between samples"
    )
    parser.add_argument(
        "--loops",
        type=int,
        dest="loops_threshold",
        help="consecutive cycles required before moving a page",
    )
    parser.add_argument(
        "--automove",
        action="store_true",
        default=None,
        dest="automove_enabled",
        help="issue slabs reassign commands (default: observe only)",
    )
    parser.add_argument(
        "--metric",
        choices=[m.value for m in RankMetric],
        help="ranking metric",
    )
    parser.add_argument(
        "--clamp-negative",
        action="store_true",
        default=None,
        dest="clamp_negative_deltas",
        help="treat counters that went backwards as zero when ranking",
    )
    parser.add_argument(
        "--quiet",
        action="store_false",
        default=None,
        dest="report_enabled",
        help="do not log the per-cycle ranking table",
    )
    parser.add_argument(
        "--timeout", type=float, dest="connect_timeout", help="connect timeout"
    )
    parser.add_argument("--cycles", type=int, help="stop after this many cycles")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def config_from_args(args: argparse.Namespace) -> MoverConfig:
    """Environment settings overridden by any flag given on the command line."""
    config = MoverConfig.from_env()
    for name in (
        "host",
        "port",
        "sleep_interval",
        "loops_threshold",
        "automove_enabled",
        "metric",
        "clamp_negative_deltas",
        "report_enabled",
        "connect_timeout",
    ):
        value = getattr(args, name)
        if value is not None:
            setattr(config, name, value)
    return config.validate()


def install_dump_handler(histogram: WinHistogram) -> None:
    """Log the win histogram on SIGUSR1."""
    if not hasattr(signal, "SIGUSR1"):  # pragma: no cover - non-POSIX
        return

    def _dump(signum, frame):
        logger.info(
            "\n" + summarize_win_histogram(histogram.snapshot(), histogram.cycles)
        )

    signal.signal(signal.SIGUSR1, _dump)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    try:
        config = config_from_args(args)
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        return 2

    histogram = WinHistogram()
    install_dump_handler(histogram)
    connection = MemcachedConnection(config.host, config.port, config.connect_timeout)
    try:
        with connection:
            loop = DriverLoop(connection, connection, config, histogram=histogram)
            loop.run(max_cycles=args.cycles)
    except ConnectionFailure as e:
        logger.error(f"Lost connection to {config.host}:{config.port}: {e}")
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted")

    logger.info("\n" + summarize_win_histogram(histogram.snapshot(), histogram.cycles))
    return 0


if __name__ == "__main__":
    sys.exit(main())
