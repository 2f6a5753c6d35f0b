import sys
import psutil
import logging

logger = logging.getLogger(__name__)


def log_monitor_status(
    server: str, cycles: int, include_process_rss: bool = True
) -> None:
    """Log the monitor's own resource usage alongside the server it watches."""
    try:
        vm = psutil.virtual_memory()
        process_rss_mb: int | None = None
        if include_process_rss:
            try:
                current_process = psutil.Process()
                process_rss_mb = current_process.memory_info().rss // (1024**2)
            except Exception:
                process_rss_mb = None

        msg = (
            f"Server={server} | cycles={cycles} | Host RAM used={vm.percent:.1f}% "
            f"({vm.used // (1024**2)}MB/{vm.total // (1024**2)}MB)"
            + (
                f" | Monitor RSS={process_rss_mb}MB"
                if process_rss_mb is not None
                else ""
            )
        )
        logger.info(msg)
        print(f"[mc-slab-mover] {msg}", file=sys.stderr, flush=True)
    except Exception as exc:  # pragma: no cover
        logger.debug(f"Failed to log monitor status: {exc}")
