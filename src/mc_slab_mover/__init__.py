import sys

from . import cli
from importlib.metadata import version, PackageNotFoundError


def main():
    """Main entry point for the package."""
    sys.exit(cli.main())


# Package metadata helpers
try:
    __version__ = version("mc-slab-mover")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0+dev"

# Tool identity (keep in sync with the CLI prog name)
TOOL_NAME = "mc-slab-mover"

# Public API
__all__ = ["main", "cli", "__version__", "TOOL_NAME"]
