"""Entry point for running peerreview as a module or installed script.

Usage:
    peerreview / python -m peerreview                        → API server
    peerreview <command> ... / python -m peerreview <command> → CLI
"""

import sys

from peerreview.cli import run_cli, serve
from peerreview.config import Settings
from peerreview.console import configure_logging


def run() -> None:
    """Entry point: no args → API server, else → CLI."""
    if len(sys.argv) == 1:
        settings = Settings.load()
        configure_logging(settings.log_level)
        serve(settings)
    else:
        sys.exit(run_cli())


if __name__ == "__main__":
    run()
