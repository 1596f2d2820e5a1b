"""Main CLI entry point for hashtrack."""  # pragma: no cover

from hashtrack.cli.app import app  # pragma: no cover
from hashtrack.config import config  # pragma: no cover
from hashtrack.utils import setup_logging  # pragma: no cover

# Register commands
from hashtrack.cli.commands import status, sync, watch  # pragma: no cover

__all__ = ["app", "status", "sync", "watch"]  # pragma: no cover


# Set up logging when module is imported
setup_logging(log_file="hashtrack-cli.log", level=config.log_level, home=config.home)  # pragma: no cover

if __name__ == "__main__":  # pragma: no cover
    app()
