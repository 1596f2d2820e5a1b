"""CLI commands for hashtrack."""

from . import status, sync, watch

__all__ = ["status", "sync", "watch"]
