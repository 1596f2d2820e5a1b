"""hashtrack - content digests for a directory tree, persisted across runs."""

__version__ = "0.1.0"
