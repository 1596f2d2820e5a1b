"""Command line interface for hashtrack."""
