"""Types and utilities for file sync."""

from dataclasses import dataclass, field
from typing import Set, Dict


@dataclass
class SyncReport:
    """Report of file changes found compared to the store.

    Attributes:
        new: Files on disk that the store has no digest for
        modified: Files whose digest differs from the stored one
        deleted: Files in the store that are no longer on disk
        unchanged: Files whose digest matches the stored one
        checksums: Current hex digests for files on disk
    """

    new: Set[str] = field(default_factory=set)
    modified: Set[str] = field(default_factory=set)
    deleted: Set[str] = field(default_factory=set)
    unchanged: Set[str] = field(default_factory=set)
    checksums: Dict[str, str] = field(default_factory=dict)

    @property
    def total_changes(self) -> int:
        """Total number of files that need attention."""
        return len(self.new) + len(self.modified) + len(self.deleted)

    @property
    def total(self) -> int:
        """Number of files currently on disk."""
        return len(self.checksums)
