"""Extension based exclusion rules for directory scans."""

import os
from pathlib import Path
from typing import Iterable, Set, Union


def file_extension(path: Union[str, Path]) -> str:
    """
    The text after the last dot of the file name.

    A name without a dot is its own extension, so "Makefile" matches an
    ignore entry "Makefile". Multi-part extensions only match on the last
    part: "a.tar.gz" -> "gz".
    """
    name = os.path.basename(os.fspath(path))
    return name.rsplit(".", 1)[-1]


def normalize_extensions(extensions: Iterable[str]) -> Set[str]:
    """Strip whitespace and a leading dot from each entry, dropping blanks."""
    return {ext.strip().lstrip(".") for ext in extensions if ext and ext.strip()}


def should_ignore_path(path: Union[str, Path], ignore_extensions: Set[str]) -> bool:
    """Check if a file should be skipped based on its extension.

    Args:
        path: The file path to check
        ignore_extensions: Normalized extensions to skip

    Returns:
        True if the path should be ignored, False otherwise
    """
    if not ignore_extensions:
        return False
    return file_extension(path) in ignore_extensions
