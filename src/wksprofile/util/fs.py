# src/wksprofile/util/fs.py: Filesystem utilities.
# Thin wrappers over directory creation and recursive removal that surface
# OS failures as FilesystemError, so callers only deal with one error type.

import os
import shutil
from pathlib import Path

from .errors import FilesystemError


def make_dirs(path: Path, mode: int = 0o700) -> None:
    """Create a directory and its parents if they are absent."""
    try:
        os.makedirs(path, mode=mode, exist_ok=True)
    except OSError as e:
        raise FilesystemError(f"unable to create directory '{path}': {e}") from e


def remove_tree(path: Path) -> None:
    """Recursively delete a directory tree. Missing paths are ignored."""
    if not os.path.lexists(path):
        return
    try:
        shutil.rmtree(path)
    except OSError as e:
        raise FilesystemError(f"unable to remove '{path}': {e}") from e


def is_empty_dir(path: Path) -> bool:
    """True if path is a directory without entries."""
    return path.is_dir() and not any(path.iterdir())
