"""Utility functions for StaticBlocks.

File-system helpers used by the page builder.

Key functions:
    iter_files: List files with a given suffix below a directory.
    page_slug: Derive a page slug from its YAML file.
    ensure_clean_dir: Ensure a directory exists and is empty.
    copy_tree: Copy a directory tree into another one.
"""

from __future__ import annotations

import shutil
from pathlib import Path


def iter_files(directory: Path, suffix: str) -> list[Path]:
    """List files below a directory with a given suffix, sorted.

    Args:
        directory: Directory to search recursively.
        suffix: File suffix including the dot, e.g. ``.yaml``.

    Returns:
        Sorted list of paths; empty if the directory does not exist.
    """
    if not directory.exists():
        return []
    return sorted(p for p in directory.rglob(f"*{suffix}") if p.is_file())


def page_slug(pages_dir: Path, path: Path) -> str:
    """Convert a page file path to its slug.

    Examples:
        >>> page_slug(Path("src/pages"), Path("src/pages/blog/post.yaml"))
        'blog/post'
    """
    return path.relative_to(pages_dir).with_suffix("").as_posix()


def ensure_clean_dir(path: Path) -> None:
    """Ensure a directory exists and is empty.

    If the directory exists, removes all contents. Creates the
    directory if it doesn't exist.

    Args:
        path: Directory path to clean or create.
    """
    if path.exists():
        shutil.rmtree(str(path), ignore_errors=True)
    path.mkdir(parents=True, exist_ok=True)


def copy_tree(source: Path, dest: Path) -> int:
    """Copy every file below ``source`` into ``dest``.

    Args:
        source: Directory to copy from.
        dest: Directory to copy into; created as needed.

    Returns:
        Number of files copied (0 if ``source`` does not exist).
    """
    if not source.exists():
        return 0
    count = 0
    for src_path in source.rglob("*"):
        if src_path.is_dir():
            continue
        dest_path = dest / src_path.relative_to(source)
        dest_path.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(src_path, dest_path)
        count += 1
    return count
