"""Discover candidate image files under a folder."""

import fnmatch
import os
from collections.abc import Iterable
from pathlib import Path

from photo_curator.config import IMAGE_PATTERNS


def enumerate_images(
    root: str | Path,
    recursive: bool = True,
    patterns: Iterable[str] = IMAGE_PATTERNS,
) -> list[Path]:
    """List image files matching ``patterns`` under ``root``.

    Patterns match file names case-insensitively. Files are returned grouped
    by pattern, sorted within each group, and de-duplicated by
    case-insensitive path so the same file is never listed twice.

    Args:
        root: Folder to scan.
        recursive: Include subfolders.
        patterns: Glob patterns such as ``"*.jpg"``.

    Returns:
        Matching paths; empty if the folder is missing or nothing matches.
    """
    root_path = Path(root)
    if not root_path.is_dir():
        return []

    candidates = root_path.rglob("*") if recursive else root_path.glob("*")
    files = sorted(p for p in candidates if p.is_file())

    seen: set[str] = set()
    result: list[Path] = []
    for pattern in patterns:
        folded = pattern.casefold()
        for path in files:
            if not fnmatch.fnmatchcase(path.name.casefold(), folded):
                continue
            key = _path_key(path)
            if key in seen:
                continue
            seen.add(key)
            result.append(path)
    return result


def _path_key(path: Path) -> str:
    return os.path.normcase(str(path)).casefold()
