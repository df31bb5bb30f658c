"""Directory traversal helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Generator, Tuple, Union


def iter_files(root: Union[str, Path], extensions: Tuple[str, ...]) -> Generator[Path, None, None]:
    """Yield files beneath ``root`` whose suffix is in ``extensions``.

    The walk is depth-first with entries visited in lexical name order, so
    repeated walks over an unchanged tree yield the same sequence. Symlinked
    directories are not followed. A ``root`` that is itself a file is yielded
    when it matches. ``OSError`` from the filesystem propagates to the caller.
    """

    root_path = Path(root)
    if not root_path.is_dir():
        # Raises FileNotFoundError for a missing root.
        os.stat(root_path)
        if root_path.suffix in extensions:
            yield root_path
        return
    yield from _walk(root_path, extensions)


def _walk(directory: Path, extensions: Tuple[str, ...]) -> Generator[Path, None, None]:
    with os.scandir(directory) as handle:
        entries = sorted(handle, key=lambda entry: entry.name)
    for entry in entries:
        path = directory / entry.name
        if entry.is_dir(follow_symlinks=False):
            yield from _walk(path, extensions)
        elif entry.is_file() and path.suffix in extensions:
            yield path
