"""
Answer one question about a directory tree: is there a `.json` file in it?

The entry point uses this to reject roots that would produce no output
before any file gets truncated. `walk_tree` is shared with the merger.
"""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterator

log = logging.getLogger(__name__)

JSON_SUFFIX = ".json"


def is_json_name(name: str) -> bool:
    return name.lower().endswith(JSON_SUFFIX)


def walk_tree(root: Path | str, follow_symlinks: bool = True,
              topdown: bool = True) -> Iterator[tuple[str, list[str]]]:
    """
    Yield (dirpath, filenames) for *root* and every directory below it.

    Works like os.walk, but each real directory is visited once: a symlink
    leading back to a directory already seen (a cycle, or a second name
    for the same place) is skipped. Entries are taken in name order, so
    the first name reached for a directory is deterministic. With
    topdown=False every directory comes after all of its subdirectories.
    Listing errors propagate.
    """
    root = os.path.abspath(root)
    seen = {os.path.realpath(root)}
    stack: list[tuple[str, list[str] | None]] = [(root, None)]

    while stack:
        path, filenames = stack.pop()
        if filenames is not None:
            yield path, filenames
            continue

        subdirs, filenames = [], []
        with os.scandir(path) as it:
            entries = sorted(it, key=lambda e: e.name)
        for entry in entries:
            if entry.is_dir(follow_symlinks=follow_symlinks):
                real = os.path.realpath(entry.path)
                if real in seen:
                    log.debug(f"{entry.path} already visited as {real}, skipping")
                    continue
                seen.add(real)
                subdirs.append(entry.path)
            elif entry.is_file():
                filenames.append(entry.name)

        if topdown:
            yield path, filenames
        else:
            stack.append((path, filenames))
        stack.extend((d, None) for d in reversed(subdirs))


def contains_json(path: Path | str, follow_symlinks: bool = True) -> bool:
    """
    True if *path* is a directory with a qualifying JSON file somewhere below it.

    Every entry counts: a JSON-free subdirectory listed after a hit does not
    undo the hit. Stops at the first qualifying file.
    """
    path = Path(path)
    log.info(f"--> searching {path}")

    if not path.is_dir():
        log.info(f"--> {path} is not a directory")
        return False

    for dirpath, filenames in walk_tree(path, follow_symlinks=follow_symlinks):
        log.debug(f"----> {dirpath}: {len(filenames)} file(s)")
        for name in filenames:
            if is_json_name(name):
                log.info(f"--> found json under {path}: {os.path.join(dirpath, name)}")
                return True

    log.info(f"--> no json under {path}")
    return False
