"""
Merge the JSON files of every directory in a tree into one array per directory.

For a directory  data/  holding

    data/
      ├── a.json        [3]
      ├── b.json        [1,2]
      └── nested/
            └── c.json  [4]

the run writes  data/nested/nested.json = [4]  first and then
data/data.json = [3,1,2].  A directory only merges its own files; the output
of a subdirectory never ends up in its parent.

Splicing is positional: one leading '[' and one trailing ']' are cut from
every input and the rest is copied byte for byte. Inputs that are not arrays
come out as whatever the bytes say.
"""
from __future__ import annotations

import logging
import os
from pathlib import Path

from tqdm import tqdm

from json_collect.scanner import JSON_SUFFIX, is_json_name, walk_tree

log = logging.getLogger(__name__)

OPEN_BRACKET = b"["
CLOSE_BRACKET = b"]"
COMMA = b","


def output_path_for(directory: Path | str) -> str:
    directory = os.path.abspath(directory)
    return os.path.join(directory, os.path.basename(directory) + JSON_SUFFIX)


def collect_candidates(directory: Path | str) -> list[str]:
    """Direct regular-file children of *directory* with a .json name, unsorted."""
    directory = os.fspath(directory)
    files = []
    with os.scandir(directory) as it:
        for entry in it:
            if entry.is_dir():
                log.debug(f"{entry.path} is a sub folder")
            elif entry.is_file() and is_json_name(entry.name):
                log.debug(f"{entry.path} is a file")
                files.append(entry.path)
    return files


def trim_brackets(buffer: bytes) -> bytes:
    if buffer.startswith(OPEN_BRACKET):
        buffer = buffer[1:]
    if buffer.endswith(CLOSE_BRACKET):
        buffer = buffer[:-1]
    return buffer


def merge_directory(directory: Path | str) -> str | None:
    """
    Write <directory>/<name>.json from the directory's own JSON files.

    Returns the written path, or None when the directory has no candidates.
    A previous output sitting among the candidates is skipped as input but
    still counts as a position when deciding where commas go.
    """
    directory = os.path.abspath(directory)
    log.info(f"Begin processing path: {directory}")

    files = collect_candidates(directory)
    log.debug(f"{directory} contains the following files: {files}")
    log.info(f"Found {len(files)} json files in path: {directory}")

    if not files:
        log.info(f"Finished processing path: {directory}")
        return None

    files.sort()
    log.debug(f"Sorted files: {files}")

    out_path = output_path_for(directory)
    last = len(files) - 1
    with open(out_path, "wb") as out:
        out.write(OPEN_BRACKET)
        for i, f in enumerate(files):
            if f == out_path:
                log.debug(f"skipping previous output {f}")
                continue
            with open(f, "rb") as src:
                buffer = trim_brackets(src.read())
            if i < last:
                buffer += COMMA
            out.write(buffer)
        out.write(CLOSE_BRACKET)

    log.info(f"Wrote {out_path}")
    log.info(f"Finished processing path: {directory}")
    return out_path


def merge_tree(root: Path | str, follow_symlinks: bool = True, progress: bool = False) -> list[str]:
    """
    Merge every directory under *root*, deepest first.

    Walks iteratively so deep trees do not run into the recursion limit.
    Symlinked directories are merged under the link's name; a directory
    reached a second time through a link is not merged again.
    Any OSError stops the run; outputs already written stay on disk.
    """
    walk = walk_tree(root, follow_symlinks=follow_symlinks, topdown=False)
    written = []
    for dirpath, _ in tqdm(walk, desc="dirs", unit="dir", disable=not progress):
        out_path = merge_directory(dirpath)
        if out_path is not None:
            written.append(out_path)
    return written
