#!/usr/bin/env python3
"""
Merge the JSON files of every directory below PATH into <dir>/<dir>.json.

    json-collect data/ -i
    json-collect data/ -d --log-file run.log --progress
"""
from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from json_collect import __version__
from json_collect.config import load_settings
from json_collect.logs import setup_logging
from json_collect.merger import merge_tree
from json_collect.scanner import contains_json

log = logging.getLogger(__name__)


def validate_root(path: Path, follow_symlinks: bool = True) -> Path:
    """
    Make *path* absolute and make sure a merge run on it would write something.

    Symlinks are kept as given, so a linked root is named after the link.
    """
    if not path.exists():
        raise FileNotFoundError(f"Path[{path}] does not exist")
    if not path.is_dir():
        raise NotADirectoryError(f"Path[{path}] should be a directory")
    path = Path(os.path.abspath(path))
    if not contains_json(path, follow_symlinks=follow_symlinks):
        raise FileNotFoundError(f"Path[{path}] or sub-paths don't contain any Json files")
    return path


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="json-collect",
        description="Merge the JSON array files of each directory into <dir>/<dir>.json.",
    )
    parser.add_argument("path", type=Path, help="the path where the json collection lies")
    parser.add_argument("-d", "--debug", action="store_true", help="activate debug mode")
    parser.add_argument("-i", "--info", action="store_true", help="activate info mode")
    parser.add_argument("--config", type=Path, help="YAML file with run settings")
    parser.add_argument("--log-file", type=Path, help="also log to this file (rotated at 10 MB)")
    parser.add_argument("--no-follow-symlinks", dest="follow_symlinks", action="store_false", default=None,
                        help="do not descend into symlinked directories")
    parser.add_argument("--progress", action="store_true", default=None,
                        help="show a progress bar over visited directories")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def cli_level(args: argparse.Namespace) -> str | None:
    if args.debug:
        return "DEBUG"
    if args.info:
        return "INFO"
    return None


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings(
            args.config,
            log_level=cli_level(args),
            log_file=args.log_file,
            follow_symlinks=args.follow_symlinks,
            progress=args.progress,
        )
    except (OSError, ValueError) as e:
        print(f"json-collect: {e}", file=sys.stderr)
        return 1

    if setup_logging(settings.log_level, settings.log_file):
        log.info("Logger was successfully setup")

    try:
        root = validate_root(args.path, follow_symlinks=settings.follow_symlinks)
    except OSError as e:
        log.error(str(e))
        return 1
    log.info(f"Path or sub-paths contains Json. [Path:{root}]")

    try:
        written = merge_tree(root, follow_symlinks=settings.follow_symlinks, progress=settings.progress)
    except OSError as e:
        log.error(f"merge aborted: {e}")
        return 1

    log.info(f"Merged {len(written)} {'directory' if len(written) == 1 else 'directories'}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
