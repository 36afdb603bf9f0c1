# -*- coding: utf-8 -*-
"""
Directory scanning for dir2txt's interactive setup.
Counts file extensions below a root so the user can pick which ones to keep out of the contents.
"""

import os
from collections import Counter
from pathlib import Path
from typing import Callable, Counter as CounterType, Optional, Union

from .dir2txt_config import SnapshotConfig, make_config
from .dir2txt_filters import is_junk, match_rules
from .dir2txt_walker import Node, SkipDir, walk

NO_EXTENSION = "(no ext)"


class _ScanLimitReached(Exception):
    pass


def scan_extensions(
    root: Union[str, Path],
    config: Optional[SnapshotConfig] = None,
    max_items: int = 20000,
    log_func: Optional[Callable] = None,
) -> CounterType[str]:
    """
    Counts files per lowercase extension (without dot) below root.

    Junk entries and hard-filtered entries are not counted and not descended
    into. Scanning stops after max_items files; directory read errors end the
    scan with what was counted so far.
    """
    config = config or make_config()
    log = log_func or (lambda msg, level="info": None)
    counter: CounterType[str] = Counter()
    scanned = 0

    def _count(node: Node) -> None:
        nonlocal scanned
        if is_junk(node.name, config) or match_rules(node.logical_path, config.hard_rules)[0]:
            if node.is_dir:
                raise SkipDir()
            return
        if node.is_dir:
            return
        ext = os.path.splitext(node.name)[1].lower().lstrip(".")
        counter[ext or NO_EXTENSION] += 1
        scanned += 1
        if scanned >= max_items:
            raise _ScanLimitReached()

    log(f"Starting extension scan in '{root}' (max: {max_items})", "info")
    try:
        walk(root, _count)
    except _ScanLimitReached:
        log(f"Scan reached max items ({max_items}).", "info")
    except OSError as e:
        log(f"Scan: could not read a directory below '{root}': {e}", "warning")

    log(f"Scan finished. Found {len(counter)} extensions in {scanned} files.", "info")
    return counter
