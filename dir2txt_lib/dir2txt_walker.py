# -*- coding: utf-8 -*-
"""
Symlink-aware directory traversal for dir2txt.

Symlinked directories are followed. Each Node keeps two paths: the logical
path (relative to the root, built from the names seen during traversal,
symlink names included) used for filtering and display, and the physical
path (the resolved location) used for I/O and cycle detection.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Set, Tuple, Union


class SkipDir(Exception):
    """Raised by a visit callback to skip the children of the current directory entry."""


@dataclass(frozen=True)
class Node:
    """A filesystem entry found during traversal."""
    name: str
    logical_path: str
    physical_path: Path
    is_dir: bool
    is_symlink: bool = False
    link_target: Optional[str] = None


class VisitedSet:
    """Canonical directories already entered during one traversal pass."""

    def __init__(self):
        self._seen: Set[str] = set()

    @staticmethod
    def canonical(path: Union[str, Path]) -> str:
        return os.path.normcase(os.path.realpath(path))

    def enter(self, path: Union[str, Path]) -> bool:
        """Records the directory and returns True, or returns False if it was already entered."""
        key = self.canonical(path)
        if key in self._seen:
            return False
        self._seen.add(key)
        return True

    def __contains__(self, path) -> bool:
        return self.canonical(path) in self._seen

    def __len__(self) -> int:
        return len(self._seen)


def join_logical(parent: str, name: str) -> str:
    return f"{parent}/{name}" if parent else name


def _make_node(entry: os.DirEntry, physical_dir: Path, logical_dir: str) -> Node:
    """Builds a Node for one directory entry, resolving symlinks to directories."""
    name = entry.name
    entry_path = physical_dir / name
    logical = join_logical(logical_dir, name)

    try:
        is_symlink = entry.is_symlink()
    except OSError:
        is_symlink = False

    if not is_symlink:
        try:
            is_dir = entry.is_dir(follow_symlinks=False)
        except OSError:
            is_dir = False
        return Node(name=name, logical_path=logical, physical_path=entry_path, is_dir=is_dir)

    try:
        link_target = os.readlink(entry_path)
    except OSError:
        link_target = None

    # A symlink that cannot be resolved, or points at a file, stays a leaf
    try:
        target = entry_path.resolve(strict=True)
        if target.is_dir():
            return Node(name=name, logical_path=logical, physical_path=target,
                        is_dir=True, is_symlink=True, link_target=link_target)
    except (OSError, RuntimeError):
        pass
    return Node(name=name, logical_path=logical, physical_path=entry_path,
                is_dir=False, is_symlink=True, link_target=link_target)


def list_directory(physical_dir: Union[str, Path], logical_dir: str = "") -> List[Node]:
    """
    Lists one directory as Nodes, sorted by name.

    Raises:
        OSError: If the directory cannot be read.
    """
    physical_dir = Path(physical_dir)
    with os.scandir(physical_dir) as it:
        entries = sorted(it, key=lambda e: e.name)
    return [_make_node(entry, physical_dir, logical_dir) for entry in entries]


def walk(
    root: Union[str, Path],
    visit: Callable[[Node], None],
    visited: Optional[VisitedSet] = None,
) -> VisitedSet:
    """
    Visits every entry below root exactly once, following symlinked directories.

    Traversal uses an explicit stack. All entries of a directory are passed to
    ``visit`` before any of its subdirectories is entered; subdirectories are
    entered in name order. A directory whose canonical path was already entered
    (the root included) is not entered again.

    Args:
        root: Physical path of the directory to walk.
        visit: Called with each Node. Raising SkipDir prunes that entry's subtree;
               any other exception aborts the walk.
        visited: VisitedSet for this pass; a fresh one is created if omitted.

    Returns:
        The VisitedSet used by the walk.

    Raises:
        OSError: If a directory cannot be read.
    """
    if visited is None:
        visited = VisitedSet()
    root = Path(root)
    visited.enter(root)

    stack: List[Tuple[Path, str]] = [(root, "")]
    while stack:
        physical_dir, logical_dir = stack.pop()
        children: List[Tuple[Path, str]] = []

        for node in list_directory(physical_dir, logical_dir):
            try:
                visit(node)
            except SkipDir:
                continue
            if node.is_dir and visited.enter(node.physical_path):
                children.append((node.physical_path, node.logical_path))

        stack.extend(reversed(children))
    return visited
