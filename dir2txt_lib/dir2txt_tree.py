# -*- coding: utf-8 -*-
"""
Tree rendering for dir2txt: the '# Project Structure' listing.

Only hard rules apply here; soft rules never hide anything from the tree.
Long file lists are folded to a fixed head and tail with a marker line
counting the hidden files. Directories are never folded.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple, Union

from .dir2txt_config import SnapshotConfig
from .dir2txt_filters import FilterRule, is_junk, match_rules
from .dir2txt_styling import TreeStyle
from .dir2txt_walker import Node, VisitedSet, list_directory


@dataclass(frozen=True)
class FoldMarker:
    """Placeholder standing in for the files hidden by folding."""
    hidden: int

    @property
    def label(self) -> str:
        return f"... ({self.hidden} files hidden) ..."


TreeItem = Union[Node, FoldMarker]


def fold_files(files: Sequence[Node], config: SnapshotConfig) -> List[TreeItem]:
    """Keeps the first keep_head and last keep_tail files when the list is longer than max_display_files."""
    if not config.fold or len(files) <= config.max_display_files:
        return list(files)
    hidden = max(len(files) - config.keep_head - config.keep_tail, 0)
    tail = list(files[len(files) - config.keep_tail:]) if config.keep_tail else []
    return list(files[:config.keep_head]) + [FoldMarker(hidden)] + tail


def display_name(item: TreeItem) -> str:
    if isinstance(item, FoldMarker):
        return item.label
    if item.is_symlink and item.link_target is not None:
        return f"{item.name} -> {item.link_target}"
    return item.name


class TreeRenderer:
    """Renders one root. Holds its own VisitedSet, so a renderer is used for a single render."""

    def __init__(
        self,
        root: Union[str, Path],
        hard_rules: Sequence[FilterRule],
        config: SnapshotConfig,
        exclude_path: Optional[Union[str, Path]] = None,
        log_func: Optional[Callable] = None,
    ):
        self.root = Path(root)
        self.hard_rules = tuple(hard_rules)
        self.config = config
        self.style = TreeStyle.get_style(config.style)
        self.exclude_key = VisitedSet.canonical(exclude_path) if exclude_path else None
        self.visited = VisitedSet()
        self._log = log_func or (lambda msg, level="info": None)
        self.folded_dirs = 0

    def _is_visible(self, node: Node) -> bool:
        if self.exclude_key and VisitedSet.canonical(node.physical_path) == self.exclude_key:
            return False
        if is_junk(node.name, self.config):
            return False
        matched, rule = match_rules(node.logical_path, self.hard_rules)
        if matched:
            self._log(f"Tree: hiding '{node.logical_path}' (hard filter \"{rule}\")", "debug")
            return False
        return True

    def _dir_items(self, physical_dir: Path, logical_dir: str) -> List[TreeItem]:
        """Visible entries of one directory: subdirectories first, then the (folded) files."""
        nodes = [n for n in list_directory(physical_dir, logical_dir) if self._is_visible(n)]

        dirs = [n for n in nodes if n.is_dir]
        files = [n for n in nodes if not n.is_dir]
        shown_files = fold_files(files, self.config)
        if len(shown_files) != len(files):
            self.folded_dirs += 1
            self._log(f"Tree: folded {len(files)} files in '{logical_dir or self.root.name}'", "debug")
        return [*dirs, *shown_files]

    def _push_items(self, stack: List[Tuple[TreeItem, str, bool]], items: List[TreeItem], prefix: str) -> None:
        # Reversed, so the first item is popped first
        for i in range(len(items) - 1, -1, -1):
            stack.append((items[i], prefix, i == len(items) - 1))

    def render(self) -> List[str]:
        """
        Returns the tree lines, starting with '<root-name>/'.

        Uses an explicit stack of (item, prefix, is_last) frames, so depth is
        not limited by the interpreter's recursion limit.

        Raises:
            OSError: If a directory cannot be read.
        """
        lines = [f"{self.root.name}/"]
        self.visited.enter(self.root)
        stack: List[Tuple[TreeItem, str, bool]] = []
        self._push_items(stack, self._dir_items(self.root, ""), "")

        while stack:
            item, prefix, is_last = stack.pop()
            pointer = self.style["last_tee"] if is_last else self.style["tee"]
            lines.append(f"{prefix}{pointer}{display_name(item)}")

            if isinstance(item, FoldMarker) or not item.is_dir:
                continue
            if not self.visited.enter(item.physical_path):
                self._log(f"Tree: '{item.logical_path}' already listed (symlink loop), not expanding", "debug")
                continue
            next_prefix = prefix + (self.style["empty"] if is_last else self.style["branch"])
            self._push_items(stack, self._dir_items(item.physical_path, item.logical_path), next_prefix)
        return lines


def render_tree(
    root: Union[str, Path],
    hard_rules: Sequence[FilterRule],
    config: SnapshotConfig,
    exclude_path: Optional[Union[str, Path]] = None,
    log_func: Optional[Callable] = None,
) -> List[str]:
    """Renders the tree for one root with a fresh VisitedSet."""
    return TreeRenderer(root, hard_rules, config, exclude_path, log_func).render()
