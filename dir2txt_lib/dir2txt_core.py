# -*- coding: utf-8 -*-
"""
Core logic for dir2txt: the SnapshotBuilder that drives the tree pass and the
content pass for every root and writes the output document.
"""

import os
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Union

from .dir2txt_config import SnapshotConfig, make_config
from .dir2txt_content import serialize_file
from .dir2txt_filters import is_asset, is_junk, match_rules
from .dir2txt_styling import Colors
from .dir2txt_tree import TreeRenderer
from .dir2txt_utils import describe_error, format_bytes, log_message
from .dir2txt_walker import Node, SkipDir, VisitedSet, walk

DEFAULT_OUTPUT_BASENAME = "merged_project"
OUTPUT_SUFFIX = "_context.md"


class SnapshotError(Exception):
    """One or more roots failed; the output document was still written for the others."""

    def __init__(self, errors: Dict[Path, BaseException]):
        self.errors = errors
        details = "; ".join(describe_error(root, err, "processing directory") for root, err in errors.items())
        super().__init__(f"{len(errors)} root(s) failed: {details}")


# --- Output path helpers ---

def _has_path_prefix(path: Path, prefix: Path) -> bool:
    return path == prefix or prefix in path.parents


def find_common_ancestor(paths: Sequence[Path]) -> Optional[Path]:
    """Deepest directory containing every path, or None when there is none."""
    if not paths:
        return None
    common = paths[0]
    for p in paths[1:]:
        while not _has_path_prefix(p, common):
            if common.parent == common:
                return None
            common = common.parent
    return common


def build_output_file_name(abs_roots: Sequence[Path]) -> str:
    """'<root>_context.md' for one root; named after the common ancestor for several."""
    if len(abs_roots) == 1:
        return f"{abs_roots[0].name or DEFAULT_OUTPUT_BASENAME}{OUTPUT_SUFFIX}"
    common = find_common_ancestor(abs_roots)
    base = DEFAULT_OUTPUT_BASENAME
    if common is not None and common.parent != common and common.name:
        base = common.name
    return f"{base}{OUTPUT_SUFFIX}"


def determine_output_path(roots: Sequence[Union[str, Path]], user_out: Optional[str] = None) -> Path:
    """
    Works out where the document goes.

    No user_out: '<cwd>/<generated name>'. A user_out ending in '.md' is the file
    itself; anything else is treated as a directory for the generated name.

    Raises:
        ValueError: If no roots are given.
    """
    if not roots:
        raise ValueError("At least one directory is required")
    abs_roots = [Path(os.path.abspath(r)) for r in roots]
    file_name = build_output_file_name(abs_roots)

    if not user_out:
        return Path.cwd() / file_name

    out = Path(os.path.abspath(user_out))
    if out.suffix.lower() == ".md":
        return out
    return out / file_name


# --- Main Class ---

class SnapshotBuilder:
    """
    Builds the snapshot document for a set of roots.

    The structure section (one tree per root) is written first, then the
    contents section. Both passes use their own traversal and VisitedSet.
    """

    def __init__(
        self,
        roots: Sequence[Union[str, Path]],
        config: Optional[SnapshotConfig] = None,
        output_path: Optional[Union[str, Path]] = None,
        log_func: Optional[Callable] = None,
    ):
        if not roots:
            raise ValueError("At least one directory is required")
        self.config = config or make_config()

        self.roots: List[Path] = []
        for root in roots:
            try:
                resolved = Path(root).resolve(strict=True)
            except FileNotFoundError:
                raise FileNotFoundError(f"Starting directory not found: '{root}'")
            except (OSError, RuntimeError) as e:
                raise ValueError(f"Error accessing starting directory '{root}': {e}")
            if not resolved.is_dir():
                raise NotADirectoryError(f"Path is not a directory: '{resolved}'")
            self.roots.append(resolved)

        if output_path is None:
            output_path = determine_output_path(roots)
        self.output_path = Path(os.path.abspath(output_path))
        self._output_key = VisitedSet.canonical(self.output_path)

        self._log = log_func or (lambda msg, level="info": log_message(msg, level, self.config.verbose, self.config.colorize))

        # --- Run state ---
        self.errors: Dict[Path, BaseException] = {}
        self.files_written = 0
        self.files_skipped = 0
        self.bytes_written = 0
        self.folded_dirs = 0

    # --- Tree pass ---
    def _write_structure(self, out) -> None:
        out.write("# Project Structure\n\n")
        out.write("```text\n")
        for root in self.roots:
            renderer = TreeRenderer(root, self.config.hard_rules, self.config,
                                    exclude_path=self.output_path, log_func=self._log)
            try:
                lines = renderer.render()
            except OSError as e:
                self._log(describe_error(root, e, "generating tree for"), "error")
                self.errors.setdefault(root, e)
                out.write(f"{root.name}/\n")
                out.write(f"Error generating tree for {root}: {e}\n")
            else:
                out.write("\n".join(lines) + "\n")
                self.folded_dirs += renderer.folded_dirs
            out.write("\n")
        out.write("```\n\n")
        out.write("---\n\n")

    # --- Content pass ---
    def _display_path(self, root: Path, node: Node) -> str:
        if self.config.absolute_paths:
            return node.physical_path.as_posix()
        return f"{root.name}/{node.logical_path}"

    def _visit_for_content(self, root: Path, node: Node, out) -> None:
        if VisitedSet.canonical(node.physical_path) == self._output_key:
            if node.is_dir:
                raise SkipDir()
            return

        if is_junk(node.name, self.config):
            if node.is_dir:
                raise SkipDir()
            return

        matched_hard, _ = match_rules(node.logical_path, self.config.hard_rules)
        if matched_hard:
            if node.is_dir:
                raise SkipDir()
            return

        matched_soft, rule = match_rules(node.logical_path, self.config.soft_rules)
        if matched_soft:
            if node.is_dir:
                self._log(f"[SKIP] Directory ignored (Soft Filter: \"{rule}\"): {node.logical_path}", "skip")
                raise SkipDir()
            self._log(f"[SKIP] Content ignored (Soft Filter: \"{rule}\"): {node.logical_path}", "skip")
            self.files_skipped += 1
            return

        if node.is_dir:
            return

        if is_asset(node.name, self.config):
            self._log(f"Content: skipping asset '{node.logical_path}'", "debug")
            self.files_skipped += 1
            return

        result = serialize_file(node.physical_path, self._display_path(root, node), self.config, self._log)
        if not result.emitted:
            self.files_skipped += 1
            return
        out.write(result.block)
        self.files_written += 1
        self.bytes_written += result.size

    def _write_contents(self, out) -> None:
        out.write("# File Contents\n\n")
        for root in self.roots:
            try:
                walk(root, lambda node, root=root: self._visit_for_content(root, node, out))
            except OSError as e:
                self._log(describe_error(root, e, "processing directory"), "error")
                self.errors.setdefault(root, e)

    # --- Public Methods ---
    def run(self) -> Path:
        """
        Writes the document and returns its path.

        Raises:
            OSError: If the output document cannot be created.
            SnapshotError: If any root failed (after the document has been written and closed).
        """
        self.errors = {}
        self.files_written = self.files_skipped = self.bytes_written = self.folded_dirs = 0

        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        self._log(f"Writing snapshot to: {self.output_path}", "info")

        with self.output_path.open("w", encoding="utf-8", newline="\n") as out:
            self._write_structure(out)
            self._write_contents(out)

        self._log(f"Snapshot complete: {self.files_written} files written "
                  f"({format_bytes(self.bytes_written)}), {self.files_skipped} skipped", "info")
        if self.errors:
            raise SnapshotError(self.errors)
        return self.output_path

    def summary(self) -> str:
        """Final status line for the console."""
        color = Colors.GREEN if self.config.colorize else ""
        reset = Colors.RESET if self.config.colorize else ""
        return (f"{color}Done!{reset} {self.files_written} files written "
                f"({format_bytes(self.bytes_written)}), {self.files_skipped} skipped -> {self.output_path}")
