# -*- coding: utf-8 -*-
"""
Configuration constants and the immutable run configuration for dir2txt.
"""

import dataclasses
from dataclasses import dataclass
from pathlib import Path
from typing import FrozenSet, Iterable, List, Optional, Tuple, Union

from .dir2txt_filters import FilterRule, parse_rules

# --- Constants ---

# Directories hidden from both the tree and the contents
DEFAULT_IGNORED_DIRS: FrozenSet[str] = frozenset({
    # Version control / IDE
    ".git", ".idea", ".vscode",
    # Dependencies
    "node_modules", "vendor",
    # Build artifacts and caches
    "__pycache__", "dist", "build", "bin", "obj", "target", ".next", "coverage",
})

# Files hidden from both the tree and the contents (the tool itself)
DEFAULT_IGNORED_FILES: FrozenSet[str] = frozenset({
    "dir2txt", "dir2txt.exe", "dir2txt.py",
})

# Dot-names that are kept even though hidden entries are otherwise junk
DEFAULT_KEPT_HIDDEN_NAMES: FrozenSet[str] = frozenset({".env", ".gitignore"})

# Extensions listed in the tree but never serialized (lowercase, with dot)
DEFAULT_IGNORED_EXTENSIONS: FrozenSet[str] = frozenset({
    # Images / media
    ".png", ".jpg", ".jpeg", ".gif", ".ico", ".svg", ".mp4", ".mp3", ".wav", ".webp",
    # Archives
    ".zip", ".tar", ".gz", ".7z", ".rar",
    # Compiled output / binaries
    ".exe", ".dll", ".so", ".dylib", ".class", ".pyc", ".o",
    # Fonts
    ".ttf", ".woff", ".woff2", ".eot",
    # Other
    ".lock", ".pdf", ".ds_store",
})

# Extensions that bypass the binary sniff (lowercase, with dot)
DEFAULT_TEXT_EXTENSIONS: FrozenSet[str] = frozenset({
    ".md", ".txt", ".log",
    ".go", ".java", ".py", ".js", ".ts",
    ".c", ".cpp", ".h", ".hpp",
    ".html", ".css", ".xml", ".yaml", ".yml",
    ".json", ".sql", ".properties", ".ini",
    ".sh", ".bat", ".conf", ".toml",
})

DEFAULT_MAX_FILE_SIZE: int = 1024 * 1024  # 1 MiB
MAX_DISPLAY_FILES: int = 24
KEEP_HEAD_FILES: int = 8
KEEP_TAIL_FILES: int = 8
BINARY_SNIFF_BYTES: int = 512
FALLBACK_ENCODINGS: Tuple[str, ...] = ("gbk", "gb18030")


@dataclass(frozen=True)
class SnapshotConfig:
    """Settings for one run. Built once by make_config() and passed to every component."""
    hard_rules: Tuple[FilterRule, ...] = ()
    soft_rules: Tuple[FilterRule, ...] = ()
    ignored_dirs: FrozenSet[str] = DEFAULT_IGNORED_DIRS
    ignored_files: FrozenSet[str] = DEFAULT_IGNORED_FILES
    kept_hidden_names: FrozenSet[str] = DEFAULT_KEPT_HIDDEN_NAMES
    ignored_exts: FrozenSet[str] = DEFAULT_IGNORED_EXTENSIONS
    text_exts: FrozenSet[str] = DEFAULT_TEXT_EXTENSIONS
    max_file_size: int = DEFAULT_MAX_FILE_SIZE
    fold: bool = True
    max_display_files: int = MAX_DISPLAY_FILES
    keep_head: int = KEEP_HEAD_FILES
    keep_tail: int = KEEP_TAIL_FILES
    binary_sniff_bytes: int = BINARY_SNIFF_BYTES
    fallback_encodings: Tuple[str, ...] = FALLBACK_ENCODINGS
    style: str = "unicode"
    absolute_paths: bool = False
    verbose: bool = False
    colorize: bool = False


def _normalize_exts(exts: Iterable[str]) -> FrozenSet[str]:
    """Lowercases extensions and makes sure they carry a leading dot."""
    return frozenset("." + ext.lower().lstrip(".") for ext in exts if ext.strip("."))


def make_config(
    hard_filters: Optional[Iterable[str]] = None,
    soft_filters: Optional[Iterable[str]] = None,
    **overrides,
) -> SnapshotConfig:
    """
    Builds a SnapshotConfig from the defaults plus overrides.

    Args:
        hard_filters: Pattern strings excluding entries from tree and contents.
        soft_filters: Pattern strings excluding entries from contents only.
        **overrides: Any other SnapshotConfig field.

    Raises:
        TypeError: For unknown setting names.
        ValueError: For inconsistent folding or size settings.
    """
    known = {f.name for f in dataclasses.fields(SnapshotConfig)} - {"hard_rules", "soft_rules"}
    unknown = sorted(set(overrides) - known)
    if unknown:
        raise TypeError(f"Unknown configuration option(s): {', '.join(unknown)}")

    for key in ("ignored_dirs", "ignored_files", "kept_hidden_names"):
        if key in overrides:
            overrides[key] = frozenset(overrides[key])
    for key in ("ignored_exts", "text_exts"):
        if key in overrides:
            overrides[key] = _normalize_exts(overrides[key])
    if "fallback_encodings" in overrides:
        overrides["fallback_encodings"] = tuple(overrides["fallback_encodings"])

    config = SnapshotConfig(
        hard_rules=parse_rules(hard_filters or []),
        soft_rules=parse_rules(soft_filters or []),
        **overrides,
    )

    if config.max_file_size < 0:
        raise ValueError("max_file_size must not be negative")
    if config.keep_head < 0 or config.keep_tail < 0:
        raise ValueError("keep_head and keep_tail must not be negative")
    if config.keep_head + config.keep_tail > config.max_display_files:
        raise ValueError("keep_head + keep_tail must not exceed max_display_files")
    return config


def load_patterns_from_file(file_path: Union[str, Path]) -> List[str]:
    """Reads filter patterns, one per line. Blank lines and '#' comments are skipped."""
    path = Path(file_path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise OSError(f"Cannot read pattern file '{path}': {e}") from e

    patterns = []
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        patterns.append(line)
    return patterns
