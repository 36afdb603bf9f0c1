# -*- coding: utf-8 -*-
"""
File content export for dir2txt.
Reads a file, checks size and binary content, normalizes its encoding to
UTF-8 and formats it as a fenced Markdown block.
"""

import os
import stat
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Sequence, Tuple, Union

from .dir2txt_config import SnapshotConfig
from .dir2txt_utils import format_bytes

# Skip reasons
SKIP_STAT = "stat"
SKIP_DIRECTORY = "directory"
SKIP_TOO_LARGE = "too_large"
SKIP_READ = "read"
SKIP_BINARY = "binary"
SKIP_ENCODING = "encoding"


@dataclass(frozen=True)
class ContentResult:
    emitted: bool
    block: Optional[str] = None
    skip_reason: Optional[str] = None
    encoding: Optional[str] = None
    size: int = 0


def is_binary(data: bytes, limit: int = 512) -> bool:
    """A NUL byte within the first `limit` bytes marks the content as binary."""
    return b"\x00" in data[:limit]


def convert_to_utf8(data: bytes, fallback_encodings: Sequence[str] = ("gbk", "gb18030")) -> Tuple[str, str]:
    """
    Decodes bytes as UTF-8, falling back to the given encodings.

    Returns:
        (text, encoding name): "UTF-8" or the upper-cased fallback name.

    Raises:
        UnicodeDecodeError: If no encoding decodes the content strictly.
    """
    try:
        return data.decode("utf-8"), "UTF-8"
    except UnicodeDecodeError as e:
        last_error = e

    for encoding in fallback_encodings:
        try:
            return data.decode(encoding), encoding.upper()
        except UnicodeDecodeError as e:
            last_error = e
    raise last_error


def language_hint(name: str) -> str:
    """Fenced code block language: the lowercase extension, or 'text'."""
    ext = os.path.splitext(name)[1].lower().lstrip(".")
    return ext or "text"


def format_block(display_path: str, text: str, lang: str) -> str:
    """Formats one '## File:' block; the content always ends with a newline before the fence."""
    if text and not text.endswith("\n"):
        text += "\n"
    return f"## File: {display_path}\n\n```{lang}\n{text}```\n\n---\n\n"


def serialize_file(
    physical_path: Union[str, Path],
    display_path: str,
    config: SnapshotConfig,
    log_func: Optional[Callable] = None,
) -> ContentResult:
    """
    Runs one file through the export gates and returns its block.

    Gates, in order: stat, directory-behind-symlink, size, read, binary sniff
    (skipped for forced-text extensions), encoding. The first failing gate
    ends processing; skips are reported through log_func, never raised.
    """
    log = log_func or (lambda msg, level="info": None)
    path = Path(physical_path)

    try:
        info = path.stat()
    except OSError:
        return ContentResult(False, skip_reason=SKIP_STAT)

    if stat.S_ISDIR(info.st_mode):
        log(f"[SKIP] Symlink points to a directory: {display_path}", "skip")
        return ContentResult(False, skip_reason=SKIP_DIRECTORY)

    if info.st_size > config.max_file_size:
        log(f"[SKIP] Large file (>{format_bytes(config.max_file_size)}): {display_path}", "skip")
        return ContentResult(False, skip_reason=SKIP_TOO_LARGE, size=info.st_size)

    try:
        data = path.read_bytes()
    except OSError:
        return ContentResult(False, skip_reason=SKIP_READ)

    ext = path.suffix.lower()
    if ext not in config.text_exts and is_binary(data, config.binary_sniff_bytes):
        log(f"[SKIP] Binary file detected: {display_path}", "skip")
        return ContentResult(False, skip_reason=SKIP_BINARY, size=len(data))

    try:
        text, encoding = convert_to_utf8(data, config.fallback_encodings)
    except UnicodeDecodeError:
        log(f"[WARN] Unrecognized file encoding (skipped): {display_path}\n"
            f"-> content is neither UTF-8 nor {'/'.join(e.upper() for e in config.fallback_encodings)}", "warning")
        return ContentResult(False, skip_reason=SKIP_ENCODING, size=len(data))

    if encoding != "UTF-8":
        log(f"[INFO] Converted encoding [{encoding} -> UTF-8]: {display_path}", "notice")

    log(f"Processing: {display_path}", "info")
    block = format_block(display_path, text, language_hint(path.name))
    return ContentResult(True, block=block, encoding=encoding, size=len(data))
