# -*- coding: utf-8 -*-
"""
Utility functions for dir2txt: size formatting, logging and error descriptions.
"""

import sys
from pathlib import Path
from datetime import datetime
from typing import Union

from .dir2txt_styling import Colors, LEVEL_COLORS

# Levels printed even when verbose output is off
ALWAYS_SHOWN_LEVELS = {"error", "warning", "success", "skip", "notice"}

# --- Formatting ---
def format_bytes(size_bytes: int) -> str:
    """Helper function to format bytes into KB, MB, GB."""
    if not isinstance(size_bytes, (int, float)) or size_bytes < 0: return "N/A"
    if size_bytes < 1024: return f"{size_bytes} B"
    elif size_bytes < 1024**2: return f"{size_bytes / 1024:.1f} KB"
    elif size_bytes < 1024**3: return f"{size_bytes / 1024**2:.1f} MB"
    else: return f"{size_bytes / 1024**3:.2f} GB"

def parse_size_string(size_str: str, default: int = 1024 * 1024) -> int:
    """
    Parses size strings like '50k', '1.5m', '2g' into bytes.

    Raises ValueError for strings that are not sizes; an empty string gives ``default``.
    """
    size_str_orig = size_str
    size_str = size_str.strip().lower()
    if not size_str: return default

    multiplier = 1
    if size_str.endswith('k') or size_str.endswith('kb'):
        multiplier = 1024
        size_str = size_str[:-1] if size_str.endswith('k') else size_str[:-2]
    elif size_str.endswith('m') or size_str.endswith('mb'):
        multiplier = 1024 * 1024
        size_str = size_str[:-1] if size_str.endswith('m') else size_str[:-2]
    elif size_str.endswith('g') or size_str.endswith('gb'):
        multiplier = 1024 * 1024 * 1024
        size_str = size_str[:-1] if size_str.endswith('g') else size_str[:-2]
    elif size_str.endswith('b'): # Explicit bytes
        size_str = size_str[:-1]

    try:
        value = float(size_str)
    except ValueError:
        raise ValueError(f"Invalid size string '{size_str_orig}'") from None
    if value < 0:
        raise ValueError(f"Size must not be negative: '{size_str_orig}'")
    return int(value * multiplier)


# --- Logging ---
def log_message(message: str, level: str = "info", verbose: bool = False, colorize: bool = False):
    """Logs a message to stderr. info/debug messages only appear when verbose is enabled."""
    level = level.lower()
    if not verbose and level not in ALWAYS_SHOWN_LEVELS:
        return

    color = LEVEL_COLORS.get(level, Colors.RESET) if colorize else ""
    reset = Colors.RESET if colorize else ""
    timestamp = datetime.now().strftime("%H:%M:%S.%f")[:-3] # Milliseconds

    lines = str(message).splitlines()
    if not lines: return

    log_prefix = f"[{timestamp}] {color}[{level.upper():<7}]{reset} "
    print(f"{log_prefix}{lines[0]}", file=sys.stderr)
    # Align continuation lines under the message text
    indent = " " * (len(log_prefix) - len(color) - len(reset))
    for line in lines[1:]:
        print(f"{indent}{line}", file=sys.stderr)


# --- Error Handling ---
def describe_error(path: Union[str, Path], error: BaseException, phase: str = "processing") -> str:
    """Builds a one-line error description with a hint for common filesystem errors."""
    message = f"Error {phase} '{path}': {error.__class__.__name__}: {error}"

    guidance = ""
    if isinstance(error, PermissionError):
        guidance = "This is a permission error. Try running with administrator/root privileges if appropriate."
    elif isinstance(error, FileNotFoundError):
        guidance = "The file or directory may have been moved or deleted during execution."
    elif isinstance(error, NotADirectoryError):
        guidance = "The path is not a directory."
    elif isinstance(error, OSError) and getattr(error, 'winerror', None) == 32: # Windows: file in use
        guidance = "The file might be locked or in use by another process."

    return f"{message} ({guidance})" if guidance else message
