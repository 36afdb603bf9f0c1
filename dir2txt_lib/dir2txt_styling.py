# -*- coding: utf-8 -*-
"""
Styling definitions (console colors, tree drawing styles) for dir2txt.
"""

from typing import Dict

# --- Styling ---

class Colors:
    """ANSI color codes for terminal output."""
    RESET = "\033[0m"
    BOLD = "\033[1m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    MAGENTA = "\033[35m"
    CYAN = "\033[36m"
    WHITE = "\033[37m"
    GRAY = "\033[90m"

class TreeStyle:
    """Branch markers and connectors used by the tree renderer."""
    UNICODE: Dict[str, str] = {"branch": "│   ", "tee": "├── ", "last_tee": "└── ", "empty": "    "}
    ASCII: Dict[str, str] = {"branch": "|   ", "tee": "|-- ", "last_tee": "`-- ", "empty": "    "}
    ROUNDED: Dict[str, str] = {"branch": "│   ", "tee": "├── ", "last_tee": "╰── ", "empty": "    "}
    BOLD: Dict[str, str] = {"branch": "┃   ", "tee": "┣━━ ", "last_tee": "┗━━ ", "empty": "    "}

    AVAILABLE: Dict[str, Dict[str, str]] = {
        "unicode": UNICODE,
        "ascii": ASCII,
        "rounded": ROUNDED,
        "bold": BOLD,
    }

    @staticmethod
    def get_style(style_name: str) -> Dict[str, str]:
        """Gets the style config, defaulting to unicode."""
        return dict(TreeStyle.AVAILABLE.get(style_name.lower(), TreeStyle.UNICODE))

# Console color per log level
LEVEL_COLORS: Dict[str, str] = {
    "error": Colors.RED,
    "warning": Colors.YELLOW,
    "success": Colors.GREEN,
    "skip": Colors.MAGENTA,
    "notice": Colors.BLUE,
    "info": Colors.CYAN,
    "debug": Colors.GRAY,
}
