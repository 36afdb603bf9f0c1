# -*- coding: utf-8 -*-
"""
Interactive setup for dir2txt, using the 'pick' library for menus:
choose one or more root directories, optionally scan them for file types
whose contents should be left out, and set folding and the output path.
"""

import sys
from pathlib import Path
from typing import Any, Counter as CounterType, Dict, List, Optional

import pick

from . import __version__
from .dir2txt_config import DEFAULT_TEXT_EXTENSIONS, make_config
from .dir2txt_scanner import NO_EXTENSION, scan_extensions
from .dir2txt_styling import Colors
from .dir2txt_utils import log_message


def interactive_available() -> bool:
    """Menus need a terminal on both ends."""
    return sys.stdin.isatty() and sys.stdout.isatty()


# --- Interactive Directory Selection ---
def select_directory_interactive(start_dir: Optional[str] = None) -> Optional[str]:
    """Browses the filesystem with arrow keys; returns the chosen directory or None if cancelled."""
    current_path = Path(start_dir).resolve() if start_dir and Path(start_dir).is_dir() else Path.cwd()
    visited_paths: List[Path] = []

    try:
        while True:
            labels: List[str] = []
            values: List[str] = []
            title_parts = [f"Directory Browser - Current: {current_path}"]

            if current_path.parent != current_path: # Not at filesystem root
                labels.append(".. (Parent Directory)")
                values.append(str(current_path.parent))
            if visited_paths:
                labels.append("<- Back (Previous Directory)")
                values.append("__BACK__")

            try:
                subdirs = sorted((d for d in current_path.iterdir() if d.is_dir()), key=lambda d: d.name.lower())
                for d in subdirs:
                    labels.append(f"[{d.name}]")
                    values.append(str(d))
                title_parts.append(f"({len(subdirs)} dirs)")
            except OSError as e:
                title_parts.append(f"(Error listing: {e})")

            labels.append(f"Select Current: '{current_path.name or current_path}'")
            values.append("__SELECT__")
            labels.append("Cancel Selection")
            values.append("__CANCEL__")

            _, index = pick.pick(labels, " ".join(title_parts), indicator="=>")
            choice = values[index]

            if choice == "__CANCEL__":
                return None
            if choice == "__SELECT__":
                return str(current_path)
            if choice == "__BACK__":
                current_path = visited_paths.pop()
                continue
            if choice != str(current_path.parent):
                visited_paths.append(current_path)
            current_path = Path(choice)
    except KeyboardInterrupt:
        print("\nDirectory selection cancelled.")
        return None


# --- Extension Selection ---
def select_extensions_to_skip(counts: CounterType[str]) -> List[str]:
    """Multi-select of scanned extensions; returns the ones whose content should be skipped."""
    if not counts:
        print("No file types found to select.")
        return []

    ordered = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    labels = [f"{ext} ({count} files){'  [text]' if '.' + ext in DEFAULT_TEXT_EXTENSIONS else ''}"
              for ext, count in ordered]
    title = ("Select file types to leave OUT of the file contents (they stay in the tree):\n"
             "Controls: Up/Down Navigate | Space Toggle | Enter Confirm")
    try:
        selected = pick.pick(labels, title, indicator="*", multiselect=True, min_selection_count=0)
    except KeyboardInterrupt:
        print("\nFile type selection cancelled.")
        return []

    chosen = [ordered[index][0] for _, index in selected]
    print(f"{Colors.GREEN}Selected {len(chosen)} file types to skip:{Colors.RESET} {', '.join(chosen) or 'None'}")
    return chosen


def extensions_to_patterns(extensions: List[str]) -> List[str]:
    """Turns scanned extensions into soft filter patterns."""
    return [f"*.{ext}" for ext in extensions if ext and ext != NO_EXTENSION]


# --- Interactive Setup Workflow ---
def run_interactive_setup() -> Dict[str, Any]:
    """
    Guides the user through choosing roots and options.

    Returns:
        {'roots', 'soft_filters', 'no_fold', 'out'}, or an empty dict if cancelled.
    """
    print(f"\n--- {Colors.BOLD}dir2txt v{__version__} Interactive Setup{Colors.RESET} ---")
    roots: List[str] = []

    # Step 1: Directories
    print(f"\n{Colors.BOLD}Step 1: Directory Selection{Colors.RESET}")
    while True:
        options = [f"Add current directory: {Path.cwd()}", "Browse for a directory", "Enter a path manually"]
        if roots:
            options.append(f"Done ({len(roots)} selected)")
        options.append("Cancel setup")
        try:
            _, index = pick.pick(options, "Choose directories to include:", indicator="=>")
        except KeyboardInterrupt:
            return {}
        choice = options[index]

        if choice.startswith("Cancel"):
            return {}
        if choice.startswith("Done"):
            break
        if choice.startswith("Add current"):
            selected = str(Path.cwd())
        elif choice.startswith("Browse"):
            selected = select_directory_interactive(roots[-1] if roots else None)
            if selected is None:
                continue
        else:
            manual = input("Enter directory path: ").strip()
            if not Path(manual).is_dir():
                print(f"{Colors.RED}Error: '{manual}' is not a directory.{Colors.RESET}")
                continue
            selected = str(Path(manual).resolve())

        if selected not in roots:
            roots.append(selected)
        print(f"Added: {Colors.CYAN}{selected}{Colors.RESET}")

    # Step 2: Content filters
    print(f"\n{Colors.BOLD}Step 2: Content Filters{Colors.RESET}")
    soft_filters: List[str] = []
    if input(f"Scan directories to choose file types to leave out of the contents? [y/{Colors.GREEN}N{Colors.RESET}]: ").lower() == 'y':
        scan_log = lambda msg, level="debug": log_message(msg, level, verbose=False, colorize=True)
        config = make_config()
        counts = scan_extensions(roots[0], config, log_func=scan_log)
        for root in roots[1:]:
            counts.update(scan_extensions(root, config, log_func=scan_log))
        soft_filters = extensions_to_patterns(select_extensions_to_skip(counts))

    # Step 3: Tree and output
    print(f"\n{Colors.BOLD}Step 3: Tree and Output{Colors.RESET}")
    no_fold = input(f"Show every file in long directories (disable folding)? [y/{Colors.GREEN}N{Colors.RESET}]: ").lower() == 'y'
    out = input("Output file or directory (empty for current directory): ").strip() or None

    # Summary
    print(f"\n{Colors.MAGENTA}--- Configuration Summary ---{Colors.RESET}")
    print(f"{Colors.BOLD}Directories:{Colors.RESET} {', '.join(roots)}")
    print(f"{Colors.BOLD}Soft filters:{Colors.RESET} {' '.join(soft_filters) or 'None'}")
    print(f"{Colors.BOLD}Folding:{Colors.RESET} {'OFF' if no_fold else 'ON'}")
    print(f"{Colors.BOLD}Output:{Colors.RESET} {out or 'Current directory'}")

    if input("\nPress Enter to generate with these settings, or 'q' to quit: ").lower() == 'q':
        print("Setup cancelled.")
        return {}

    return {'roots': roots, 'soft_filters': soft_filters, 'no_fold': no_fold, 'out': out}
