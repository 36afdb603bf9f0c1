# -*- coding: utf-8 -*-
"""
Command-line interface (CLI) for dir2txt.
Handles argument parsing and runs the snapshot builder.
"""

import sys
import argparse
import traceback
from typing import List, Optional, Sequence, Tuple

from . import __version__
from .dir2txt_config import DEFAULT_MAX_FILE_SIZE, MAX_DISPLAY_FILES, load_patterns_from_file, make_config
from .dir2txt_core import SnapshotBuilder, SnapshotError, determine_output_path
from .dir2txt_interactive import interactive_available, run_interactive_setup
from .dir2txt_styling import Colors, TreeStyle
from .dir2txt_utils import describe_error, format_bytes, parse_size_string

GLOB_MARKERS = set("*?[]")


class PatternAction(argparse.Action):
    """Appends patterns to a shared list; each value may hold several space-separated patterns."""

    def __call__(self, parser, namespace, values, option_string=None):
        patterns = list(getattr(namespace, self.dest, None) or [])
        for value in values:
            patterns.extend(value.split())
        setattr(namespace, self.dest, patterns)


class PatternFileAction(argparse.Action):
    """Loads a pattern file and appends its patterns to a shared list, keeping command-line order."""

    def __call__(self, parser, namespace, values, option_string=None):
        patterns = list(getattr(namespace, self.dest, None) or [])
        try:
            patterns.extend(load_patterns_from_file(values))
        except OSError as e:
            parser.error(str(e))
        setattr(namespace, self.dest, patterns)


# --- Argument Parsing ---
def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dir2txt",
        description=f"dir2txt v{__version__} - Turn directories into one Markdown file: a tree plus file contents.",
        formatter_class=argparse.RawTextHelpFormatter,
        epilog=(
            "Pattern syntax: ? one character (test?.log); * any run (*.go); [] character class (file[0-9].txt);\n"
            "** crosses directories (dist/**); leading ! negates (!important.txt); 'dir' or 'dir/' hides the\n"
            "directory and its contents; 'dir/*' hides only the contents. The first matching rule wins.\n"
            "Examples:\n"
            "  dir2txt --dir . ../other --filter '*.png *.jpg' '!keep.png'\n"
            "  dir2txt src -F 'dist/**' -f '*.png'"
        ),
    )

    # --- Positional Argument ---
    parser.add_argument(
        'paths',
        nargs='*',
        default=[],
        help="Directories to include. Arguments starting with '!' or containing * ? [ ]\nare treated as soft filters instead."
    )

    # --- Input / Output Group ---
    io_group = parser.add_argument_group('Input/Output Options')
    io_group.add_argument(
        '-d', '--dir',
        dest='dirs',
        action='extend',
        nargs='+',
        metavar='PATH',
        default=[],
        help="Directories to scan. Can be used multiple times."
    )
    io_group.add_argument(
        '-o', '--out',
        metavar='PATH',
        default=None,
        help="Output file (ending in .md) or output directory.\n(Default: '<dir>_context.md' in the current directory)"
    )
    io_group.add_argument(
        '-i', '--interactive',
        action='store_true',
        help="Choose directories and content filters with interactive menus."
    )

    # --- Filtering Group ---
    filter_group = parser.add_argument_group('Filtering Options')
    filter_group.add_argument(
        '-f', '--filter', '-filter',
        dest='soft_filters',
        action=PatternAction,
        nargs='+',
        metavar='PATTERN',
        default=[],
        help="Soft filter: skip file contents only; entries stay in the tree."
    )
    filter_group.add_argument(
        '-F', '--Filter', '-Filter',
        dest='hard_filters',
        action=PatternAction,
        nargs='+',
        metavar='PATTERN',
        default=[],
        help="Hard filter: hide entries from both the tree and the contents."
    )
    filter_group.add_argument(
        '-c', '--config', '-fc',
        dest='soft_filters',
        action=PatternFileAction,
        metavar='FILE',
        help="Read soft filter patterns from FILE (one per line, '#' starts a comment)."
    )
    filter_group.add_argument(
        '-Fc',
        dest='hard_filters',
        action=PatternFileAction,
        metavar='FILE',
        help="Read hard filter patterns from FILE."
    )

    # --- Display Group ---
    display_group = parser.add_argument_group('Display Options')
    display_group.add_argument(
        '--no-fold',
        action='store_true',
        default=False,
        help=f"Always list every file in the tree (Default: fold lists longer than {MAX_DISPLAY_FILES} files)."
    )
    display_group.add_argument(
        '-s', '--style',
        default='unicode',
        choices=list(TreeStyle.AVAILABLE.keys()),
        help=f"Tree drawing style (Default: unicode).\nAvailable: {', '.join(TreeStyle.AVAILABLE.keys())}"
    )
    display_group.add_argument(
        '--max-size',
        metavar='SIZE',
        default=None,
        help=f"Skip files larger than SIZE (e.g., 500k, 2m). (Default: {format_bytes(DEFAULT_MAX_FILE_SIZE)})"
    )
    display_group.add_argument(
        '--absolute-paths',
        action='store_true',
        default=False,
        help="Label file blocks with absolute paths instead of '<root>/<relative path>'."
    )

    # --- Behavior Group ---
    behavior_group = parser.add_argument_group('Behavior Options')
    behavior_group.add_argument(
        '-v', '--verbose',
        action='store_true',
        default=False,
        help="Show verbose logging messages during processing."
    )
    color_parser = behavior_group.add_mutually_exclusive_group()
    color_parser.add_argument(
        '--color',
        action='store_true',
        dest='colorize',
        default=sys.stderr.isatty(),
        help="Force colorized console messages (Default: auto-detect based on TTY)."
    )
    color_parser.add_argument(
        '--no-color',
        action='store_false',
        dest='colorize',
        help="Disable colorized console messages."
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'dir2txt v{__version__}'
    )
    return parser


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parses command-line arguments (sys.argv[1:] when argv is None)."""
    return build_parser().parse_intermixed_args(argv)


def split_paths_and_patterns(paths: Sequence[str]) -> Tuple[List[str], List[str]]:
    """Positional arguments: '!...' or glob-looking values are soft filters, the rest are directories."""
    dirs, patterns = [], []
    for arg in paths:
        if arg.startswith("!") or GLOB_MARKERS.intersection(arg):
            patterns.extend(arg.split())
        else:
            dirs.append(arg)
    return dirs, patterns


# --- Main Execution Logic ---
def main(argv: Optional[Sequence[str]] = None) -> None:
    """Main function to run dir2txt."""
    try:
        args = parse_args(argv)
        colorize = args.colorize
        red = Colors.RED if colorize else ""
        reset = Colors.RESET if colorize else ""

        dirs, positional_patterns = split_paths_and_patterns(args.paths)
        dirs = list(args.dirs) + dirs
        soft_filters = list(args.soft_filters) + positional_patterns
        hard_filters = list(args.hard_filters)
        no_fold = args.no_fold
        out = args.out

        if args.interactive:
            if not interactive_available():
                print(f"{red}Error: Interactive mode needs a terminal.{reset}", file=sys.stderr)
                sys.exit(1)
            setup = run_interactive_setup()
            if not setup: # Setup was cancelled
                sys.exit(0)
            dirs = dirs + [d for d in setup['roots'] if d not in dirs]
            soft_filters.extend(setup['soft_filters'])
            no_fold = no_fold or setup['no_fold']
            out = out or setup['out']

        if not dirs:
            dirs = ["."]

        try:
            max_file_size = parse_size_string(args.max_size, DEFAULT_MAX_FILE_SIZE) if args.max_size else DEFAULT_MAX_FILE_SIZE
            config = make_config(
                hard_filters=hard_filters,
                soft_filters=soft_filters,
                fold=not no_fold,
                max_file_size=max_file_size,
                style=args.style,
                absolute_paths=args.absolute_paths,
                verbose=args.verbose,
                colorize=colorize,
            )
            output_path = determine_output_path(dirs, out)
            builder = SnapshotBuilder(dirs, config, output_path)
        except (FileNotFoundError, NotADirectoryError, ValueError) as e_init:
            print(f"{red}Initialization Error: {e_init}{reset}", file=sys.stderr)
            sys.exit(1)

        print(f"Output will be written to: {builder.output_path}")
        try:
            builder.run()
        except SnapshotError as e_roots:
            for root, err in e_roots.errors.items():
                print(f"{red}{describe_error(root, err, 'processing directory')}{reset}", file=sys.stderr)
            print(f"{red}Finished with errors; partial output written to {builder.output_path}{reset}", file=sys.stderr)
            sys.exit(1)
        except OSError as e_out:
            print(f"{red}Cannot write output file: {e_out}{reset}", file=sys.stderr)
            sys.exit(1)
        except Exception:
            print(f"\n{red}An unexpected error occurred during execution:{reset}", file=sys.stderr)
            print(traceback.format_exc(), file=sys.stderr)
            sys.exit(1)

        print(builder.summary())

    except KeyboardInterrupt:
        print("\nOperation cancelled by user.")
        sys.exit(130)  # Standard exit code for SIGINT

if __name__ == '__main__':
    main()
