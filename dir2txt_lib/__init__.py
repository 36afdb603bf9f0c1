# -*- coding: utf-8 -*-
"""
dir2txt Package - Turn one or more directories into a single Markdown document

This package provides tools for:
- Rendering a tree of each directory, with long file lists folded
- Exporting text file contents as fenced code blocks
- Hard and soft filter rules (glob, directory prefix, contents-only, negation)
- Following symlinked directories without looping

Usage:
    from dir2txt_lib import SnapshotBuilder, make_config
    builder = SnapshotBuilder(["path/to/directory"], make_config(soft_filters=["*.png"]))
    builder.run()
"""

# Package version
__version__ = "1.7.0"

# Import public classes and functions for direct access
from .dir2txt_config import SnapshotConfig, make_config, load_patterns_from_file
from .dir2txt_filters import FilterRule, match_rules, parse_rules
from .dir2txt_walker import Node, SkipDir, VisitedSet, walk
from .dir2txt_tree import render_tree
from .dir2txt_content import serialize_file
from .dir2txt_core import SnapshotBuilder, SnapshotError, determine_output_path
from .dir2txt_cli import main

# Define what gets imported with 'from dir2txt_lib import *'
__all__ = [
    'SnapshotBuilder', 'SnapshotError', 'SnapshotConfig', 'make_config', 'load_patterns_from_file',
    'FilterRule', 'match_rules', 'parse_rules', 'Node', 'SkipDir', 'VisitedSet', 'walk',
    'render_tree', 'serialize_file', 'determine_output_path', 'main',
]
