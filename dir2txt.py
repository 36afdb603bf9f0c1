#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
dir2txt - Turn directories into one Markdown file for sharing with LLMs

This script writes a tree of each directory followed by the contents of its
text files, with hard and soft filters deciding what appears where.
"""

import sys
from pathlib import Path

# Running from a checkout: make 'dir2txt_lib' (a sibling of this script) importable.
script_dir = Path(__file__).resolve().parent
if (script_dir / 'dir2txt_lib').is_dir() and str(script_dir) not in sys.path:
    sys.path.insert(0, str(script_dir))

from dir2txt_lib.dir2txt_cli import main

if __name__ == "__main__":
    main()
