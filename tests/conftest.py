# tests/conftest.py
import pytest
import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

# Make sure the main library path is available
package_root = Path(__file__).parent.parent
sys.path.insert(0, str(package_root))

# Now attempt the imports
try:
    from dir2txt_lib.dir2txt_config import make_config
    from dir2txt_lib.dir2txt_core import SnapshotBuilder
except ImportError as e:
    pytest.fail(f"Failed to import dir2txt_lib components: {e}\n"
                f"Ensure the package is installed correctly (e.g., 'pip install -e .') "
                f"or PYTHONPATH is set up.\n"
                f"Current sys.path: {sys.path}")


def create_test_structure(base_path: Path, structure: Dict[str, Any]):
    """Recursively creates a directory structure from a dictionary."""
    base_path.mkdir(parents=True, exist_ok=True)

    for name, content in structure.items():
        path = base_path / name
        if isinstance(content, dict):
            path.mkdir(parents=True, exist_ok=True)
            create_test_structure(path, content)
        elif isinstance(content, str): # Text file content
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding='utf-8')
        elif isinstance(content, bytes): # Raw file content
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(content)
        elif content is None: # Empty file
            path.parent.mkdir(parents=True, exist_ok=True)
            path.touch()
        else:
            raise TypeError(f"Unsupported structure type for {name}: {type(content)}")


def make_symlink(link: Path, target: Path, target_is_directory: bool = True):
    """Creates a symlink or skips the calling test where the platform refuses."""
    try:
        os.symlink(target, link, target_is_directory=target_is_directory)
    except (OSError, NotImplementedError) as e:
        pytest.skip(f"Symlinks not supported here: {e}")


def silent_log(msg, level="info"):
    pass


class LogRecorder:
    """Collects (level, message) pairs passed to a log_func."""

    def __init__(self):
        self.records: List[tuple] = []

    def __call__(self, msg, level="info"):
        self.records.append((level, msg))

    def levels(self) -> List[str]:
        return [level for level, _ in self.records]

    def messages(self, level: Optional[str] = None) -> List[str]:
        return [msg for lvl, msg in self.records if level is None or lvl == level]


@pytest.fixture
def base_test_structure(tmp_path):
    """Provides a standard project-like directory structure for testing."""
    structure = {
        "src": {
            "main.py": "print('hello')\n",
            "utils": {
                "helpers.py": "# Utility functions",
                "data.json": '{"key": "value"}',
            },
            "feature": {
                "component.js": "// JS Component",
                "style.css": "body { color: blue; }",
            },
        },
        "tests": {
            "test_main.py": "import pytest",
        },
        "node_modules": { # Ignored directory
            "package_a": {"index.js": "// Package A"},
        },
        ".git": { # Hidden directory
            "HEAD": "ref: refs/heads/main",
        },
        ".env": "SECRET_KEY=12345", # Kept hidden file
        ".hidden_notes": "not listed",
        "docs": {
            "index.md": "# Documentation",
        },
        "assets": {
            "logo.png": b"\x89PNG\r\n\x1a\n\x00\x00",
        },
        "README.md": "# My Project",
    }
    root = tmp_path / "test_proj"
    create_test_structure(root, structure)
    return root


@pytest.fixture
def recorder():
    return LogRecorder()


@pytest.fixture
def run_snapshot(tmp_path):
    """Fixture to run SnapshotBuilder and return the document text plus the builder."""
    def _run(roots, hard_filters=None, soft_filters=None, output_path=None, log_func=None, **overrides):
        if not isinstance(roots, (list, tuple)):
            roots = [roots]
        for root in roots:
            if not Path(root).is_dir():
                raise FileNotFoundError(f"Test setup error: root '{root}' does not exist or is not a directory.")

        config = make_config(hard_filters=hard_filters, soft_filters=soft_filters, **overrides)
        out = Path(output_path) if output_path else tmp_path / "out" / "snapshot.md"
        builder = SnapshotBuilder(roots, config, out, log_func=log_func or silent_log)
        written = builder.run()
        return written.read_text(encoding='utf-8'), builder

    return _run


@pytest.fixture
def deep_chain(tmp_path):
    """A root holding a chain of 1200 nested 'd' directories with leaf.txt at the bottom."""
    depth = 1200
    root = tmp_path / "deep"
    root.mkdir()
    bottom = root
    # One level at a time; mkdir(parents=True) recurses per missing level
    for _ in range(depth):
        bottom = bottom / "d"
        bottom.mkdir()
    (bottom / "leaf.txt").write_text("bottom\n", encoding="utf-8")

    yield root, depth

    # Remove bottom-up so cleanup does not depend on a recursive rmtree
    (bottom / "leaf.txt").unlink()
    current = bottom
    while current != root:
        current.rmdir()
        current = current.parent
