# tests/test_filtering_logic.py
import pytest

from dir2txt_lib.dir2txt_config import make_config
from dir2txt_lib.dir2txt_filters import (
    RULE_CONTENTS, RULE_DIRECTORY, RULE_GLOB,
    _compile_pattern, is_asset, is_junk, match_rules, normalize_pattern, parse_rule, parse_rules,
)


# Test _compile_pattern helper (basic check)
def test_compile_pattern():
    regex = _compile_pattern("*.py")
    assert regex.match("test.py")
    assert not regex.match("test.pyc")
    assert not regex.match("src/test.py") # '*' stays within one segment
    regex_globstar = _compile_pattern("dist/**")
    assert regex_globstar.match("dist/a/b/c.js")
    assert not regex_globstar.match("dist")
    regex_class = _compile_pattern("file[0-9].txt")
    assert regex_class.match("file7.txt")
    assert not regex_class.match("fileA.txt")
    regex_negclass = _compile_pattern("file[!0-9].txt")
    assert regex_negclass.match("fileA.txt")
    assert not regex_negclass.match("file7.txt")


def test_compile_pattern_unterminated_class_is_literal():
    regex = _compile_pattern("weird[name")
    assert regex.match("weird[name")


# === Rule parsing ===

@pytest.mark.parametrize("pattern, kind, target, negated", [
    ("build", RULE_DIRECTORY, "build", False),
    ("build/", RULE_DIRECTORY, "build", False),
    ("src\\gen", RULE_DIRECTORY, "src/gen", False),
    ("logs/*", RULE_CONTENTS, "logs", False),
    ("*.png", RULE_GLOB, "*.png", False),
    ("test?.log", RULE_GLOB, "test?.log", False),
    ("!important.txt", RULE_DIRECTORY, "important.txt", True),
    ("!*.md", RULE_GLOB, "*.md", True),
])
def test_parse_rule(pattern, kind, target, negated):
    rule = parse_rule(pattern)
    assert rule.kind == kind
    assert rule.pattern == target
    assert rule.negated is negated


def test_parse_rules_drops_empty_patterns():
    rules = parse_rules(["", "  ", "/", "*.log", "!"])
    assert [r.raw for r in rules] == ["*.log"]


def test_normalize_pattern():
    assert normalize_pattern("a\\b\\") == "a/b"
    assert normalize_pattern("logs/*") == "logs/*"
    assert normalize_pattern("  docs/  ") == "docs"


# === Matching ===

def test_directory_prefix_rule():
    rules = parse_rules(["build"])
    assert match_rules("build", rules) == (True, "build")
    assert match_rules("build/out/app.js", rules) == (True, "build")
    assert match_rules("builder.py", rules) == (False, None)
    # Bare names also match the final segment anywhere in the tree
    assert match_rules("pkg/build", rules) == (True, "build")


def test_contents_rule_keeps_directory_itself():
    rules = parse_rules(["logs/*"])
    assert match_rules("logs", rules) == (False, None)
    assert match_rules("logs/today.log", rules) == (True, "logs/*")
    assert match_rules("logs/2024/jan.log", rules) == (True, "logs/*")


def test_glob_matches_basename_and_full_path():
    rules = parse_rules(["*.png"])
    assert match_rules("logo.png", rules)[0]
    assert match_rules("assets/img/logo.png", rules)[0]
    assert not match_rules("assets/logo.png.txt", rules)[0]

    full = parse_rules(["src/*.py"])
    assert match_rules("src/main.py", full)[0]
    assert not match_rules("src/sub/main.py", full)[0]


def test_globstar_crosses_directories():
    rules = parse_rules(["dist/**"])
    assert match_rules("dist/js/app.js", rules)[0]


def test_first_match_wins_negation_first():
    rules = parse_rules(["!important.txt", "*.txt"])
    assert match_rules("important.txt", rules) == (False, "!important.txt")
    assert match_rules("notes.txt", rules) == (True, "*.txt")


def test_first_match_wins_negation_after():
    # The negation comes too late to save the file
    rules = parse_rules(["*.txt", "!important.txt"])
    assert match_rules("important.txt", rules) == (True, "*.txt")


def test_no_rules_and_empty_path():
    assert match_rules("anything.py", ()) == (False, None)
    assert match_rules("", parse_rules(["*"])) == (False, None)


def test_match_is_deterministic():
    rules = parse_rules(["docs/*", "!docs/keep.md", "*.md"])
    first = [match_rules(p, rules) for p in ("docs/keep.md", "README.md", "docs")]
    second = [match_rules(p, rules) for p in ("docs/keep.md", "README.md", "docs")]
    assert first == second
    assert first[0] == (True, "docs/*")


def test_backslash_paths_are_normalized():
    rules = parse_rules(["src/gen"])
    assert match_rules("src\\gen\\file.py", rules)[0]


# === Junk and assets ===

@pytest.mark.parametrize("name, expected", [
    (".git", True),
    (".hidden", True),
    (".env", False),
    (".gitignore", False),
    ("node_modules", True),
    ("__pycache__", True),
    ("dir2txt.py", True),
    ("src", False),
    ("main.py", False),
])
def test_is_junk(name, expected):
    assert is_junk(name, make_config()) is expected


@pytest.mark.parametrize("name, expected", [
    ("logo.png", True),
    ("LOGO.PNG", True),
    ("archive.tar", True),
    (".DS_Store", True),
    ("main.py", False),
    ("Makefile", False),
])
def test_is_asset(name, expected):
    assert is_asset(name, make_config()) is expected


def test_custom_ignored_extensions_are_normalized():
    config = make_config(ignored_exts=["CSV", ".Dat"])
    assert is_asset("table.csv", config)
    assert is_asset("blob.dat", config)
    assert not is_asset("logo.png", config)
