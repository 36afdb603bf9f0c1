# -*- coding: utf-8 -*-
"""
Filtering logic for dir2txt. Decides which entries are excluded from the tree
(hard rules) or from the file contents only (soft rules), and which names are
junk or assets regardless of the user's rules.

Rule syntax:
    dir, dir/   directory prefix: the directory and everything below it
    dir/*       contents only: everything below the directory, not the directory itself
    glob        '*', '?', '[...]' and '**', matched against the full relative
                path and against the final path segment
    !rule       negation: if this is the first rule to match, the entry is kept

Rules are evaluated in declaration order and the first matching rule decides.
"""

import os
import re
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Pattern, Sequence, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from .dir2txt_config import SnapshotConfig

RULE_DIRECTORY = "directory"
RULE_CONTENTS = "contents"
RULE_GLOB = "glob"

_GLOB_CHARS = set("*?[")

# Compiled glob patterns, keyed by pattern text
_COMPILED_REGEX_CACHE: Dict[str, Pattern[str]] = {}


@dataclass(frozen=True)
class FilterRule:
    """One normalized filter rule."""
    raw: str        # the rule as normalized at load time, including any '!'
    pattern: str    # the rule without '!' (and without '/*' for contents rules)
    negated: bool
    kind: str


def _translate_glob(pattern: str) -> str:
    """Translates a glob into a regex. '*' and '?' stay within one path segment, '**' crosses them."""
    i, n = 0, len(pattern)
    parts = []
    while i < n:
        c = pattern[i]
        i += 1
        if c == '*':
            if i < n and pattern[i] == '*':
                while i < n and pattern[i] == '*':
                    i += 1
                parts.append('.*')
            else:
                parts.append('[^/]*')
        elif c == '?':
            parts.append('[^/]')
        elif c == '[':
            j = i
            if j < n and pattern[j] in '!^':
                j += 1
            if j < n and pattern[j] == ']':
                j += 1
            while j < n and pattern[j] != ']':
                j += 1
            if j >= n:
                # Unterminated class: match '[' literally
                parts.append('\\[')
            else:
                body = pattern[i:j].replace('\\', '\\\\').replace('[', '\\[')
                i = j + 1
                if body[:1] in ('!', '^'):
                    body = '^' + body[1:]
                parts.append(f'[{body}]')
        else:
            parts.append(re.escape(c))
    return '(?s:' + ''.join(parts) + r')\Z'


def _compile_pattern(pattern: str) -> Pattern[str]:
    """Compile a glob pattern to regex, caching the result."""
    if pattern in _COMPILED_REGEX_CACHE:
        return _COMPILED_REGEX_CACHE[pattern]
    compiled = re.compile(_translate_glob(pattern))
    _COMPILED_REGEX_CACHE[pattern] = compiled
    return compiled


def normalize_pattern(pattern: str) -> str:
    """Backslashes become forward slashes; a trailing '/' is dropped unless the rule ends in '/*'."""
    pattern = pattern.strip().replace("\\", "/")
    if pattern.endswith("/*"):
        return pattern
    return pattern.rstrip("/")


def parse_rule(pattern: str) -> Optional[FilterRule]:
    """Parses one pattern string into a FilterRule, or None if nothing is left after normalization."""
    raw = normalize_pattern(pattern)
    negated = raw.startswith("!")
    body = raw[1:] if negated else raw

    if body.endswith("/*"):
        parent = body[:-2]
        if not parent:
            return None
        return FilterRule(raw=raw, pattern=parent, negated=negated, kind=RULE_CONTENTS)
    if not body:
        return None
    kind = RULE_GLOB if _GLOB_CHARS.intersection(body) else RULE_DIRECTORY
    return FilterRule(raw=raw, pattern=body, negated=negated, kind=kind)


def parse_rules(patterns: Iterable[str]) -> Tuple[FilterRule, ...]:
    """Parses patterns in order, dropping empty ones."""
    rules = []
    for pattern in patterns:
        rule = parse_rule(pattern)
        if rule is not None:
            rules.append(rule)
    return tuple(rules)


def rule_matches(path: str, rule: FilterRule) -> bool:
    """Checks a single rule against a normalized relative path, ignoring negation."""
    target = rule.pattern

    if rule.kind == RULE_CONTENTS:
        return path.startswith(target + "/") and path != target

    # Directory prefix: the entry itself or anything below it
    if path == target or path.startswith(target + "/"):
        return True

    base = path.rsplit("/", 1)[-1]
    if rule.kind == RULE_DIRECTORY:
        return base == target

    regex = _compile_pattern(target)
    return regex.match(path) is not None or regex.match(base) is not None


def match_rules(path: str, rules: Sequence[FilterRule]) -> Tuple[bool, Optional[str]]:
    """
    Evaluates a path against an ordered list of rules.

    Args:
        path: Relative path with forward slashes.
        rules: Rules in declaration order.

    Returns:
        (matched, deciding_rule). The first rule that matches decides: a normal
        rule returns (True, rule), a negated rule returns (False, rule).
        No matching rule returns (False, None).
    """
    if not path:
        return False, None

    path = path.replace("\\", "/")
    for rule in rules:
        if rule_matches(path, rule):
            return (not rule.negated), rule.raw
    return False, None


def is_junk(name: str, config: "SnapshotConfig") -> bool:
    """Entries that appear nowhere: the tool's own files, hidden entries and ignored directories."""
    if name in (".", ""):
        return False
    if name in config.kept_hidden_names:
        return False
    if name in config.ignored_files:
        return True
    if name.startswith("."):
        return True
    return name in config.ignored_dirs


def is_asset(name: str, config: "SnapshotConfig") -> bool:
    """Files that are listed in the tree but whose content is never exported (images, archives...)."""
    ext = os.path.splitext(name)[1].lower()
    if not ext and name.startswith("."):
        # ".DS_Store" has no extension for splitext; treat the whole name as one
        ext = name.lower()
    return ext in config.ignored_exts
