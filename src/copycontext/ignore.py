"""
Lightweight ``.gitignore`` matcher.

Deliberately simpler than git: no negation, no ``**``, no character
classes, and a leading ``/`` does not anchor. A rule matches a path when
it matches the whole path or any single ``/``-separated segment; a
directory rule (``dist/``) only looks at segments and never checks that
the segment really is a directory. Rules are OR-ed, so their order does
not matter.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple, Union

GITIGNORE = ".gitignore"


@dataclass(frozen=True)
class GitignoreRule:
    raw_pattern: str
    is_directory_only: bool = False
    has_wildcard: bool = False

    @classmethod
    def from_line(cls, line: str) -> "GitignoreRule":
        return cls(line, line.endswith("/"), "*" in line)


RuleSet = Tuple[GitignoreRule, ...]


def parse_rules(content: str) -> RuleSet:
    """Parse ``.gitignore`` text, skipping blank lines and ``#`` comments."""
    lines = (line.strip() for line in content.split("\n"))
    return tuple(GitignoreRule.from_line(ln) for ln in lines if ln and not ln.startswith("#"))


def _wildcard_match(text: str, pattern: str) -> bool:
    # Only ``.`` is escaped; other metacharacters keep their regex meaning.
    regex = "^%s$" % pattern.replace(".", r"\.").replace("*", ".*")
    try:
        return re.match(regex, text) is not None
    except re.error:
        return False


def _segment_match(segment: str, pattern: str) -> bool:
    if "*" in pattern:
        return _wildcard_match(segment, pattern)
    return segment == pattern


def matches_pattern(path: str, pattern: str) -> bool:
    """Return True when one raw ignore *pattern* matches the normalised *path*."""
    if pattern.startswith("/"):
        pattern = pattern[1:]
    segments = path.split("/")

    if pattern.endswith("/"):
        pattern = pattern[:-1]
        return any(_segment_match(part, pattern) for part in segments)

    if "*" in pattern:
        return _wildcard_match(path, pattern) or any(
            _wildcard_match(part, pattern) for part in segments
        )

    return path == pattern or pattern in segments


def should_ignore(relative_path: str, rules: RuleSet) -> bool:
    path = relative_path.replace("\\", "/")
    return any(matches_pattern(path, rule.raw_pattern) for rule in rules)


# Caller-side helpers
def relative_path(path: Union[str, Path], root: Union[str, Path]) -> Optional[str]:
    """Return *path* relative to *root* with ``/`` separators, or None if outside it."""
    try:
        rel = os.path.relpath(os.path.abspath(path), os.path.abspath(root))
    except ValueError:  # different drives on Windows
        return None
    if rel == os.pardir or rel.startswith(os.pardir + os.sep) or os.path.isabs(rel):
        return None
    return rel.replace(os.sep, "/")


def load_rules(root: Union[str, Path]) -> RuleSet:
    """Read ``<root>/.gitignore``; a missing or unreadable file yields no rules."""
    gitignore_path = Path(root) / GITIGNORE
    try:
        with gitignore_path.open("r", encoding="utf-8") as fh:
            return parse_rules(fh.read())
    except (OSError, UnicodeDecodeError):
        return ()
