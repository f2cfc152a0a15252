"""
Core logic for copycontext: picking, filtering and reading the files to copy.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

import pathspec
from colorama import Fore, Style, init as colorama_init

from .ignore import RuleSet, load_rules, relative_path, should_ignore
from .languages import language_for_path

colorama_init()

# Exceptions
class CopyContextError(Exception): ...
class InvalidRootError(CopyContextError): ...
class ConfigFileError(CopyContextError): ...
class OutputError(CopyContextError): ...
class FileReadError(CopyContextError): ...
class LineRangeError(CopyContextError): ...


def echo(msg: str, colour: Optional[str] = None) -> None:
    print(f"{colour}{msg}{Style.RESET_ALL}" if colour else msg, file=sys.stderr)


def warn(msg: str) -> None:
    echo(msg, Fore.YELLOW)


# Settings & records
@dataclass
class Settings:
    minify: bool = False
    selection_minify: bool = False
    remove_comments: bool = True
    respect_gitignore: bool = True
    append_line_numbers: bool = True
    structure_type: str = "tree"
    max_bytes: int = 100_000
    verbose: bool = False


@dataclass
class FileContent:
    path: str
    content: str
    language: str
    line_range: Optional[Tuple[int, int]] = None
    truncated: bool = False


# Defaults & helpers
DEFAULT_PATTERNS: List[str] = [
    ".env",
    "node_modules/",
    "__pycache__/",
    ".git/",          # exclude VCS data
]
DEFAULT_SPEC = pathspec.PathSpec.from_lines("gitwildmatch", DEFAULT_PATTERNS)


def display_path(path: Path, root: Path) -> str:
    """Root-relative path with ``/`` separators; the bare name for the root itself or outside files."""
    rel = relative_path(path, root)
    return path.name if rel in (None, ".") else rel


# Ignore-file utilities
def load_extra_patterns(config_path: Path) -> "pathspec.PathSpec":
    if not config_path.exists():
        raise ConfigFileError(f"Config file '{config_path}' does not exist")
    if not config_path.is_file():
        raise ConfigFileError(f"'{config_path}' is not a file")
    try:
        with config_path.open("r", encoding="utf-8") as fh:
            lines = [
                ln.strip()
                for ln in fh
                if ln.strip() and not ln.lstrip().startswith("#")
            ]
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigFileError(f"Could not read config file '{config_path}': {e}")
    return pathspec.PathSpec.from_lines("gitwildmatch", lines)


def gitignore_rules(root: Path, settings: Settings) -> RuleSet:
    return load_rules(root) if settings.respect_gitignore else ()


def is_ignored(
    path: Path,
    root: Path,
    rules: RuleSet,
    extra_spec: Optional["pathspec.PathSpec"] = None,
) -> bool:
    """
    True when *path* is excluded by the built-in defaults, the extra
    patterns or the root ``.gitignore`` rules.

    Paths outside *root* are never excluded.
    """
    rel = relative_path(path, root)
    if rel is None or rel == ".":
        return False
    spec_path = rel + "/" if path.is_dir() else rel
    if DEFAULT_SPEC.match_file(spec_path):
        return True
    if extra_spec is not None and extra_spec.match_file(spec_path):
        return True
    return should_ignore(rel, rules)


# File-scanning helpers
def scan_files(root: Path) -> List[Path]:
    try:
        root = root.resolve()
    except (OSError, RuntimeError) as e:
        raise InvalidRootError(f"Could not resolve root path '{root}': {e}")
    if not root.exists():
        raise InvalidRootError(f"Root directory '{root}' does not exist")
    if not root.is_dir():
        raise InvalidRootError(f"Root path '{root}' is not a directory")
    try:
        return sorted(p for p in root.rglob("*") if p.is_file())
    except (OSError, PermissionError) as e:
        raise InvalidRootError(f"Could not scan directory '{root}': {e}")


def collect_files(
    paths: Iterable[Path],
    root: Path,
    settings: Settings,
    extra_spec: Optional["pathspec.PathSpec"] = None,
) -> List[Path]:
    """
    Expand selected files and folders into the files to copy.

    Folders are scanned recursively; anything ignored is dropped and the
    result keeps first-seen order without duplicates.
    """
    root = root.resolve()
    rules = gitignore_rules(root, settings)
    kept: List[Path] = []
    seen = set()
    for selected in paths:
        selected = selected.resolve()
        if not selected.exists():
            raise FileReadError(f"'{selected}' does not exist")
        candidates = scan_files(selected) if selected.is_dir() else [selected]
        for p in candidates:
            if p in seen:
                continue
            seen.add(p)
            if is_ignored(p, root, rules, extra_spec):
                if settings.verbose:
                    warn(f"[copycontext] - Ignoring {display_path(p, root)}")
                continue
            kept.append(p)
    return kept


# Line ranges
def parse_line_range(text: str) -> Tuple[int, int]:
    """Parse ``"12-20"`` or ``"7"`` into a 1-based inclusive ``(start, end)``."""
    start_s, _, end_s = text.strip().partition("-")
    try:
        start = int(start_s)
        end = int(end_s) if end_s else start
    except ValueError:
        raise LineRangeError(f"Invalid line range '{text}' (expected START-END)")
    if start < 1 or end < start:
        raise LineRangeError(f"Invalid line range '{text}'")
    return start, end


def slice_lines(text: str, start: int, end: int) -> List[str]:
    lines = text.split("\n")
    if text.endswith("\n"):
        lines.pop()
    if end > len(lines):
        raise LineRangeError(
            f"Line range {start}-{end} is past the end of the file ({len(lines)} lines)"
        )
    return lines[start - 1 : end]


# Misc helpers
def _is_binary(data: bytes) -> bool:
    return b"\0" in data


def read_file(
    path: Path,
    root: Path,
    line_range: Optional[Tuple[int, int]] = None,
    max_bytes: int = 100_000,
) -> FileContent:
    rel = display_path(path, root)
    try:
        raw = path.read_bytes()
    except OSError as e:
        raise FileReadError(f"Could not read {rel}: {e}")
    if _is_binary(raw):
        raise FileReadError(f"Skipping binary {rel}")

    text = raw.decode("utf-8", errors="replace")
    language = language_for_path(path)
    if line_range is not None:
        content = "\n".join(slice_lines(text, *line_range))
        return FileContent(rel, content, language, line_range)

    truncated = len(raw) > max_bytes
    if truncated:
        text = raw[:max_bytes].decode("utf-8", errors="replace")
    return FileContent(rel, text, language, truncated=truncated)


def read_files(paths: Iterable[Path], root: Path, settings: Settings) -> List[FileContent]:
    """Read every path, skipping (and, when verbose, reporting) unreadable ones."""
    files: List[FileContent] = []
    for p in paths:
        try:
            files.append(read_file(p, root, max_bytes=settings.max_bytes))
        except FileReadError as e:
            if settings.verbose:
                warn(f"[copycontext] ! {e}")
    return files
