"""
Markdown rendering for copied files, selections and folder structures.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

import pathspec

from .core import FileContent, Settings, display_path, gitignore_rules, is_ignored
from .ignore import RuleSet
from .minifier import MinifyOptions, minify

FOLDER = "folder"
FILE = "file"

TRUNCATED_MARKER = "# [truncated]"


# File sections
def section_title(file: FileContent, settings: Settings) -> str:
    title = file.path
    if file.line_range and settings.append_line_numbers:
        start, end = file.line_range
        title += f":{start}" if start == end else f":{start}-{end}"
    return title


def _fenced(title: str, language: str, content: str) -> str:
    if not content.endswith("\n"):
        content += "\n"
    return f"## {title}\n```{language}\n{content}```"


def generate_markdown(files: Sequence[FileContent], settings: Settings) -> str:
    """
    Render *files* as ``## path`` headers followed by fenced code blocks.

    Line-range entries follow ``selection_minify``; whole files follow
    ``minify``.
    """
    options = MinifyOptions(remove_comments=settings.remove_comments)
    sections: List[str] = []
    for file in files:
        should_minify = settings.selection_minify if file.line_range else settings.minify
        content = file.content
        if should_minify:
            content = minify(content, file.language, options)
        if file.truncated:
            if not content.endswith("\n"):
                content += "\n"
            content += TRUNCATED_MARKER
        sections.append(_fenced(section_title(file, settings), file.language, content))
    return "\n".join(sections)


def number_lines(lines: Sequence[str], start: int, minify_lines: bool = False) -> str:
    """Prefix each line with its 1-based number, counting from *start*."""
    if minify_lines:
        return " ".join(
            f"{n}: {line.strip()}"
            for n, line in enumerate(lines, start)
            if line.strip()
        )
    return "".join(f"{n}: {line}\n" for n, line in enumerate(lines, start))


def render_numbered_selection(file: FileContent, settings: Settings) -> str:
    """Render a line-range selection with every line numbered."""
    start, end = file.line_range or (1, file.content.count("\n") + 1)
    content = number_lines(file.content.split("\n"), start, settings.selection_minify)
    title = f"{file.path}:{start}" if start == end else f"{file.path}:{start}-{end}"
    return _fenced(title, file.language, content)


# Folder structures
@dataclass
class FolderNode:
    name: str
    type: str
    path: str
    children: List["FolderNode"] = field(default_factory=list)


def _sort_key(node: FolderNode):
    return (node.type != FOLDER, node.name.lower(), node.name)


def _build(
    folder: Path,
    root: Path,
    include_files: bool,
    rules: RuleSet,
    extra_spec: Optional["pathspec.PathSpec"],
) -> FolderNode:
    node = FolderNode(folder.name, FOLDER, display_path(folder, root))
    for child in folder.iterdir():
        if is_ignored(child, root, rules, extra_spec):
            continue
        if child.is_dir():
            # symlinked folders are not followed
            if child.is_symlink():
                continue
            node.children.append(_build(child, root, include_files, rules, extra_spec))
        elif include_files and child.is_file():
            node.children.append(FolderNode(child.name, FILE, display_path(child, root)))
    node.children.sort(key=_sort_key)
    return node


def build_folder_structure(
    folder: Path,
    root: Path,
    settings: Settings,
    include_files: bool = False,
    extra_spec: Optional["pathspec.PathSpec"] = None,
) -> Optional[FolderNode]:
    """
    Walk *folder* into a tree of FolderNode.

    Returns None when *folder* is not a directory or is itself ignored.
    """
    folder, root = folder.resolve(), root.resolve()
    if not folder.is_dir():
        return None
    rules = gitignore_rules(root, settings)
    if is_ignored(folder, root, rules, extra_spec):
        return None
    return _build(folder, root, include_files, rules, extra_spec)


def render_folder_tree(node: FolderNode, depth: int = 0) -> str:
    prefix = "📁 " if node.type == FOLDER else "📄 "
    lines = ["  " * depth + prefix + node.name + "\n"]
    lines.extend(render_folder_tree(child, depth + 1) for child in node.children)
    return "".join(lines)


def folder_to_json(node: FolderNode) -> Union[str, Dict[str, Any]]:
    if node.type == FILE:
        return "File"
    return {child.name: folder_to_json(child) for child in node.children}


def generate_folder_structure_markdown(
    structures: Sequence[FolderNode], structure_type: str = "tree"
) -> str:
    blocks: List[str] = []
    for structure in structures:
        if structure_type == "json":
            body = json.dumps(folder_to_json(structure), indent=2, ensure_ascii=False)
            blocks.append(f"## {structure.path}\n```json\n{body}\n```")
        else:
            blocks.append(f"## {structure.path}\n```\n{render_folder_tree(structure)}```")
    return "# Folder Structure\n\n" + "\n\n".join(blocks)
