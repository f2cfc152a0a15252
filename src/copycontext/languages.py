"""
Language tags and comment syntax for copycontext.

A file's extension picks its language tag; the tag picks the comment
syntax the minifier strips and the fence label used in Markdown output.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePath
from types import MappingProxyType
from typing import Mapping, Optional, Tuple, Union

TEXT = "text"

# Comment families
CURLY_BRACE = "curly-brace"
HASH = "hash"
HTML = "html"

_LANG_MAP: Mapping[str, str] = MappingProxyType(
    {
        ".js": "javascript",
        ".jsx": "jsx",
        ".ts": "typescript",
        ".tsx": "tsx",
        ".py": "python",
        ".java": "java",
        ".c": "c",
        ".cpp": "cpp",
        ".cc": "cpp",
        ".cxx": "cpp",
        ".h": "c",
        ".hpp": "cpp",
        ".cs": "csharp",
        ".php": "php",
        ".rb": "ruby",
        ".go": "go",
        ".rs": "rust",
        ".swift": "swift",
        ".kt": "kotlin",
        ".scala": "scala",
        ".sh": "bash",
        ".bash": "bash",
        ".zsh": "zsh",
        ".fish": "fish",
        ".ps1": "powershell",
        ".html": "html",
        ".htm": "html",
        ".xml": "xml",
        ".css": "css",
        ".scss": "scss",
        ".sass": "sass",
        ".less": "less",
        ".json": "json",
        ".yaml": "yaml",
        ".yml": "yaml",
        ".toml": "toml",
        ".ini": "ini",
        ".cfg": "ini",
        ".conf": "conf",
        ".sql": "sql",
        ".md": "markdown",
        ".markdown": "markdown",
        ".tex": "latex",
        ".r": "r",
        ".m": "matlab",
        ".pl": "perl",
        ".lua": "lua",
        ".vim": "vim",
        ".dockerfile": "dockerfile",
        ".gitignore": "gitignore",
        ".env": "dotenv",
    }
)


@dataclass(frozen=True)
class CommentSyntax:
    """How comments look for one language tag.

    ``block_patterns`` are regexes for multi-line comments, applied in order
    and non-greedily. ``line_token`` starts a comment that runs to the end of
    the physical line.
    """

    family: Optional[str] = None
    block_patterns: Tuple[str, ...] = ()
    line_token: Optional[str] = None


NO_COMMENTS = CommentSyntax()

_C_BLOCK = r"/\*[\s\S]*?\*/"

_C_LIKE = CommentSyntax(CURLY_BRACE, (_C_BLOCK,), "//")
_HASH_LINE = CommentSyntax(HASH, (), "#")

_COMMENT_SYNTAX: Mapping[str, CommentSyntax] = MappingProxyType(
    {
        **{
            tag: _C_LIKE
            for tag in (
                "javascript",
                "typescript",
                "jsx",
                "tsx",
                "java",
                "c",
                "cpp",
                "csharp",
                "go",
                "rust",
                "swift",
                "kotlin",
                "scala",
            )
        },
        "css": CommentSyntax(CURLY_BRACE, (_C_BLOCK,)),
        "less": CommentSyntax(CURLY_BRACE, (_C_BLOCK,)),
        "scss": CommentSyntax(CURLY_BRACE, (_C_BLOCK,), "//"),
        # sass has no block comments in its indented syntax
        "sass": CommentSyntax(CURLY_BRACE, (), "//"),
        "python": CommentSyntax(HASH, (r'"""[\s\S]*?"""', r"'''[\s\S]*?'''"), "#"),
        **{tag: _HASH_LINE for tag in ("ruby", "bash", "sh", "yaml", "toml")},
        "html": CommentSyntax(HTML, (r"<!--[\s\S]*?-->",)),
        "xml": CommentSyntax(HTML, (r"<!--[\s\S]*?-->",)),
    }
)


def language_for_path(path: Union[str, PurePath]) -> str:
    """Return the language tag for *path*, ``text`` when the extension is unknown."""
    pure = PurePath(path)
    suffix = pure.suffix
    # dotfiles such as ``.gitignore`` have a name but no suffix
    if not suffix and pure.name.startswith("."):
        suffix = pure.name
    return _LANG_MAP.get(suffix.lower(), TEXT)


def comment_syntax(language: str) -> CommentSyntax:
    return _COMMENT_SYNTAX.get(language, NO_COMMENTS)
