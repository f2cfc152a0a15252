"""
Copy Context - copy source files as Markdown for LLM prompts.

This package turns selected files, line ranges and folders into a single
Markdown document, optionally minified, while honouring .gitignore rules.
"""

__version__ = "0.1.0"

from .ignore import parse_rules, should_ignore
from .languages import language_for_path
from .minifier import MinifyOptions, minify

__all__ = [
    "minify",
    "MinifyOptions",
    "parse_rules",
    "should_ignore",
    "language_for_path",
]
