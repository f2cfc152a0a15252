"""
Language-aware minifier.

Compacts source text for pasting into an LLM prompt: comments are stripped
without touching quoted literals, lines are folded into one, and whitespace
around punctuation is dropped per language family. Deliberately regex based:
punctuation inside surviving string literals gets compacted too.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Sequence, Tuple

from .languages import comment_syntax

QUOTES = ('"', "'", "`")

Step = Tuple[str, str]


class ScanState(enum.Enum):
    NORMAL = "normal"
    IN_STRING = "in_string"
    ESCAPED = "escaped"


@dataclass(frozen=True)
class MinifyOptions:
    remove_comments: bool = True


# Comment stripping
def remove_multi_line_comments(content: str, language: str) -> str:
    for pattern in comment_syntax(language).block_patterns:
        content = re.sub(pattern, "", content)
    return content


def remove_comment_from_line(line: str, token: str) -> str:
    """
    Cut *line* at the first *token* that sits outside a quoted literal.

    A backslash escapes the next character in any state, so ``\\"`` never
    opens or closes a string. The line comes back unchanged when no comment
    starts on it.
    """
    state = ScanState.NORMAL
    resume = ScanState.NORMAL
    delimiter: Optional[str] = None

    for i in range(len(line) - len(token) + 1):
        char = line[i]
        if state is ScanState.ESCAPED:
            state = resume
            continue
        if char == "\\":
            resume, state = state, ScanState.ESCAPED
            continue
        if state is ScanState.NORMAL:
            if char in QUOTES:
                state, delimiter = ScanState.IN_STRING, char
            elif line.startswith(token, i):
                return line[:i].rstrip()
        elif char == delimiter:
            state, delimiter = ScanState.NORMAL, None

    return line


def remove_single_line_comments(content: str, language: str) -> str:
    token = comment_syntax(language).line_token
    if not token:
        return content
    return "\n".join(remove_comment_from_line(line, token) for line in content.split("\n"))


# Line compaction
def compact_lines(content: str) -> str:
    return " ".join(line.strip() for line in content.split("\n") if line.strip())


# Token compaction
def _keywords(*words: str) -> Step:
    # ``$`` counts as an identifier character and a leading ``.`` marks a property
    return (r"(?<![\w$.])(?:%s)(?![\w$])" % "|".join(words), r" \g<0> ")


_COLLAPSE: Step = (r"\s+", " ")

SCRIPT_RULES: Sequence[Step] = (
    (r"\s*([+\-*/%=<>!&|^~,;:?()])\s*", r"\1"),
    (r"\s*([{}])\s*", r"\1"),
    (r"\s*([\[\]])\s*", r"\1"),
    _keywords(
        "if", "else", "for", "while", "do", "switch", "case", "return",
        "function", "const", "let", "var", "class", "extends", "implements",
        "import", "export", "from", "as", "typeof", "instanceof",
    ),
    _COLLAPSE,
)

CSS_TRAILING_SEMICOLON: Step = (r";+}", "}")

STYLESHEET_RULES: Sequence[Step] = (
    (r"\s*([{}:;,>+~])\s*", r"\1"),
    (r"\s*([()])\s*", r"\1"),
    CSS_TRAILING_SEMICOLON,
)

DATA_RULES: Sequence[Step] = ((r"\s*([{}\[\]:,])\s*", r"\1"),)

PYTHON_RULES: Sequence[Step] = (
    (r"\s*([=+\-*/%<>!,()\[\]{}:;])\s*", r"\1"),
    _keywords(
        "if", "elif", "else", "for", "while", "def", "class", "import",
        "from", "as", "return", "yield", "try", "except", "finally", "with",
        "lambda", "and", "or", "not", "in", "is",
    ),
    _COLLAPSE,
)

COMPILED_RULES: Sequence[Step] = (
    (r"\s*([+\-*/%=<>!&|^~,;:?(){}\[\]])\s*", r"\1"),
    _keywords(
        "if", "else", "for", "while", "do", "switch", "case", "return",
        "class", "interface", "public", "private", "protected", "static",
        "final", "abstract", "extends", "implements", "import", "package",
        "try", "catch", "finally", "throw", "throws", "new", "this", "super",
        "void", "int", "long", "double", "float", "boolean", "char", "string",
    ),
    _COLLAPSE,
)

MARKUP_RULES: Sequence[Step] = ((r">\s+<", "><"), _COLLAPSE)

YAML_RULES: Sequence[Step] = ((r"\s*:\s*", ":"), (r"\s*-\s*", "-"))

LANGUAGE_RULES: Mapping[str, Sequence[Step]] = MappingProxyType(
    {
        **dict.fromkeys(("javascript", "typescript", "jsx", "tsx"), SCRIPT_RULES),
        **dict.fromkeys(("css", "scss", "less"), STYLESHEET_RULES),
        "json": DATA_RULES,
        "python": PYTHON_RULES,
        **dict.fromkeys(("java", "c", "cpp", "csharp"), COMPILED_RULES),
        **dict.fromkeys(("html", "xml"), MARKUP_RULES),
        "yaml": YAML_RULES,
    }
)


def apply_steps(content: str, steps: Sequence[Step]) -> str:
    for pattern, replacement in steps:
        content = re.sub(pattern, replacement, content)
    return content.strip()


def apply_language_rules(content: str, language: str) -> str:
    return apply_steps(content, LANGUAGE_RULES.get(language, ()))


# Facade
def minify(content: str, language: str, options: Optional[MinifyOptions] = None) -> str:
    """
    Minify *content* written in *language*.

    Never raises for any input; an unknown language only has its whitespace
    collapsed.
    """
    options = options or MinifyOptions()
    if options.remove_comments:
        content = remove_multi_line_comments(content, language)
        content = remove_single_line_comments(content, language)
    content = compact_lines(content)
    content = apply_language_rules(content, language)
    return re.sub(r"\s+", " ", content).strip()
