"""
CLI entrypoint for copycontext.
"""
import argparse
import sys
from pathlib import Path
from typing import List, Optional, Tuple

import pyperclip
from colorama import Fore

from .core import (
    CopyContextError,
    LineRangeError,
    OutputError,
    Settings,
    collect_files,
    echo,
    load_extra_patterns,
    parse_line_range,
    read_file,
    read_files,
    warn,
)
from .markdown import (
    build_folder_structure,
    generate_folder_structure_markdown,
    generate_markdown,
    render_numbered_selection,
)


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--root", type=Path, default=Path("."), help="Project root dir")
    common.add_argument("--out", type=Path, help="Write the Markdown to this file")
    common.add_argument(
        "--stdout", action="store_true", help="Print the Markdown instead of copying it"
    )
    common.add_argument(
        "--config",
        type=Path,
        help="Path to a file with extra ignore patterns (one per line)",
    )
    common.add_argument(
        "--no-gitignore",
        action="store_true",
        help="Do not skip paths listed in the root .gitignore",
    )
    common.add_argument(
        "--max-bytes",
        type=int,
        default=100_000,
        help="Maximum bytes per file to include (default 100k)",
    )
    common.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")

    p = argparse.ArgumentParser(
        prog="copycontext",
        description="Copy files, line ranges or folder structures as Markdown for LLM prompts.",
    )
    sub = p.add_subparsers(dest="command", required=True)

    files = sub.add_parser("files", parents=[common], help="Copy files and folders")
    files.add_argument("paths", nargs="*", type=Path, help="Files or folders (default: root)")
    files.add_argument("--lines", help="Copy only this 1-based line range, e.g. 10-20")
    files.add_argument(
        "--numbered", action="store_true", help="Prefix each line of --lines with its number"
    )
    files.add_argument("--minify", action="store_true", help="Minify whole files")
    files.add_argument(
        "--minify-selection", action="store_true", help="Minify --lines selections"
    )
    files.add_argument(
        "--keep-comments", action="store_true", help="Keep comments when minifying"
    )
    files.add_argument(
        "--no-line-numbers",
        action="store_true",
        help="Leave the line range out of selection headers",
    )

    tree = sub.add_parser("tree", parents=[common], help="Copy folder structures")
    tree.add_argument("folders", nargs="*", type=Path, help="Folders (default: root)")
    tree.add_argument("--files", action="store_true", help="Include files in the structure")
    tree.add_argument(
        "--format", choices=("tree", "json"), default="tree", help="Structure format"
    )
    return p.parse_args(argv)


def _settings(ns: argparse.Namespace) -> Settings:
    return Settings(
        minify=getattr(ns, "minify", False),
        selection_minify=getattr(ns, "minify_selection", False),
        remove_comments=not getattr(ns, "keep_comments", False),
        respect_gitignore=not ns.no_gitignore,
        append_line_numbers=not getattr(ns, "no_line_numbers", False),
        structure_type=getattr(ns, "format", "tree"),
        max_bytes=ns.max_bytes,
        verbose=ns.verbose,
    )


def _copy_files(
    ns: argparse.Namespace, root: Path, settings: Settings, extra_spec
) -> Tuple[str, str]:
    if ns.numbered and not ns.lines:
        raise LineRangeError("--numbered needs --lines")
    if ns.lines:
        if len(ns.paths) != 1:
            raise LineRangeError("--lines needs exactly one file")
        start, end = parse_line_range(ns.lines)
        fc = read_file(ns.paths[0].resolve(), root, line_range=(start, end))
        if ns.numbered:
            return render_numbered_selection(fc, settings), f"line range {start}-{end}"
        return generate_markdown([fc], settings), f"line range {start}-{end}"

    kept = collect_files(ns.paths or [root], root, settings, extra_spec)
    if settings.verbose:
        echo(f"[copycontext] {len(kept)} files kept after filtering.")
    files = read_files(kept, root, settings)
    if not files:
        raise CopyContextError("No valid files to copy")
    return generate_markdown(files, settings), f"{len(files)} file(s)"


def _copy_tree(
    ns: argparse.Namespace, root: Path, settings: Settings, extra_spec
) -> Tuple[str, str]:
    structures = []
    for folder in ns.folders or [root]:
        node = build_folder_structure(folder, root, settings, ns.files, extra_spec)
        if node is not None:
            structures.append(node)
    if not structures:
        raise CopyContextError("No valid folders to copy")
    markdown = generate_folder_structure_markdown(structures, settings.structure_type)
    return markdown, f"{len(structures)} folder structure(s)"


def _write_output(text: str, out_path: Path) -> None:
    try:
        out_path = out_path.resolve()
    except (OSError, RuntimeError) as e:
        raise OutputError(f"Could not resolve output path '{out_path}': {e}")

    if not out_path.parent.exists():
        try:
            out_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise OutputError(f"Could not create directory '{out_path.parent}': {e}")
    try:
        with out_path.open("w", encoding="utf-8", newline="\n") as out_fh:
            out_fh.write(text + "\n")
    except OSError as e:
        raise OutputError(f"Could not write '{out_path}': {e}")


def _emit(text: str, what: str, ns: argparse.Namespace) -> None:
    if ns.out:
        _write_output(text, ns.out)
        echo(f"[copycontext] Wrote {what} to {ns.out}", Fore.GREEN)
        return
    if not ns.stdout:
        try:
            pyperclip.copy(text)
        except pyperclip.PyperclipException as e:
            warn(f"[copycontext] ! Clipboard unavailable ({e}); printing instead")
        else:
            echo(f"[copycontext] Copied {what} to clipboard", Fore.GREEN)
            return
    sys.stdout.write(text + "\n")


def main(argv: Optional[List[str]] = None) -> None:
    try:
        ns = _parse_args(argv)
        root = ns.root.resolve()
        settings = _settings(ns)

        extra_spec = None
        if ns.config:
            extra_spec = load_extra_patterns(ns.config.resolve())
            if ns.verbose:
                echo(f"[copycontext] Loaded extra patterns from {ns.config}")

        if ns.command == "files":
            text, what = _copy_files(ns, root, settings, extra_spec)
        else:
            text, what = _copy_tree(ns, root, settings, extra_spec)
        _emit(text, what, ns)

    except CopyContextError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        print("\nCancelled.", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
