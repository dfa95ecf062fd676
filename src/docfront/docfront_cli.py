"""
docfront CLI Entrypoint.

This module provides the command-line interface for extracting doc-comments
and the code that follows them from JavaScript sources.

Features:
    - Read sources from files, directories (walked recursively) or inline strings.
    - Lex, scan and summarize every doc-comment.
    - Output the records as JSON to the console or a file.

Example usage:
    docfront src/app.js
    docfront -s "/** doc */ var x = 1;"
    docfront src/ -o docs.json -c docfront.json --recover

Functions:
    collect_files(paths: list[str], extensions: list[str]) -> list[str]:
        Expands directories into the source files they contain.

    run_docfront(sources: list[str], is_string: bool = False, out: str | None = None,
                 config: ScanConfig | None = None) -> list[dict]:
        Runs the full pipeline (read -> lex -> scan -> JSON output).

    main() -> None:
        Parses CLI arguments and invokes `run_docfront`.
"""

import argparse
import json
import logging
import os
import sys
from typing import Any

from docfront.docfront_config import ConfigError, ScanConfig
from docfront.docfront_parser import JsParser

logger = logging.getLogger(__name__)


def collect_files(paths: list[str], extensions: list[str]) -> list[str]:
    """Expands directories into sorted lists of files with a matching suffix."""
    files: list[str] = []
    for path in paths:
        if os.path.isdir(path):
            found = []
            for root, _dirs, names in os.walk(path):
                for name in names:
                    if any(name.endswith(ext) for ext in extensions):
                        found.append(os.path.join(root, name))
            files.extend(sorted(found))
        else:
            files.append(path)
    return files


def run_docfront(
    sources: list[str],
    is_string: bool = False,
    out: str | None = None,
    config: ScanConfig | None = None,
) -> list[dict[str, Any]]:
    """
    Run the docfront pipeline: read, scan, and write the records as JSON.

    Args:
        sources (list[str]): Paths to files or directories, or raw JavaScript with `is_string`.
        is_string (bool): If True, treats each entry of `sources` as source text. Defaults to False.
        out (str | None): Optional path to write the JSON output. If None, prints to stdout.
        config (ScanConfig | None): Scan settings; defaults apply when omitted.

    Returns:
        list[dict]: One `{"filename": ..., "docs": [...]}` entry per source.

    Raises:
        GrammarMismatch: If a code block is malformed and `config.recover` is off.
        SyntaxError: If the lexer meets an unterminated string, regex or comment.
        OSError: If a source file cannot be read.
    """
    config = config or ScanConfig()

    if is_string:
        inputs = [("<string>", text) for text in sources]
    else:
        inputs = []
        for path in collect_files(sources, config.extensions):
            with open(path, encoding=config.encoding) as f:
                inputs.append((path, f.read()))

    results = []
    for filename, text in inputs:
        logger.info("scanning %s", filename)
        docs = JsParser(text, recover=config.recover).parse()
        results.append({"filename": filename, "docs": [d.to_dict() for d in docs]})

    output = json.dumps(results, indent=config.indent)
    if out:
        with open(out, "w", encoding="utf-8") as f:
            f.write(output + "\n")
        logger.info("wrote %d file(s) to %s", len(results), out)
    else:
        print(output)
    return results


def main() -> None:
    """
    Entry point for the docfront CLI.

    Supported flags:
        - `-s`, `--string`: Interpret the positional arguments as raw JavaScript.
        - `-o`, `--out`: Write JSON output to a file.
        - `-c`, `--config`: Load settings from a JSON config file.
        - `--compact`: Write JSON without indentation.
        - `--recover`: Keep scanning past malformed code blocks.
        - `-v`, `--verbose`: Log progress to stderr.

    Exits with status 1 and a message on stderr when a source cannot be read
    or parsed, or the config file is invalid.
    """
    parser = argparse.ArgumentParser(
        prog="docfront",
        description="Extract doc-comments and the code that follows them from JavaScript.",
    )
    parser.add_argument("sources", nargs="+", help="Files, directories, or raw source (with -s)")
    parser.add_argument(
        "-s", "--string", action="store_true", help="Interpret sources as literal strings"
    )
    parser.add_argument("-o", "--out", metavar="OUTFILE", help="Output to file")
    parser.add_argument("-c", "--config", metavar="CONFIG", help="JSON config file")
    parser.add_argument(
        "--compact", action="store_true", help="Write JSON without indentation"
    )
    parser.add_argument(
        "--recover",
        action="store_true",
        help="Summarize malformed code as nop instead of aborting",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = ScanConfig.from_json(args.config) if args.config else ScanConfig()
    except ConfigError as e:
        print(f"docfront: {e}", file=sys.stderr)
        for problem in e.problems:
            print(f"  - {problem}", file=sys.stderr)
        sys.exit(1)

    if args.compact:
        config.indent = None
    if args.recover:
        config.recover = True

    try:
        run_docfront(
            sources=args.sources, is_string=args.string, out=args.out, config=config
        )
    except (SyntaxError, OSError) as e:
        print(f"docfront: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__" and not any("pytest" in arg for arg in sys.argv):
    main()
