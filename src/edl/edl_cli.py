"""
EDL CLI Entrypoint.

This module provides the command-line interface for checking and reformatting
EDL source code.

Features:
    - Read source from `.edl` / `.gml` files or inline strings.
    - Lex and parse in the selected dialect, printing every diagnostic to stderr.
    - Print the parsed program as normalized EDL or as a JSON tree.
    - Load parser settings from a JSON config file; flags override it.

Example usage:
    edl script.edl
    edl -s "if (a) & (b) x = 1" -d quirks
    edl script.gml -d gml -t json -o script.json
    edl script.edl --config edl.json --max-depth 500 --verbose

Functions:
    run_edl(source, is_string=False, dialect=None, max_depth=None, config_path=None,
            target="edl", out=None) -> int:
        Runs the pipeline (read, lex, parse, emit, output) and returns the exit status.

    main() -> None:
        Parses CLI arguments and exits with the status from `run_edl`.
"""

import argparse
import logging
import sys

from edl.edl_config import ConfigError, ParserConfig
from edl.edl_dialect import DIALECTS
from edl.edl_parser import parse_source
from edl.edl_transpile import EMITTERS, Transpiler

logger = logging.getLogger(__name__)

SOURCE_SUFFIXES = (".edl", ".gml")


def run_edl(
    source: str,
    is_string: bool = False,
    dialect: str | None = None,
    max_depth: int | None = None,
    config_path: str | None = None,
    target: str = "edl",
    out: str | None = None,
) -> int:
    """
    Run the EDL toolchain: read, lex, parse, then print or write the emitted output.

    Args:
        source (str): The EDL source code or path to a `.edl`/`.gml` file.
        is_string (bool): If True, treats `source` as raw code instead of a file path.
        dialect (str | None): Header dialect; overrides the config file.
        max_depth (int | None): Nesting limit; overrides the config file.
        config_path (str | None): Optional JSON file with parser settings.
        target (str): Output format, "edl" or "json". Defaults to "edl".
        out (str | None): Optional path to write the output. If None, prints to stdout.

    Returns:
        1 if any error was reported while parsing, 0 otherwise.

    Raises:
        ValueError: If `is_string` is False and the source is not a `.edl`/`.gml` file.
        ConfigError: If the configuration is invalid.
    """
    if not is_string and not source.endswith(SOURCE_SUFFIXES):
        raise ValueError("Only .edl and .gml files are supported.")
    if not is_string:
        with open(source, encoding="utf-8") as f:
            source = f.read()

    config = ParserConfig.load_from_json(config_path) if config_path else ParserConfig()
    config = config.replace(dialect=dialect, max_depth=max_depth)
    logger.debug("running with %r", config)

    root, diagnostics = parse_source(source, config)
    if diagnostics.diagnostics:
        print(diagnostics.format(), file=sys.stderr)

    code = Transpiler(target).transpile(root.children)
    if out:
        with open(out, "w", encoding="utf-8") as f:
            f.write(code + "\n")
        logger.info("wrote %s output to %s", target, out)
    else:
        print(code)

    return 1 if diagnostics.has_errors() else 0


def main() -> None:
    """
    Entry point for the EDL CLI.

    Supported flags:
        - `-s`, `--string`: Interpret source as a raw string instead of a file path.
        - `-d`, `--dialect`: Condition-header dialect (strict, quirks, gml).
        - `--max-depth`: Maximum nesting depth before "Nesting too deep" is reported.
        - `--config`: JSON file with parser settings.
        - `-t`, `--target`: Output format ('edl' or 'json'), default is 'edl'.
        - `-o`, `--out`: Write output to a file.
        - `--verbose`: Log debug output.
    """
    parser = argparse.ArgumentParser(prog="edl")
    parser.add_argument("source", help="Filename or raw source (with -s)")
    parser.add_argument(
        "-s", "--string", action="store_true", help="Interpret source as literal string"
    )
    parser.add_argument(
        "-d",
        "--dialect",
        choices=DIALECTS,
        help="Condition-header dialect (default: strict, or the config file's)",
    )
    parser.add_argument("--max-depth", type=int, metavar="N", help="Maximum nesting depth")
    parser.add_argument("--config", metavar="FILE", help="JSON parser configuration")
    parser.add_argument(
        "-t",
        "--target",
        choices=tuple(EMITTERS),
        default="edl",
        help="Output format (default: edl)",
    )
    parser.add_argument("-o", "--out", metavar="OUTFILE", help="Output to file")
    parser.add_argument("--verbose", action="store_true", help="Log debug output")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        status = run_edl(
            source=args.source,
            is_string=args.string,
            dialect=args.dialect,
            max_depth=args.max_depth,
            config_path=args.config,
            target=args.target,
            out=args.out,
        )
    except (ConfigError, ValueError, OSError, RecursionError) as e:
        problems = getattr(e, "problems", [])
        print(f"edl: {e}", file=sys.stderr)
        for problem in problems:
            print(f"  {problem}", file=sys.stderr)
        sys.exit(2)
    sys.exit(status)


if __name__ == "__main__" and not any("pytest" in arg for arg in sys.argv):
    main()
