"""CLI entry point for cc-clean."""

import argparse
import io
import logging
import os
import sys
from contextlib import contextmanager
from importlib import metadata

import cc_clean.logging_setup
import cc_clean.settings
from cc_clean.rendering import STYLE_DESCRIPTIONS, OutputStyle, RenderOptions
from cc_clean.stream import StreamProcessor, make_console, make_err_console

logger = logging.getLogger(__name__)

PROG = "cc-clean"

EPILOG = "Styles:\n{styles}\n\nExamples:\n{examples}".format(
    styles="\n".join(f"  {s.value:<8} - {desc}" for s, desc in STYLE_DESCRIPTIONS.items()),
    examples="\n".join(
        [
            f"  claude -p 'prompt' --output-format stream-json | {PROG}",
            f"  {PROG} output.jsonl             # Process a JSONL file",
            f"  {PROG} -s compact output.jsonl  # Use compact style",
        ]
    ),
)


def _version() -> str:
    try:
        return metadata.version("cc-clean")
    except metadata.PackageNotFoundError:
        return "dev"


def build_parser(defaults: dict) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="Transform Claude Code's stream-json output into readable terminal output.",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "file",
        nargs="?",
        default="-",
        help="JSONL file to process (default: read from stdin)",
    )
    parser.add_argument(
        "-s",
        "--style",
        default=defaults["style"],
        help="Output style: default, compact, minimal, plain (default: %(default)s). Env: CC_CLEAN_STYLE",
    )
    parser.add_argument(
        "-V",
        "--verbose",
        action="store_true",
        default=defaults["verbose"],
        help="Show verbose output (usage stats, tool IDs, raw tool output)",
    )
    parser.add_argument(
        "-n",
        "--line-numbers",
        action="store_true",
        default=defaults["line_numbers"],
        help="Show line numbers",
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"{PROG} version {_version()}",
    )
    return parser


def parse_style(raw: str) -> OutputStyle | None:
    try:
        return OutputStyle(raw)
    except ValueError:
        return None


@contextmanager
def open_input(path: str):
    """Yield a text line source for ``path`` ("-" means stdin)."""
    if path == "-":
        buffer = getattr(sys.stdin, "buffer", None)
        if buffer is None:
            yield sys.stdin
            return
        stream = io.TextIOWrapper(buffer, encoding="utf-8", errors="replace")
        try:
            yield stream
        finally:
            stream.detach()
        return
    with open(path, encoding="utf-8", errors="replace") as f:
        yield f


def main(argv=None) -> int:
    parser = build_parser(cc_clean.settings.resolve_defaults())
    args = parser.parse_args(argv)

    # [LAW:single-enforcer] Runtime logger configuration is centralized in logging_setup.
    log_runtime = cc_clean.logging_setup.configure()
    logger.debug("logging configured level=%s file=%s", log_runtime.level_name, log_runtime.file_path)

    style = parse_style(args.style)
    if style is None:
        print(f"Unknown style: {args.style}", file=sys.stderr)
        parser.print_usage(sys.stderr)
        return 1

    if args.file != "-" and not os.path.isfile(args.file):
        print(f"File not found: {args.file}", file=sys.stderr)
        return 1

    options = RenderOptions(style=style, verbose=args.verbose, show_line_numbers=args.line_numbers)
    processor = StreamProcessor(make_console(style), make_err_console(), options)

    try:
        with open_input(args.file) as lines:
            processor.process_stream(lines)
    except OSError as e:
        if isinstance(e, BrokenPipeError):
            # Downstream closed early (e.g. piped into head).
            devnull = os.open(os.devnull, os.O_WRONLY)
            os.dup2(devnull, sys.stdout.fileno())
            return 0
        logger.debug("read failed after line %d", processor.line_num, exc_info=True)
        print(f"Error reading: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())
