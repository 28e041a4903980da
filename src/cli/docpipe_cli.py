# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Command line entry point for the incremental documentation build."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, TextIO

from rich.console import Console
from rich.logging import RichHandler

from docpipe.analyzer import AnalysisFailure
from docpipe.analyzers import PythonAnalyzer
from docpipe.cache import CacheError, FileCache, InMemoryFileCache
from docpipe.database import SQLiteFileCache
from docpipe.discovery import discover_files
from docpipe.events import EventBus
from docpipe.logging_subscriber import LoggingSubscriber, build_console
from docpipe.model import FileRecord
from docpipe.pipeline import AnalysisPipeline, BuildReport
from docpipe.severity import Verbosity, threshold_for

logger = logging.getLogger(__name__)

DEFAULT_EXTENSIONS: tuple[str, ...] = (".py",)


def configure_logging(level: int = logging.WARNING) -> None:
    """Configure diagnostic logging with a Rich handler on stderr.

    Args:
        level: Logging severity threshold.
    """
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[
            RichHandler(
                console=Console(stderr=True), rich_tracebacks=True, show_path=False
            )
        ],
        force=True,
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser instance.
    """
    parser = argparse.ArgumentParser(prog="docpipe")
    subparsers = parser.add_subparsers(dest="command", required=True)
    build_parser_ = subparsers.add_parser("build")
    build_parser_.add_argument(
        "--path", required=True, help="Project root to analyze."
    )
    build_parser_.add_argument(
        "--cache-db",
        required=False,
        help="SQLite cache file; omit to cache in memory for this run only.",
    )
    build_parser_.add_argument(
        "--rebuild",
        action="store_true",
        help="Discard the --cache-db contents first so every file is analyzed again.",
    )
    build_parser_.add_argument(
        "--extension",
        action="append",
        dest="extensions",
        help="File suffix to include; may be repeated (default: .py).",
    )
    build_parser_.add_argument(
        "--verbosity",
        choices=[verbosity.value for verbosity in Verbosity],
        default=Verbosity.NORMAL.value,
        help="Use 'debug' to print every recorded error instead of ERROR and above.",
    )
    build_parser_.add_argument(
        "--continue-on-error",
        action="store_true",
        help="Keep processing remaining files when one cannot be analyzed.",
    )
    build_parser_.add_argument(
        "--summary-output",
        required=False,
        help="Optional output file path for a JSON build summary.",
    )
    return parser


def run(argv: list[str], stdout: TextIO, stderr: TextIO) -> int:
    """Run CLI command.

    Args:
        argv: CLI arguments.
        stdout: Standard output stream.
        stderr: Standard error stream.

    Returns:
        Exit code.
    """
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit:
        logger.warning(f"Argument parsing failed (argv={argv})")
        return 2
    if args.command == "build":
        return _run_build(args=args, stdout=stdout, stderr=stderr)

    logger.warning(f"Unsupported command (command={args.command})")
    stderr.write(f"Unsupported command: {args.command}\n")
    return 2


def _run_build(args: argparse.Namespace, stdout: TextIO, stderr: TextIO) -> int:
    """Run build command.

    Args:
        args: Parsed CLI arguments.
        stdout: Standard output stream.
        stderr: Standard error stream.

    Returns:
        Exit code.
    """
    root_path = Path(args.path)
    if not root_path.is_dir():
        logger.warning(f"Path is not a directory (path={root_path})")
        stderr.write(f"Path is not a directory: {root_path}\n")
        return 2

    cache: FileCache
    if args.cache_db:
        db_path = Path(args.cache_db)
        if not db_path.parent.exists():
            logger.warning(f"Cache directory does not exist (cache_db={db_path})")
            stderr.write(f"Cache directory does not exist: {db_path.parent}\n")
            return 2
        cache = SQLiteFileCache(db_path=db_path)
    else:
        cache = InMemoryFileCache()

    verbosity = Verbosity(args.verbosity)
    logging.getLogger("docpipe").setLevel(
        logging.DEBUG if verbosity is Verbosity.DEBUG else logging.NOTSET
    )
    bus = EventBus()
    subscriber = LoggingSubscriber(
        console=build_console(stdout),
        threshold=threshold_for(verbosity),
    )
    subscriber.connect(bus)
    pipeline = AnalysisPipeline(
        root_path=root_path, analyzer=PythonAnalyzer(), cache=cache, bus=bus
    )
    paths = discover_files(root_path, args.extensions or DEFAULT_EXTENSIONS)

    try:
        if args.rebuild and isinstance(cache, SQLiteFileCache):
            logger.info(f"Clearing cache before build (cache_db={args.cache_db})")
            cache.clear()
        report = pipeline.run(paths, continue_on_error=args.continue_on_error)
    except AnalysisFailure as exc:
        logger.warning(f"Build aborted (file_path={exc.path} error={exc.message})")
        stderr.write(f"Unable to analyze file {exc.path}: {exc.message}\n")
        return 1
    except CacheError as exc:
        logger.warning(f"Build aborted by cache failure (error={exc})")
        stderr.write(f"Cache storage failed: {exc}\n")
        return 2

    if args.summary_output:
        try:
            _write_summary_file(report=report, output_path=Path(args.summary_output))
        except OSError as exc:
            logger.warning(
                f"Failed to write summary file (output_path={args.summary_output} error={exc})"
            )
            stderr.write(f"Failed to write summary file: {args.summary_output}\n")
            return 2
    return 1 if report.failures else 0


def _record_payload(record: FileRecord) -> dict[str, Any]:
    return {
        "path": record.path,
        "fingerprint": record.fingerprint,
        "last_analyzed": record.last_analyzed.isoformat(),
        "errors": [
            {
                "severity": error.severity.name,
                "line": error.line,
                "message": error.render(),
            }
            for error in record.errors
        ],
    }


def _summary_payload(report: BuildReport) -> dict[str, Any]:
    return {
        "status": report.status,
        "cached_count": report.cached_count,
        "analyzed_count": report.analyzed_count,
        "records": [_record_payload(record) for record in report.records],
        "failures": [
            {"file_path": failure.path, "message": failure.message}
            for failure in report.failures
        ],
    }


def _write_summary_file(report: BuildReport, output_path: Path) -> None:
    """Write the JSON build summary to an output file.

    Args:
        report: Finished build report.
        output_path: Target file path.

    Raises:
        OSError: If directory creation or file writing fails.
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(
        json.dumps(_summary_payload(report), indent=2, sort_keys=True),
        encoding="utf-8",
    )


def main() -> None:
    """Run the CLI application and exit."""
    configure_logging()
    exit_code = run(sys.argv[1:], stdout=sys.stdout, stderr=sys.stderr)
    raise SystemExit(exit_code)


if __name__ == "__main__":
    main()
