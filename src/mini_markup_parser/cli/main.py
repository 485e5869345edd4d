"""Main CLI entry point for the mini-markup command-line tool.

Provides parsing, validation and tree dumping for markup files, with batch
processing over directories and JSON, CSV or plain-text reports.
"""

import argparse
import json
import logging
import sys
import time
from concurrent.futures import ProcessPoolExecutor, as_completed
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, TextIO

from mini_markup_parser import __version__
from mini_markup_parser.api import parse_file
from mini_markup_parser.dom import debug_dump, to_dict, to_markup
from mini_markup_parser.shared import (
    ConfigError,
    ConfigValidationError,
    ParserConfig,
    get_logger,
)

MARKUP_SUFFIXES = {".html", ".htm", ".xml", ".xhtml"}
PRESETS = ["strict", "lenient"]
OUTPUT_FORMATS = ["json", "csv", "text"]


class CLIConfig:
    """Settings for one CLI run, optionally loaded from JSON."""

    def __init__(self):
        self.parser_config = ParserConfig.strict()
        self.max_workers = None  # Use system default
        self.output_format = "json"
        self.verbose = False
        self.quiet = False

    @classmethod
    def from_file(cls, config_path: Path) -> "CLIConfig":
        """Load CLI configuration from a JSON file.

        Recognised keys: ``parser_preset``, ``parser`` (a ParserConfig
        dictionary, applied after the preset), ``max_workers`` and
        ``output_format``.
        """
        config = cls()
        if not config_path.exists():
            return config

        try:
            with config_path.open(encoding="utf-8") as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ConfigValidationError("CLI configuration must be a JSON object")

            parser_config = config.parser_config
            if "parser_preset" in data:
                parser_config = ParserConfig.from_preset(data["parser_preset"])
            if "parser" in data:
                if not isinstance(data["parser"], dict):
                    raise ConfigValidationError(
                        "'parser' must be a JSON object", field_name="parser"
                    )
                parser_config = parser_config.override(**data["parser"])

            max_workers = data.get("max_workers", config.max_workers)
            if max_workers is not None and (
                not isinstance(max_workers, int) or isinstance(max_workers, bool)
                or max_workers <= 0
            ):
                raise ConfigValidationError(
                    "max_workers must be a positive integer", field_name="max_workers"
                )

            output_format = data.get("output_format", config.output_format)
            if output_format not in OUTPUT_FORMATS:
                raise ConfigValidationError(
                    f"output_format must be one of {OUTPUT_FORMATS}",
                    field_name="output_format",
                )

        except (OSError, ValueError, ConfigError) as e:
            print(f"Warning: Could not load config file: {e}", file=sys.stderr)
        else:
            config.parser_config = parser_config
            config.max_workers = max_workers
            config.output_format = output_format

        return config


class ProgressTracker:
    """Single-line batch progress on stderr with a failure count."""

    BAR_WIDTH = 40
    REFRESH_SECONDS = 1.0

    def __init__(
        self,
        total: int,
        description: str = "Processing",
        stream: Optional[TextIO] = None,
        enabled: bool = True,
    ):
        self.total = total
        self.description = description
        self.stream = stream or sys.stderr
        self.enabled = enabled and total > 0
        self.completed = 0
        self.failed = 0
        self.start_time = time.perf_counter()
        self._last_render = float("-inf")

    @property
    def done(self) -> bool:
        return self.completed >= self.total

    def update(self, success: bool = True):
        """Record one finished file and redraw at most once per second."""
        self.completed += 1
        if not success:
            self.failed += 1

        now = time.perf_counter()
        if self.enabled and (self.done or now - self._last_render >= self.REFRESH_SECONDS):
            self._render(now)
            self._last_render = now

    def _render(self, now: float):
        fraction = self.completed / self.total
        filled = int(fraction * self.BAR_WIDTH)
        bar = "#" * filled + "." * (self.BAR_WIDTH - filled)

        status = f"{self.completed}/{self.total} files"
        if self.failed:
            status += f", {self.failed} failed"

        elapsed = now - self.start_time
        if not self.done and elapsed > 0:
            remaining = (self.total - self.completed) * elapsed / self.completed
            status += f", ETA {remaining:.0f}s"

        end = "\n" if self.done else ""
        self.stream.write(f"\r{self.description} [{bar}] {fraction:.0%} ({status}){end}")
        self.stream.flush()


class MarkupProcessor:
    """Core processing logic shared by the CLI commands."""

    def __init__(self, config: CLIConfig):
        self.config = config
        self.logger = get_logger(__name__, None, "cli_processor")

    def process_single_file(self, file_path: Path) -> Dict[str, Any]:
        """Parse one file and summarise the outcome as a plain dictionary."""
        result = parse_file(file_path, config=self.config.parser_config)
        stats = result.statistics

        summary: Dict[str, Any] = {
            "file": str(file_path),
            "success": result.success,
            "element_count": stats["element_count"],
            "text_count": stats["text_count"],
            "max_depth": stats["max_depth"],
            "processing_time_ms": result.performance.processing_time_ms,
            "diagnostics": [
                {
                    "severity": diag.severity.name,
                    "message": diag.message,
                    "component": diag.component,
                } for diag in result.diagnostics
            ],
        }
        if result.error is not None:
            summary["error"] = result.error.to_dict()
        elif not result.success:
            summary["error"] = {"kind": "IOError", "message": result.error_message}

        if not result.success:
            self.logger.info(
                "File failed to parse",
                extra={"file_path": str(file_path), "error_kind": summary["error"]["kind"]}
            )
        return summary

    def find_markup_files(self, path: Path, recursive: bool = True) -> Iterator[Path]:
        """Find markup files in ``path`` by suffix."""
        if path.is_file():
            if path.suffix.lower() in MARKUP_SUFFIXES:
                yield path
        elif path.is_dir():
            pattern = "**/*" if recursive else "*"
            for candidate in sorted(path.glob(pattern)):
                if candidate.is_file() and candidate.suffix.lower() in MARKUP_SUFFIXES:
                    yield candidate

    def batch_process(self, paths: List[Path], recursive: bool = True) -> List[Dict[str, Any]]:
        """Process files and directories, in parallel when there is more than one file."""
        all_files: List[Path] = []
        for path in paths:
            if not path.exists():
                # Reported as a failure by process_single_file
                all_files.append(path)
            else:
                all_files.extend(self.find_markup_files(path, recursive))

        if not all_files:
            return []

        results = []
        progress = ProgressTracker(
            len(all_files), "Parsing markup files", enabled=not self.config.quiet
        )

        with self.logger.timed("Batch processing", logging.INFO) as log_fields:
            if len(all_files) == 1 or self.config.max_workers == 1:
                for file_path in all_files:
                    results.append(self.process_single_file(file_path))
                    progress.update(results[-1]["success"])
            else:
                with ProcessPoolExecutor(max_workers=self.config.max_workers) as executor:
                    futures = [
                        executor.submit(self.process_single_file, file_path)
                        for file_path in all_files
                    ]
                    for future in as_completed(futures):
                        results.append(future.result())
                        progress.update(results[-1]["success"])
                results.sort(key=lambda item: item["file"])

            log_fields["file_count"] = len(results)
            log_fields["successful"] = sum(1 for r in results if r["success"])

        return results


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="mini-markup",
        description="Strict markup parser producing a minimal DOM"
    )

    parser.add_argument("--version", action="version", version=__version__)
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Quiet output"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Parse command
    parse_parser = subparsers.add_parser("parse", help="Parse markup files and report")
    parse_parser.add_argument(
        "paths",
        nargs="+",
        type=Path,
        help="Markup files or directories to parse"
    )
    parse_parser.add_argument(
        "--recursive", "-r",
        action="store_true",
        help="Recursively process directories"
    )
    parse_parser.add_argument(
        "--format", "-f",
        choices=OUTPUT_FORMATS,
        help="Output format (default: json)"
    )
    parse_parser.add_argument(
        "--output", "-o",
        type=Path,
        help="Output file (default: stdout)"
    )
    parse_parser.add_argument(
        "--config", "-c",
        type=Path,
        help="Configuration file path"
    )
    parse_parser.add_argument(
        "--preset",
        choices=PRESETS,
        help="Parser configuration preset (default: strict)"
    )
    parse_parser.add_argument(
        "--workers", "-w",
        type=int,
        help="Number of parallel workers"
    )

    # Validate command
    validate_parser = subparsers.add_parser("validate", help="Check files are well-formed")
    validate_parser.add_argument(
        "paths",
        nargs="+",
        type=Path,
        help="Markup files to validate"
    )
    validate_parser.add_argument(
        "--preset",
        choices=PRESETS,
        default="strict",
        help="Parser configuration preset"
    )
    validate_parser.add_argument(
        "--format", "-f",
        choices=["json", "text"],
        default="text",
        help="Output format"
    )

    # Dump command
    dump_parser = subparsers.add_parser("dump", help="Print the parsed tree of one file")
    dump_parser.add_argument("path", type=Path, help="Markup file to dump")
    dump_parser.add_argument(
        "--format", "-f",
        choices=["debug", "markup", "json"],
        default="debug",
        help="Tree rendering (default: debug)"
    )
    dump_parser.add_argument(
        "--preset",
        choices=PRESETS,
        default="strict",
        help="Parser configuration preset"
    )
    dump_parser.add_argument(
        "--encoding",
        help="Source encoding (default: detect byte order mark, else utf-8)"
    )

    return parser


def _describe_error(error: Dict[str, Any]) -> str:
    message = error.get("message", "")
    if "line" in error:
        return f"{error['kind']}: {message} (line {error['line']}, column {error['column']})"
    return f"{error.get('kind', 'Error')}: {message}"


def format_results(results: List[Dict[str, Any]], format_type: str) -> str:
    """Render per-file summaries in the requested report format."""
    if format_type == "csv":
        if not results:
            return ""

        lines = ["file,success,elements,text_nodes,max_depth,time_ms,error"]
        for result in results:
            error_kind = result.get("error", {}).get("kind", "")
            lines.append(
                f"{result['file']},{result['success']},"
                f"{result.get('element_count', 0)},{result.get('text_count', 0)},"
                f"{result.get('max_depth', 0)},"
                f"{result.get('processing_time_ms', 0):.1f},{error_kind}"
            )
        return "\n".join(lines)

    if format_type == "text":
        if not results:
            return "No results to display."

        successful = sum(1 for r in results if r.get("success", False))
        lines = [f"Processed {len(results)} files, {successful} successful", "-" * 60]

        for result in results:
            status = "✓" if result.get("success", False) else "✗"
            lines.append(f"{status} {result['file']}")
            lines.append(
                f"   Elements: {result.get('element_count', 0)}, "
                f"Text nodes: {result.get('text_count', 0)}, "
                f"Depth: {result.get('max_depth', 0)}, "
                f"Time: {result.get('processing_time_ms', 0):.1f}ms"
            )
            if "error" in result:
                lines.append(f"   Error: {_describe_error(result['error'])}")
            lines.append("")

        return "\n".join(lines)

    return json.dumps(results, indent=2)


def _configure_logging(args: argparse.Namespace, default_level: Optional[str] = None) -> None:
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)
    elif args.quiet:
        logging.basicConfig(level=logging.ERROR)
    elif default_level:
        logging.basicConfig(level=default_level)


def cmd_parse(args: argparse.Namespace) -> int:
    """Handle parse command."""
    config = CLIConfig()
    if args.config:
        config = CLIConfig.from_file(args.config)
        _configure_logging(args, config.parser_config.logging_level)

    if args.preset:
        config.parser_config = ParserConfig.from_preset(args.preset)
    if args.workers:
        config.max_workers = args.workers
    if args.format:
        config.output_format = args.format
    config.verbose = args.verbose
    config.quiet = args.quiet

    processor = MarkupProcessor(config)
    try:
        results = processor.batch_process(args.paths, args.recursive)
    except KeyboardInterrupt:
        print("\nProcessing interrupted by user", file=sys.stderr)
        return 130

    formatted_output = format_results(results, config.output_format)

    if args.output:
        try:
            args.output.write_text(formatted_output, encoding="utf-8")
        except OSError as e:
            processor.logger.exception(
                "Could not write results", extra={"output_path": str(args.output)}
            )
            print(f"Error writing output: {e}", file=sys.stderr)
            return 1
        print(f"Results written to {args.output}", file=sys.stderr)
    else:
        print(formatted_output)

    if not results:
        return 1

    successful = sum(1 for r in results if r.get("success", False))
    return 0 if successful == len(results) else 1


def cmd_validate(args: argparse.Namespace) -> int:
    """Handle validate command."""
    config = CLIConfig()
    config.parser_config = ParserConfig.from_preset(args.preset)
    processor = MarkupProcessor(config)

    results = []
    for path in args.paths:
        summary = processor.process_single_file(path)
        validation = {"file": str(path), "valid": summary["success"]}
        if "error" in summary:
            validation["error"] = summary["error"]
        results.append(validation)

    if args.format == "json":
        print(json.dumps(results, indent=2))
    else:
        valid_count = sum(1 for r in results if r["valid"])
        print(f"Validated {len(results)} files, {valid_count} valid")
        print("-" * 50)

        for result in results:
            status = "✓" if result["valid"] else "✗"
            print(f"{status} {result['file']}")
            if "error" in result:
                print(f"   Error: {_describe_error(result['error'])}")

    return 0 if all(r["valid"] for r in results) else 1


def cmd_dump(args: argparse.Namespace) -> int:
    """Handle dump command."""
    config = ParserConfig.from_preset(args.preset)
    result = parse_file(args.path, encoding=args.encoding, config=config)

    if not result.success:
        if result.error is not None:
            print(f"Error: {_describe_error(result.error.to_dict())}", file=sys.stderr)
        else:
            print(f"Error: {result.error_message}", file=sys.stderr)
        return 1

    root = result.unwrap()
    if args.format == "markup":
        print(to_markup(root))
    elif args.format == "json":
        print(json.dumps(to_dict(root), indent=2))
    else:
        print(debug_dump(root))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    _configure_logging(args)

    try:
        if args.command == "parse":
            return cmd_parse(args)
        if args.command == "validate":
            return cmd_validate(args)
        if args.command == "dump":
            return cmd_dump(args)
        print(f"Unknown command: {args.command}", file=sys.stderr)
        return 1

    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return 130  # Standard exit code for SIGINT


if __name__ == "__main__":
    sys.exit(main())
