"""
Command-line interface for running record pipelines.

Usage:
    python -m recordflow.cli.pipeline_cli run --config <pipeline.yaml>
    python -m recordflow.cli.pipeline_cli run --input <path> --output <path> [options]
    python -m recordflow.cli.pipeline_cli schema --input <path> [options]
"""

import argparse
import asyncio
import sys
from pathlib import Path

from dotenv import load_dotenv

from recordflow.config import (
    AdapterConfig,
    PipelineConfigBuilder,
    PipelineConfigLoader,
    build_pipeline,
    build_source,
)
from recordflow.core.errors import PipelineError
from recordflow.observability.logger import get_logger, setup_logger
from recordflow.observability.metrics import start_metrics_server

logger = get_logger(__name__)

FORMAT_BY_SUFFIX = {
    ".csv": "csv",
    ".jsonl": "jsonl",
    ".ndjson": "jsonl",
}


def detect_format(path: str) -> str:
    """
    Map a file extension to an adapter type.

    Raises:
        PipelineError: kind CONFIG for unsupported extensions
    """
    suffix = Path(path).suffix.lower()
    if suffix not in FORMAT_BY_SUFFIX:
        raise PipelineError.config(
            f"Cannot infer format of {path}; expected one of {', '.join(sorted(FORMAT_BY_SUFFIX))}"
        )
    return FORMAT_BY_SUFFIX[suffix]


def _csv_options(args, include_header: bool) -> dict:
    options = {}
    if args.delimiter:
        options["delimiter"] = args.delimiter
    if include_header and args.no_header:
        options["has_header"] = False
    return options


def run_command(args) -> int:
    """
    Execute a pipeline, from a YAML definition or from input/output paths.

    Args:
        args: Command-line arguments

    Returns:
        Process exit code
    """
    if args.metrics_port:
        start_metrics_server(args.metrics_port)
        logger.info(f"Serving metrics on port {args.metrics_port}")

    try:
        if args.config:
            logger.info(f"Loading pipeline configuration: {args.config}")
            pipeline = PipelineConfigLoader(args.config).build()
        else:
            if not args.input or not args.output:
                logger.error("run needs either --config or both --input and --output")
                return 2
            input_format = detect_format(args.input)
            output_format = detect_format(args.output)
            builder = PipelineConfigBuilder(args.name)
            builder.with_source(
                input_format,
                args.input,
                **(_csv_options(args, include_header=True) if input_format == "csv" else {}),
            )
            builder.with_sink(
                output_format,
                args.output,
                **(_csv_options(args, include_header=False) if output_format == "csv" else {}),
            )
            pipeline = build_pipeline(builder.build())

        result = asyncio.run(pipeline.run())

    except PipelineError as e:
        logger.error(
            f"Pipeline failed: {e}",
            extra={"error_kind": e.kind.value, "error_message": e.message},
        )
        return 1

    logger.info(
        "Pipeline completed",
        extra={
            "pipeline": result.pipeline_name,
            "records_read": result.records_read,
            "records_written": result.records_written,
            "duration_seconds": round(result.duration_seconds, 3),
        },
    )
    return 0


def schema_command(args) -> int:
    """
    Print the schema inferred from an input file as JSON.

    Args:
        args: Command-line arguments

    Returns:
        Process exit code
    """
    try:
        input_format = detect_format(args.input)
        source = build_source(
            AdapterConfig(
                type=input_format,
                path=args.input,
                options=_csv_options(args, include_header=True) if input_format == "csv" else {},
            )
        )
        schema = asyncio.run(source.get_schema())
    except PipelineError as e:
        logger.error(
            f"Schema inference failed: {e}",
            extra={"error_kind": e.kind.value, "error_message": e.message},
        )
        return 1

    print(schema.model_dump_json(indent=2))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="recordflow",
        description="Record-oriented data pipeline",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Convert a CSV file to JSON Lines
  recordflow run --input data/orders.csv --output out/orders.jsonl

  # Semicolon-delimited CSV without a header row
  recordflow run --input data/raw.csv --output out/raw.jsonl --delimiter ";" --no-header

  # Run a pipeline defined in YAML
  recordflow run --config config/orders_pipeline.yaml

  # Show the schema inferred from a file
  recordflow schema --input data/orders.csv
        """
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (default: LOG_LEVEL env or INFO)"
    )
    parser.add_argument(
        "--log-format",
        default=None,
        choices=["json", "text"],
        help="Log format (default: LOG_FORMAT env or json)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    run_parser = subparsers.add_parser("run", help="Run a pipeline")
    run_parser.add_argument("--config", help="Path to pipeline YAML file")
    run_parser.add_argument("--input", help="Input file (.csv, .jsonl, .ndjson)")
    run_parser.add_argument("--output", help="Output file (.csv, .jsonl, .ndjson)")
    run_parser.add_argument("--name", default="cli", help="Pipeline name for logs and metrics")
    run_parser.add_argument("--delimiter", help="CSV delimiter (default: ,)")
    run_parser.add_argument(
        "--no-header",
        action="store_true",
        help="Input CSV has no header row"
    )
    run_parser.add_argument(
        "--metrics-port",
        type=int,
        help="Serve Prometheus metrics on this port while running"
    )

    schema_parser = subparsers.add_parser("schema", help="Print the inferred schema of a file")
    schema_parser.add_argument("--input", required=True, help="Input file (.csv, .jsonl, .ndjson)")
    schema_parser.add_argument("--delimiter", help="CSV delimiter (default: ,)")
    schema_parser.add_argument(
        "--no-header",
        action="store_true",
        help="Input CSV has no header row"
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    load_dotenv()

    parser = build_parser()
    args = parser.parse_args(argv)

    if args.log_level or args.log_format:
        setup_logger(level=args.log_level, format_type=args.log_format)

    if not args.command:
        parser.print_help()
        return 1

    if args.command == "run":
        return run_command(args)
    return schema_command(args)


if __name__ == "__main__":
    sys.exit(main())
