import argparse
import logging
import os
import sys
import traceback

from dotenv import load_dotenv

from rmqtimeline import __version__
from rmqtimeline.analysis.analyzer import TimelineAnalyzer
from rmqtimeline.core.exceptions import RmqTimelineError
from rmqtimeline.core.models import LogFormat
from rmqtimeline.render.factory import get_renderer, get_supported_renderers
from rmqtimeline.utils.validation import validate_labels, validate_log_files

load_dotenv()


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="rmqtimeline",
        description="Merge RabbitMQ node logs into one annotated, side-by-side timeline",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # HTML timeline of a three node cluster
  rmqtimeline rabbit1.log rabbit2.log rabbit3.log > timeline.html

  # Newer log format with microseconds and UTC offsets
  rmqtimeline --format permissive node-*.log -o timeline.html

  # Terminal report with custom column labels
  rmqtimeline a.log b.log --labels rabbit@a rabbit@b --output-format text

Environment:
  RMQ_TIMELINE_FORMAT          default for --format
  RMQ_TIMELINE_OUTPUT_FORMAT   default for --output-format
        """,
    )

    parser.add_argument("log_files", nargs="*", help="One log file per cluster node")
    parser.add_argument(
        "--format",
        choices=["auto"] + [f.value for f in LogFormat],
        default=os.getenv("RMQ_TIMELINE_FORMAT", "auto"),
        help="Log header grammar (default: auto-detect per file)",
    )
    parser.add_argument(
        "--output-format",
        choices=get_supported_renderers(),
        default=os.getenv("RMQ_TIMELINE_OUTPUT_FORMAT", "html"),
        help="Output format (default: html)",
    )
    parser.add_argument("-o", "--output", help="Write output to a file instead of stdout")
    parser.add_argument(
        "--labels",
        nargs="+",
        help="Column labels, one per log file (default: file names)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    parser.add_argument("--debug", action="store_true", help="Debug level logging")
    parser.add_argument(
        "--version", action="store_true", help="Print version and exit"
    )
    return parser


def print_version():
    print(f"rmqtimeline version {__version__}")


def main(argv=None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # Defaults from the environment bypass argparse choices
    if args.format != "auto" and args.format not in {f.value for f in LogFormat}:
        parser.error(f"invalid RMQ_TIMELINE_FORMAT: {args.format!r}")
    if args.output_format not in get_supported_renderers():
        parser.error(f"invalid RMQ_TIMELINE_OUTPUT_FORMAT: {args.output_format!r}")

    if args.version:
        print_version()
        return 0

    if not args.log_files:
        print_version()
        parser.print_usage()
        return 0

    # Set up logging
    if args.debug:
        level = logging.DEBUG
    elif args.verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(level=level, format="%(asctime)s - %(levelname)s - %(message)s")

    log_format = None if args.format == "auto" else LogFormat(args.format)

    try:
        log_files = validate_log_files(args.log_files)
        labels = validate_labels(args.labels, log_files)

        analyzer = TimelineAnalyzer(log_format=log_format)
        report = analyzer.analyze_files(log_files, labels=labels)
        output = get_renderer(args.output_format).render(report)

        if args.output:
            with open(args.output, "w", encoding="utf-8") as f:
                f.write(output)
            logging.getLogger(__name__).info(f"Timeline saved to: {args.output}")
        else:
            sys.stdout.write(output)

    except (RmqTimelineError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        if args.debug:
            traceback.print_exc()
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
