"""Command-line interface for the tagging pipeline."""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from tqdm import tqdm

from .boundaries import PunctuationBoundaryProvider
from .config import Config
from .errors import TaggingError
from .output import spans_to_frame, write_spans
from .pipeline import TaggingPipeline
from .tokenizer import request_line


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the CLI."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="postagger",
        description="Tag text with an external part-of-speech tagger",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Using a config file
  postagger tag --config config.yaml --input text.txt --language de

  # Direct arguments
  postagger tag --input text.txt --language de --profile german.par \\
      --executable /opt/tagger/bin/tree-tagger --output spans.csv

  # Only finite verbs, as JSON Lines
  postagger tag --config config.yaml --input text.txt --only VVFIN VAFIN --format jsonl

  # Show what is sent to the tagger
  postagger tokenize --input text.txt
        """,
    )
    subparsers = parser.add_subparsers(dest="command", required=True, help="Command to run")

    tag_parser = subparsers.add_parser("tag", help="Tag every sentence of a text file")
    setup_tag_parser(tag_parser)

    tokenize_parser = subparsers.add_parser(
        "tokenize", help="Print the tokenized tagger request for each sentence"
    )
    tokenize_parser.add_argument("--input", type=Path, required=True, help="Path to input text file")
    tokenize_parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    return parser


def setup_tag_parser(parser: argparse.ArgumentParser) -> None:
    """Setup arguments for tag command."""
    parser.add_argument("--config", type=Path, help="Path to YAML configuration file")

    # Input/Output
    parser.add_argument("--input", type=Path, help="Path to input text file (UTF-8)")
    parser.add_argument("--output", type=Path, help="Path to output file")
    parser.add_argument(
        "--format",
        choices=["csv", "jsonl"],
        help="Output format (default: csv)",
    )

    # Tagger options
    parser.add_argument("--language", "-l", help="Language key (default: config default_language)")
    parser.add_argument("--profile", type=Path, help="Tagger profile for the language")
    parser.add_argument("--executable", type=Path, help="Tagger executable")
    parser.add_argument("--delimiter", help="Sentence delimiter string (default: <EOS>)")
    parser.add_argument("--timeout", type=float, help="Seconds to wait per sentence (default: 5)")

    # Selection
    parser.add_argument(
        "--only",
        nargs="+",
        metavar="TAG",
        help="Only write spans with these tags",
    )
    parser.add_argument(
        "--stop-on-error",
        action="store_true",
        help="Abort on the first sentence that fails to tag",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")


def build_config(args: argparse.Namespace) -> Config:
    """Build configuration from arguments."""
    # Start with config file if provided
    if args.config:
        config = Config.from_yaml(args.config)
    else:
        config = Config()

    # Override with command-line arguments
    if args.input:
        config.input_file = args.input
    if args.output:
        config.output.output_path = args.output
    if args.format:
        config.output.format = args.format
    if args.language:
        config.default_language = args.language

    if args.executable:
        config.tagger.executable = args.executable
    if args.delimiter:
        config.tagger.delimiter = args.delimiter
    if args.timeout is not None:
        config.tagger.timeout = args.timeout
    if args.profile and config.default_language:
        config.profiles[config.default_language] = args.profile

    # Re-run validators on the overridden values
    return Config.model_validate(config.model_dump())


def handle_tag(args: argparse.Namespace) -> int:
    """Handle tag command."""
    try:
        config = build_config(args)
    except (ValueError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not config.input_file:
        print("Error: Input file is required (use --input or --config)", file=sys.stderr)
        return 1
    language: Optional[str] = config.default_language
    if not language:
        print("Error: Language is required (use --language or --config)", file=sys.stderr)
        return 1

    try:
        document = config.input_file.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        print(f"Error: File not found - {e}", file=sys.stderr)
        return 1

    boundaries = PunctuationBoundaryProvider()
    try:
        with TaggingPipeline(config) as pipeline:
            results = list(
                tqdm(
                    pipeline.tag_text(
                        document,
                        language,
                        boundaries,
                        stop_on_error=args.stop_on_error,
                    ),
                    desc=f"Tagging ({language})",
                    unit="sent",
                )
            )
    except TaggingError as e:
        logging.exception("Tagging failed")
        print(f"Error: {e}", file=sys.stderr)
        return 1

    failed = sum(1 for result in results if not result.ok)
    frame = spans_to_frame(
        results,
        document=document,
        include_text=config.output.include_text,
        tags=args.only,
    )
    path = write_spans(frame, config.output.output_path, config.output.format)
    print(f"\nTagged {len(results) - failed} of {len(results)} sentences, {len(frame)} spans -> {path}")
    return 0


def handle_tokenize(args: argparse.Namespace) -> int:
    """Handle tokenize command."""
    try:
        document = args.input.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        print(f"Error: File not found - {e}", file=sys.stderr)
        return 1

    for sentence in PunctuationBoundaryProvider().sentences(document):
        print(request_line(sentence.text))
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    if args.command == "tag":
        return handle_tag(args)
    if args.command == "tokenize":
        return handle_tokenize(args)
    return 1


if __name__ == "__main__":
    sys.exit(main())
