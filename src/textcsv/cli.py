"""Command-line front end: classify a file and print its XHTML and metadata.

Usage:
  textcsv data.csv
  textcsv notes.txt --override "text/csv; delimiter=pipe"
  textcsv big.tsv --mark-limit 5000 --min-confidence 0.8
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from textcsv.config import load_config
from textcsv.errors import ConfigurationError, EncapsulationParseError, TextCSVError
from textcsv.patterns import CONTENT_TYPE_OVERRIDE
from textcsv.pipeline import TextAndCSVParser
from textcsv.sax import xhtml_writer

logger = logging.getLogger(__name__)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Classify a text file as plain text, CSV or TSV and emit XHTML")
    parser.add_argument("path", type=Path, help="File to parse")
    parser.add_argument("--override", type=str, default=None, help='Forced type, e.g. "text/csv; delimiter=pipe"')
    parser.add_argument("--mark-limit", type=int, default=None, help="Characters sampled for sniffing")
    parser.add_argument("--min-confidence", type=float, default=None, help="Minimum confidence for csv/tsv")
    parser.add_argument("--verbose", action="store_true", help="Log candidate scores")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    try:
        config = load_config()
        updates = {}
        if args.mark_limit is not None:
            updates["mark_limit"] = args.mark_limit
        if args.min_confidence is not None:
            updates["min_confidence"] = args.min_confidence
        if updates:
            # Re-validate rather than model_copy(update=...), which skips validation
            config = type(config)(**{**config.model_dump(), **updates})
    except ConfigurationError as exc:
        logger.error("Configuration error: %s", exc)
        return 2

    metadata: dict = {}
    if args.override:
        metadata[CONTENT_TYPE_OVERRIDE] = args.override

    generator, out = xhtml_writer()
    status = 0
    with open(args.path, "rb") as fopen:
        try:
            TextAndCSVParser(config).parse(fopen, generator, metadata)
        except EncapsulationParseError as exc:
            # Partial output is complete and still worth printing
            logger.error("Degraded parse of %s: %s", args.path, exc)
            status = 1
        except TextCSVError as exc:
            logger.error("Failed to parse %s: %s", args.path, exc)
            return 1

    print(out.getvalue())
    print(json.dumps(metadata, indent=2))
    return status


if __name__ == "__main__":
    sys.exit(main())
