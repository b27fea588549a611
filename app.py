"""Command-line entry point: compare two versions of a PDF and write a highlighted diff."""
from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from comparison.errors import NoOutputProduced
from config.settings import settings
from pipeline.compare_pdfs import compare_pdfs
from utils.logging import configure_logging, logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Highlight text removed, added, or changed between two versions of a PDF.",
    )
    parser.add_argument("old_pdf", help="Older version of the document")
    parser.add_argument("new_pdf", help="Newer version of the document")
    parser.add_argument("-o", "--output", default="pdf-diff.pdf", help="Path of the diff PDF to write")
    parser.add_argument("--json", dest="json_output", default=None, help="Also write a JSON report here")
    parser.add_argument(
        "--tolerance",
        type=float,
        default=None,
        help=f"Matching tolerance in points (default: {settings.match_tolerance:g})",
    )
    parser.add_argument("--log-level", default=settings.log_level, help="Logging level (default: %(default)s)")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    try:
        report = compare_pdfs(
            args.old_pdf,
            args.new_pdf,
            args.output,
            tolerance=args.tolerance,
            json_output_path=args.json_output,
        )
    except ValueError as exc:
        logger.error("Invalid input: %s", exc)
        return 2
    except NoOutputProduced as exc:
        logger.error("Comparison failed: %s", exc)
        return 1

    summary = report.summary
    logger.info(
        "Diff PDF generated successfully! (%s) %d of %d pages changed",
        report.output_path,
        summary["changed_pages"],
        summary["total_pages"],
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
