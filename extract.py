"""
Command-line entry point: ingest a statement PDF and print the reports.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

import config
from exceptions import DecodeError
from export import ExportSettings
from pipeline import StatementPipeline, ingestion_report
from session import StatementSession

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else getattr(logging, str(config.LOG_LEVEL).upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Extract and categorize transactions from a bank statement PDF')
    parser.add_argument('file_path', help='Path to bank statement PDF')
    parser.add_argument('-o', '--output', help='Write the JSON report to this file')
    parser.add_argument('--scale', type=float, default=None, help='Render scale for page images')
    parser.add_argument('--workers', type=int, default=None, help='Pages processed in parallel')
    parser.add_argument('--search', default='', help='Only list transactions matching this text')
    parser.add_argument('--type', dest='type_filter', choices=['all', 'income', 'expense'], default='all')
    parser.add_argument('--sort', choices=['date', 'description', 'amount', 'category', 'type'])
    parser.add_argument('--desc', action='store_true', help='Sort descending')
    parser.add_argument('--include-images', action='store_true', help='Keep page images in the report')
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')
    return parser


def main(argv=None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    file_path = Path(args.file_path)
    if not file_path.exists():
        print(f"Error: File not found - {file_path}", file=sys.stderr)
        return 1

    pipeline = StatementPipeline(max_workers=args.workers)
    try:
        result = pipeline.ingest(file_path.read_bytes(), scale=args.scale)
    except DecodeError as e:
        logger.error(f"Could not open {file_path}: {e.message}")
        print(f"Error: {e.message}", file=sys.stderr)
        return 1

    session = StatementSession(result)
    session.search = args.search
    session.type_filter = args.type_filter
    if args.sort:
        session.request_sort(args.sort)
        if args.desc:
            session.request_sort(args.sort)

    report = ingestion_report(result.document)
    if not args.include_images:
        for page in report["pages"]:
            page.pop("thumbnail")
            page.pop("fullImage")

    categorized = session.categorization_result()
    output_data = {
        "ingestion": report,
        "failures": [f.model_dump() for f in result.failures],
        "transactions": [
            t.model_dump(mode="json", by_alias=True, exclude={"page_index"}) for t in session.view()
        ],
        "summary": categorized["summary"],
        "export": ExportSettings().model_dump(by_alias=True),
    }

    if args.output:
        with open(args.output, 'w', encoding='utf-8') as f:
            json.dump(output_data, f, indent=2, ensure_ascii=False)
        print(f"Results written to: {args.output}")
    else:
        print(json.dumps(output_data, indent=2, ensure_ascii=False))

    return 0 if result.is_complete else 2


if __name__ == "__main__":
    sys.exit(main())
