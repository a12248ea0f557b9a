"""Entry point for the RSS field analyzer: python -m rssfield_analyzer URL [URL ...]"""

import argparse
import asyncio
import json
import logging
import os
import sys

from rssfield_analyzer.analysis import DEFAULT_SAMPLE_SIZE
from rssfield_analyzer.analyzer import analyze
from rssfield_analyzer.exceptions import MissingMappingError
from rssfield_analyzer.instructions import generate_parsing_instructions
from rssfield_analyzer.models import AnalysisReport
from rssfield_analyzer.schema import build_mapping_record

logger = logging.getLogger("rssfield_analyzer")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rssfield-analyzer",
        description="Infer the field structure of RSS/Atom feeds and recommend mappings.",
    )
    parser.add_argument("urls", nargs="+", help="Feed URLs to analyze")
    parser.add_argument(
        "--sample-size",
        type=int,
        default=int(os.environ.get("RSSFIELD_SAMPLE_SIZE", DEFAULT_SAMPLE_SIZE)),
        help="Number of items to sample per feed (default: %(default)s)",
    )
    parser.add_argument(
        "--no-deep-scan",
        dest="deep_scan",
        action="store_false",
        help="Only look at well-known RSS/Atom elements",
    )
    parser.add_argument(
        "--instructions",
        action="store_true",
        help="Include XPath parsing instructions for the recommended mapping",
    )
    parser.add_argument(
        "--record",
        metavar="FEED_ID",
        help="Include the mapping record to persist under this feed id",
    )
    return parser


def render(report, args: argparse.Namespace) -> dict:
    """JSON document for one analysis result."""
    output = report.to_dict()
    if not isinstance(report, AnalysisReport):
        return output

    if args.instructions:
        try:
            instructions = generate_parsing_instructions(report.recommended_mappings)
            output["parsing_instructions"] = {
                slot: instruction.to_dict() if instruction else None
                for slot, instruction in instructions.items()
            }
        except MissingMappingError as e:
            output["parsing_instructions"] = {"error": str(e), "missing": e.slots}

    if args.record:
        output["mapping_record"] = build_mapping_record(args.record, report)
    return output


async def run(args: argparse.Namespace) -> int:
    """Analyze all URLs concurrently and print one JSON document each."""
    reports = await asyncio.gather(*(
        asyncio.to_thread(analyze, url, args.sample_size, args.deep_scan)
        for url in args.urls
    ))

    failures = 0
    for report in reports:
        if not report.success:
            failures += 1
        print(json.dumps(render(report, args), indent=2, ensure_ascii=False))

    if failures:
        logger.warning("%d of %d analyses failed", failures, len(reports))
    return 1 if failures else 0


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(
        level=os.environ.get("RSSFIELD_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )
    # Quiet noisy loggers
    logging.getLogger("httpx").setLevel(logging.WARNING)

    args = build_parser().parse_args(argv)
    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
