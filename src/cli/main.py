"""Harvest CLI entry point.

This module maps command-line flags onto configuration and runs one
ingest pass. It is the process boundary: failures are reported on
stderr and turned into a non-zero exit status.
"""

from __future__ import annotations

import argparse
import traceback
from typing import Sequence

from core.config import HarvestConfig, validate_config
from core.logging_config import get_logger
from core.reporting import PipelineReporter
from ingest.pipeline import build_ingest_context, run_ingest

_LOGGER = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(
        prog="harvest",
        description="Import harvested Research Graph XML into a graph database",
    )
    parser.add_argument("--config", help="Optional YAML properties file")
    parser.add_argument("--s3-bucket", dest="s3_bucket", help="S3 bucket holding harvests")
    parser.add_argument("--s3-prefix", dest="s3_prefix", help="S3 prefix holding latest.txt")
    parser.add_argument("--xml-folder", dest="xml_folder", help="Local folder of XML files")
    parser.add_argument("--xml-type", dest="xml_type", help="Crosswalk document type (rg)")
    parser.add_argument("--source", help="Harvest source name")
    parser.add_argument("--crosswalk", help="Optional XSLT template applied to each document")
    parser.add_argument(
        "--versions-folder",
        dest="versions_folder",
        help="Folder receiving the last processed snapshot per source",
    )
    parser.add_argument("--neo4j", help="Neo4j URI (bolt://, neo4j://) or local graph folder")
    parser.add_argument(
        "--verbose",
        action="store_true",
        default=None,
        help="Log per-document details",
    )
    parser.add_argument(
        "--profiling",
        action="store_true",
        default=None,
        help="Print per-stage timing for every document",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the Harvest CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code: 0 on success, 1 on any failure.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        _run_import(args)
    except Exception as error:
        _LOGGER.error("ingest_failed", error=str(error), error_type=type(error).__name__)
        traceback.print_exc()
        return 1
    return 0


def _run_import(args: argparse.Namespace) -> None:
    """Build configuration and collaborators, then run one ingest pass."""
    overrides = {key: value for key, value in vars(args).items() if key != "config"}
    config = HarvestConfig.from_sources(overrides, properties_file=args.config)
    validate_config(config)
    reporter = PipelineReporter(profiling_enabled=config.profiling)
    reporter.configuration(config)
    context = build_ingest_context(config, reporter)
    try:
        run_ingest(context)
    finally:
        context.importer.close()
