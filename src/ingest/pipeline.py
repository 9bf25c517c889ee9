"""Ingest orchestration.

This module drives one ingest run: it discovers source documents,
runs each one through the optional XSLT transform, the crosswalk, and
the graph importer strictly in order, and reports statistics once
every document has been imported. Any failure aborts the run.
"""

from __future__ import annotations

import time
from contextlib import closing
from dataclasses import dataclass, field
from typing import Any, BinaryIO

from core.config import HarvestConfig
from core.constants import STAGE_CROSSWALK, STAGE_IMPORT, STAGE_TOTAL, STAGE_TRANSFORM
from core.logging_config import get_logger
from core.reporting import PipelineReporter
from core.types import DocumentReference, RunStatistics
from crosswalk.base import Crosswalk, build_crosswalk
from graph.base import GraphImporter, build_graph_importer
from ingest.discovery import discover_documents, resolve_source
from transforms.xslt_transform import TransformTemplate, apply_template, compile_template

_LOGGER = get_logger(__name__)


@dataclass
class IngestContext:
    """Collaborators and settings for one ingest run.

    Attributes:
        config: Runtime configuration.
        crosswalk: Converter from XML streams to graphs.
        importer: Graph database writer.
        reporter: Diagnostic output collaborator.
        template: Compiled XSLT template, or None for raw documents.
        s3_client: Optional S3 client override for remote discovery.
        statistics: Counters accumulated during the run.
    """

    config: HarvestConfig
    crosswalk: Crosswalk
    importer: GraphImporter
    reporter: PipelineReporter
    template: TransformTemplate | None = None
    s3_client: Any | None = None
    statistics: RunStatistics = field(default_factory=RunStatistics)


class IngestPipelineRunner:
    """Sequential runner for one ingest pass."""

    def __init__(self, context: IngestContext) -> None:
        self._context = context
        self._config = context.config
        self._reporter = context.reporter
        self._statistics = context.statistics

    def run(self) -> RunStatistics:
        """Process every discovered document and report statistics.

        Returns:
            Counters accumulated by this run.

        Raises:
            HarvestError: For any discovery, transform, crosswalk, or import failure.
        """
        source = resolve_source(self._config)
        _LOGGER.info("ingest_started", source=repr(source), profiling=self._config.profiling)
        documents = discover_documents(
            source, self._config, self._reporter, s3_client=self._context.s3_client
        )
        for document in documents:
            self._process_document(document)
        self._report_statistics()
        _LOGGER.info(
            "ingest_completed",
            source=repr(source),
            documents_processed=self._statistics.documents_processed,
        )
        return self._statistics

    def _process_document(self, document: DocumentReference) -> None:
        self._reporter.processing_document(document.key)
        started_at = time.monotonic()
        with closing(document.open()) as stream:
            xml_stream = self._transform(stream)
            crosswalk_started_at = time.monotonic()
            graph = self._context.crosswalk.process(xml_stream)
            self._record_stage(STAGE_CROSSWALK, crosswalk_started_at)
            import_started_at = time.monotonic()
            self._context.importer.import_graph(graph, self._config.profiling)
            self._record_stage(STAGE_IMPORT, import_started_at)
        self._record_stage(STAGE_TOTAL, started_at)
        self._statistics.documents_processed += 1
        if self._config.verbose:
            _LOGGER.info(
                "document_processed",
                key=document.key,
                nodes=len(graph.nodes),
                relationships=len(graph.relationships),
            )

    def _transform(self, stream: BinaryIO) -> BinaryIO:
        template = self._context.template
        if template is None:
            return stream
        started_at = time.monotonic()
        transformed = apply_template(template, stream)
        self._record_stage(STAGE_TRANSFORM, started_at)
        return transformed

    def _record_stage(self, stage: str, started_at: float) -> None:
        """Accumulate and print one stage timing when profiling is enabled."""
        if not self._config.profiling:
            return
        elapsed_ms = int((time.monotonic() - started_at) * 1000)
        self._statistics.add_stage_time(stage, elapsed_ms)
        self._reporter.stage_timing(stage, elapsed_ms)

    def _report_statistics(self) -> None:
        output = self._reporter.output
        if self._context.template is not None:
            self._context.crosswalk.print_statistics(output)
        self._context.importer.print_statistics(output)
        self._reporter.run_statistics(self._statistics)


def run_ingest(context: IngestContext) -> RunStatistics:
    """Run one ingest pass.

    Args:
        context: Run collaborators and settings.

    Returns:
        Counters accumulated by the run.
    """
    return IngestPipelineRunner(context).run()


def build_ingest_context(
    config: HarvestConfig,
    reporter: PipelineReporter,
    s3_client: Any | None = None,
) -> IngestContext:
    """Build run collaborators from configuration.

    The template compiles before the importer opens, so a bad stylesheet
    fails without touching the graph database.

    Args:
        config: Validated runtime configuration.
        reporter: Diagnostic output collaborator.
        s3_client: Optional S3 client override.

    Returns:
        Ready-to-run ingest context.
    """
    template = compile_template(config.crosswalk_path) if config.crosswalk_path else None
    crosswalk = build_crosswalk(config)
    importer = build_graph_importer(config)
    return IngestContext(
        config=config,
        crosswalk=crosswalk,
        importer=importer,
        reporter=reporter,
        template=template,
        s3_client=s3_client,
    )
