"""Diagnostic reporting for ingest runs.

This module renders the human-readable progress lines printed on stdout
and mirrors each one as a structured log event. Pipeline code calls the
reporter instead of printing directly.
"""

from __future__ import annotations

import sys
from typing import TextIO

from core.config import HarvestConfig
from core.constants import STAGE_CROSSWALK, STAGE_IMPORT, STAGE_TOTAL, STAGE_TRANSFORM
from core.logging_config import get_logger
from core.types import RunStatistics

_LOGGER = get_logger(__name__)
_STAGE_ORDER = (STAGE_TRANSFORM, STAGE_CROSSWALK, STAGE_IMPORT, STAGE_TOTAL)


class PipelineReporter:
    """Emit diagnostic lines for one ingest run."""

    def __init__(self, profiling_enabled: bool = False, output: TextIO | None = None) -> None:
        self._profiling_enabled = profiling_enabled
        self._output = output

    @property
    def output(self) -> TextIO:
        """Return the diagnostic stream, resolving stdout lazily."""
        return self._output if self._output is not None else sys.stdout

    def configuration(self, config: HarvestConfig) -> None:
        """Echo the effective configuration."""
        self._line(f"Verbose: {_format_bool(config.verbose)}")
        self._line(f"Profiling enabled: {_format_bool(config.profiling)}")
        if config.versions_folder:
            self._line(f"Version folder: {config.versions_folder}")
        self._line(f"Neo4J: {config.graph_target}")
        if config.crosswalk_path:
            self._line(f"XSLT Crosswalk: {config.crosswalk_path}")
        if config.uses_object_storage:
            self._line(f"S3 Bucket: {config.s3_bucket}")
            self._line(f"S3 Prefix: {config.s3_prefix}")
        elif config.xml_folder:
            self._line(f"XML: {config.xml_folder}")

    def processing_document(self, key: str) -> None:
        """Announce the document about to be processed."""
        self._line(f"Processing file: {key}")

    def directory_done(self, directory: str) -> None:
        """Announce that one local directory has been exhausted."""
        self._line(f"{directory} is done.")

    def snapshot_resolved(self, bucket: str, prefix: str, snapshot_id: str) -> None:
        """Announce the snapshot selected by the pointer object."""
        self._line(f"S3 Repository: {snapshot_id}")
        _LOGGER.info("snapshot_resolved", bucket=bucket, prefix=prefix, snapshot_id=snapshot_id)

    def snapshot_done(self, bucket: str, prefix: str, snapshot_id: str) -> None:
        """Announce that every object of the snapshot has been listed."""
        self._line(f"{bucket}{prefix} is done.")
        _LOGGER.info("snapshot_completed", bucket=bucket, prefix=prefix, snapshot_id=snapshot_id)

    def stage_timing(self, stage: str, elapsed_ms: int) -> None:
        """Print one stage timing line when profiling is enabled."""
        if not self._profiling_enabled:
            return
        self._line(f"{stage} in milliseconds:{elapsed_ms}")

    def run_statistics(self, statistics: RunStatistics) -> None:
        """Print accumulated run counters."""
        self._line(f"Documents processed: {statistics.documents_processed}")
        if not self._profiling_enabled:
            return
        for stage in _STAGE_ORDER:
            if stage in statistics.stage_milliseconds:
                total_ms = statistics.stage_milliseconds[stage]
                self._line(f"Total {stage} milliseconds: {total_ms}")

    def _line(self, text: str) -> None:
        print(text, file=self.output)


def _format_bool(value: bool) -> str:
    return "true" if value else "false"
