"""Public SDK surface for Harvest.

This module provides a stable import path for programmatic runs.
It re-exports the pipeline entry points and typed models.
"""

from __future__ import annotations

from core.config import HarvestConfig, validate_config
from core.reporting import PipelineReporter
from core.types import (
    DocumentReference,
    Graph,
    GraphNode,
    GraphRelationship,
    LocalSource,
    RemoteSource,
    RunStatistics,
)
from crosswalk.research_graph import ResearchGraphCrosswalk
from graph.local_store import LocalGraphStore
from ingest.local_walker import walk_xml_documents
from ingest.pipeline import IngestContext, build_ingest_context, run_ingest
from ingest.s3_lister import list_snapshot_documents, resolve_latest_snapshot
from store.version_store import VersionStore
from transforms.xslt_transform import TransformTemplate, apply_template, compile_template

__all__ = [
    "DocumentReference",
    "Graph",
    "GraphNode",
    "GraphRelationship",
    "HarvestConfig",
    "IngestContext",
    "LocalGraphStore",
    "LocalSource",
    "PipelineReporter",
    "RemoteSource",
    "ResearchGraphCrosswalk",
    "RunStatistics",
    "TransformTemplate",
    "VersionStore",
    "apply_template",
    "build_ingest_context",
    "compile_template",
    "list_snapshot_documents",
    "resolve_latest_snapshot",
    "run_ingest",
    "validate_config",
    "walk_xml_documents",
]
