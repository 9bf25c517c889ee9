"""Shared typed models.

This module defines the models passed between discovery, transform,
crosswalk, and graph import stages to keep interfaces explicit and stable.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import BinaryIO, Callable, Mapping, Union


@dataclass(frozen=True)
class RemoteSource:
    """Object-storage harvest source.

    Attributes:
        bucket: S3 bucket holding harvested snapshots.
        prefix: Key prefix holding ``latest.txt`` and snapshot folders.
    """

    bucket: str
    prefix: str


@dataclass(frozen=True)
class LocalSource:
    """Filesystem harvest source.

    Attributes:
        folder: Root directory scanned recursively for XML files.
    """

    folder: str


HarvestSource = Union[RemoteSource, LocalSource]


@dataclass(frozen=True)
class DocumentReference:
    """One discovered source document.

    Attributes:
        key: Object key or file path identifying the document.
        opener: Callable returning a fresh binary stream for the document.
    """

    key: str
    opener: Callable[[], BinaryIO]

    def open(self) -> BinaryIO:
        """Open the document content. The caller owns and closes the stream."""
        return self.opener()


@dataclass(frozen=True)
class GraphNode:
    """Graph node produced by crosswalk conversion.

    Attributes:
        key: Globally unique node key.
        node_type: Node label, e.g. ``researcher`` or ``dataset``.
        source: Harvest source name that produced the node.
        properties: String properties copied from the record.
    """

    key: str
    node_type: str
    source: str
    properties: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class GraphRelationship:
    """Directed relationship between two node keys."""

    from_key: str
    to_key: str
    relation_type: str
    properties: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class Graph:
    """Graph converted from one source document."""

    nodes: tuple[GraphNode, ...] = ()
    relationships: tuple[GraphRelationship, ...] = ()


@dataclass
class RunStatistics:
    """Per-run counters accumulated by the ingest pipeline.

    Attributes:
        documents_processed: Documents fully imported in this run.
        stage_milliseconds: Accumulated elapsed milliseconds per stage.
    """

    documents_processed: int = 0
    stage_milliseconds: dict[str, int] = field(default_factory=dict)

    def add_stage_time(self, stage: str, elapsed_ms: int) -> None:
        """Accumulate elapsed milliseconds for one stage."""
        self.stage_milliseconds[stage] = self.stage_milliseconds.get(stage, 0) + elapsed_ms
