"""Folder-backed graph store.

This module keeps imported nodes and relationships as JSON lines under
a local folder, one file per element kind. Nodes merge on their key and
relationships merge on their endpoints and type, so re-importing the
same documents leaves the stored graph unchanged.
"""

from __future__ import annotations

import json
import time
from dataclasses import asdict
from pathlib import Path
from typing import TextIO

from core.constants import (
    LOCAL_GRAPH_NODES_FILE_NAME,
    LOCAL_GRAPH_RELATIONSHIPS_FILE_NAME,
    TEXT_ENCODING,
)
from core.errors import HarvestGraphImportError
from core.logging_config import get_logger
from core.types import Graph, GraphNode, GraphRelationship
from graph.statistics import ImportStatistics

_LOGGER = get_logger(__name__)

NodeKey = str
RelationshipKey = tuple[str, str, str]


class LocalGraphStore:
    """JSONL graph store that merges by key."""

    def __init__(self, folder: str | Path, verbose: bool = False) -> None:
        self._folder = Path(folder).expanduser()
        self._verbose = verbose
        self._statistics = ImportStatistics()
        self._nodes: dict[NodeKey, dict[str, object]] | None = None
        self._relationships: dict[RelationshipKey, dict[str, object]] | None = None

    @property
    def nodes_path(self) -> Path:
        return self._folder / LOCAL_GRAPH_NODES_FILE_NAME

    @property
    def relationships_path(self) -> Path:
        return self._folder / LOCAL_GRAPH_RELATIONSHIPS_FILE_NAME

    def import_graph(self, graph: Graph, profiling_enabled: bool = False) -> None:
        """Merge one graph into the store and rewrite its files.

        Raises:
            HarvestGraphImportError: If the folder or files are unreadable
                or not writable.
        """
        started_at = time.monotonic()
        try:
            self._folder.mkdir(parents=True, exist_ok=True)
            nodes, relationships = self._load()
            for node in graph.nodes:
                _merge_node(nodes, node)
            for relationship in graph.relationships:
                _merge_relationship(relationships, relationship)
            _rewrite_rows(self.nodes_path, list(nodes.values()))
            _rewrite_rows(self.relationships_path, list(relationships.values()))
        except OSError as error:
            raise HarvestGraphImportError(
                f"Failed to write graph to {self._folder}: {error}. "
                "Check that the graph folder is writable and retry."
            ) from error
        elapsed_ms = int((time.monotonic() - started_at) * 1000)
        self._statistics.record(graph, elapsed_ms)
        if self._verbose or profiling_enabled:
            _LOGGER.debug(
                "graph_imported",
                folder=str(self._folder),
                nodes=len(graph.nodes),
                relationships=len(graph.relationships),
                elapsed_ms=elapsed_ms,
            )

    def print_statistics(self, output: TextIO) -> None:
        self._statistics.print_to("Local graph", output)

    def close(self) -> None:
        """Nothing to release; files are closed after every write."""

    def _load(
        self,
    ) -> tuple[dict[NodeKey, dict[str, object]], dict[RelationshipKey, dict[str, object]]]:
        if self._nodes is None or self._relationships is None:
            self._nodes = {
                str(row["key"]): row for row in _read_rows(self.nodes_path)
            }
            self._relationships = {
                _relationship_key(row): row for row in _read_rows(self.relationships_path)
            }
        return self._nodes, self._relationships


def _merge_node(nodes: dict[NodeKey, dict[str, object]], node: GraphNode) -> None:
    row = asdict(node)
    existing = nodes.get(node.key)
    if existing is not None:
        properties = dict(existing.get("properties") or {})
        properties.update(node.properties)
        row["properties"] = properties
    nodes[node.key] = row


def _merge_relationship(
    relationships: dict[RelationshipKey, dict[str, object]],
    relationship: GraphRelationship,
) -> None:
    row = asdict(relationship)
    key = _relationship_key(row)
    existing = relationships.get(key)
    if existing is not None:
        properties = dict(existing.get("properties") or {})
        properties.update(relationship.properties)
        row["properties"] = properties
    relationships[key] = row


def _relationship_key(row: dict[str, object]) -> RelationshipKey:
    return (str(row["from_key"]), str(row["to_key"]), str(row["relation_type"]))


def _read_rows(path: Path) -> list[dict[str, object]]:
    if not path.exists():
        return []
    rows: list[dict[str, object]] = []
    with path.open("r", encoding=TEXT_ENCODING) as handle:
        for line_number, line in enumerate(handle, start=1):
            if not line.strip():
                continue
            try:
                rows.append(json.loads(line))
            except json.JSONDecodeError as error:
                raise HarvestGraphImportError(
                    f"Graph file {path} has invalid JSON on line {line_number}: {error.msg}. "
                    "Repair or remove the file and retry."
                ) from error
    return rows


def _rewrite_rows(path: Path, rows: list[dict[str, object]]) -> None:
    temp_path = path.with_name(f"{path.name}.tmp")
    with temp_path.open("w", encoding=TEXT_ENCODING) as handle:
        for row in rows:
            handle.write(json.dumps(row, sort_keys=True))
            handle.write("\n")
    temp_path.replace(path)
