"""Neo4j graph importer.

This module merges crosswalk graphs into Neo4j through the official
driver. Every node carries one shared label with a unique key, so
nodes and relationship endpoints merge on the same index whichever
document mentions them first. The node type is added as a second
label. Each graph is written in one transaction.
"""

from __future__ import annotations

import re
import time
from collections import defaultdict
from typing import Any, TextIO

from core.constants import NEO4J_NODE_KEY_CONSTRAINT, NEO4J_NODE_LABEL
from core.errors import HarvestDependencyError, HarvestGraphImportError
from core.logging_config import get_logger
from core.types import Graph, GraphNode, GraphRelationship
from graph.statistics import ImportStatistics

_LOGGER = get_logger(__name__)
_UNSAFE_IDENTIFIER_CHARS = re.compile(r"[^A-Za-z0-9_]")


class Neo4jGraphImporter:
    """Driver-backed importer with per-run statistics."""

    def __init__(self, driver: Any, verbose: bool = False) -> None:
        self._driver = driver
        self._verbose = verbose
        self._statistics = ImportStatistics()
        self._constraint_ready = False

    @classmethod
    def connect(
        cls,
        uri: str,
        user: str,
        password: str | None,
        verbose: bool = False,
    ) -> "Neo4jGraphImporter":
        """Open a driver for a Neo4j URI.

        Raises:
            HarvestDependencyError: If the neo4j driver is not installed.
            HarvestGraphImportError: If the driver cannot be created.
        """
        try:
            from neo4j import GraphDatabase
        except ImportError as error:
            raise HarvestDependencyError(
                "Neo4j import requires the neo4j driver, but it is not installed. "
                "Install neo4j or point --neo4j at a local graph folder."
            ) from error
        auth = (user, password) if password else None
        try:
            driver = GraphDatabase.driver(uri, auth=auth)
        except Exception as error:
            raise HarvestGraphImportError(
                f"Failed to create Neo4j driver for {uri}: {error}. Check the URI and retry."
            ) from error
        return cls(driver, verbose=verbose)

    def import_graph(self, graph: Graph, profiling_enabled: bool = False) -> None:
        """Merge one graph in a single write transaction.

        Raises:
            HarvestGraphImportError: If the transaction fails.
        """
        started_at = time.monotonic()
        try:
            with self._driver.session() as session:
                self._ensure_key_constraint(session)
                session.execute_write(_write_graph, graph)
        except Exception as error:
            raise HarvestGraphImportError(
                f"Failed to import graph with {len(graph.nodes)} nodes into Neo4j: {error}."
            ) from error
        elapsed_ms = int((time.monotonic() - started_at) * 1000)
        self._statistics.record(graph, elapsed_ms)
        if self._verbose or profiling_enabled:
            _LOGGER.debug(
                "graph_imported",
                nodes=len(graph.nodes),
                relationships=len(graph.relationships),
                elapsed_ms=elapsed_ms,
            )

    def _ensure_key_constraint(self, session: Any) -> None:
        if self._constraint_ready:
            return
        session.run(
            f"CREATE CONSTRAINT {NEO4J_NODE_KEY_CONSTRAINT} IF NOT EXISTS "
            f"FOR (n:`{NEO4J_NODE_LABEL}`) REQUIRE n.key IS UNIQUE"
        ).consume()
        self._constraint_ready = True

    def print_statistics(self, output: TextIO) -> None:
        self._statistics.print_to("Neo4j", output)

    def close(self) -> None:
        self._driver.close()


def _write_graph(tx: Any, graph: Graph) -> None:
    """Run merge statements for one graph inside a transaction."""
    for label, rows in _group_nodes(graph.nodes).items():
        tx.run(
            f"UNWIND $rows AS row "
            f"MERGE (n:`{NEO4J_NODE_LABEL}` {{key: row.key}}) "
            f"SET n:`{label}` "
            f"SET n += row.properties, n.source = row.source",
            rows=rows,
        )
    for relation_type, rows in _group_relationships(graph.relationships).items():
        tx.run(
            f"UNWIND $rows AS row "
            f"MERGE (a:`{NEO4J_NODE_LABEL}` {{key: row.from_key}}) "
            f"MERGE (b:`{NEO4J_NODE_LABEL}` {{key: row.to_key}}) "
            f"MERGE (a)-[r:`{relation_type}`]->(b) "
            f"SET r += row.properties",
            rows=rows,
        )


def _group_nodes(nodes: tuple[GraphNode, ...]) -> dict[str, list[dict[str, object]]]:
    grouped: dict[str, list[dict[str, object]]] = defaultdict(list)
    for node in nodes:
        grouped[cypher_identifier(node.node_type)].append(
            {"key": node.key, "source": node.source, "properties": dict(node.properties)}
        )
    return grouped


def _group_relationships(
    relationships: tuple[GraphRelationship, ...],
) -> dict[str, list[dict[str, object]]]:
    grouped: dict[str, list[dict[str, object]]] = defaultdict(list)
    for relationship in relationships:
        grouped[cypher_identifier(relationship.relation_type)].append(
            {
                "from_key": relationship.from_key,
                "to_key": relationship.to_key,
                "properties": dict(relationship.properties),
            }
        )
    return grouped


def cypher_identifier(name: str) -> str:
    """Reduce a label or relationship type to characters safe inside backticks."""
    cleaned = _UNSAFE_IDENTIFIER_CHARS.sub("_", name.strip())
    return cleaned or "_"
