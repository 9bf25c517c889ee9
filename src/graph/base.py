"""Graph importer contract and factory."""

from __future__ import annotations

from typing import Protocol, TextIO
from urllib.parse import urlparse

from core.config import HarvestConfig
from core.constants import DEFAULT_NEO4J_USER, NEO4J_URI_SCHEMES
from core.errors import HarvestConfigurationError
from core.types import Graph
from graph.local_store import LocalGraphStore
from graph.neo4j_importer import Neo4jGraphImporter


class GraphImporter(Protocol):
    """Writes graphs into a graph database."""

    def import_graph(self, graph: Graph, profiling_enabled: bool = False) -> None:
        """Import one graph."""

    def print_statistics(self, output: TextIO) -> None:
        """Print accumulated import statistics."""

    def close(self) -> None:
        """Release database resources."""


def is_neo4j_uri(target: str) -> bool:
    """Return whether a graph target is a Neo4j driver URI."""
    return urlparse(target).scheme in NEO4J_URI_SCHEMES


def build_graph_importer(config: HarvestConfig) -> GraphImporter:
    """Build the importer addressed by the configured graph target.

    Args:
        config: Runtime configuration.

    Returns:
        Neo4j importer for driver URIs, else a local graph folder store.

    Raises:
        HarvestConfigurationError: If no graph target is configured.
        HarvestDependencyError: If the Neo4j driver is required but missing.
    """
    target = config.graph_target
    if not target:
        raise HarvestConfigurationError("Graph target can not be empty. Set --neo4j.")
    if is_neo4j_uri(target):
        return Neo4jGraphImporter.connect(
            uri=target,
            user=config.neo4j_user or DEFAULT_NEO4J_USER,
            password=config.neo4j_password,
            verbose=config.verbose,
        )
    return LocalGraphStore(target, verbose=config.verbose)
