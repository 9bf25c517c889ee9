"""Import counters shared by graph importers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TextIO

from core.types import Graph


@dataclass
class ImportStatistics:
    """Accumulated graph import counters."""

    graphs: int = 0
    nodes: int = 0
    relationships: int = 0
    milliseconds: int = 0

    def record(self, graph: Graph, elapsed_ms: int) -> None:
        """Count one imported graph."""
        self.graphs += 1
        self.nodes += len(graph.nodes)
        self.relationships += len(graph.relationships)
        self.milliseconds += elapsed_ms

    def print_to(self, label: str, output: TextIO) -> None:
        """Print counters prefixed with the importer label."""
        print(f"{label} graphs imported: {self.graphs}", file=output)
        print(f"{label} nodes imported: {self.nodes}", file=output)
        print(f"{label} relationships imported: {self.relationships}", file=output)
        print(f"{label} import milliseconds: {self.milliseconds}", file=output)
