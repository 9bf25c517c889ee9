"""Crosswalk collaborator contract and factory."""

from __future__ import annotations

from typing import BinaryIO, Protocol, TextIO

from core.config import HarvestConfig
from core.errors import HarvestConfigurationError
from core.types import Graph
from crosswalk.research_graph import ResearchGraphCrosswalk


class Crosswalk(Protocol):
    """Converts one XML document stream into a graph."""

    def process(self, stream: BinaryIO) -> Graph:
        """Convert one document."""

    def print_statistics(self, output: TextIO) -> None:
        """Print accumulated conversion statistics."""


def build_crosswalk(config: HarvestConfig) -> Crosswalk:
    """Build the crosswalk matching the configured XML type.

    Raises:
        HarvestConfigurationError: If the XML type is not supported.
    """
    if config.xml_type == "rg":
        return ResearchGraphCrosswalk(source_name=config.source_name, verbose=config.verbose)
    raise HarvestConfigurationError(
        f"Unsupported XML type '{config.xml_type}'. Use 'rg' for Research Graph XML."
    )
