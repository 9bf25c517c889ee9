"""Unit tests for the Research Graph crosswalk."""

from __future__ import annotations

import io

import pytest

from core.config import HarvestConfig
from core.errors import HarvestConfigurationError, HarvestCrosswalkError
from crosswalk.base import build_crosswalk
from crosswalk.research_graph import ResearchGraphCrosswalk
from tests.fixture_paths import fixture_path


def test_process_converts_records_and_relations() -> None:
    """Records become nodes and relations become relationships."""
    crosswalk = ResearchGraphCrosswalk(source_name="orcid")

    with fixture_path("rg/researchers.xml").open("rb") as stream:
        graph = crosswalk.process(stream)

    assert [node.node_type for node in graph.nodes] == ["researcher", "dataset"]
    assert graph.relationships[0].relation_type == "relatedTo"


def test_process_keeps_record_source_and_properties() -> None:
    """Explicit record sources win; remaining fields become properties."""
    crosswalk = ResearchGraphCrosswalk(source_name="orcid")

    with fixture_path("rg/researchers.xml").open("rb") as stream:
        researcher, dataset = crosswalk.process(stream).nodes

    assert researcher.source == "orcid.org" and dataset.source == "orcid"
    assert researcher.properties["full_name"] == "Josiah Carberry"
    assert "key" not in researcher.properties


def test_process_raises_for_record_without_key() -> None:
    """Every record requires a key."""
    crosswalk = ResearchGraphCrosswalk()

    with fixture_path("rg/missing_key.xml").open("rb") as stream:
        with pytest.raises(HarvestCrosswalkError):
            crosswalk.process(stream)


def test_process_raises_for_malformed_xml() -> None:
    """Malformed documents should be crosswalk errors."""
    with pytest.raises(HarvestCrosswalkError):
        ResearchGraphCrosswalk().process(io.BytesIO(b"<registryObjects>"))


def test_process_defaults_missing_relation_label() -> None:
    """Relations without a label get the default relationship type."""
    document = (
        b"<registryObjects><relations><relation>"
        b"<from_key>a</from_key><to_uri>b</to_uri>"
        b"</relation></relations></registryObjects>"
    )

    graph = ResearchGraphCrosswalk().process(io.BytesIO(document))

    assert graph.relationships[0].relation_type == "related"


def test_print_statistics_counts_nodes_by_type() -> None:
    """Statistics should count documents, node types, and relationships."""
    crosswalk = ResearchGraphCrosswalk()
    for _ in range(2):
        with fixture_path("rg/researchers.xml").open("rb") as stream:
            crosswalk.process(stream)
    output = io.StringIO()

    crosswalk.print_statistics(output)

    assert output.getvalue().splitlines() == [
        "Crosswalk documents: 2",
        "Crosswalk nodes (dataset): 2",
        "Crosswalk nodes (researcher): 2",
        "Crosswalk relationships: 2",
    ]


def test_build_crosswalk_rejects_unknown_type() -> None:
    """Only the Research Graph document type is supported."""
    with pytest.raises(HarvestConfigurationError):
        build_crosswalk(HarvestConfig(xml_type="oai_dc"))
