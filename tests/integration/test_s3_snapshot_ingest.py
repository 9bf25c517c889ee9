"""Integration tests for S3 snapshot ingest and version bookkeeping."""

from __future__ import annotations

import io
from pathlib import Path

import pytest

from core.config import HarvestConfig
from core.errors import HarvestCrosswalkError
from core.reporting import PipelineReporter
from ingest.pipeline import build_ingest_context, run_ingest
from store.version_store import VersionStore
from tests.fakes import FakeS3Client
from tests.fixture_paths import fixture_bytes


def _config(tmp_path: Path) -> HarvestConfig:
    return HarvestConfig(
        s3_bucket="rg-harvest",
        s3_prefix="orcid",
        source_name="orcid",
        versions_folder=str(tmp_path / "versions"),
        graph_target=str(tmp_path / "graph"),
    )


def _run(config: HarvestConfig, client: FakeS3Client) -> list[str]:
    output = io.StringIO()
    context = build_ingest_context(config, PipelineReporter(output=output), s3_client=client)
    run_ingest(context)
    return output.getvalue().splitlines()


def test_snapshot_ingest_records_version_and_is_repeatable(tmp_path: Path) -> None:
    """Two runs over one snapshot import everything and record the same version."""
    document = fixture_bytes("rg/researchers.xml")
    client = FakeS3Client(
        {
            "orcid/latest.txt": b"2021-01-01\n",
            "orcid/2021-01-01/part-0.xml": document,
            "orcid/2021-01-01/part-1.xml": document,
            "orcid/2020-12-01/stale.xml": b"<ignored/>",
        },
        page_size=1,
    )
    config = _config(tmp_path)
    store = VersionStore(tmp_path / "versions")

    first_output = _run(config, client)
    first_version = store.read_version("orcid")
    _run(config, client)

    assert first_version == store.read_version("orcid") == "2021-01-01"
    assert "Local graph graphs imported: 2" in first_output
    assert "rg-harvestorcid is done." in first_output


def test_snapshot_with_bad_document_keeps_previous_version(tmp_path: Path) -> None:
    """A failing document leaves the earlier version record in place."""
    store = VersionStore(tmp_path / "versions")
    store.write_version("orcid", "2020-12-01")
    client = FakeS3Client(
        {
            "orcid/latest.txt": b"2021-01-01",
            "orcid/2021-01-01/a.xml": fixture_bytes("rg/researchers.xml"),
            "orcid/2021-01-01/b.xml": fixture_bytes("rg/missing_key.xml"),
        }
    )

    with pytest.raises(HarvestCrosswalkError):
        _run(_config(tmp_path), client)

    assert store.read_version("orcid") == "2020-12-01"
