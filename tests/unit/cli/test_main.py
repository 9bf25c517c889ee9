"""Unit tests for CLI command handling."""

from __future__ import annotations

from pathlib import Path

import pytest

from cli.main import build_parser, main
from core.config import CONFIG_KEYS
from core.constants import ENV_PREFIX
from tests.fixture_paths import fixture_bytes, fixture_path


@pytest.fixture(autouse=True)
def _clear_harvest_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in CONFIG_KEYS:
        monkeypatch.delenv(f"{ENV_PREFIX}{key.upper()}", raising=False)


def test_cli_fails_fast_on_invalid_document(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """A document without a record key should abort the run with status 1."""
    graph_folder = tmp_path / "graph"
    args = ["--xml-folder", str(fixture_path("rg")), "--neo4j", str(graph_folder)]

    exit_code = main(args)
    output = capsys.readouterr().out.splitlines()

    assert exit_code == 1
    assert any(line.startswith("Processing file: ") for line in output)
    assert not any(line.startswith("Documents processed") for line in output)


def test_cli_imports_valid_documents(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """A folder of valid documents should import fully."""
    source = tmp_path / "xml"
    source.mkdir()
    (source / "researchers.xml").write_bytes(fixture_bytes("rg/researchers.xml"))
    graph_folder = tmp_path / "graph"

    exit_code = main(["--xml-folder", str(source), "--neo4j", str(graph_folder)])
    output = capsys.readouterr().out.splitlines()

    assert exit_code == 0
    assert "Local graph nodes imported: 2" in output
    assert (graph_folder / "nodes.jsonl").exists()


def test_cli_rerun_leaves_graph_folder_unchanged(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """Running the same import twice should not duplicate stored rows."""
    source = tmp_path / "xml"
    source.mkdir()
    (source / "researchers.xml").write_bytes(fixture_bytes("rg/researchers.xml"))
    graph_folder = tmp_path / "graph"
    args = ["--xml-folder", str(source), "--neo4j", str(graph_folder)]

    assert main(args) == 0
    first = (graph_folder / "nodes.jsonl").read_text(encoding="utf-8").splitlines()
    assert main(args) == 0
    second = (graph_folder / "nodes.jsonl").read_text(encoding="utf-8").splitlines()
    capsys.readouterr()

    assert len(second) == len(first) == 2


def test_cli_returns_one_for_missing_source(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """Configuration errors should exit with status 1 and a traceback."""
    exit_code = main(["--neo4j", str(tmp_path)])
    captured = capsys.readouterr()

    assert exit_code == 1 and "HarvestConfigurationError" in captured.err


def test_cli_reads_properties_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """Values from --config should drive the run."""
    source = tmp_path / "xml"
    source.mkdir()
    (source / "researchers.xml").write_bytes(fixture_bytes("rg/researchers.xml"))
    properties = tmp_path / "harvest.yaml"
    properties.write_text(
        f"xml_folder: {source}\nneo4j: {tmp_path / 'graph'}\nprofiling: true\n",
        encoding="utf-8",
    )

    exit_code = main(["--config", str(properties)])
    output = capsys.readouterr().out.splitlines()

    assert exit_code == 0
    assert "Profiling enabled: true" in output
    assert sum(line.startswith("completed in milliseconds:") for line in output) == 1


def test_parser_leaves_unset_flags_as_none() -> None:
    """Unset flags must not override file or environment values."""
    args = build_parser().parse_args([])

    assert args.verbose is None and args.profiling is None and args.source is None
