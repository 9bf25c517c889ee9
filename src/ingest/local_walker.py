"""Local directory discovery.

This module walks a folder tree depth-first and yields one document
reference per XML file, in the order the filesystem lists entries.
"""

from __future__ import annotations

import os
from functools import partial
from pathlib import Path
from typing import BinaryIO, Iterator

from core.constants import XML_FILE_SUFFIX
from core.errors import HarvestDiscoveryError
from core.reporting import PipelineReporter
from core.types import DocumentReference


def walk_xml_documents(
    root: str | Path,
    reporter: PipelineReporter | None = None,
) -> Iterator[DocumentReference]:
    """Yield XML documents found under a directory tree.

    Args:
        root: Directory to scan recursively.
        reporter: Optional reporter receiving per-directory completion notices.

    Yields:
        Document references for files ending in ``.xml`` (any case).

    Raises:
        HarvestDiscoveryError: If root is missing or not a directory.
    """
    root_path = Path(root).expanduser()
    if not root_path.exists():
        raise HarvestDiscoveryError(
            f"Failed to read XML folder at {root_path}: path does not exist. "
            "Provide an existing directory."
        )
    if not root_path.is_dir():
        raise HarvestDiscoveryError(
            f"Failed to read XML folder at {root_path}: path is not a directory. "
            "Provide a directory containing XML files."
        )
    yield from _walk_directory(root_path.resolve(), reporter)


def _walk_directory(
    directory: Path,
    reporter: PipelineReporter | None,
) -> Iterator[DocumentReference]:
    """Recurse into one directory in listing order."""
    for entry in _list_entries(directory):
        if entry.is_dir():
            yield from _walk_directory(Path(entry.path), reporter)
        elif entry.is_file() and _is_xml_name(entry.name):
            yield DocumentReference(key=entry.path, opener=partial(_open_file, entry.path))
    if reporter is not None:
        reporter.directory_done(str(directory))


def _list_entries(directory: Path) -> list[os.DirEntry[str]]:
    """Snapshot directory entries so no handle stays open while recursing."""
    try:
        with os.scandir(directory) as entries:
            return list(entries)
    except OSError as error:
        raise HarvestDiscoveryError(
            f"Failed to list directory {directory}: {error}. Check permissions and retry."
        ) from error


def _is_xml_name(name: str) -> bool:
    """Return whether a file name carries the XML suffix."""
    return name.lower().endswith(XML_FILE_SUFFIX)


def _open_file(path: str) -> BinaryIO:
    return open(path, "rb")
