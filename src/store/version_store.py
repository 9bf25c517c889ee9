"""Version record persistence.

This module records the last harvested snapshot seen for each source.
Each record is one plain-text file named after the source whose whole
content is the snapshot identifier.
"""

from __future__ import annotations

from pathlib import Path

from core.constants import TEXT_ENCODING
from core.errors import HarvestStoreError
from core.logging_config import get_logger

_LOGGER = get_logger(__name__)


class VersionStore:
    """Filesystem-backed version pointer store."""

    def __init__(self, versions_folder: str | Path) -> None:
        self._versions_folder = Path(versions_folder).expanduser()

    def record_path(self, source_name: str) -> Path:
        """Return the version record path for a source."""
        return self._versions_folder / source_name

    def write_version(self, source_name: str, snapshot_id: str) -> Path:
        """Overwrite the version record for a source.

        Args:
            source_name: Harvest source name.
            snapshot_id: Resolved snapshot identifier.

        Returns:
            Path of the written record.

        Raises:
            HarvestStoreError: If the record cannot be written.
        """
        record_path = self.record_path(source_name)
        try:
            self._versions_folder.mkdir(parents=True, exist_ok=True)
            record_path.write_bytes(snapshot_id.encode(TEXT_ENCODING))
        except OSError as error:
            raise HarvestStoreError(
                f"Failed to write version record {record_path}: {error}. "
                "Check that the versions folder is writable and retry."
            ) from error
        _LOGGER.info(
            "version_recorded",
            source_name=source_name,
            snapshot_id=snapshot_id,
            record_path=str(record_path),
        )
        return record_path

    def read_version(self, source_name: str) -> str | None:
        """Read the recorded snapshot identifier, or None when absent."""
        record_path = self.record_path(source_name)
        if not record_path.exists():
            return None
        try:
            return record_path.read_bytes().decode(TEXT_ENCODING)
        except OSError as error:
            raise HarvestStoreError(
                f"Failed to read version record {record_path}: {error}."
            ) from error
