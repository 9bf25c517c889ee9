"""Discovery strategy selection.

This module resolves the configured harvest source into one variant
at startup and maps that variant onto its document iterator.
"""

from __future__ import annotations

from typing import Any, Iterator

from core.config import HarvestConfig
from core.errors import HarvestConfigurationError
from core.reporting import PipelineReporter
from core.s3_client import create_s3_client
from core.types import DocumentReference, HarvestSource, LocalSource, RemoteSource
from ingest.local_walker import walk_xml_documents
from ingest.s3_lister import list_snapshot_documents
from store.version_store import VersionStore


def resolve_source(config: HarvestConfig) -> HarvestSource:
    """Select the harvest source described by configuration.

    Object storage wins only when both bucket and prefix are set.

    Raises:
        HarvestConfigurationError: If neither source kind is configured.
    """
    if config.uses_object_storage:
        return RemoteSource(bucket=str(config.s3_bucket), prefix=str(config.s3_prefix))
    if config.xml_folder:
        return LocalSource(folder=config.xml_folder)
    raise HarvestConfigurationError(
        "Please provide either S3 Bucket and prefix OR a path to a XML Folder."
    )


def discover_documents(
    source: HarvestSource,
    config: HarvestConfig,
    reporter: PipelineReporter,
    s3_client: Any | None = None,
) -> Iterator[DocumentReference]:
    """Return the document iterator for a harvest source.

    Args:
        source: Resolved source variant.
        config: Runtime configuration.
        reporter: Reporter receiving discovery notices.
        s3_client: Optional preconfigured S3 client, created from config when omitted.

    Returns:
        Lazy iterator over document references in discovery order.

    Raises:
        HarvestConfigurationError: If a remote source lacks version settings.
    """
    if isinstance(source, LocalSource):
        return walk_xml_documents(source.folder, reporter)
    if not config.source_name or not config.versions_folder:
        raise HarvestConfigurationError(
            "S3 discovery requires --source and --versions-folder for the version record."
        )
    client = s3_client if s3_client is not None else create_s3_client(config)
    return list_snapshot_documents(
        client,
        source.bucket,
        source.prefix,
        VersionStore(config.versions_folder),
        config.source_name,
        reporter,
    )
