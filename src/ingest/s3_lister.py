"""S3 snapshot discovery.

This module resolves the latest harvested snapshot for a bucket/prefix
pair from its ``latest.txt`` pointer object, pages through the objects
stored under that snapshot folder, and records the snapshot identifier
once every page has been consumed.
"""

from __future__ import annotations

from functools import partial
from typing import Any, BinaryIO, Iterator

from core.constants import LATEST_POINTER_FILE_NAME, TEXT_ENCODING
from core.errors import HarvestDiscoveryError, HarvestSnapshotResolutionError
from core.reporting import PipelineReporter
from core.types import DocumentReference
from store.version_store import VersionStore


def resolve_latest_snapshot(s3_client: Any, bucket: str, prefix: str) -> str:
    """Read the snapshot identifier named by the pointer object.

    Args:
        s3_client: Boto3-compatible S3 client.
        bucket: Bucket holding harvested snapshots.
        prefix: Key prefix holding ``latest.txt``.

    Returns:
        Non-empty, whitespace-trimmed snapshot identifier.

    Raises:
        HarvestSnapshotResolutionError: If the pointer is missing, unreadable, or empty.
    """
    pointer_key = f"{prefix}/{LATEST_POINTER_FILE_NAME}"
    try:
        body = s3_client.get_object(Bucket=bucket, Key=pointer_key)["Body"]
        try:
            content = body.read().decode(TEXT_ENCODING)
        finally:
            body.close()
    except Exception as error:
        raise HarvestSnapshotResolutionError(
            f"Unable to read s3://{bucket}/{pointer_key}: {error}. "
            "Check that you have access to the S3 bucket and that harvesting has completed."
        ) from error
    snapshot_id = content.strip()
    if not snapshot_id:
        raise HarvestSnapshotResolutionError(
            f"Unable to find latest harvest in s3://{bucket}/{pointer_key}: "
            "the pointer object is empty. Check that harvesting has completed."
        )
    return snapshot_id


def snapshot_folder(prefix: str, snapshot_id: str) -> str:
    """Return the key prefix of one snapshot folder."""
    return f"{prefix}/{snapshot_id}/"


def list_snapshot_documents(
    s3_client: Any,
    bucket: str,
    prefix: str,
    version_store: VersionStore,
    source_name: str,
    reporter: PipelineReporter | None = None,
) -> Iterator[DocumentReference]:
    """Yield every document of the latest snapshot, then record its version.

    The version record is written only after the last page has been
    consumed. A failure, or a consumer that stops iterating early, leaves
    the previous record untouched.

    Args:
        s3_client: Boto3-compatible S3 client.
        bucket: Bucket holding harvested snapshots.
        prefix: Key prefix holding ``latest.txt`` and snapshot folders.
        version_store: Store receiving the resolved snapshot identifier.
        source_name: Source name keying the version record.
        reporter: Optional reporter for snapshot notices.

    Yields:
        Document references in listing and pagination order.

    Raises:
        HarvestSnapshotResolutionError: If the pointer object cannot be resolved.
        HarvestDiscoveryError: If a listing page cannot be fetched.
    """
    snapshot_id = resolve_latest_snapshot(s3_client, bucket, prefix)
    if reporter is not None:
        reporter.snapshot_resolved(bucket, prefix, snapshot_id)
    folder = snapshot_folder(prefix, snapshot_id)
    for key in _iter_object_keys(s3_client, bucket, folder):
        yield DocumentReference(key=key, opener=partial(_open_object, s3_client, bucket, key))
    version_store.write_version(source_name, snapshot_id)
    if reporter is not None:
        reporter.snapshot_done(bucket, prefix, snapshot_id)


def _iter_object_keys(s3_client: Any, bucket: str, folder: str) -> Iterator[str]:
    """Page through object keys under a folder with marker pagination."""
    marker: str | None = None
    while True:
        page = _list_page(s3_client, bucket, folder, marker)
        contents = page.get("Contents", [])
        for summary in contents:
            yield summary["Key"]
        if not page.get("IsTruncated", False):
            return
        marker = _next_marker(page, contents)
        if marker is None:
            raise HarvestDiscoveryError(
                f"Listing of s3://{bucket}/{folder} reported more results "
                "without a continuation marker."
            )


def _list_page(
    s3_client: Any,
    bucket: str,
    folder: str,
    marker: str | None,
) -> dict[str, Any]:
    """Fetch one listing page."""
    request: dict[str, str] = {"Bucket": bucket, "Prefix": folder}
    if marker is not None:
        request["Marker"] = marker
    try:
        return s3_client.list_objects(**request)
    except Exception as error:
        raise HarvestDiscoveryError(
            f"Failed to list s3://{bucket}/{folder}: {error}. "
            "Check AWS credentials and bucket permissions and retry."
        ) from error


def _next_marker(page: dict[str, Any], contents: list[dict[str, Any]]) -> str | None:
    """Return the marker for the next page.

    S3 only returns ``NextMarker`` when a delimiter is requested, so the
    last key of the current page stands in otherwise.
    """
    next_marker = page.get("NextMarker")
    if next_marker:
        return str(next_marker)
    if contents:
        return str(contents[-1]["Key"])
    return None


def _open_object(s3_client: Any, bucket: str, key: str) -> BinaryIO:
    try:
        return s3_client.get_object(Bucket=bucket, Key=key)["Body"]
    except Exception as error:
        raise HarvestDiscoveryError(
            f"Failed to fetch s3://{bucket}/{key}: {error}. "
            "Check AWS credentials and bucket permissions and retry."
        ) from error
