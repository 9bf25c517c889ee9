"""S3 client construction.

This module encapsulates boto3 session and client creation so
discovery code receives a ready client and stays testable with fakes.
"""

from __future__ import annotations

from typing import Any

from core.config import HarvestConfig
from core.errors import HarvestDependencyError


def create_s3_client(config: HarvestConfig) -> Any:
    """Create a boto3 S3 client.

    Credentials resolve through the default boto3 chain, which includes
    instance profiles on EC2 hosts.

    Args:
        config: Runtime config containing optional profile/region.

    Returns:
        Boto3 S3 client.

    Raises:
        HarvestDependencyError: If boto3 is missing.
    """
    try:
        import boto3
    except ImportError as error:
        raise HarvestDependencyError(
            "S3 discovery requires boto3, but it is not installed. "
            "Install boto3 to ingest from S3 buckets."
        ) from error
    session = boto3.session.Session(**_build_boto3_session_kwargs(config))
    return session.client("s3")


def _build_boto3_session_kwargs(config: HarvestConfig) -> dict[str, str]:
    """Build boto3 Session kwargs from config."""
    kwargs: dict[str, str] = {}
    if config.s3_profile:
        kwargs["profile_name"] = config.s3_profile
    if config.s3_region:
        kwargs["region_name"] = config.s3_region
    return kwargs
