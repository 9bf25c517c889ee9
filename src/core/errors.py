"""Harvest exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each pipeline stage raises a specific error type for debuggability.
"""

from __future__ import annotations


class HarvestError(Exception):
    """Base exception for all Harvest failures."""


class HarvestConfigurationError(HarvestError):
    """Raised for missing, conflicting, or invalid runtime configuration."""


class HarvestSnapshotResolutionError(HarvestError):
    """Raised when the latest harvested snapshot cannot be resolved."""


class HarvestDiscoveryError(HarvestError):
    """Raised when source documents cannot be enumerated."""


class HarvestTransformError(HarvestError):
    """Raised for XSLT compile and apply failures."""


class HarvestCrosswalkError(HarvestError):
    """Raised when a document cannot be converted into a graph."""


class HarvestGraphImportError(HarvestError):
    """Raised when a graph cannot be written to the graph database."""


class HarvestStoreError(HarvestError):
    """Raised for version record persistence failures."""


class HarvestDependencyError(HarvestError):
    """Raised when an optional runtime dependency is missing."""
