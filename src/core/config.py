"""Runtime configuration model for Harvest.

This module owns all configuration parsing and validation.
Values resolve from CLI overrides, an optional YAML properties file,
and ``HARVEST_*`` environment variables, in that order of precedence.
Other modules consume a typed config object instead of raw lookups.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, cast

import yaml

from core.constants import DEFAULT_XML_TYPE, ENV_PREFIX, SUPPORTED_XML_TYPES
from core.errors import HarvestConfigurationError

CONFIG_KEYS = (
    "s3_bucket",
    "s3_prefix",
    "xml_folder",
    "xml_type",
    "source",
    "crosswalk",
    "versions_folder",
    "verbose",
    "profiling",
    "neo4j",
    "s3_region",
    "s3_profile",
    "neo4j_user",
    "neo4j_password",
)
_TRUE_VALUES = ("true", "1", "yes", "on")
_FALSE_VALUES = ("false", "0", "no", "off", "")


@dataclass(frozen=True)
class HarvestConfig:
    """Validated runtime configuration.

    Attributes:
        s3_bucket: Bucket holding harvested snapshots.
        s3_prefix: Key prefix holding ``latest.txt`` and snapshot folders.
        xml_folder: Local folder scanned when no bucket is configured.
        xml_type: Crosswalk document type tag.
        source_name: Harvest source name used for nodes and version records.
        crosswalk_path: Optional XSLT template applied before conversion.
        versions_folder: Folder receiving one version record per source.
        verbose: Whether collaborators emit per-record diagnostics.
        profiling: Whether per-stage timing lines are printed.
        graph_target: Neo4j URI or local graph folder.
        s3_region: Optional AWS region for boto3 session initialization.
        s3_profile: Optional AWS profile for boto3 session initialization.
        neo4j_user: Neo4j user for driver authentication.
        neo4j_password: Optional Neo4j password; no auth when omitted.
    """

    s3_bucket: str | None = None
    s3_prefix: str | None = None
    xml_folder: str | None = None
    xml_type: str = DEFAULT_XML_TYPE
    source_name: str | None = None
    crosswalk_path: str | None = None
    versions_folder: str | None = None
    verbose: bool = False
    profiling: bool = False
    graph_target: str | None = None
    s3_region: str | None = None
    s3_profile: str | None = None
    neo4j_user: str | None = None
    neo4j_password: str | None = None

    @property
    def uses_object_storage(self) -> bool:
        """Return whether both bucket and prefix are configured."""
        return bool(self.s3_bucket) and bool(self.s3_prefix)

    @classmethod
    def from_sources(
        cls,
        overrides: Mapping[str, object] | None = None,
        properties_file: str | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> "HarvestConfig":
        """Build config from CLI overrides, a properties file, and environment.

        Args:
            overrides: Highest-precedence values, usually parsed CLI flags.
                ``None`` values are treated as unset.
            properties_file: Optional YAML mapping of configuration keys.
            environ: Environment mapping, defaults to ``os.environ``.

        Returns:
            A parsed config object. Call ``validate_config`` before use.

        Raises:
            HarvestConfigurationError: If values cannot be parsed.
        """
        environment = os.environ if environ is None else environ
        values: dict[str, object] = {}
        for key in CONFIG_KEYS:
            env_value = environment.get(f"{ENV_PREFIX}{key.upper()}")
            if env_value:
                values[key] = env_value
        if properties_file:
            values.update(_load_properties_file(properties_file))
        for key, value in (overrides or {}).items():
            if value is not None and key in CONFIG_KEYS:
                values[key] = value
        return cls(
            s3_bucket=_optional_string(values.get("s3_bucket")),
            s3_prefix=_normalize_prefix(_optional_string(values.get("s3_prefix"))),
            xml_folder=_optional_string(values.get("xml_folder")),
            xml_type=_optional_string(values.get("xml_type")) or DEFAULT_XML_TYPE,
            source_name=_optional_string(values.get("source")),
            crosswalk_path=_optional_string(values.get("crosswalk")),
            versions_folder=_optional_string(values.get("versions_folder")),
            verbose=_parse_bool(values.get("verbose"), "verbose"),
            profiling=_parse_bool(values.get("profiling"), "profiling"),
            graph_target=_optional_string(values.get("neo4j")),
            s3_region=_optional_string(values.get("s3_region")),
            s3_profile=_optional_string(values.get("s3_profile")),
            neo4j_user=_optional_string(values.get("neo4j_user")),
            neo4j_password=_optional_string(values.get("neo4j_password")),
        )


def validate_config(config: HarvestConfig) -> None:
    """Validate cross-field configuration rules at startup.

    Args:
        config: Parsed configuration.

    Raises:
        HarvestConfigurationError: If source selection or required folders are invalid.
    """
    if not config.graph_target:
        raise HarvestConfigurationError(
            "Graph target can not be empty. "
            "Set --neo4j to a bolt:// or neo4j:// URI, or to a local graph folder."
        )
    if bool(config.s3_bucket) != bool(config.s3_prefix):
        raise HarvestConfigurationError(
            "S3 discovery requires both bucket and prefix. "
            "Provide --s3-bucket together with --s3-prefix."
        )
    if config.uses_object_storage and config.xml_folder:
        raise HarvestConfigurationError(
            "Both S3 bucket/prefix and an XML folder were provided. "
            "Please provide either S3 Bucket and prefix OR a path to a XML Folder."
        )
    if not config.uses_object_storage and not config.xml_folder:
        raise HarvestConfigurationError(
            "No harvest source configured. "
            "Please provide either S3 Bucket and prefix OR a path to a XML Folder."
        )
    if config.uses_object_storage:
        _require_version_settings(config)
    if config.xml_type not in SUPPORTED_XML_TYPES:
        raise HarvestConfigurationError(
            f"Unsupported XML type '{config.xml_type}'. "
            f"Supported types: {', '.join(SUPPORTED_XML_TYPES)}."
        )


def _require_version_settings(config: HarvestConfig) -> None:
    if not config.source_name:
        raise HarvestConfigurationError(
            "S3 discovery requires a source name for the version record. Set --source."
        )
    if not config.versions_folder:
        raise HarvestConfigurationError(
            "S3 discovery requires a versions folder for the version record. "
            "Set --versions-folder."
        )


def _load_properties_file(properties_file: str) -> dict[str, object]:
    """Load a YAML properties mapping from disk.

    Args:
        properties_file: Path to a YAML file.

    Returns:
        Mapping of known configuration keys to raw values.

    Raises:
        HarvestConfigurationError: If the file is missing, unreadable, or not a mapping.
    """
    properties_path = Path(properties_file).expanduser().resolve()
    if not properties_path.exists():
        raise HarvestConfigurationError(
            f"Properties file does not exist at {properties_path}. "
            "Provide a valid YAML file path with --config."
        )
    try:
        payload = cast(object, yaml.safe_load(properties_path.read_text(encoding="utf-8")))
    except OSError as error:
        raise HarvestConfigurationError(
            f"Failed to read properties file at {properties_path}: {error}. "
            "Check file permissions and retry."
        ) from error
    except yaml.YAMLError as error:
        raise HarvestConfigurationError(
            f"Failed to parse properties file at {properties_path}: {error}. "
            "Fix YAML syntax and retry."
        ) from error
    if payload is None:
        return {}
    if not isinstance(payload, Mapping):
        raise HarvestConfigurationError(
            f"Invalid properties file at {properties_path}: expected a mapping of keys to values."
        )
    unknown_keys = sorted(str(key) for key in payload if key not in CONFIG_KEYS)
    if unknown_keys:
        raise HarvestConfigurationError(
            f"Unsupported keys in properties file {properties_path}: {', '.join(unknown_keys)}. "
            f"Supported keys: {', '.join(CONFIG_KEYS)}."
        )
    return {str(key): value for key, value in payload.items()}


def _optional_string(value: object) -> str | None:
    """Normalize a raw value into a stripped string or None."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _normalize_prefix(prefix: str | None) -> str | None:
    """Drop trailing slashes so keys join as ``<prefix>/<name>``."""
    if prefix is None:
        return None
    return prefix.rstrip("/") or None


def _parse_bool(value: object, key: str) -> bool:
    """Parse a boolean configuration value.

    Args:
        value: Raw value from flags, file, or environment.
        key: Configuration key for error context.

    Returns:
        Parsed boolean, ``False`` when unset.

    Raises:
        HarvestConfigurationError: If value is not a recognized boolean.
    """
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    normalized = str(value).strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise HarvestConfigurationError(
        f"Invalid value for {key}: expected true or false, got '{value}'."
    )
