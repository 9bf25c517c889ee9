"""Core constants used across Harvest modules.

This module centralizes non-domain-specific constants.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

LATEST_POINTER_FILE_NAME = "latest.txt"
XML_FILE_SUFFIX = ".xml"
TEXT_ENCODING = "utf-8"
ENV_PREFIX = "HARVEST_"
DEFAULT_XML_TYPE = "rg"
SUPPORTED_XML_TYPES = ("rg",)
RELATIONS_ELEMENT_NAME = "relations"
RELATION_ELEMENT_NAME = "relation"
RECORD_KEY_FIELD = "key"
RECORD_SOURCE_FIELD = "source"
RELATION_FROM_FIELD = "from_key"
RELATION_TO_FIELD = "to_uri"
RELATION_LABEL_FIELD = "label"
DEFAULT_RELATION_TYPE = "related"
NEO4J_URI_SCHEMES = ("bolt", "bolt+s", "bolt+ssc", "neo4j", "neo4j+s", "neo4j+ssc")
DEFAULT_NEO4J_USER = "neo4j"
NEO4J_NODE_LABEL = "RGNode"
NEO4J_NODE_KEY_CONSTRAINT = "rg_node_key"
LOCAL_GRAPH_NODES_FILE_NAME = "nodes.jsonl"
LOCAL_GRAPH_RELATIONSHIPS_FILE_NAME = "relationships.jsonl"
STAGE_TRANSFORM = "transform"
STAGE_CROSSWALK = "crosswalk.process"
STAGE_IMPORT = "neo4j.importGraph"
STAGE_TOTAL = "completed"
