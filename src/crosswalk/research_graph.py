"""Research Graph XML crosswalk.

This module converts Research Graph XML documents into graph models.
A document root holds collection elements (``researchers``, ``grants``,
``datasets``, ``publications`` and so on) whose children are records,
plus an optional ``relations`` collection linking record keys.
Namespaces are ignored and elements are matched by local name.
"""

from __future__ import annotations

from collections import Counter
from typing import BinaryIO, TextIO

from lxml import etree

from core.constants import (
    DEFAULT_RELATION_TYPE,
    RECORD_KEY_FIELD,
    RECORD_SOURCE_FIELD,
    RELATION_ELEMENT_NAME,
    RELATION_FROM_FIELD,
    RELATION_LABEL_FIELD,
    RELATION_TO_FIELD,
    RELATIONS_ELEMENT_NAME,
)
from core.errors import HarvestCrosswalkError
from core.logging_config import get_logger
from core.types import Graph, GraphNode, GraphRelationship

_LOGGER = get_logger(__name__)


class ResearchGraphCrosswalk:
    """Stateful Research Graph converter with per-run statistics."""

    def __init__(self, source_name: str | None = None, verbose: bool = False) -> None:
        self._source_name = source_name or ""
        self._verbose = verbose
        self._documents = 0
        self._node_counts: Counter[str] = Counter()
        self._relationship_count = 0

    def process(self, stream: BinaryIO) -> Graph:
        """Convert one document stream into a graph.

        Args:
            stream: XML document stream.

        Returns:
            Graph holding one node per record and one relationship per relation.

        Raises:
            HarvestCrosswalkError: If the XML is malformed or a record has no key.
        """
        try:
            root = etree.parse(stream, etree.XMLParser(resolve_entities=False, no_network=True))
        except etree.XMLSyntaxError as error:
            raise HarvestCrosswalkError(f"Failed to parse Research Graph XML: {error}.") from error
        nodes: list[GraphNode] = []
        relationships: list[GraphRelationship] = []
        for collection in _child_elements(root.getroot()):
            if _local_name(collection) == RELATIONS_ELEMENT_NAME:
                relationships.extend(self._convert_relations(collection))
            else:
                nodes.extend(self._convert_records(collection))
        self._documents += 1
        self._relationship_count += len(relationships)
        return Graph(nodes=tuple(nodes), relationships=tuple(relationships))

    def print_statistics(self, output: TextIO) -> None:
        """Print conversion counters."""
        print(f"Crosswalk documents: {self._documents}", file=output)
        for node_type, count in sorted(self._node_counts.items()):
            print(f"Crosswalk nodes ({node_type}): {count}", file=output)
        print(f"Crosswalk relationships: {self._relationship_count}", file=output)

    def _convert_records(self, collection: etree._Element) -> list[GraphNode]:
        nodes: list[GraphNode] = []
        for record in _child_elements(collection):
            node = self._convert_record(record)
            self._node_counts[node.node_type] += 1
            if self._verbose:
                _LOGGER.debug("crosswalk_record", key=node.key, node_type=node.node_type)
            nodes.append(node)
        return nodes

    def _convert_record(self, record: etree._Element) -> GraphNode:
        node_type = _local_name(record)
        properties = _element_fields(record)
        key = properties.pop(RECORD_KEY_FIELD, "")
        if not key:
            raise HarvestCrosswalkError(
                f"Record <{node_type}> at line {record.sourceline} has no <key>. "
                "Every Research Graph record requires a key."
            )
        source = properties.pop(RECORD_SOURCE_FIELD, "") or self._source_name
        return GraphNode(key=key, node_type=node_type, source=source, properties=properties)

    def _convert_relations(self, collection: etree._Element) -> list[GraphRelationship]:
        relationships: list[GraphRelationship] = []
        for relation in _child_elements(collection):
            if _local_name(relation) != RELATION_ELEMENT_NAME:
                continue
            fields = _element_fields(relation)
            from_key = fields.pop(RELATION_FROM_FIELD, "")
            to_key = fields.pop(RELATION_TO_FIELD, "")
            if not from_key or not to_key:
                raise HarvestCrosswalkError(
                    f"Relation at line {relation.sourceline} requires both "
                    f"<{RELATION_FROM_FIELD}> and <{RELATION_TO_FIELD}>."
                )
            relation_type = fields.pop(RELATION_LABEL_FIELD, "") or DEFAULT_RELATION_TYPE
            relationships.append(
                GraphRelationship(
                    from_key=from_key,
                    to_key=to_key,
                    relation_type=relation_type,
                    properties=fields,
                )
            )
        return relationships


def _child_elements(element: etree._Element) -> list[etree._Element]:
    """Return element children, skipping comments and processing instructions."""
    return [child for child in element if isinstance(child.tag, str)]


def _local_name(element: etree._Element) -> str:
    return etree.QName(element).localname


def _element_fields(element: etree._Element) -> dict[str, str]:
    """Map child local names to stripped text, keeping the first of repeated fields."""
    fields: dict[str, str] = {}
    for child in _child_elements(element):
        name = _local_name(child)
        if name in fields:
            continue
        fields[name] = (child.text or "").strip()
    return fields
