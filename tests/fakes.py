"""Shared test doubles for S3, crosswalk, and graph import collaborators."""

from __future__ import annotations

import io
from typing import BinaryIO, TextIO

from core.errors import HarvestCrosswalkError
from core.types import Graph, GraphNode


class FakeNoSuchKey(Exception):
    """Stands in for a botocore NoSuchKey client error."""


class TrackingBody(io.BytesIO):
    """Object body that remembers whether it was closed."""


class FakeS3Client:
    """In-memory S3 client supporting get_object and list_objects.

    When ``pages`` is given, listing calls return those key pages in order
    and record the markers they received. Otherwise keys are served from
    ``objects`` in sorted order, ``page_size`` keys per page.
    """

    def __init__(
        self,
        objects: dict[str, bytes],
        page_size: int = 1000,
        pages: list[list[str]] | None = None,
        send_next_marker: bool = False,
        list_error: Exception | None = None,
    ) -> None:
        self.objects = dict(objects)
        self.page_size = page_size
        self.pages = pages
        self.send_next_marker = send_next_marker
        self.list_error = list_error
        self.list_calls: list[dict[str, str]] = []
        self.opened_bodies: dict[str, TrackingBody] = {}

    def get_object(self, Bucket: str, Key: str) -> dict[str, BinaryIO]:
        if Key not in self.objects:
            raise FakeNoSuchKey(f"NoSuchKey: {Bucket}/{Key}")
        body = TrackingBody(self.objects[Key])
        self.opened_bodies[Key] = body
        return {"Body": body}

    def list_objects(self, **request: str) -> dict[str, object]:
        self.list_calls.append(dict(request))
        if self.list_error is not None:
            raise self.list_error
        if self.pages is not None:
            return self._scripted_page(len(self.list_calls) - 1)
        prefix = request["Prefix"]
        marker = request.get("Marker", "")
        keys = sorted(key for key in self.objects if key.startswith(prefix) and key > marker)
        page_keys = keys[: self.page_size]
        truncated = len(keys) > self.page_size
        return self._page(page_keys, truncated)

    def _scripted_page(self, index: int) -> dict[str, object]:
        assert self.pages is not None
        truncated = index < len(self.pages) - 1
        return self._page(self.pages[index], truncated)

    def _page(self, keys: list[str], truncated: bool) -> dict[str, object]:
        page: dict[str, object] = {
            "Contents": [{"Key": key, "Size": 1} for key in keys],
            "IsTruncated": truncated,
        }
        if truncated and self.send_next_marker and keys:
            page["NextMarker"] = keys[-1]
        return page


class RecordingCrosswalk:
    """Crosswalk that records raw payloads and emits one node per document."""

    def __init__(self, fail_on: bytes | None = None) -> None:
        self.fail_on = fail_on
        self.payloads: list[bytes] = []
        self.statistics_printed = False

    def process(self, stream: BinaryIO) -> Graph:
        payload = stream.read()
        self.payloads.append(payload)
        if self.fail_on is not None and self.fail_on in payload:
            raise HarvestCrosswalkError("recording crosswalk rejected document")
        key = f"doc-{len(self.payloads)}"
        return Graph(nodes=(GraphNode(key=key, node_type="document", source="test"),))

    def print_statistics(self, output: TextIO) -> None:
        self.statistics_printed = True
        print(f"Recording crosswalk documents: {len(self.payloads)}", file=output)


class RecordingImporter:
    """Graph importer that keeps imported graphs in memory."""

    def __init__(self) -> None:
        self.graphs: list[Graph] = []
        self.profiling_flags: list[bool] = []
        self.statistics_printed = False
        self.closed = False

    def import_graph(self, graph: Graph, profiling_enabled: bool = False) -> None:
        self.graphs.append(graph)
        self.profiling_flags.append(profiling_enabled)

    def print_statistics(self, output: TextIO) -> None:
        self.statistics_printed = True
        print(f"Recording importer graphs: {len(self.graphs)}", file=output)

    def close(self) -> None:
        self.closed = True
