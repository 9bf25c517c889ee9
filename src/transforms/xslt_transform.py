"""XSLT document transform stage.

This module compiles an XSLT template once per run and applies it to
each source document, buffering the full output in memory before it is
handed to the crosswalk stage.
"""

from __future__ import annotations

import io
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

from lxml import etree

from core.errors import HarvestTransformError


@dataclass(frozen=True)
class TransformTemplate:
    """Compiled, reusable XSLT template.

    Attributes:
        path: Path the template was compiled from.
        xslt: Compiled lxml transform, applied once per document.
    """

    path: Path
    xslt: etree.XSLT


def compile_template(template_path: str | Path) -> TransformTemplate:
    """Compile an XSLT template from disk.

    Args:
        template_path: Path to the XSLT file.

    Returns:
        Compiled template.

    Raises:
        HarvestTransformError: If the file is missing or is not a valid stylesheet.
    """
    resolved_path = Path(template_path).expanduser().resolve()
    if not resolved_path.is_file():
        raise HarvestTransformError(
            f"XSLT template not found at {resolved_path}. Provide a valid --crosswalk path."
        )
    try:
        stylesheet = etree.parse(str(resolved_path), _build_parser())
        xslt = etree.XSLT(stylesheet)
    except (etree.XMLSyntaxError, etree.XSLTParseError) as error:
        raise HarvestTransformError(
            f"Failed to compile XSLT template {resolved_path}: {error}. "
            "Fix the stylesheet and retry."
        ) from error
    return TransformTemplate(path=resolved_path, xslt=xslt)


def apply_template(template: TransformTemplate, stream: BinaryIO) -> BinaryIO:
    """Transform one document and return the buffered result.

    Args:
        template: Compiled template.
        stream: Source document stream. The caller keeps ownership.

    Returns:
        In-memory stream holding the transformed document.

    Raises:
        HarvestTransformError: If the document is malformed or the transform fails.
    """
    try:
        document = etree.parse(stream, _build_parser())
        result = template.xslt(document)
    except etree.XMLSyntaxError as error:
        raise HarvestTransformError(
            f"Malformed XML input for template {template.path.name}: {error}."
        ) from error
    except etree.XSLTApplyError as error:
        raise HarvestTransformError(
            f"XSLT template {template.path.name} failed to apply: {error}."
        ) from error
    return io.BytesIO(bytes(result))


def _build_parser() -> etree.XMLParser:
    """Build a parser that never resolves external entities or fetches URLs."""
    return etree.XMLParser(resolve_entities=False, no_network=True)
