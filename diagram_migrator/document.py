"""Structured document tree: parsing, accessors, and serialization.

A document is the generic JSON view of a saved diagram: object records are
``dict`` (insertion ordered), arrays are ``list``, scalars are ``str``,
``int`` or ``bool``. The root record carries ``version``, ``nodes`` and
``edges``. Nodes are identified by their position in ``nodes``; edges refer
to them through integer ``start`` and ``end`` fields.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .errors import DocumentParseError
from .version import Version

logger = logging.getLogger(__name__)

Record = Dict[str, Any]
Document = Dict[str, Any]

NODES = "nodes"
EDGES = "edges"


def parse_document(text: str) -> Document:
    """Parse JSON text into a document tree.

    Raises:
        DocumentParseError: If the text is not JSON or its root is not an object.
    """
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise DocumentParseError(f"Invalid JSON at line {exc.lineno}, column {exc.colno}: {exc.msg}") from exc
    if not isinstance(payload, dict):
        raise DocumentParseError(f"Document root must be an object, got {type(payload).__name__}")
    return payload


def load_document(path: Path) -> Document:
    logger.debug("Reading diagram document %s", path)
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise DocumentParseError(f"{path} is not UTF-8 text") from exc
    return parse_document(text)


def dump_document(document: Document, version: Optional[Union[Version, str]] = None) -> str:
    """Serialize a document, optionally stamping it with ``version``."""
    if version is not None:
        document = {**document, "version": str(version)}
    return json.dumps(document, indent=2, ensure_ascii=False)


def save_document(document: Document, path: Path, version: Optional[Union[Version, str]] = None) -> None:
    path.write_text(dump_document(document, version) + "\n", encoding="utf-8")
    logger.info("Wrote %s", path)


# ------------------------------------------------------------------
# Accessors used by the rewrite rules
# ------------------------------------------------------------------

def records(document: Document, key: str) -> List[Record]:
    """Return the array stored under ``key``, or an empty list if there is none.

    Shape errors are left for the decoder to report.
    """
    value = document.get(key)
    if isinstance(value, list):
        return value
    return []


def replace_records(document: Document, key: str, values: List[Record]) -> Document:
    """Return a shallow copy of ``document`` with ``key`` set to ``values``."""
    updated = dict(document)
    updated[key] = values
    return updated


def is_type(record: Any, type_name: str) -> bool:
    return isinstance(record, dict) and record.get("type") == type_name
