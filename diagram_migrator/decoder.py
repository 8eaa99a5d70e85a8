"""Decode a current-schema document tree into typed diagram objects."""

from __future__ import annotations

from typing import Any, Dict, List

from .document import EDGES, NODES, Document, Record
from .errors import MalformedDocumentError
from .models import Diagram, Edge, Node

DEFAULT_DIAGRAM_TYPE = "ClassDiagram"

# Fields mapped onto dataclass attributes rather than kept in ``properties``.
_NODE_FIELDS = {"type", "name", "x", "y", "children", "id"}
_EDGE_FIELDS = {"type", "start", "end", "directionality", "middleLabel"}

# Properties that no longer exist in the current schema.
_DROPPED_PROPERTIES = {
    "PackageNode": {"contents"},
    "DependencyEdge": {"startLabel", "endLabel"},
}

# Directionality values accepted per edge type; other edge types are not checked.
DIRECTIONALITIES = {
    "DependencyEdge": {"Unidirectional", "Bidirectional"},
    "AssociationEdge": {"Unspecified", "Unidirectional", "Bidirectional"},
}


def decode(document: Document) -> Diagram:
    """Build a :class:`Diagram` from a document that conforms to the current schema.

    Raises:
        MalformedDocumentError: On a missing or mistyped field, an index that
            does not name a node, or an enumerator the current schema lacks.
    """
    raw_nodes = _array(document, NODES)
    raw_edges = _array(document, EDGES)
    diagram_type = document.get("diagram", DEFAULT_DIAGRAM_TYPE)
    if not isinstance(diagram_type, str):
        raise MalformedDocumentError("'diagram' must be a string")

    nodes = [_decode_node(index, record, len(raw_nodes)) for index, record in enumerate(raw_nodes)]
    edges = [_decode_edge(position, record, len(raw_nodes)) for position, record in enumerate(raw_edges)]
    return Diagram(diagram_type=diagram_type, nodes=nodes, edges=edges)


def _array(document: Document, key: str) -> List[Any]:
    if key not in document:
        raise MalformedDocumentError(f"Document has no '{key}' array")
    value = document[key]
    if not isinstance(value, list):
        raise MalformedDocumentError(f"'{key}' must be an array, got {type(value).__name__}")
    return value


def _record(value: Any, where: str) -> Record:
    if not isinstance(value, dict):
        raise MalformedDocumentError(f"{where} must be an object, got {type(value).__name__}")
    return value


def _string(record: Record, key: str, where: str, default: Any = None) -> str:
    value = record.get(key, default)
    if not isinstance(value, str):
        raise MalformedDocumentError(f"{where} field '{key}' must be a string")
    return value


def _integer(record: Record, key: str, where: str, default: Any = None) -> int:
    value = record.get(key, default)
    # bool is an int subclass but never a valid index or coordinate
    if not isinstance(value, int) or isinstance(value, bool):
        raise MalformedDocumentError(f"{where} field '{key}' must be an integer")
    return value


def _node_index(value: Any, node_count: int, where: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool) or not 0 <= value < node_count:
        raise MalformedDocumentError(f"{where} refers to unknown node {value!r}")
    return value


def _properties(record: Record, record_type: str, structural: set) -> Dict[str, Any]:
    dropped = _DROPPED_PROPERTIES.get(record_type, set())
    return {k: v for k, v in record.items() if k not in structural and k not in dropped}


def _decode_node(index: int, value: Any, node_count: int) -> Node:
    where = f"Node {index}"
    record = _record(value, where)
    node_type = _string(record, "type", where)
    children = record.get("children", [])
    if not isinstance(children, list):
        raise MalformedDocumentError(f"{where} field 'children' must be an array")
    return Node(
        index=index,
        node_type=node_type,
        name=_string(record, "name", where, default=""),
        x=_integer(record, "x", where, default=0),
        y=_integer(record, "y", where, default=0),
        children=[_node_index(child, node_count, f"{where} child") for child in children],
        properties=_properties(record, node_type, _NODE_FIELDS),
    )


def _decode_edge(position: int, value: Any, node_count: int) -> Edge:
    where = f"Edge {position}"
    record = _record(value, where)
    edge_type = _string(record, "type", where)
    directionality = _string(record, "directionality", where, default="")
    allowed = DIRECTIONALITIES.get(edge_type)
    if allowed is not None and directionality not in allowed:
        raise MalformedDocumentError(
            f"{where} ({edge_type}) has unsupported directionality {directionality!r}"
        )
    return Edge(
        edge_type=edge_type,
        start=_node_index(record.get("start"), node_count, f"{where} start"),
        end=_node_index(record.get("end"), node_count, f"{where} end"),
        directionality=directionality,
        middle_label=_string(record, "middleLabel", where, default=""),
        properties=_properties(record, edge_type, _EDGE_FIELDS),
    )
