"""
Graph Document Codec
====================

Graph <-> JSON-shaped document.

CURRENT FORM (version 1):
    {"format": "mindgraph.graph", "version": 1,
     "nodes": {id: {"type", "position": {"x", "y"}, "data", "selected"}},
     "edges": {id: {"source", "target", "type", "data", "selected"}}}

Object key order carries sequence order.

LEGACY FORM (accepted on decode only):
    {"nodes": [{"id", "type", ...}], "edges": [{"id", ...}]}
    Node type "editable" or missing -> generic; edge type missing -> the
    caller's default (plain unless told otherwise).

Decoding is all-or-nothing: any error fails the whole document.
Failure codes: DUPLICATE_ID for a repeated node or edge id,
PAYLOAD_TYPE_MISMATCH for node data that does not fit its type,
UNSUPPORTED_VERSION for a newer writer, MALFORMED_DOCUMENT otherwise.
"""

from __future__ import annotations
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple
import json
import math

from ..contracts.base import EdgeType, Error, ErrorCode, NodeType, Position, Result
from ..contracts.graph import Edge, EdgeData, Graph, Node
from ..contracts.payloads import payload_from_dict

DOCUMENT_FORMAT = "mindgraph.graph"
DOCUMENT_VERSION = 1

_LEGACY_NODE_TYPES = {"editable": NodeType.GENERIC}
_LEGACY_EDGE_TYPES = {"default": EdgeType.PLAIN}


class GraphDocumentEncoder(json.JSONEncoder):
    """
    JSON encoder for graph documents.

    RULES:
    1. Enums use their .value
    2. Sets become sorted lists (deterministic output)
    3. Objects with to_dict() use it
    """

    def default(self, obj: Any) -> Any:
        if isinstance(obj, Enum):
            return obj.value
        if isinstance(obj, (set, frozenset)):
            return sorted(obj)
        if hasattr(obj, "to_dict"):
            return obj.to_dict()
        return super().default(obj)


# =============================================================================
# ENCODING
# =============================================================================

def encode_node(node: Node) -> Dict[str, Any]:
    return {
        "type": node.node_type.value,
        "position": {"x": node.position.x, "y": node.position.y},
        "data": node.data.to_dict(),
        "selected": node.selected,
    }


def encode_edge(edge: Edge) -> Dict[str, Any]:
    data = {} if edge.data.label is None else {"label": edge.data.label}
    return {
        "source": edge.source,
        "target": edge.target,
        "type": edge.edge_type.value,
        "data": data,
        "selected": edge.selected,
    }


def encode_graph(graph: Graph) -> Dict[str, Any]:
    """Graph -> version 1 document. Edge ids are assumed unique."""
    return {
        "format": DOCUMENT_FORMAT,
        "version": DOCUMENT_VERSION,
        "nodes": {n.node_id: encode_node(n) for n in graph.nodes},
        "edges": {e.edge_id: encode_edge(e) for e in graph.edges},
    }


def dumps_graph(graph: Graph, indent: Optional[int] = None) -> str:
    return json.dumps(encode_graph(graph), cls=GraphDocumentEncoder, indent=indent, ensure_ascii=False)


# =============================================================================
# DECODING
# =============================================================================

def _malformed(message: str) -> Result:
    return Result.failure(Error(code=ErrorCode.MALFORMED_DOCUMENT, message=message))


class _Rejected(ValueError):
    """A decode failure with a code more specific than MALFORMED_DOCUMENT."""

    def __init__(self, code: ErrorCode, message: str, key: str, value: Any):
        super().__init__(message)
        self.code = code
        self.key = key
        self.value = value

    def to_error(self) -> Error:
        return Error(code=self.code, message=str(self)).with_context(self.key, str(self.value))


def _unique(ids: List[Any], what: str) -> None:
    seen = set()
    for item_id in ids:
        if item_id in seen:
            raise _Rejected(ErrorCode.DUPLICATE_ID, f"Duplicate {what} id: {item_id!r}", f"{what}_id", item_id)
        seen.add(item_id)


def _number(value: Any, key: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"'{key}' must be a number")
    if not math.isfinite(value):
        raise ValueError(f"'{key}' must be finite")
    return value


def _position(raw: Any) -> Position:
    if raw is None:
        return Position.origin()
    if not isinstance(raw, Mapping):
        raise ValueError("'position' must be an object")
    return Position(x=_number(raw.get("x", 0), "x"), y=_number(raw.get("y", 0), "y"))


def _node_type(raw: Any, legacy: bool) -> NodeType:
    if raw is None and legacy:
        return NodeType.GENERIC
    if legacy and raw in _LEGACY_NODE_TYPES:
        return _LEGACY_NODE_TYPES[raw]
    return NodeType(raw)


def _edge_type(raw: Any, legacy: bool, default: EdgeType) -> EdgeType:
    if raw is None:
        return default
    if legacy and raw in _LEGACY_EDGE_TYPES:
        return _LEGACY_EDGE_TYPES[raw]
    return EdgeType(raw)


def _decode_node(node_id: Any, raw: Any, legacy: bool) -> Node:
    if not isinstance(raw, Mapping):
        raise ValueError(f"Node {node_id!r} must be an object")
    node_type = _node_type(raw.get("type"), legacy)
    try:
        data = payload_from_dict(node_type, raw.get("data"))
    except (ValueError, TypeError) as e:
        raise _Rejected(
            ErrorCode.PAYLOAD_TYPE_MISMATCH,
            f"Node {node_id!r} data does not fit type {node_type.value!r}: {e}",
            "node_id", node_id,
        ) from None
    return Node(
        node_id=node_id,
        position=_position(raw.get("position")),
        node_type=node_type,
        data=data,
        selected=bool(raw.get("selected", False)),
    )


def _decode_edge(edge_id: Any, raw: Any, legacy: bool, default_type: EdgeType) -> Edge:
    if not isinstance(raw, Mapping):
        raise ValueError(f"Edge {edge_id!r} must be an object")
    source, target = raw.get("source"), raw.get("target")
    if not isinstance(source, str) or not isinstance(target, str):
        raise ValueError(f"Edge {edge_id!r} needs string source and target")
    data = raw.get("data") or {}
    if not isinstance(data, Mapping):
        raise ValueError(f"Edge {edge_id!r} data must be an object")
    label = data.get("label")
    if label is not None and not isinstance(label, str):
        raise ValueError(f"Edge {edge_id!r} label must be a string")
    return Edge(
        edge_id=edge_id,
        source=source,
        target=target,
        edge_type=_edge_type(raw.get("type"), legacy, default_type),
        data=EdgeData(label=label),
        selected=bool(raw.get("selected", False)),
    )


def _entries(raw: Any, what: str) -> Tuple[List[Tuple[Any, Any]], bool]:
    """(id, record) pairs plus whether the collection used the legacy list form."""
    if isinstance(raw, Mapping):
        return list(raw.items()), False
    if isinstance(raw, list):
        pairs = []
        for item in raw:
            if not isinstance(item, Mapping):
                raise ValueError(f"Each {what} entry must be an object")
            pairs.append((item.get("id"), item))
        return pairs, True
    raise ValueError(f"'{what}' must be an object or a list")


def decode_graph(document: Any, default_edge_type: EdgeType = EdgeType.PLAIN) -> Result:
    """
    Document -> Result[Graph].

    Failure codes: DUPLICATE_ID, PAYLOAD_TYPE_MISMATCH and
    UNSUPPORTED_VERSION as named; MALFORMED_DOCUMENT for any other
    shape problem.
    """
    if not isinstance(document, Mapping):
        return _malformed("Graph document must be an object")

    version = document.get("version")
    if version is not None and version != DOCUMENT_VERSION:
        return Result.failure(Error(
            code=ErrorCode.UNSUPPORTED_VERSION,
            message=f"Unsupported graph document version: {version!r}",
        ))

    try:
        node_entries, legacy_nodes = _entries(document.get("nodes", []), "nodes")
        edge_entries, legacy_edges = _entries(document.get("edges", []), "edges")
        nodes = [_decode_node(i, raw, legacy_nodes) for i, raw in node_entries]
        edges = [_decode_edge(i, raw, legacy_edges, default_edge_type) for i, raw in edge_entries]
        _unique([n.node_id for n in nodes], "node")
        _unique([e.edge_id for e in edges], "edge")
        graph = Graph(nodes=tuple(nodes), edges=tuple(edges))
    except _Rejected as e:
        return Result.failure(e.to_error())
    except (ValueError, TypeError, KeyError) as e:
        return _malformed(f"Malformed graph document: {e}")

    return Result.success(graph)


def loads_graph(text: str, default_edge_type: EdgeType = EdgeType.PLAIN) -> Result:
    try:
        document = json.loads(text)
    except (ValueError, TypeError) as e:
        return _malformed(f"Graph document is not valid JSON: {e}")
    return decode_graph(document, default_edge_type)
