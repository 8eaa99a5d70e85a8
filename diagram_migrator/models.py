"""Core data models shared by the decoder, the migrator, and the CLI."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

from .version import Version


@dataclass
class Node:
    index: int
    node_type: str
    name: str = ""
    x: int = 0
    y: int = 0
    children: List[int] = field(default_factory=list)
    properties: Dict[str, Any] = field(default_factory=dict)


@dataclass
class Edge:
    edge_type: str
    start: int
    end: int
    directionality: str = ""
    middle_label: str = ""
    properties: Dict[str, Any] = field(default_factory=dict)


@dataclass
class Diagram:
    diagram_type: str
    nodes: List[Node] = field(default_factory=list)
    edges: List[Edge] = field(default_factory=list)

    def nodes_of_type(self, node_type: str) -> List[Node]:
        return [n for n in self.nodes if n.node_type == node_type]

    def edges_of_type(self, edge_type: str) -> List[Edge]:
        return [e for e in self.edges if e.edge_type == edge_type]


@dataclass(frozen=True)
class MigrationOptions:
    """Tunable migration behaviour, loaded from ``[migration]`` in the config file."""

    # Report every association as migrated, renamed or not (historical behaviour).
    flag_every_association: bool = True


@dataclass
class MigrationResult:
    """A decoded diagram together with how it was loaded."""

    diagram: Diagram
    version: Version
    migrated: bool
    applied_rules: List[str] = field(default_factory=list)
    document: Dict[str, Any] = field(default_factory=dict)

    @property
    def summary(self) -> str:
        if not self.migrated:
            return f"Version {self.version}: no migration needed."
        return f"Migrated from version {self.version} ({len(self.applied_rules)} rule(s) applied)."
