"""Rewrite rules that bring pre-3.0 diagram documents up to the current schema.

Every rule takes a document and returns ``(document, changed)``. Rules never
mutate the document they are given; touched records are copied and the root
is rebuilt only when something changed. Nodes are never removed or reordered
because edges refer to them by index. Edges may be dropped or merged.

The rules are order dependent and are applied as listed by :func:`default_rules`:

1. package nodes holding only free-text contents become description nodes
2. dependencies from a node to itself are dropped
3. dependencies get an explicit ``Unidirectional`` directionality
4. two dependencies between the same nodes merge into one bidirectional edge
5. the ``«interface»`` stereotype is removed from interface names
6. associations pointing at their start node are reversed
7. association directionalities are renamed to the current enumerators
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import partial
from typing import Callable, Dict, FrozenSet, List, Optional, Tuple

from .document import EDGES, NODES, Document, Record, is_type, records, replace_records
from .models import MigrationOptions

logger = logging.getLogger(__name__)

RuleOutcome = Tuple[Document, bool]

PACKAGE_NODE = "PackageNode"
PACKAGE_DESCRIPTION_NODE = "PackageDescriptionNode"
INTERFACE_NODE = "InterfaceNode"
DEPENDENCY_EDGE = "DependencyEdge"
ASSOCIATION_EDGE = "AssociationEdge"

UNIDIRECTIONAL = "Unidirectional"
BIDIRECTIONAL = "Bidirectional"
INTERFACE_STEREOTYPE = "«interface»"
LABEL_SEPARATOR = " + "

ASSOCIATION_RENAMES: Dict[str, str] = {
    "None": "Unspecified",
    "End": UNIDIRECTIONAL,
    "Both": BIDIRECTIONAL,
}


@dataclass(frozen=True)
class RewriteRule:
    """One named step of the migration pipeline."""

    name: str
    description: str
    apply: Callable[[Document], RuleOutcome]

    def __call__(self, document: Document) -> RuleOutcome:
        return self.apply(document)


def convert_package_nodes(document: Document) -> RuleOutcome:
    """Retag contents-only ``PackageNode`` records as ``PackageDescriptionNode``.

    A package with both ``contents`` and ``children`` stays a ``PackageNode``
    and its contents are lost at decode time.
    """
    changed = False
    nodes: List[Record] = []
    for index, node in enumerate(records(document, NODES)):
        if is_type(node, PACKAGE_NODE) and "contents" in node:
            if "children" in node:
                logger.warning(
                    "PackageNode %d has both contents and children; its contents will be dropped", index
                )
            else:
                node = {**node, "type": PACKAGE_DESCRIPTION_NODE}
                changed = True
        nodes.append(node)
    if not changed:
        return document, False
    return replace_records(document, NODES, nodes), True


def _is_self_dependency(edge: Record) -> bool:
    return is_type(edge, DEPENDENCY_EDGE) and "start" in edge and edge.get("start") == edge.get("end")


def remove_self_dependencies(document: Document) -> RuleOutcome:
    edges = records(document, EDGES)
    kept = [edge for edge in edges if not _is_self_dependency(edge)]
    if len(kept) == len(edges):
        return document, False
    logger.debug("Removed %d self dependencies", len(edges) - len(kept))
    return replace_records(document, EDGES, kept), True


def add_dependency_directionality(document: Document) -> RuleOutcome:
    """Give every dependency an explicit ``Unidirectional`` directionality.

    Old schemas had no such field. A value that is already present (a merged
    ``Bidirectional`` edge on a second pass) is kept. Reports a change whenever
    a dependency exists.
    """
    changed = False
    injected = False
    edges: List[Record] = []
    for edge in records(document, EDGES):
        if is_type(edge, DEPENDENCY_EDGE):
            if "directionality" not in edge:
                edge = {**edge, "directionality": UNIDIRECTIONAL}
                injected = True
            changed = True
        edges.append(edge)
    if injected:
        document = replace_records(document, EDGES, edges)
    return document, changed


def merge_dual_dependencies(document: Document) -> RuleOutcome:
    """Collapse dependencies that join the same two nodes into one bidirectional edge.

    The first dependency seen for an unordered pair of nodes is kept in place;
    each later one is dropped and its middle label appended to the keeper's.
    """
    changed = False
    keepers: Dict[FrozenSet[int], Record] = {}
    edges: List[Record] = []
    for edge in records(document, EDGES):
        if not is_type(edge, DEPENDENCY_EDGE):
            edges.append(edge)
            continue
        key = frozenset((edge.get("start"), edge.get("end")))
        keeper = keepers.get(key)
        if keeper is None:
            keeper = dict(edge)
            keepers[key] = keeper
            edges.append(keeper)
            continue
        keeper["directionality"] = BIDIRECTIONAL
        keeper["middleLabel"] = (
            f"{keeper.get('middleLabel', '')}{LABEL_SEPARATOR}{edge.get('middleLabel', '')}"
        )
        changed = True
    if not changed:
        return document, False
    return replace_records(document, EDGES, edges), True


def strip_interface_stereotype(document: Document) -> RuleOutcome:
    changed = False
    nodes: List[Record] = []
    for node in records(document, NODES):
        name = node.get("name") if is_type(node, INTERFACE_NODE) else None
        if isinstance(name, str) and INTERFACE_STEREOTYPE in name:
            node = {**node, "name": name.replace(INTERFACE_STEREOTYPE, "").strip()}
            changed = True
        nodes.append(node)
    if not changed:
        return document, False
    return replace_records(document, NODES, nodes), True


def flip_inverted_associations(document: Document) -> RuleOutcome:
    """Reverse associations whose arrow points at the start node."""
    changed = False
    edges: List[Record] = []
    for edge in records(document, EDGES):
        if is_type(edge, ASSOCIATION_EDGE) and edge.get("directionality") == "Start":
            edge = {**edge, "start": edge.get("end"), "end": edge.get("start"), "directionality": "End"}
            changed = True
        edges.append(edge)
    if not changed:
        return document, False
    return replace_records(document, EDGES, edges), True


def rename_association_directionality(
    document: Document, flag_every_association: bool = True
) -> RuleOutcome:
    """Map old association directionalities onto the current enumerators.

    With ``flag_every_association`` (the historical behaviour) any association
    counts as a change, renamed or not. Otherwise only actual renames do.
    """
    changed = False
    renamed = False
    edges: List[Record] = []
    for edge in records(document, EDGES):
        if is_type(edge, ASSOCIATION_EDGE):
            direction = edge.get("directionality")
            replacement = ASSOCIATION_RENAMES.get(direction) if isinstance(direction, str) else None
            if replacement is not None:
                edge = {**edge, "directionality": replacement}
                renamed = True
            changed = changed or renamed or flag_every_association
        edges.append(edge)
    if renamed:
        document = replace_records(document, EDGES, edges)
    return document, changed


def default_rules(options: Optional[MigrationOptions] = None) -> List[RewriteRule]:
    """The seven rules in the order they must run."""
    options = options or MigrationOptions()
    return [
        RewriteRule(
            "convert_package_nodes",
            "Contents-only PackageNode becomes PackageDescriptionNode",
            convert_package_nodes,
        ),
        RewriteRule(
            "remove_self_dependencies",
            "Drop DependencyEdge whose start and end are the same node",
            remove_self_dependencies,
        ),
        RewriteRule(
            "add_dependency_directionality",
            "Set directionality=Unidirectional on every DependencyEdge",
            add_dependency_directionality,
        ),
        RewriteRule(
            "merge_dual_dependencies",
            "Merge opposite DependencyEdges into one Bidirectional edge",
            merge_dual_dependencies,
        ),
        RewriteRule(
            "strip_interface_stereotype",
            "Remove «interface» from InterfaceNode names",
            strip_interface_stereotype,
        ),
        RewriteRule(
            "flip_inverted_associations",
            "Reverse AssociationEdge with directionality=Start",
            flip_inverted_associations,
        ),
        RewriteRule(
            "rename_association_directionality",
            "Rename None/End/Both to Unspecified/Unidirectional/Bidirectional",
            partial(rename_association_directionality, flag_every_association=options.flag_every_association),
        ),
    ]
