"""In-memory concept map graph with distance-based view filtering.

A :class:`ConceptMap` owns its nodes and edges and a single
:class:`~cartograph.models.FilterState`. Navigation calls mutate that state in
place; ``get_visible_nodes`` / ``get_visible_edges`` answer what the current
view should show.
"""

from __future__ import annotations

import logging
import math
import random
from collections import deque
from typing import Any, Dict, List, Mapping, Optional, Set

from .models import Edge, FilterState, Node, ParsedDeclarations

logger = logging.getLogger(__name__)

INFINITE_DISTANCE = math.inf


class ConceptMap:
    """Labelled, directed concept graph plus its navigation state."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._nodes: Dict[str, Node] = {}
        self._edges: Dict[str, Edge] = {}
        self.filter_state = FilterState()

    def __repr__(self) -> str:
        return f"ConceptMap({self.name!r}, nodes={len(self._nodes)}, edges={len(self._edges)})"

    # ------------------------------------------------------------------
    # Graph operations
    # ------------------------------------------------------------------

    def add_node(self, node_id: str, definition: Optional[str] = None) -> Node:
        """Add a node, or update an existing node's definition when one is given."""
        existing = self._nodes.get(node_id)
        if existing is not None:
            if definition is not None:
                existing.definition = definition
            return existing

        node = Node(node_id, definition)
        self._nodes[node_id] = node
        return node

    def add_edge(self, source: Node, target: Node, relationship: str) -> Edge:
        """Register a new edge.

        An edge with the same derived id replaces the previous one; callers
        that must not overwrite are expected to deduplicate beforehand.
        """
        edge = Edge(source, target, relationship)
        self._edges[edge.id] = edge
        return edge

    def get_node(self, node_id: str) -> Optional[Node]:
        return self._nodes.get(node_id)

    def get_edge(self, edge_id: str) -> Optional[Edge]:
        return self._edges.get(edge_id)

    def get_all_nodes(self) -> List[Node]:
        return list(self._nodes.values())

    def get_all_edges(self) -> List[Edge]:
        return list(self._edges.values())

    def get_relationships(self) -> List[str]:
        """Distinct relationship labels, in first-seen order."""
        return list(dict.fromkeys(edge.relationship for edge in self._edges.values()))

    # ------------------------------------------------------------------
    # Navigation state
    # ------------------------------------------------------------------

    def set_active_node(self, node: Optional[Node]) -> None:
        self.filter_state.active_node = node

    def get_active_node(self) -> Optional[Node]:
        return self.filter_state.active_node

    def add_selected_node(self, node: Node) -> None:
        self.filter_state.selected_nodes.add(node)

    def remove_selected_node(self, node: Node) -> None:
        self.filter_state.selected_nodes.discard(node)

    def get_selected_nodes(self) -> List[Node]:
        return list(self.filter_state.selected_nodes)

    def set_max_distance(self, distance: int) -> None:
        self.filter_state.max_distance = max(0, distance)

    def get_max_distance(self) -> int:
        return self.filter_state.max_distance

    def set_bidirectional(self, bidirectional: bool) -> None:
        self.filter_state.bidirectional = bidirectional

    def is_bidirectional(self) -> bool:
        return self.filter_state.bidirectional

    def set_active_relationship(self, relationship: Optional[str]) -> None:
        # An empty label can never match an edge, so it means "no filter".
        self.filter_state.active_relationship = relationship or None

    def get_active_relationship(self) -> Optional[str]:
        return self.filter_state.active_relationship

    def apply_view_config(self, view: Mapping[str, Any]) -> None:
        """Apply ``max_distance`` / ``bidirectional`` settings from a config mapping."""
        if "max_distance" in view:
            self.set_max_distance(int(view["max_distance"]))
        if "bidirectional" in view:
            self.set_bidirectional(bool(view["bidirectional"]))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def _adjacency(self, bidirectional: bool) -> Dict[str, Set[str]]:
        adjacency: Dict[str, Set[str]] = {}
        for edge in self._edges.values():
            adjacency.setdefault(edge.source.id, set()).add(edge.target.id)
            if bidirectional:
                adjacency.setdefault(edge.target.id, set()).add(edge.source.id)
        return adjacency

    def _distances_from(self, start_id: str, bidirectional: bool) -> Dict[str, int]:
        adjacency = self._adjacency(bidirectional)
        distances = {start_id: 0}
        queue = deque([start_id])

        while queue:
            current = queue.popleft()
            for nxt in adjacency.get(current, ()):
                if nxt not in distances:
                    distances[nxt] = distances[current] + 1
                    queue.append(nxt)
        return distances

    def get_neighbors(self, node: Node) -> List[Node]:
        """Immediate neighbours of *node* under the current bidirectional setting."""
        neighbors: Dict[str, Node] = {}
        for edge in self._edges.values():
            if edge.source.id == node.id:
                neighbors.setdefault(edge.target.id, edge.target)
            if self.filter_state.bidirectional and edge.target.id == node.id:
                neighbors.setdefault(edge.source.id, edge.source)
        return list(neighbors.values())

    def get_distance_from_active(self, node: Node) -> float:
        """Shortest path length in edges from the active node.

        Returns :data:`INFINITE_DISTANCE` when there is no active node or no
        path.
        """
        active = self.filter_state.active_node
        if active is None:
            return INFINITE_DISTANCE
        distances = self._distances_from(active.id, self.filter_state.bidirectional)
        return distances.get(node.id, INFINITE_DISTANCE)

    def get_visible_nodes(self) -> List[Node]:
        state = self.filter_state
        if state.active_node is None and not state.selected_nodes:
            return []

        visible: Dict[str, Node] = {}

        if state.active_node is not None:
            visible[state.active_node.id] = state.active_node
            distances = self._distances_from(state.active_node.id, state.bidirectional)
            for node in self._nodes.values():
                if distances.get(node.id, INFINITE_DISTANCE) <= state.max_distance:
                    visible.setdefault(node.id, node)

        for selected in state.selected_nodes:
            visible.setdefault(selected.id, selected)
            for neighbor in self.get_neighbors(selected):
                visible.setdefault(neighbor.id, neighbor)

        if state.active_relationship is not None:
            endpoints: Set[str] = set()
            for edge in self._edges.values():
                if edge.relationship == state.active_relationship:
                    endpoints.add(edge.source.id)
                    endpoints.add(edge.target.id)
            return [node for node_id, node in visible.items() if node_id in endpoints]

        return list(visible.values())

    def get_visible_edges(self) -> List[Edge]:
        visible_ids = {node.id for node in self.get_visible_nodes()}
        relationship = self.filter_state.active_relationship
        return [
            edge
            for edge in self._edges.values()
            if edge.source.id in visible_ids
            and edge.target.id in visible_ids
            and (relationship is None or edge.relationship == relationship)
        ]

    # ------------------------------------------------------------------
    # Construction / export
    # ------------------------------------------------------------------

    @classmethod
    def from_parsed_declarations(cls, name: str, parsed: ParsedDeclarations) -> "ConceptMap":
        """Build a map from parser output.

        Only concepts referenced by a predicate become nodes; orphaned
        definitions are dropped.
        """
        concept_map = cls(name)

        concept_ids: Dict[str, None] = {}
        for predicate in parsed.predicates:
            concept_ids.setdefault(predicate.source)
            concept_ids.setdefault(predicate.target)

        for concept_id in concept_ids:
            concept_map.add_node(concept_id, parsed.definitions.get(concept_id))

        for predicate in parsed.predicates:
            concept_map.add_edge(
                concept_map._nodes[predicate.source],
                concept_map._nodes[predicate.target],
                predicate.relationship,
            )

        logger.info(
            "Built concept map '%s': %d nodes, %d edges",
            name, len(concept_map._nodes), len(concept_map._edges),
        )
        return concept_map

    def to_dsl(self) -> str:
        """Serialize edges and node definitions back to DSL text."""
        lines: List[str] = [
            f"{edge.source.id} -- {edge.relationship} -> {edge.target.id}"
            for edge in self._edges.values()
        ]
        if self._edges:
            lines.append("")

        for node in self._nodes.values():
            if node.definition:
                lines.extend([f"{node.id}:", node.definition, "---", ""])

        return "\n".join(lines).rstrip()


def select_random_node(concept_map: ConceptMap, rng: Optional[random.Random] = None) -> Optional[Node]:
    """Pick a random node to seed the view, or ``None`` for an empty map."""
    nodes = concept_map.get_all_nodes()
    if not nodes:
        return None
    return (rng or random).choice(nodes)
