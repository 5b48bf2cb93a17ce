"""Graph export helpers for JSON, DOT and plain-text views of a concept map."""

from __future__ import annotations

import json
from collections import deque
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from .concept_map import INFINITE_DISTANCE, ConceptMap
from .models import Edge, Node


def _view_subgraph(concept_map: ConceptMap) -> Tuple[List[Node], List[Edge]]:
    # Without an active node or selection the view is empty, so export everything.
    if concept_map.get_active_node() is None and not concept_map.get_selected_nodes():
        return concept_map.get_all_nodes(), concept_map.get_all_edges()
    return concept_map.get_visible_nodes(), concept_map.get_visible_edges()


def graph_payload(concept_map: ConceptMap) -> Dict[str, Any]:
    """Describe the current view as plain data for a visualization layer."""
    nodes, edges = _view_subgraph(concept_map)
    active = concept_map.get_active_node()
    selected = {node.id for node in concept_map.get_selected_nodes()}
    relationship = concept_map.get_active_relationship()

    node_payload = []
    for node in nodes:
        distance = concept_map.get_distance_from_active(node)
        node_payload.append({
            "id": node.id,
            "definition": node.definition,
            "distance": None if distance == INFINITE_DISTANCE else int(distance),
            "active": active is not None and active.id == node.id,
            "selected": node.id in selected,
        })

    return {
        "name": concept_map.name,
        "nodes": node_payload,
        "links": [
            {
                "id": edge.id,
                "source": edge.source.id,
                "target": edge.target.id,
                "label": edge.relationship,
                "highlighted": relationship is not None and edge.relationship == relationship,
            }
            for edge in edges
        ],
    }


def export_json(concept_map: ConceptMap, output_file: Optional[Path] = None) -> str:
    doc = json.dumps(graph_payload(concept_map), indent=2)
    if output_file is not None:
        output_file.write_text(doc, encoding="utf-8")
    return doc


def export_dot(concept_map: ConceptMap, output_file: Optional[Path] = None) -> str:
    """Render the current view as a Graphviz digraph."""
    nodes, edges = _view_subgraph(concept_map)
    active = concept_map.get_active_node()

    lines = [f'digraph "{_esc(concept_map.name)}" {{']
    lines.append("  rankdir=LR;")

    for node in nodes:
        attrs = [f'label="{_esc(node.id)}"']
        if node.definition:
            attrs.append(f'tooltip="{_esc(node.definition)}"')
        if active is not None and active.id == node.id:
            attrs.append("penwidth=2")
        lines.append(f'  "{_esc(node.id)}" [{", ".join(attrs)}];')

    for edge in edges:
        lines.append(
            f'  "{_esc(edge.source.id)}" -> "{_esc(edge.target.id)}" [label="{_esc(edge.relationship)}"];'
        )

    lines.append("}")
    doc = "\n".join(lines)
    if output_file is not None:
        output_file.write_text(doc, encoding="utf-8")
    return doc


def ascii_view(concept_map: ConceptMap) -> str:
    """Indented sketch of the neighbourhood around the active node.

    Walks breadth-first up to ``max_distance`` hops. Incoming edges are shown
    as ``<-rel-`` when the map is in bidirectional mode.
    """
    active = concept_map.get_active_node()
    if active is None:
        return "No active concept."

    bidirectional = concept_map.is_bidirectional()
    max_distance = concept_map.get_max_distance()
    edges = concept_map.get_all_edges()

    lines: List[str] = []
    queue = deque([(active, 0)])
    seen = {active.id}

    while queue:
        current, depth = queue.popleft()
        prefix = "  " * depth
        lines.append(f"{prefix}{current.id}")
        if depth >= max_distance:
            continue
        for edge in edges:
            if edge.source.id == current.id:
                nxt, arrow = edge.target, f"-{edge.relationship}->"
            elif bidirectional and edge.target.id == current.id:
                nxt, arrow = edge.source, f"<-{edge.relationship}-"
            else:
                continue
            lines.append(f"{prefix}  |{arrow} {nxt.id}")
            if nxt.id not in seen:
                seen.add(nxt.id)
                queue.append((nxt, depth + 1))
    return "\n".join(lines)


def _esc(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
