"""Core data models shared by the DSL parser and the concept map graph."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set


# ---------------------------------------------------------------------------
# Parser output
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Predicate:
    source: str
    relationship: str
    target: str

    @property
    def key(self) -> str:
        return f"{self.source}--{self.relationship}-->{self.target}"


@dataclass
class ParseError:
    line: int
    column: int
    message: str
    kind: str = "syntax"  # "syntax" | "semantic"


@dataclass
class ParseWarning:
    line: int
    column: int
    message: str
    kind: str  # "orphaned_definition" | "missing_definition"


@dataclass
class ParsedDeclarations:
    """Result of one ``parse_dsl`` call.

    When ``errors`` is non-empty the parse was aborted and ``predicates``,
    ``definitions`` and ``warnings`` are all empty.
    """

    predicates: List[Predicate] = field(default_factory=list)
    definitions: Dict[str, str] = field(default_factory=dict)
    errors: List[ParseError] = field(default_factory=list)
    warnings: List[ParseWarning] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


# ---------------------------------------------------------------------------
# Graph entities
# ---------------------------------------------------------------------------

@dataclass(unsafe_hash=True)
class Node:
    """A concept in the graph. Equality and hashing use ``id`` only."""

    id: str
    definition: Optional[str] = field(default=None, compare=False)

    def __str__(self) -> str:
        return f"Node({self.id})"


@dataclass(frozen=True)
class Edge:
    source: Node
    target: Node
    relationship: str

    @property
    def id(self) -> str:
        return f"{self.source.id}--{self.relationship}-->{self.target.id}"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Edge):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __str__(self) -> str:
        return f"Edge({self.source.id} --{self.relationship}--> {self.target.id})"


@dataclass
class FilterState:
    """Navigation state driving the filtered view of one concept map."""

    active_node: Optional[Node] = None
    max_distance: int = 2
    selected_nodes: Set[Node] = field(default_factory=set)
    bidirectional: bool = True
    active_relationship: Optional[str] = None
