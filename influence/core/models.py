"""
core data models for influence.
works, graph nodes and links for a single graph-build request.
"""

from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any, Tuple
from enum import Enum


class NodeSide(Enum):
    """which side of the center a node was reached from."""
    CENTER = "center"
    BACKWARD = "backward"  # reached via references
    FORWARD = "forward"    # reached via citing works
    BOTH = "both"          # reached from both sides

    def merge(self, other: "NodeSide") -> "NodeSide":
        """widen side when a node is reached along another path."""
        if self is NodeSide.CENTER or other is NodeSide.CENTER:
            return NodeSide.CENTER
        if self is other:
            return self
        return NodeSide.BOTH


class LinkType(Enum):
    """types of links in the graph."""
    REFERENCES = "references"  # source cites target
    CITED_BY = "cited_by"      # source is cited by target


class Direction(Enum):
    """traversal direction a link was discovered in."""
    BACKWARD = "backward"
    FORWARD = "forward"


@dataclass(frozen=True)
class Work:
    """
    canonical work record, normalized from provider data.
    immutable once fetched.
    """
    id: str                               # https://openalex.org/W...
    title: str = "Untitled"
    year: Optional[int] = None
    cited_by_count: int = 0
    authors: Tuple[str, ...] = ()         # at most 8, authorship order
    venue: str = "Unknown venue"
    canonical_url: str = ""
    referenced_work_ids: Tuple[str, ...] = ()
    doi: Optional[str] = None

    @property
    def short_id(self) -> str:
        return self.id.rsplit("/", 1)[-1]

    def summary(self) -> Dict[str, Any]:
        """short form used by the resolve endpoint."""
        return {
            "id": self.id,
            "title": self.title,
            "year": self.year,
            "cited_by_count": self.cited_by_count
        }


@dataclass
class GraphNode:
    """work plus traversal metadata."""
    work: Work
    side: NodeSide
    depth: int
    size: float = 0.0

    @property
    def id(self) -> str:
        return self.work.id

    def merge(self, work: Work, side: NodeSide, depth: int):
        """fold another sighting of the same work into this node."""
        self.work = work
        self.side = self.side.merge(side)
        self.depth = min(self.depth, depth)

    def to_dict(self) -> Dict[str, Any]:
        w = self.work
        return {
            "id": w.id,
            "title": w.title,
            "year": w.year,
            "cited_by_count": w.cited_by_count,
            "authors": list(w.authors),
            "venue": w.venue,
            "canonical_url": w.canonical_url,
            "doi": w.doi,
            "side": self.side.value,
            "depth": self.depth,
            "size": self.size
        }


@dataclass(frozen=True)
class GraphLink:
    """directed link between two works."""
    source: str
    target: str
    link_type: LinkType
    direction: Direction

    @property
    def key(self) -> Tuple[str, str, LinkType]:
        return (self.source, self.target, self.link_type)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source": self.source,
            "target": self.target,
            "type": self.link_type.value,
            "direction": self.direction.value
        }


@dataclass
class Graph:
    """assembled citation graph around a center work."""
    center_id: str
    depth: int
    limit: int
    nodes: List[GraphNode] = field(default_factory=list)
    links: List[GraphLink] = field(default_factory=list)

    @property
    def center(self) -> Optional[GraphNode]:
        for node in self.nodes:
            if node.side is NodeSide.CENTER:
                return node
        return None

    def get_node(self, work_id: str) -> Optional[GraphNode]:
        for node in self.nodes:
            if node.id == work_id:
                return node
        return None

    def to_dict(self) -> Dict[str, Any]:
        """serialize to the response shape."""
        return {
            "meta": {
                "centerId": self.center_id,
                "depth": self.depth,
                "limit": self.limit
            },
            "nodes": [n.to_dict() for n in self.nodes],
            "links": [l.to_dict() for l in self.links]
        }
