"""
graph assembly - merge both sides, re-check links, prune orphans, size nodes.
"""

import logging
import math
from typing import Dict, List, Optional

import networkx as nx

from ..core.models import Work, Graph, GraphNode, GraphLink, NodeSide
from .expansion import SideResult, LinkKey, is_temporally_consistent

logger = logging.getLogger("influence.assembly")


def compute_node_size(cited_by_count: Optional[int]) -> float:
    """log-compressed visual weight; rendering hint only."""
    count = max(0, cited_by_count or 0)
    return round(math.log10(count + 1) * 2.6 + 1.2, 3)


class GraphAssembler:
    """
    joins per-side expansion results into one Graph.

    steps:
    1. merge nodes (side lattice, min depth) and links (first key wins)
    2. drop links that are temporally inconsistent with the final records
    3. drop nodes not reachable from the center via surviving links
    4. attribute size
    """

    def assemble(
        self,
        center: Work,
        sides: List[SideResult],
        depth: int,
        limit: int
    ) -> Graph:
        nodes: Dict[str, GraphNode] = {
            center.id: GraphNode(work=center, side=NodeSide.CENTER, depth=0)
        }
        links: Dict[LinkKey, GraphLink] = {}

        for side in sides:
            for node in side.nodes.values():
                existing = nodes.get(node.id)
                if existing is None:
                    nodes[node.id] = GraphNode(work=node.work, side=node.side, depth=node.depth)
                else:
                    existing.merge(node.work, node.side, node.depth)
            for key, link in side.links.items():
                if key not in links:
                    links[key] = link

        valid_links = self._validate_links(nodes, links)
        reachable = self._reachable(center.id, nodes, valid_links)

        kept_nodes = [n for n in nodes.values() if n.id in reachable]
        kept_links = [
            l for l in valid_links
            if l.source in reachable and l.target in reachable
        ]

        for node in kept_nodes:
            node.size = compute_node_size(node.work.cited_by_count)

        dropped = len(nodes) - len(kept_nodes)
        if dropped or len(kept_links) != len(links):
            logger.info(
                f"[assembly] pruned {dropped} nodes, "
                f"{len(links) - len(kept_links)} links"
            )

        return Graph(
            center_id=center.id,
            depth=depth,
            limit=limit,
            nodes=kept_nodes,
            links=kept_links
        )

    def _validate_links(
        self,
        nodes: Dict[str, GraphNode],
        links: Dict[LinkKey, GraphLink]
    ) -> List[GraphLink]:
        """re-check temporal consistency against merged node records."""
        valid = []
        for link in links.values():
            source = nodes.get(link.source)
            target = nodes.get(link.target)
            if source is None or target is None:
                continue
            if not is_temporally_consistent(source.work.year, target.work.year, link.link_type):
                logger.debug(f"[assembly] dropping inconsistent link {link.source} -> {link.target}")
                continue
            valid.append(link)
        return valid

    def _reachable(
        self,
        center_id: str,
        nodes: Dict[str, GraphNode],
        links: List[GraphLink]
    ) -> set:
        """node ids reachable from the center along link direction."""
        g = nx.DiGraph()
        g.add_nodes_from(nodes)
        g.add_edges_from((l.source, l.target) for l in links)
        return {center_id} | nx.descendants(g, center_id)
