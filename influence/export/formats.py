"""
graph exporter - JSON (response shape) and GraphML (for Gephi, Cytoscape).

usage:
    exporter = GraphExporter()
    exporter.to_json(graph, "graph.json")
    exporter.to_graphml(graph, "graph.graphml")
"""

import json
import logging
from typing import Dict, Any, Optional

import networkx as nx

from ..core.models import Graph

logger = logging.getLogger("influence.export")


class GraphExporter:
    """exports assembled graphs to various formats."""

    def to_json(self, graph: Graph, filepath: Optional[str] = None) -> Dict[str, Any]:
        """export graph to the {meta, nodes, links} JSON shape."""
        data = graph.to_dict()

        if filepath:
            with open(filepath, "w") as f:
                json.dump(data, f, indent=2)
            logger.info(f"exported JSON to {filepath}")

        return data

    def to_networkx(self, graph: Graph) -> nx.MultiDiGraph:
        """
        build a MultiDiGraph (one edge per link type) with flat attributes.
        lists are JSON-encoded and None values dropped (GraphML has no null).
        """
        g = nx.MultiDiGraph(center_id=graph.center_id, depth=graph.depth, limit=graph.limit)

        for node in graph.nodes:
            attrs = {}
            for key, value in node.to_dict().items():
                if key == "id" or value is None:
                    continue
                if isinstance(value, (list, dict)):
                    value = json.dumps(value)
                attrs[key] = value
            g.add_node(node.id, **attrs)

        for link in graph.links:
            g.add_edge(
                link.source,
                link.target,
                key=link.link_type.value,
                type=link.link_type.value,
                direction=link.direction.value
            )

        return g

    def to_graphml(self, graph: Graph, filepath: str):
        """export graph to GraphML."""
        nx.write_graphml(self.to_networkx(graph), filepath)
        logger.info(f"exported GraphML to {filepath}")
