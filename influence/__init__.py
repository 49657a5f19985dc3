"""
influence - bounded citation graphs around a single work.
"""

from .core.config import InfluenceConfig
from .core.errors import InfluenceError, BadWorkIdError, WorkNotFoundError, UpstreamError
from .core.models import Work, Graph, GraphNode, GraphLink, NodeSide, LinkType, Direction
from .graph.builder import GraphBuilder, build_graph, parse_graph_params
from .providers.openalex import OpenAlexSource
from .search.resolver import WorkResolver, resolve_work
from .export.formats import GraphExporter

__version__ = "1.0.0"

__all__ = [
    "InfluenceConfig",
    "InfluenceError",
    "BadWorkIdError",
    "WorkNotFoundError",
    "UpstreamError",
    "Work",
    "Graph",
    "GraphNode",
    "GraphLink",
    "NodeSide",
    "LinkType",
    "Direction",
    "GraphBuilder",
    "build_graph",
    "parse_graph_params",
    "OpenAlexSource",
    "WorkResolver",
    "resolve_work",
    "GraphExporter"
]
