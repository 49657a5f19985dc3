"""
graph builder - entry point for building a citation graph around one work.

usage:
    async with OpenAlexSource() as source:
        builder = GraphBuilder(source)
        graph = await builder.build_graph("W2741809807", depth=2, limit=20)
        print(graph.to_dict())
"""

import asyncio
import logging
import math
import re
import time
from typing import Optional, Tuple, Any

from ..core.config import ExpansionConfig
from ..core.errors import BadWorkIdError, WorkNotFoundError
from ..core.identifiers import normalize
from ..core.models import Graph, LinkType
from ..providers.base import WorkSource
from .assembly import GraphAssembler
from .context import BuildContext
from .expansion import FrontierExpander

logger = logging.getLogger("influence.builder")

LEADING_INT = re.compile(r'^\s*([+-]?\d+)')


def clamp_integer(value: Any, minimum: int, maximum: int, fallback: int) -> int:
    """
    parse the leading integer of value and clamp it.
    non-numeric values give fallback.
    """
    if value is None or isinstance(value, bool):
        return fallback
    if isinstance(value, int):
        parsed = value
    elif isinstance(value, float):
        if math.isfinite(value):
            parsed = int(value)
        else:
            return fallback
    else:
        match = LEADING_INT.match(str(value))
        if not match:
            return fallback
        parsed = int(match.group(1))

    return min(maximum, max(minimum, parsed))


def parse_graph_params(
    depth: Any = None,
    limit: Any = None,
    config: Optional[ExpansionConfig] = None
) -> Tuple[int, int]:
    """clamp requested depth and limit into their allowed ranges."""
    config = config or ExpansionConfig()
    return (
        clamp_integer(depth, config.min_depth, config.max_depth, config.default_depth),
        clamp_integer(limit, config.min_limit, config.max_limit, config.default_limit)
    )


class GraphBuilder:
    """
    builds one graph per call.
    the source may be shared; all per-request state lives in a BuildContext.
    """

    def __init__(self, source: WorkSource, config: Optional[ExpansionConfig] = None):
        self.source = source
        self.config = config or ExpansionConfig()
        self.expander = FrontierExpander(self.config)
        self.assembler = GraphAssembler()

    async def build_graph(
        self,
        seed: str,
        depth: Any = None,
        limit: Any = None
    ) -> Graph:
        """
        resolve the seed, expand both sides concurrently, assemble.

        raises:
            BadWorkIdError: seed is not an OpenAlex work id (no I/O done)
            WorkNotFoundError: provider has no such work
            UpstreamError: any provider failure
        """
        work_id = normalize(seed)
        if not work_id:
            raise BadWorkIdError(seed)

        depth, limit = parse_graph_params(depth, limit, self.config)
        start = time.time()

        ctx = BuildContext(self.source)
        center = await ctx.get_work(work_id)
        if center is None:
            raise WorkNotFoundError(work_id)

        logger.info(f"[builder] building graph for {center.id} (depth={depth}, limit={limit})")

        references, citations = await asyncio.gather(
            self.expander.expand(ctx, center, LinkType.REFERENCES, depth, limit),
            self.expander.expand(ctx, center, LinkType.CITED_BY, depth, limit)
        )

        graph = self.assembler.assemble(center, [references, citations], depth, limit)

        logger.info(
            f"[builder] {center.id}: {len(graph.nodes)} nodes, {len(graph.links)} links "
            f"in {time.time() - start:.2f}s ({ctx.stats()['source_calls']} source calls)"
        )
        return graph


async def build_graph(
    source: WorkSource,
    seed: str,
    depth: Any = None,
    limit: Any = None,
    config: Optional[ExpansionConfig] = None
) -> Graph:
    """convenience wrapper around GraphBuilder."""
    return await GraphBuilder(source, config).build_graph(seed, depth, limit)
