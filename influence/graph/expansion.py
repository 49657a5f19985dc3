"""
frontier expansion engine - level-by-level walk out from the center work.

one side per call:
- references: center -> works it cites -> works those cite ...
- cited_by:   center -> works citing it -> works citing those ...

the per-level budget is split across the frontier so fan-out stays bounded
at depth 2-3, and every level is capped at `limit` new pairs overall.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from ..core.config import ExpansionConfig
from ..core.models import Work, GraphNode, GraphLink, NodeSide, LinkType, Direction
from .context import BuildContext

logger = logging.getLogger("influence.expansion")

LinkKey = Tuple[str, str, LinkType]

SIDE_FOR_TYPE = {
    LinkType.REFERENCES: (NodeSide.BACKWARD, Direction.BACKWARD),
    LinkType.CITED_BY: (NodeSide.FORWARD, Direction.FORWARD),
}


def influence_key(work: Work) -> Tuple[int, str]:
    """rank key: most cited first, then id ascending."""
    return (-work.cited_by_count, work.id)


def is_temporally_consistent(
    source_year: Optional[int],
    target_year: Optional[int],
    link_type: LinkType
) -> bool:
    """
    references point back in time, citations forward.
    unknown years are accepted.
    """
    if source_year is None or target_year is None:
        return True
    if link_type == LinkType.REFERENCES:
        return target_year <= source_year
    return target_year >= source_year


@dataclass
class SideResult:
    """nodes and links produced by one side of the expansion."""
    link_type: LinkType
    nodes: Dict[str, GraphNode] = field(default_factory=dict)
    links: Dict[LinkKey, GraphLink] = field(default_factory=dict)
    levels_expanded: int = 0

    def add_node(self, work: Work, side: NodeSide, depth: int):
        existing = self.nodes.get(work.id)
        if existing is None:
            self.nodes[work.id] = GraphNode(work=work, side=side, depth=depth)
        else:
            existing.merge(work, side, depth)

    def add_link(self, link: GraphLink):
        if link.key not in self.links:
            self.links[link.key] = link


class FrontierExpander:
    """
    bfs-style expansion of one side of the citation graph.
    all fetches go through the request's BuildContext.
    """

    def __init__(self, config: Optional[ExpansionConfig] = None):
        self.config = config or ExpansionConfig()

    async def expand(
        self,
        ctx: BuildContext,
        seed: Work,
        link_type: LinkType,
        depth: int,
        limit: int
    ) -> SideResult:
        """expand one side up to depth levels."""
        result = SideResult(link_type=link_type)
        side, direction = SIDE_FOR_TYPE[link_type]

        frontier = [seed.id]
        expanded = {seed.id}

        for level in range(1, depth + 1):
            if not frontier:
                break

            per_parent_limit = max(1, limit // len(frontier))
            logger.debug(
                f"[expansion] {link_type.value} level {level}: "
                f"{len(frontier)} parents, {per_parent_limit} per parent"
            )

            parents = await asyncio.gather(*(ctx.get_work(pid) for pid in frontier))
            candidates = await asyncio.gather(*(
                self._children(ctx, parent, link_type, per_parent_limit)
                for parent in parents if parent is not None
            ))

            pairs = self._select_pairs(candidates, limit)

            next_frontier = []
            queued = set()
            for parent, child in pairs:
                result.add_node(child, side, level)
                result.add_link(GraphLink(
                    source=parent.id,
                    target=child.id,
                    link_type=link_type,
                    direction=direction
                ))
                if child.id not in expanded and child.id not in queued:
                    queued.add(child.id)
                    next_frontier.append(child.id)

            result.levels_expanded = level
            logger.info(
                f"[expansion] {link_type.value} level {level}: "
                f"kept {len(pairs)} pairs, next frontier {len(next_frontier)}"
            )

            expanded.update(next_frontier)
            frontier = next_frontier

        return result

    def _select_pairs(
        self,
        candidates: List[Tuple[Work, List[Work]]],
        limit: int
    ) -> List[Tuple[Work, Work]]:
        """
        one pair per child (lowest parent id wins), then the level cap.
        result order is independent of fetch completion order.
        """
        best: Dict[str, Tuple[Work, Work]] = {}
        for parent, children in candidates:
            for child in children:
                current = best.get(child.id)
                if current is None or parent.id < current[0].id:
                    best[child.id] = (parent, child)

        ranked = sorted(best.values(), key=lambda pair: influence_key(pair[1]))
        return ranked[:limit]

    async def _children(
        self,
        ctx: BuildContext,
        parent: Work,
        link_type: LinkType,
        per_parent_limit: int
    ) -> Tuple[Work, List[Work]]:
        """fetch, filter and rank candidate children of one parent."""
        if link_type == LinkType.REFERENCES:
            ref_ids = parent.referenced_work_ids[:self.config.max_reference_candidates]
            # get_works keeps reference order; sorted() below is stable
            works = await ctx.get_works(ref_ids)
        else:
            fetch_limit = min(
                self.config.max_citer_candidates,
                per_parent_limit * self.config.citer_fetch_multiplier
            )
            works = await ctx.get_citers(parent.id, fetch_limit)

        accepted = [
            w for w in works
            if w.id != parent.id
            and is_temporally_consistent(parent.year, w.year, link_type)
        ]
        accepted = sorted(accepted, key=influence_key)
        return parent, accepted[:per_parent_limit]

