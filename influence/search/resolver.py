"""
work resolver - turn a user query into a single work.

supported input types:
- OpenAlex ID: "W2741809807" or "https://openalex.org/W2741809807"
- DOI: "10.1038/nature12373" or "https://doi.org/10.1038/nature12373"
- Title: "Attention Is All You Need" (search + title overlap scoring)

usage:
    resolver = WorkResolver(source)
    work = await resolver.resolve("10.1038/nature12373")
"""

import logging
import re
from typing import List, Optional, Set

from ..core.identifiers import normalize_work_id, normalize_doi
from ..core.models import Work
from ..providers.base import WorkSource

logger = logging.getLogger("influence.search.resolver")

TOKEN_SPLIT = re.compile(r'\s+')
NON_ALNUM = re.compile(r'[^a-z0-9\s]')

# title overlap dominates, citation count breaks near-ties
TITLE_WEIGHT = 10000


def tokenize(text: Optional[str]) -> List[str]:
    """lowercase alphanumeric tokens."""
    cleaned = NON_ALNUM.sub(" ", (text or "").lower())
    return [t for t in TOKEN_SPLIT.split(cleaned) if t]


def title_match_score(query: str, title: str) -> float:
    """fraction of distinct query tokens present in the title."""
    query_tokens: Set[str] = set(tokenize(query))
    title_tokens: Set[str] = set(tokenize(title))
    if not query_tokens or not title_tokens:
        return 0.0
    return len(query_tokens & title_tokens) / len(query_tokens)


def choose_best_match(query: str, works: List[Work]) -> Optional[Work]:
    """highest title overlap, then most cited; provider order on full ties."""
    if not works:
        return None

    def score(work: Work):
        s = title_match_score(query, work.title) * TITLE_WEIGHT + work.cited_by_count
        return (s, work.cited_by_count)

    # max() keeps the first of equal elements
    return max(works, key=score)


class WorkResolver:
    """resolve ids, DOIs and titles to works."""

    def __init__(self, source: WorkSource, search_limit: int = 5):
        self.source = source
        self.search_limit = search_limit

    async def resolve(self, query: Optional[str]) -> Optional[Work]:
        """resolve a query to one work, or None."""
        query = (query or "").strip()
        if not query:
            return None

        work_id = normalize_work_id(query)
        if work_id:
            logger.debug(f"[resolver] openalex id {work_id}")
            return await self.source.fetch_by_id(work_id)

        doi = normalize_doi(query)
        if doi:
            work = await self.source.fetch_by_doi(doi)
            if work:
                logger.debug(f"[resolver] doi {doi} -> {work.id}")
                return work
            logger.info(f"[resolver] no match for doi {doi}, falling back to search")

        candidates = await self.source.search(query, self.search_limit)
        best = choose_best_match(query, candidates)
        if best:
            logger.info(f"[resolver] '{query[:60]}' -> {best.id} ({len(candidates)} candidates)")
        return best


async def resolve_work(source: WorkSource, query: Optional[str]) -> Optional[Work]:
    """convenience wrapper around WorkResolver."""
    return await WorkResolver(source).resolve(query)
