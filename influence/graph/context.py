"""
request-scoped work cache.
one BuildContext per graph build; never shared across requests.
"""

import logging
from typing import Dict, List, Optional, Set, Iterable

from ..core.identifiers import normalize_work_id, unique_work_ids
from ..core.models import Work
from ..providers.base import WorkSource

logger = logging.getLogger("influence.context")


class BuildContext:
    """
    caches works fetched during one graph build.
    concurrent lookups of the same id may both hit the source; the
    records are identical so the last write wins harmlessly.
    """

    def __init__(self, source: WorkSource):
        self.source = source
        self.works: Dict[str, Work] = {}
        self.missing: Set[str] = set()

        # stats
        self.cache_hits = 0
        self.source_calls = 0

    def remember(self, works: Iterable[Work]):
        for work in works:
            self.works[work.id] = work

    async def get_work(self, work_id: str) -> Optional[Work]:
        """cached single lookup."""
        work_id = normalize_work_id(work_id) or work_id
        if work_id in self.works:
            self.cache_hits += 1
            return self.works[work_id]
        if work_id in self.missing:
            self.cache_hits += 1
            return None

        self.source_calls += 1
        work = await self.source.fetch_by_id(work_id)
        if work is None:
            self.missing.add(work_id)
            return None

        self.works[work.id] = work
        return work

    async def get_works(self, work_ids: Iterable[str]) -> List[Work]:
        """
        cached batch lookup.
        returns found works in the order of work_ids, deduplicated.
        """
        ordered = unique_work_ids(work_ids)
        to_fetch = [w for w in ordered if w not in self.works and w not in self.missing]
        self.cache_hits += len(ordered) - len(to_fetch)

        if to_fetch:
            logger.debug(f"[context] fetching {len(to_fetch)} of {len(ordered)} works")
            self.source_calls += 1
            fetched = await self.source.fetch_by_ids(to_fetch)
            self.remember(fetched)
            for work_id in to_fetch:
                if work_id not in self.works:
                    self.missing.add(work_id)

        return [self.works[w] for w in ordered if w in self.works]

    async def get_citers(self, work_id: str, limit: int) -> List[Work]:
        """citers are not cached as a list, only their records."""
        self.source_calls += 1
        citers = await self.source.fetch_citers_of(work_id, limit)
        self.remember(citers)
        return citers

    def stats(self) -> Dict[str, int]:
        return {
            "cached_works": len(self.works),
            "cache_hits": self.cache_hits,
            "source_calls": self.source_calls
        }
