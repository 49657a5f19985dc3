"""
shared test helpers: an in-memory WorkSource and a work factory.
"""

import asyncio
from typing import Callable, Dict, Iterable, List, Optional

from influence.core.errors import UpstreamError
from influence.core.identifiers import normalize_work_id, unique_work_ids
from influence.core.models import Work
from influence.providers.base import WorkSource


def wid(n: int) -> str:
    """canonical id for test work n; 5 digits so string order is numeric order."""
    return f"https://openalex.org/W{10000 + n}"


def make_work(
    n: int,
    year: Optional[int] = 2000,
    cited: int = 0,
    refs: Iterable[int] = (),
    title: Optional[str] = None,
    doi: Optional[str] = None
) -> Work:
    return Work(
        id=wid(n),
        title=title or f"Work {n}",
        year=year,
        cited_by_count=cited,
        authors=(f"Author {n}",),
        venue="Test Venue",
        canonical_url=wid(n),
        referenced_work_ids=tuple(wid(r) for r in refs),
        doi=doi
    )


class FakeSource(WorkSource):
    """
    in-memory work source.
    citers are derived from referenced_work_ids and sorted like openalex.
    """

    def __init__(
        self,
        works: Iterable[Work] = (),
        delay: Optional[Callable[[str], float]] = None,
        fail_on: Optional[str] = None,
        search_results: Optional[List[Work]] = None
    ):
        self.works: Dict[str, Work] = {w.id: w for w in works}
        self.delay = delay
        self.fail_on = fail_on
        self.search_results = search_results or []
        self.calls: List[tuple] = []
        self.closed = False

    @property
    def name(self) -> str:
        return "fake"

    def add(self, *works: Work):
        for w in works:
            self.works[w.id] = w

    async def _enter(self, method: str, arg):
        self.calls.append((method, arg))
        if self.fail_on == method:
            raise UpstreamError(500, "boom")
        if self.delay:
            await asyncio.sleep(self.delay(str(arg)))

    async def fetch_by_id(self, work_id: str) -> Optional[Work]:
        await self._enter("fetch_by_id", work_id)
        return self.works.get(normalize_work_id(work_id))

    async def fetch_by_ids(self, work_ids) -> List[Work]:
        ids = unique_work_ids(work_ids)
        await self._enter("fetch_by_ids", tuple(ids))
        return [self.works[i] for i in ids if i in self.works]

    async def fetch_citers_of(self, work_id: str, limit: int, page: int = 1) -> List[Work]:
        await self._enter("fetch_citers_of", (work_id, limit, page))
        citers = [w for w in self.works.values() if work_id in w.referenced_work_ids]
        citers.sort(key=lambda w: (-w.cited_by_count, w.id))
        start = (page - 1) * limit
        return citers[start:start + limit]

    async def fetch_by_doi(self, doi: str) -> Optional[Work]:
        await self._enter("fetch_by_doi", doi)
        for w in self.works.values():
            if w.doi and w.doi.lower() == doi.lower():
                return w
        return None

    async def search(self, query: str, limit: int = 5) -> List[Work]:
        await self._enter("search", query)
        return self.search_results[:limit]

    async def close(self):
        self.closed = True

    def count(self, method: str) -> int:
        return sum(1 for m, _ in self.calls if m == method)

