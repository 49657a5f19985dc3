"""
openalex provider - source for works, references and citers.
https://docs.openalex.org/
"""

import asyncio
import logging
from typing import List, Optional, Dict, Any, Iterable

import httpx

from .base import WorkSource
from ..core.config import ProviderConfig
from ..core.errors import UpstreamError
from ..core.identifiers import normalize_work_id, short_work_id, unique_work_ids
from ..core.models import Work

logger = logging.getLogger("influence.openalex")

WORK_SELECT_FIELDS = ",".join([
    "id",
    "display_name",
    "publication_year",
    "cited_by_count",
    "referenced_works",
    "authorships",
    "primary_location",
    "doi"
])

MAX_AUTHORS = 8


def parse_work(work: Optional[Dict[str, Any]]) -> Optional[Work]:
    """parse an openalex work record to Work."""
    if not work or not work.get("id"):
        return None

    authors = []
    for authorship in work.get("authorships") or []:
        name = ((authorship or {}).get("author") or {}).get("display_name")
        if name:
            authors.append(name)

    venue = None
    primary_location = work.get("primary_location") or {}
    source = primary_location.get("source") or {}
    if source:
        venue = source.get("display_name")

    cited_by_count = work.get("cited_by_count")
    if not isinstance(cited_by_count, int) or isinstance(cited_by_count, bool):
        cited_by_count = 0

    year = work.get("publication_year")
    if not isinstance(year, int) or isinstance(year, bool) or year == 0:
        year = None

    referenced = work.get("referenced_works")
    if not isinstance(referenced, list):
        referenced = []

    work_id = normalize_work_id(work["id"]) or work["id"]

    return Work(
        id=work_id,
        title=work.get("display_name") or "Untitled",
        year=year,
        cited_by_count=max(0, cited_by_count),
        authors=tuple(authors[:MAX_AUTHORS]),
        venue=venue or "Unknown venue",
        canonical_url=work_id,
        referenced_work_ids=tuple(
            normalize_work_id(r) or r for r in referenced if isinstance(r, str)
        ),
        doi=work.get("doi") or None
    )


def chunked(items: List[str], size: int) -> List[List[str]]:
    """split items into consecutive chunks of at most size."""
    return [items[i:i + size] for i in range(0, len(items), size)]


class OpenAlexSource(WorkSource):
    """
    async openalex.org works client.
    no retries - any non-success response raises UpstreamError.
    """

    def __init__(
        self,
        config: Optional[ProviderConfig] = None,
        client: Optional[httpx.AsyncClient] = None
    ):
        self.config = config or ProviderConfig()
        self._owns_client = client is None
        self._client = client
        self.request_count = 0

    @property
    def name(self) -> str:
        return "openalex"

    @property
    def client(self) -> httpx.AsyncClient:
        """lazy client initialization."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self.config.timeout)
            self._owns_client = True
        return self._client

    async def close(self):
        """close the http client if we created it."""
        if self._owns_client and self._client and not self._client.is_closed:
            await self._client.aclose()
        self._client = None

    async def _request(self, params: Dict[str, Any]) -> Dict[str, Any]:
        """GET the works endpoint with the fixed select list."""
        params = dict(params)
        params["select"] = WORK_SELECT_FIELDS
        if self.config.mailto:
            params["mailto"] = self.config.mailto

        headers = {"User-Agent": self.config.user_agent}
        self.request_count += 1

        try:
            resp = await self.client.get(self.config.base_url, params=params, headers=headers)
        except httpx.HTTPError as e:
            logger.warning(f"[openalex] transport error: {e}")
            raise UpstreamError(None, str(e)) from e

        if not resp.is_success:
            filter_val = str(params.get("filter", ""))[:100]
            logger.warning(f"[openalex] {resp.status_code} (filter: {filter_val})")
            raise UpstreamError(resp.status_code, resp.text)

        try:
            return resp.json()
        except ValueError as e:
            logger.warning(f"[openalex] non-JSON {resp.status_code} response")
            raise UpstreamError(resp.status_code, resp.text) from e

    def _parse_results(self, data: Optional[Dict[str, Any]]) -> List[Work]:
        works = []
        for raw in (data or {}).get("results") or []:
            work = parse_work(raw)
            if work:
                works.append(work)
        return works

    async def fetch_by_id(self, work_id: str) -> Optional[Work]:
        """get work by openalex id."""
        normalized = normalize_work_id(work_id)
        if not normalized:
            return None

        data = await self._request({
            "filter": f"openalex_id:{short_work_id(normalized)}",
            "per-page": 1
        })
        works = self._parse_results(data)
        return works[0] if works else None

    async def fetch_by_ids(self, work_ids: Iterable[str]) -> List[Work]:
        """batch fetch, chunks requested concurrently."""
        normalized = unique_work_ids(work_ids)
        if not normalized:
            return []

        chunks = chunked(normalized, self.config.batch_size)
        logger.debug(f"[openalex] batch fetch {len(normalized)} ids in {len(chunks)} chunks")

        async def fetch_chunk(chunk: List[str]) -> List[Work]:
            data = await self._request({
                "filter": "openalex_id:" + "|".join(short_work_id(c) for c in chunk),
                "per-page": len(chunk)
            })
            return self._parse_results(data)

        responses = await asyncio.gather(*(fetch_chunk(c) for c in chunks))
        return [work for chunk_works in responses for work in chunk_works]

    async def fetch_citers_of(self, work_id: str, limit: int, page: int = 1) -> List[Work]:
        """get works that cite this work, most cited first."""
        normalized = normalize_work_id(work_id)
        if not normalized or limit < 1:
            return []

        data = await self._request({
            "filter": f"cites:{short_work_id(normalized)}",
            "sort": "cited_by_count:desc",
            "per-page": limit,
            "page": page
        })
        return self._parse_results(data)[:limit]

    async def fetch_by_doi(self, doi: str) -> Optional[Work]:
        """get work by doi url."""
        data = await self._request({
            "filter": f"doi:{doi}",
            "per-page": 1
        })
        works = self._parse_results(data)
        return works[0] if works else None

    async def search(self, query: str, limit: int = 5) -> List[Work]:
        """full-text search, provider relevance order."""
        data = await self._request({
            "search": query,
            "per-page": limit
        })
        return self._parse_results(data)[:limit]

    def stats(self) -> Dict[str, Any]:
        """provider request statistics."""
        return {
            "provider": self.name,
            "requests": self.request_count
        }
