"""
base provider interface for work metadata sources.
all sources must implement this interface.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Iterable

from ..core.models import Work


class WorkSource(ABC):
    """
    abstract base class for work metadata sources.
    every method is a coroutine; failures raise UpstreamError.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """source name for logging."""
        pass

    @abstractmethod
    async def fetch_by_id(self, work_id: str) -> Optional[Work]:
        """single work lookup. None when the provider has no record."""
        pass

    @abstractmethod
    async def fetch_by_ids(self, work_ids: Iterable[str]) -> List[Work]:
        """
        batch lookup.
        ids are deduplicated; missing ids are silently dropped.
        """
        pass

    @abstractmethod
    async def fetch_citers_of(self, work_id: str, limit: int, page: int = 1) -> List[Work]:
        """works citing work_id, most cited first (provider sort)."""
        pass

    async def fetch_by_doi(self, doi: str) -> Optional[Work]:
        """lookup by doi url."""
        return None

    async def search(self, query: str, limit: int = 5) -> List[Work]:
        """free-text search over titles."""
        return []

    async def close(self):
        """release any held connections."""
        pass

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
        return False
