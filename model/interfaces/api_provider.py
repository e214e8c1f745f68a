from abc import ABC, abstractmethod

from utils.pool_utils import Pool, PoolList


class APIProvider(ABC):
    """Read-only access to an AMM pool directory"""

    @abstractmethod
    async def fetch_pools(self) -> PoolList:
        """Fetch and parse the full pool directory"""
        pass

    @abstractmethod
    async def find_pool(self, pool_id: str) -> Pool:
        """Look up a single pool by id, raising NotFoundError when absent"""
        pass
