import logging
from typing import Optional

import httpx

from model.errors import DecodeError, NetworkError
from model.interfaces.api_provider import APIProvider
from utils.pool_utils import Pool, PoolList, parse_pool_list

logger = logging.getLogger(__name__)


class RaydiumAPIProvider(APIProvider):
    """Raydium liquidity pool directory over HTTPS"""

    def __init__(self, pools_url: str, http_client: Optional[httpx.AsyncClient] = None,
                 timeout: float = 30.0):
        self.pools_url = pools_url
        self.timeout = timeout
        self._http_client = http_client

    async def _get(self) -> httpx.Response:
        if self._http_client is not None:
            return await self._http_client.get(self.pools_url, timeout=self.timeout)
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.get(self.pools_url)

    async def fetch_pools(self) -> PoolList:
        """
        Raises:
            NetworkError: transport failure or a non-200 status
            DecodeError: the body is not a valid pool directory
        """
        try:
            response = await self._get()
        except httpx.HTTPError as e:
            raise NetworkError(f"failed to get raydium pools: {e!r}") from e

        if response.status_code != 200:
            raise NetworkError(f"failed to get raydium pools; status_code={response.status_code}")

        try:
            body = response.json()
        except ValueError as e:
            raise DecodeError(f"raydium pools response is not JSON: {e}") from e

        pools = parse_pool_list(body)
        logger.info(f"Fetched {len(pools.official)} official and {len(pools.unofficial)} unofficial pools")
        return pools

    async def find_pool(self, pool_id: str) -> Pool:
        pools = await self.fetch_pools()
        return pools.find_pool(pool_id)
