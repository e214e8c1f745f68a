import asyncio
import logging

import httpx
from solana.exceptions import SolanaRpcException
from solana.rpc.async_api import AsyncClient

from config import Config, WellKnownAddresses

logger = logging.getLogger(__name__)

# Transport level failures surfaced by solana-py and httpx
RPC_TRANSPORT_ERRORS = (
    SolanaRpcException,
    httpx.HTTPError,
    OSError,
    asyncio.TimeoutError,
)


class SolanaProvider:
    """
    Owns the RPC transport and the websocket endpoint for one application.

    The provider is created by the caller and its ``rpc`` client is passed to
    the token and transaction providers, which only borrow it per call.
    """

    def __init__(self, rpc: AsyncClient, ws_url: str, addresses: WellKnownAddresses):
        self.rpc = rpc
        self.ws_url = ws_url
        self.addresses = addresses

    @classmethod
    def from_config(cls, config: Config) -> "SolanaProvider":
        rpc = AsyncClient(config.get_solana_rpc_url(), timeout=config.RPC_TIMEOUT)
        logger.info("Solana RPC client created")
        return cls(rpc, config.get_solana_ws_url(), config.get_well_known_addresses())

    async def close(self):
        await self.rpc.close()
