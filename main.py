#!/usr/bin/env python3
"""
Raydium Swap - pool and wallet inspection
"""

import asyncio
import logging
import sys

from config import Config
from model.providers import RaydiumAPIProvider, SolanaProvider, SolanaTokenProvider
from utils.common_utils import TokenInfo, parse_address

logging.getLogger("httpx").setLevel(logging.WARNING)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout)
    ]
)
logger = logging.getLogger(__name__)


async def inspect(pool_id: str, wallet: str = None):
    config = Config()
    solana_provider = SolanaProvider.from_config(config)
    token_provider = SolanaTokenProvider(solana_provider.rpc, solana_provider.addresses)
    api_provider = RaydiumAPIProvider(config.POOLS_URL, timeout=config.RPC_TIMEOUT)

    try:
        pool = await api_provider.find_pool(pool_id)
        base = TokenInfo("base", pool.base_decimals)
        quote = TokenInfo("quote", pool.quote_decimals)

        balances = await token_provider.read_balances(
            [pool.base_vault, pool.quote_vault], timeout=config.RPC_TIMEOUT
        )
        print(f"Pool {pool.id}")
        print(f"   Base mint:  {pool.base_mint}  reserves {base.to_float(balances[str(pool.base_vault)]):.6f}")
        print(f"   Quote mint: {pool.quote_mint}  reserves {quote.to_float(balances[str(pool.quote_vault)]):.6f}")

        if wallet:
            owner = parse_address(wallet)
            existing, missing = await token_provider.resolve_token_accounts(
                owner, [pool.base_mint, pool.quote_mint], timeout=config.RPC_TIMEOUT
            )
            for mint, account in existing.items():
                print(f"   Token account for {mint}: {account}")
            for mint, account in missing.items():
                print(f"   Missing token account for {mint}: {account}")
    finally:
        await solana_provider.close()


def main():
    if len(sys.argv) < 2:
        print("usage: main.py <pool_id> [wallet]")
        sys.exit(2)
    asyncio.run(inspect(sys.argv[1], sys.argv[2] if len(sys.argv) > 2 else None))


if __name__ == "__main__":
    main()
