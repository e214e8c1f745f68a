import asyncio
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from solana.rpc.async_api import AsyncClient
from solana.rpc.commitment import Commitment, Confirmed
from solana.rpc.core import RPCException
from solders.pubkey import Pubkey # type: ignore

from config import WellKnownAddresses
from model.errors import DecodeError, NetworkError
from model.interfaces.token_provider import TokenProvider
from model.providers.solana_provider import RPC_TRANSPORT_ERRORS
from utils.pool_utils import decode_token_account

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TokenAccountInfo:
    mint: Pubkey
    account: Pubkey


class SolanaTokenProvider(TokenProvider):
    """
    Resolves associated token accounts and reads balances.

    Every public call issues exactly one ``getMultipleAccounts`` request on
    the borrowed RPC client and holds no state between calls.
    """

    def __init__(self, rpc: AsyncClient, addresses: WellKnownAddresses,
                 commitment: Commitment = Confirmed):
        self.rpc = rpc
        self.addresses = addresses
        self.commitment = commitment

    def get_associated_token_address(self, owner: Pubkey, mint: Pubkey) -> Pubkey:
        """Derive the associated token account PDA for (owner, mint)"""
        seeds = [bytes(owner), bytes(self.addresses.token_program), bytes(mint)]
        address, _ = Pubkey.find_program_address(seeds, self.addresses.assoc_token_acc_prog)
        return address

    async def _get_multiple_accounts(self, addresses: List[Pubkey], timeout: Optional[float]) -> list:
        """
        Fetch raw account records in one round trip.

        Returns a list aligned with ``addresses``; ``None`` marks an absent account.

        Raises:
            NetworkError: transport failure, timeout or RPC error response
            DecodeError: the response is not one record per requested address
        """
        logger.debug(f"getMultipleAccounts for {len(addresses)} accounts")
        try:
            resp = await asyncio.wait_for(
                self.rpc.get_multiple_accounts(addresses, commitment=self.commitment, encoding="base64"),
                timeout,
            )
        except RPCException as e:
            raise NetworkError(f"getMultipleAccounts failed: {e}") from e
        except RPC_TRANSPORT_ERRORS as e:
            raise NetworkError(f"getMultipleAccounts failed: {e!r}") from e

        records = getattr(resp, "value", None)
        if records is None:
            raise DecodeError(f"Unexpected getMultipleAccounts response: {resp}")
        if len(records) != len(addresses):
            raise DecodeError(
                f"getMultipleAccounts returned {len(records)} records for {len(addresses)} addresses"
            )
        return list(records)

    async def resolve_token_accounts(
        self,
        owner: Pubkey,
        mints: Sequence[Pubkey],
        timeout: Optional[float] = None,
    ) -> Tuple[Dict[str, Pubkey], Dict[str, Pubkey]]:
        """
        Partition the owner's token accounts for ``mints`` into existing and missing.

        Duplicate mints are dropped, keeping the first. The native SOL mint maps to
        ``owner`` itself.

        Returns:
            tuple: (existing, missing), both ``{mint_str: account}``

        Raises:
            NetworkError: the account lookup failed
            DecodeError: a present token account could not be decoded
        """
        seen = set()
        infos: List[TokenAccountInfo] = []
        for mint in mints:
            if mint in seen:
                continue
            seen.add(mint)
            if mint == self.addresses.native_sol:
                account = owner
            else:
                account = self.get_associated_token_address(owner, mint)
            infos.append(TokenAccountInfo(mint=mint, account=account))

        existing: Dict[str, Pubkey] = {}
        missing: Dict[str, Pubkey] = {}
        if not infos:
            return existing, missing

        records = await self._get_multiple_accounts([info.account for info in infos], timeout)

        for info, record in zip(infos, records):
            key = str(info.mint)
            if record is None:
                missing[key] = info.account
                continue
            if info.mint == self.addresses.native_sol:
                existing[key] = owner
                continue
            decode_token_account(record.data)
            existing[key] = info.account

        logger.debug(f"Resolved {len(existing)} existing and {len(missing)} missing token accounts for {owner}")
        return existing, missing

    async def read_balances(
        self,
        addresses: Sequence[Pubkey],
        timeout: Optional[float] = None,
    ) -> Dict[str, int]:
        """
        Read raw balances for a batch of accounts.

        Token program accounts report their token ``amount``; any other account
        reports its lamports. Every address must exist.

        Raises:
            NetworkError: the account lookup failed
            DecodeError: an account is absent or its token payload is malformed
        """
        addresses = list(addresses)
        if not addresses:
            return {}

        records = await self._get_multiple_accounts(addresses, timeout)

        balances: Dict[str, int] = {}
        for address, record in zip(addresses, records):
            if record is None:
                raise DecodeError(f"Account {address} does not exist")
            if record.owner == self.addresses.token_program:
                balances[str(address)] = decode_token_account(record.data).amount
            else:
                balances[str(address)] = record.lamports
        return balances
