from abc import ABC, abstractmethod
from typing import Dict, Optional, Sequence, Tuple

from solders.pubkey import Pubkey # type: ignore


class TokenProvider(ABC):
    """Token account resolution and balance reads"""

    @abstractmethod
    async def resolve_token_accounts(
        self,
        owner: Pubkey,
        mints: Sequence[Pubkey],
        timeout: Optional[float] = None,
    ) -> Tuple[Dict[str, Pubkey], Dict[str, Pubkey]]:
        """Return (existing, missing) associated accounts keyed by mint"""
        pass

    @abstractmethod
    async def read_balances(
        self,
        addresses: Sequence[Pubkey],
        timeout: Optional[float] = None,
    ) -> Dict[str, int]:
        """Return raw balances keyed by address"""
        pass
