from abc import ABC, abstractmethod
from typing import Optional, Sequence

from solders.instruction import Instruction # type: ignore
from solders.keypair import Keypair # type: ignore
from solders.signature import Signature # type: ignore


class TransactionProvider(ABC):
    """Build, sign, submit and confirm transactions"""

    @abstractmethod
    async def build_transaction(
        self,
        signers: Sequence[Keypair],
        instructions: Sequence[Instruction],
        fee_payer: Optional[Keypair] = None,
        timeout: Optional[float] = None,
    ):
        """Fetch a fresh blockhash and return a fully signed transaction"""
        pass

    @abstractmethod
    async def submit(self, transaction, skip_preflight: Optional[bool] = None,
                     timeout: Optional[float] = None) -> Signature:
        """Send a built transaction without waiting for confirmation"""
        pass

    @abstractmethod
    async def submit_and_confirm(self, transaction, skip_preflight: Optional[bool] = None,
                                 timeout: Optional[float] = None,
                                 confirm_timeout: Optional[float] = None) -> Signature:
        """Send a built transaction and wait until it is finalized"""
        pass
