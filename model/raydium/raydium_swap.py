import logging
from typing import Dict, List, Optional, Sequence, Tuple

from solders.instruction import Instruction # type: ignore
from solders.keypair import Keypair # type: ignore
from solders.pubkey import Pubkey # type: ignore
from solders.signature import Signature # type: ignore
from spl.token.instructions import create_associated_token_account

from config import WellKnownAddresses
from model.providers.solana_token_provider import SolanaTokenProvider
from model.providers.solana_transaction_provider import SolanaTransactionProvider
from utils.pool_utils import Pool

logger = logging.getLogger(__name__)


class RaydiumSwap:
    """
    Runs a swap for one wallet: resolve token accounts, prepend account
    creation, then build, submit and optionally confirm.

    The swap instruction itself is supplied by the caller.
    """

    def __init__(
        self,
        token_provider: SolanaTokenProvider,
        transaction_provider: SolanaTransactionProvider,
        addresses: WellKnownAddresses,
        signer: Keypair,
    ):
        self.token_provider = token_provider
        self.transaction_provider = transaction_provider
        self.addresses = addresses
        self.signer = signer

    async def pool_reserves(self, pool: Pool, timeout: Optional[float] = None) -> Tuple[int, int]:
        """
        Returns:
            tuple: (base_vault_raw, quote_vault_raw)
        """
        balances = await self.token_provider.read_balances([pool.base_vault, pool.quote_vault], timeout=timeout)
        return balances[str(pool.base_vault)], balances[str(pool.quote_vault)]

    async def prepare_token_accounts(
        self,
        mints: Sequence[Pubkey],
        owner: Optional[Pubkey] = None,
        timeout: Optional[float] = None,
    ) -> Tuple[Dict[str, Pubkey], List[Instruction]]:
        """
        Resolve the owner's accounts for ``mints`` and build creation
        instructions for the missing ones.

        Returns:
            tuple: ({mint_str: account}, [create_ata_instruction, ...])
        """
        owner = owner or self.signer.pubkey()
        existing, missing = await self.token_provider.resolve_token_accounts(owner, mints, timeout=timeout)

        accounts = dict(existing)
        instructions = []
        for mint_str, account in missing.items():
            accounts[mint_str] = account
            mint = Pubkey.from_string(mint_str)
            if mint == self.addresses.native_sol:
                # Native SOL lives on the wallet itself
                continue
            logger.info(f"Creating token account {account} for mint {mint_str}")
            instructions.append(
                create_associated_token_account(
                    payer=self.signer.pubkey(),
                    owner=owner,
                    mint=mint,
                    token_program_id=self.addresses.token_program,
                )
            )
        return accounts, instructions

    async def swap(
        self,
        swap_instructions: Sequence[Instruction],
        mints: Sequence[Pubkey],
        extra_signers: Sequence[Keypair] = (),
        wait_confirm: bool = True,
        skip_preflight: Optional[bool] = None,
        timeout: Optional[float] = None,
        confirm_timeout: Optional[float] = None,
    ) -> Signature:
        """
        Execute caller-built swap instructions after creating any missing
        token accounts for ``mints``. The wallet signer pays fees.
        """
        _, setup_instructions = await self.prepare_token_accounts(mints, timeout=timeout)

        instructions = setup_instructions + list(swap_instructions)
        logger.info(f"Swapping with {len(setup_instructions)} setup and {len(swap_instructions)} swap instructions")

        return await self.transaction_provider.execute_instructions(
            [self.signer, *extra_signers],
            instructions,
            wait_confirm=wait_confirm,
            skip_preflight=skip_preflight,
            timeout=timeout,
            confirm_timeout=confirm_timeout,
        )
