import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

from solana.rpc.async_api import AsyncClient
from solana.rpc.commitment import Finalized
from solana.rpc.core import RPCException
from solana.rpc.types import TxOpts
from solana.rpc.websocket_api import connect
from solders.hash import Hash # type: ignore
from solders.instruction import Instruction # type: ignore
from solders.keypair import Keypair # type: ignore
from solders.message import MessageV0 # type: ignore
from solders.pubkey import Pubkey # type: ignore
from solders.rpc.responses import SignatureNotification # type: ignore
from solders.signature import Signature # type: ignore
from solders.transaction import VersionedTransaction # type: ignore
from websockets.exceptions import WebSocketException

from config import Config
from model.errors import ConfirmationError, DecodeError, NetworkError, RejectedError, SigningError
from model.interfaces.transaction_provider import TransactionProvider
from model.providers.solana_provider import RPC_TRANSPORT_ERRORS

logger = logging.getLogger(__name__)

DEFAULT_CONFIRM_TIMEOUT = 90.0


@dataclass(frozen=True)
class BuiltTransaction:
    transaction: VersionedTransaction
    instructions: Tuple[Instruction, ...]
    fee_payer: Pubkey
    recent_blockhash: Hash

    @property
    def signatures(self) -> List[Signature]:
        return list(self.transaction.signatures)

    @property
    def signature(self) -> Signature:
        """Fee payer signature, which is also the transaction id"""
        return self.transaction.signatures[0]


class SolanaTransactionProvider(TransactionProvider):
    """
    Builds, signs, submits and confirms transactions.

    Submission goes through the borrowed RPC client. Confirmation opens its own
    websocket per call and always closes it before returning.

    ``skip_preflight`` and ``confirm_timeout`` are the defaults used when a
    call does not pass its own.
    """

    def __init__(self, rpc: AsyncClient, ws_url: str, ws_connect: Callable = connect,
                 skip_preflight: bool = False, confirm_timeout: float = DEFAULT_CONFIRM_TIMEOUT):
        self.rpc = rpc
        self.ws_url = ws_url
        self._ws_connect = ws_connect
        self.skip_preflight = skip_preflight
        self.confirm_timeout = confirm_timeout

    @classmethod
    def from_config(cls, rpc: AsyncClient, config: Config,
                    ws_connect: Callable = connect) -> "SolanaTransactionProvider":
        return cls(
            rpc,
            config.get_solana_ws_url(),
            ws_connect=ws_connect,
            skip_preflight=config.SKIP_PREFLIGHT,
            confirm_timeout=config.CONFIRM_TIMEOUT,
        )

    async def get_recent_blockhash(self, timeout: Optional[float] = None) -> Hash:
        """
        Fetch a finalized blockhash. Never cached, each transaction needs its own.

        Raises:
            NetworkError: the RPC call failed or timed out
        """
        try:
            resp = await asyncio.wait_for(self.rpc.get_latest_blockhash(commitment=Finalized), timeout)
        except RPCException as e:
            raise NetworkError(f"getLatestBlockhash failed: {e}") from e
        except RPC_TRANSPORT_ERRORS as e:
            raise NetworkError(f"getLatestBlockhash failed: {e!r}") from e

        value = getattr(resp, "value", None)
        if value is None:
            raise DecodeError(f"Unexpected getLatestBlockhash response: {resp}")
        return value.blockhash

    async def build_transaction(
        self,
        signers: Sequence[Keypair],
        instructions: Sequence[Instruction],
        fee_payer: Optional[Keypair] = None,
        timeout: Optional[float] = None,
    ) -> BuiltTransaction:
        """
        Compile ``instructions`` in the given order and sign every required slot.

        Args:
            signers: key pairs available for signing, extra ones are ignored
            instructions: opaque instructions, order is preserved
            fee_payer: defaults to ``signers[0]``

        Raises:
            NetworkError: the blockhash fetch failed
            SigningError: a required signer slot has no key pair in ``signers``
        """
        signers = list(signers)
        if fee_payer is None:
            if not signers:
                raise SigningError("At least one signer is required to pay fees")
            fee_payer = signers[0]

        instructions = tuple(instructions)
        blockhash = await self.get_recent_blockhash(timeout)

        message = MessageV0.try_compile(
            payer=fee_payer.pubkey(),
            instructions=list(instructions),
            address_lookup_table_accounts=[],
            recent_blockhash=blockhash,
        )

        required = message.account_keys[:message.header.num_required_signatures]
        slot_signers = []
        for key in required:
            keypair = next((s for s in signers if s.pubkey() == key), None)
            if keypair is None:
                raise SigningError(f"No key pair provided for required signer {key}")
            slot_signers.append(keypair)

        transaction = VersionedTransaction(message, slot_signers)
        logger.debug(f"Built transaction with {len(instructions)} instructions and {len(slot_signers)} signatures")
        return BuiltTransaction(
            transaction=transaction,
            instructions=instructions,
            fee_payer=fee_payer.pubkey(),
            recent_blockhash=blockhash,
        )

    async def submit(self, transaction: BuiltTransaction, skip_preflight: Optional[bool] = None,
                     timeout: Optional[float] = None) -> Signature:
        """
        Send a built transaction. No retries, a retry must rebuild first.

        Raises:
            RejectedError: the node refused it (preflight failure, stale blockhash, funds)
            NetworkError: transport failure or timeout
        """
        if skip_preflight is None:
            skip_preflight = self.skip_preflight
        opts = TxOpts(skip_preflight=skip_preflight, preflight_commitment=Finalized)
        try:
            resp = await asyncio.wait_for(
                self.rpc.send_transaction(transaction.transaction, opts=opts),
                timeout,
            )
        except RPCException as e:
            logger.error(f"Transaction {transaction.signature} rejected: {e}")
            raise RejectedError(f"Transaction rejected: {e}", transaction.signature) from e
        except RPC_TRANSPORT_ERRORS as e:
            logger.error(f"Transaction {transaction.signature} not sent: {e!r}")
            raise NetworkError(f"sendTransaction failed: {e!r}") from e

        signature = resp.value
        logger.info(f"Transaction sent: {signature}")
        return signature

    async def confirm_transaction(self, signature: Signature, timeout: Optional[float] = None) -> Signature:
        """
        Wait on a websocket subscription until ``signature`` is finalized.

        ``timeout`` defaults to the provider's ``confirm_timeout``.

        Raises:
            RejectedError: the transaction landed with an error
            ConfirmationError: the channel failed or timed out, landed status unknown
        """
        if timeout is None:
            timeout = self.confirm_timeout
        try:
            await asyncio.wait_for(self._wait_finalized(signature), timeout)
        except asyncio.TimeoutError as e:
            logger.error(f"Timed out waiting for {signature} to finalize")
            raise ConfirmationError("Timed out waiting for finalization", signature) from e
        except (WebSocketException, OSError, ValueError) as e:
            # ValueError covers frames the client cannot parse
            logger.error(f"Confirmation channel failed for {signature}: {e!r}")
            raise ConfirmationError(f"Confirmation channel failed: {e!r}", signature) from e
        logger.info(f"Transaction finalized: {signature}")
        return signature

    async def _wait_finalized(self, signature: Signature):
        async with self._ws_connect(self.ws_url) as ws:
            await ws.signature_subscribe(signature, commitment=Finalized)
            while True:
                messages = await ws.recv()
                for message in messages:
                    if not isinstance(message, SignatureNotification):
                        continue
                    err = message.result.value.err
                    if err is not None:
                        raise RejectedError(f"Transaction {signature} failed: {err}", signature)
                    return

    async def submit_and_confirm(self, transaction: BuiltTransaction, skip_preflight: Optional[bool] = None,
                                 timeout: Optional[float] = None,
                                 confirm_timeout: Optional[float] = None) -> Signature:
        """
        Submit, then block until finalized.

        A rejected submission never opens the websocket. On ``ConfirmationError``
        the signature is carried on the exception.
        """
        signature = await self.submit(transaction, skip_preflight=skip_preflight, timeout=timeout)
        return await self.confirm_transaction(signature, timeout=confirm_timeout)

    async def get_signature_status(self, signature: Signature, timeout: Optional[float] = None):
        """
        Look up a signature after an ambiguous confirmation.

        Returns:
            The node's status entry, or None when the signature is unknown.
        """
        try:
            resp = await asyncio.wait_for(
                self.rpc.get_signature_statuses([signature], search_transaction_history=True),
                timeout,
            )
        except RPCException as e:
            raise NetworkError(f"getSignatureStatuses failed: {e}") from e
        except RPC_TRANSPORT_ERRORS as e:
            raise NetworkError(f"getSignatureStatuses failed: {e!r}") from e
        statuses = getattr(resp, "value", None)
        if statuses is None or len(statuses) != 1:
            raise DecodeError(f"Unexpected getSignatureStatuses response: {resp}")
        return statuses[0]

    async def execute_instructions(
        self,
        signers: Sequence[Keypair],
        instructions: Sequence[Instruction],
        wait_confirm: bool = False,
        skip_preflight: Optional[bool] = None,
        timeout: Optional[float] = None,
        confirm_timeout: Optional[float] = None,
    ) -> Signature:
        """Build with ``signers[0]`` paying fees, then submit and optionally confirm"""
        built = await self.build_transaction(signers, instructions, timeout=timeout)
        if wait_confirm:
            return await self.submit_and_confirm(
                built, skip_preflight=skip_preflight, timeout=timeout, confirm_timeout=confirm_timeout
            )
        return await self.submit(built, skip_preflight=skip_preflight, timeout=timeout)
