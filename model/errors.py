"""
Error taxonomy for the swap pipeline.

Every component raises one of these on its first failure. Library exceptions
(solana-py, httpx, websockets, construct) are translated at the component
boundary and chained with ``raise ... from``.
"""

from typing import Optional

from solders.signature import Signature # type: ignore


class SwapError(Exception):
    """Base class for all swap pipeline failures"""


class NetworkError(SwapError):
    """Transport failure or timeout talking to the RPC or pool directory"""


class DecodeError(SwapError):
    """Malformed account payload, address text or response shape"""


class NotFoundError(SwapError):
    """Named pool is absent from the directory"""


class SigningError(SwapError):
    """A required signer slot has no matching key pair"""


class RejectedError(SwapError):
    """The ledger validated or simulated the transaction and refused it"""

    def __init__(self, message: str, signature: Optional[Signature] = None):
        super().__init__(message)
        self.signature = signature


class ConfirmationError(SwapError):
    """
    Confirmation channel failed after a successful submission.

    The transaction may still have landed. ``signature`` is always set so the
    caller can query its status instead of blindly resubmitting.
    """

    def __init__(self, message: str, signature: Signature):
        super().__init__(f"{message} (signature {signature}, landed status unknown)")
        self.signature = signature
