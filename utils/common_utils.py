import math
import logging
from dataclasses import dataclass
from solders.pubkey import Pubkey  # type: ignore
from model.errors import DecodeError

# Configure logging
logger = logging.getLogger(__name__)


def parse_address(text: str) -> Pubkey:
    """
    Parse a base-58 address into a 32-byte public key.

    Raises:
        DecodeError: text is not a valid 32-byte base-58 address
    """
    if isinstance(text, Pubkey):
        return text
    try:
        return Pubkey.from_string(text.strip())
    except (ValueError, TypeError, AttributeError) as e:
        raise DecodeError(f"Invalid address {text!r}: {e}") from e


@dataclass(frozen=True)
class TokenInfo:
    symbol: str
    decimals: int

    def pow(self) -> float:
        return math.pow(10, self.decimals)

    def to_float(self, raw_amount: int) -> float:
        """Convert raw base units into a UI amount"""
        return raw_amount / self.pow()

    def from_float(self, amount: float) -> int:
        """Convert a UI amount into raw base units, truncating"""
        return int(amount * self.pow())
