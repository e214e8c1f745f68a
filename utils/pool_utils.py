from dataclasses import dataclass, field
from typing import List
from construct import Struct as cStruct, Bytes, Int8ul, Int32ul, Int64ul, ConstructError
from solders.pubkey import Pubkey # type: ignore
from model.errors import DecodeError, NotFoundError
from utils.common_utils import parse_address
import logging

# Configure logging
logger = logging.getLogger(__name__)

# SPL token account, 165 bytes
TokenAccountLayout = cStruct(
    "mint" / Bytes(32),
    "owner" / Bytes(32),
    "amount" / Int64ul,
    "delegate_option" / Int32ul,
    "delegate" / Bytes(32),
    "state" / Int8ul,
    "is_native_option" / Int32ul,
    "is_native" / Int64ul,
    "delegated_amount" / Int64ul,
    "close_authority_option" / Int32ul,
    "close_authority" / Bytes(32),
)


@dataclass(frozen=True)
class TokenAccount:
    mint: Pubkey
    owner: Pubkey
    amount: int
    state: int


def decode_token_account(raw_data: bytes) -> TokenAccount:
    """
    Decode an SPL token account payload.

    Raises:
        DecodeError: payload is shorter than a token account or otherwise malformed
    """
    try:
        parsed = TokenAccountLayout.parse(bytes(raw_data))
    except (ConstructError, TypeError) as e:
        raise DecodeError(f"Malformed token account ({len(raw_data)} bytes): {e}") from e
    return TokenAccount(
        mint=Pubkey.from_bytes(parsed.mint),
        owner=Pubkey.from_bytes(parsed.owner),
        amount=parsed.amount,
        state=parsed.state,
    )


@dataclass(frozen=True)
class Pool:
    id: Pubkey
    base_mint: Pubkey
    quote_mint: Pubkey
    lp_mint: Pubkey
    base_decimals: int
    quote_decimals: int
    lp_decimals: int
    version: int
    program_id: Pubkey
    authority: Pubkey
    open_orders: Pubkey
    target_orders: Pubkey
    base_vault: Pubkey
    quote_vault: Pubkey
    withdraw_queue: Pubkey
    lp_vault: Pubkey
    market_version: int
    market_program_id: Pubkey
    market_id: Pubkey
    market_authority: Pubkey
    market_base_vault: Pubkey
    market_quote_vault: Pubkey
    market_bids: Pubkey
    market_asks: Pubkey
    market_event_queue: Pubkey
    lookup_table_account: Pubkey


@dataclass
class PoolList:
    name: str = ""
    official: List[Pool] = field(default_factory=list)
    unofficial: List[Pool] = field(default_factory=list)

    def all_pools(self) -> List[Pool]:
        return self.official + self.unofficial

    def find_pool(self, pool_id: str) -> Pool:
        """
        Raises:
            NotFoundError: no official or unofficial pool has this id
        """
        target = parse_address(pool_id)
        for pool in self.all_pools():
            if pool.id == target:
                return pool
        raise NotFoundError(f"pool was not found by id [{pool_id}]")


# JSON key -> (field name, is address)
POOL_FIELDS = [
    ("id", "id", True),
    ("baseMint", "base_mint", True),
    ("quoteMint", "quote_mint", True),
    ("lpMint", "lp_mint", True),
    ("baseDecimals", "base_decimals", False),
    ("quoteDecimals", "quote_decimals", False),
    ("lpDecimals", "lp_decimals", False),
    ("version", "version", False),
    ("programId", "program_id", True),
    ("authority", "authority", True),
    ("openOrders", "open_orders", True),
    ("targetOrders", "target_orders", True),
    ("baseVault", "base_vault", True),
    ("quoteVault", "quote_vault", True),
    ("withdrawQueue", "withdraw_queue", True),
    ("lpVault", "lp_vault", True),
    ("marketVersion", "market_version", False),
    ("marketProgramId", "market_program_id", True),
    ("marketId", "market_id", True),
    ("marketAuthority", "market_authority", True),
    ("marketBaseVault", "market_base_vault", True),
    ("marketQuoteVault", "market_quote_vault", True),
    ("marketBids", "market_bids", True),
    ("marketAsks", "market_asks", True),
    ("marketEventQueue", "market_event_queue", True),
    ("lookupTableAccount", "lookup_table_account", True),
]


def parse_pool(pool_json: dict) -> Pool:
    """Map one directory entry into a Pool, validating every address"""
    values = {}
    for json_key, name, is_address in POOL_FIELDS:
        if json_key not in pool_json:
            raise DecodeError(f"Pool entry missing field {json_key!r}")
        raw = pool_json[json_key]
        if is_address:
            values[name] = parse_address(raw)
        else:
            try:
                values[name] = int(raw)
            except (TypeError, ValueError) as e:
                raise DecodeError(f"Pool field {json_key!r} is not an integer: {raw!r}") from e
    return Pool(**values)


def parse_pool_list(body: dict) -> PoolList:
    if not isinstance(body, dict):
        raise DecodeError("Pool directory response is not a JSON object")
    official = [parse_pool(p) for p in body.get("official") or []]
    unofficial = [parse_pool(p) for p in body.get("unOfficial") or []]
    logger.debug(f"Parsed {len(official)} official and {len(unofficial)} unofficial pools")
    return PoolList(name=body.get("name", ""), official=official, unofficial=unofficial)
