"""
Solana Provider Implementations

This package contains Solana-specific implementations of the abstract interfaces.
These providers handle all Solana blockchain and pool directory interactions.
"""

from .solana_provider import SolanaProvider
from .solana_token_provider import SolanaTokenProvider
from .solana_transaction_provider import BuiltTransaction, SolanaTransactionProvider
from .raydium_api_provider import RaydiumAPIProvider

__all__ = [
    'SolanaProvider',
    'SolanaTokenProvider',
    'SolanaTransactionProvider',
    'BuiltTransaction',
    'RaydiumAPIProvider',
]
