"""
Abstract Interfaces for Raydium Swaps

This package contains abstract base classes that define contracts
for the pool directory, token account and transaction providers.
"""

from .api_provider import APIProvider
from .token_provider import TokenProvider
from .transaction_provider import TransactionProvider

__all__ = [
    'APIProvider',
    'TokenProvider',
    'TransactionProvider',
]
