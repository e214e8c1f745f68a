from .raydium_swap import RaydiumSwap

__all__ = ['RaydiumSwap']
