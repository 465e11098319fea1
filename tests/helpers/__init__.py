"""Test helpers package"""

from .steps import CALLS, reset_calls


__all__ = [
    "CALLS",
    "reset_calls",
]
