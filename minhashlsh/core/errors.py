"""Exception types raised by the MinHash LSH index."""
from __future__ import annotations

from typing import Tuple, Union


class MinhashLSHError(Exception):
    """Base class for all minhashlsh errors."""


class InvalidConfiguration(MinhashLSHError, ValueError):
    """Raised at construction time for unusable parameters."""


class ShapeMismatch(MinhashLSHError, ValueError):
    """Signature length differs from the configured number of hash functions.

    *actual* is the received length, or the full shape when the input is not 1-D.
    """

    def __init__(self, expected: int, actual: Union[int, Tuple[int, ...]]):
        super().__init__(f"Expected signature of length {expected}, got {actual}")
        self.expected = expected
        self.actual = actual


class UnknownKey(MinhashLSHError, KeyError):
    """Raised by ``remove`` on an unknown id when the index is strict."""

    def __str__(self) -> str:  # KeyError quotes its argument otherwise
        return f"Unknown key: {self.args[0]!r}"
