"""Fixed-width band keys.

A band key is the concatenation of each signature value's little-endian
bytes, truncated to the key width. Narrow keys keep 2 bytes per value,
medium keys 4 and wide keys all 8.
"""
from __future__ import annotations

from typing import Callable

import numpy as np

from .errors import InvalidConfiguration

NARROW = 2
MEDIUM = 4
WIDE = 8

KEY_WIDTHS = (NARROW, MEDIUM, WIDE)


def check_width(width: int) -> None:
    if width not in KEY_WIDTHS:
        raise InvalidConfiguration(f"key width must be one of {KEY_WIDTHS}, got {width}")


def hash_key_func(width: int) -> Callable[[np.ndarray], bytes]:
    """Return a function packing a signature slice into ``width * len(slice)`` bytes."""
    check_width(width)

    def hash_key(sig) -> bytes:
        values = np.ascontiguousarray(sig, dtype="<u8")
        return values.view(np.uint8).reshape(-1, 8)[:, :width].tobytes()

    return hash_key


def band_keys(signatures: np.ndarray, start: int, stop: int, width: int) -> np.ndarray:
    """Keys for columns ``[start, stop)`` of every row in *signatures*.

    Returns a 1-D array of dtype ``S{(stop - start) * width}`` (one key per
    row). All keys of a band have the same width, so NumPy's zero padding
    never makes two distinct keys compare equal.
    """
    n = signatures.shape[0]
    key_len = (stop - start) * width
    block = np.ascontiguousarray(signatures[:, start:stop], dtype="<u8")
    raw = block.view(np.uint8).reshape(n, stop - start, 8)[:, :, :width]
    packed = np.ascontiguousarray(raw).reshape(n, key_len)
    return packed.view(f"S{key_len}").reshape(n)
