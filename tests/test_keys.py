"""Band key encoding tests."""
from __future__ import annotations

import numpy as np
import pytest

from minhashlsh.core.errors import InvalidConfiguration
from minhashlsh.core.keys import KEY_WIDTHS, band_keys, hash_key_func


def test_hash_key_func_narrow(random_signature) -> None:
    sig = random_signature(2, 1)
    key = hash_key_func(2)(sig)
    assert len(key) == 2 * 2


def test_hash_key_func_wide(random_signature) -> None:
    sig = random_signature(2, 1)
    key = hash_key_func(8)(sig)
    assert len(key) == 8 * 2


def test_hash_key_is_little_endian_truncation() -> None:
    sig = np.array([0x0102030405060708, 0x1112131415161718], dtype=np.uint64)
    assert hash_key_func(2)(sig) == b"\x08\x07\x18\x17"
    assert hash_key_func(4)(sig) == b"\x08\x07\x06\x05\x18\x17\x16\x15"
    assert hash_key_func(8)(sig) == (0x0102030405060708).to_bytes(8, "little") + (
        0x1112131415161718
    ).to_bytes(8, "little")


def test_unsupported_width_rejected() -> None:
    with pytest.raises(InvalidConfiguration):
        hash_key_func(3)


@pytest.mark.parametrize("width", KEY_WIDTHS)
def test_band_keys_match_single_key_func(width: int, random_signature) -> None:
    sigs = np.stack([random_signature(12, seed) for seed in range(5)])
    keys = band_keys(sigs, 4, 8, width)
    assert keys.dtype == np.dtype(f"S{4 * width}")
    assert keys.shape == (5,)
    f = hash_key_func(width)
    for row, key in zip(sigs, keys):
        # NumPy strips trailing NUL padding on item access; compare padded.
        assert key.ljust(4 * width, b"\x00") == f(row[4:8])


def test_band_keys_with_trailing_zero_bytes_stay_distinct() -> None:
    sigs = np.array([[0x0100], [0x0000]], dtype=np.uint64)
    keys = band_keys(sigs, 0, 1, 2)
    assert keys[0] != keys[1]
    assert np.argsort(keys).tolist() == [1, 0]


def test_band_keys_empty() -> None:
    keys = band_keys(np.empty((0, 8), dtype=np.uint64), 0, 4, 2)
    assert keys.shape == (0,)
