"""Shared fixtures for the minhashlsh test-suite."""
from __future__ import annotations

from typing import Callable

import numpy as np
import pytest


def _random_signature(size: int, seed: int) -> np.ndarray:
    rng = np.random.default_rng(seed)
    return rng.integers(0, 2**63, size=size, dtype=np.uint64)


@pytest.fixture
def random_signature() -> Callable[[int, int], np.ndarray]:
    """Factory for reproducible signatures of pseudo-random 63-bit values."""
    return _random_signature


@pytest.fixture
def words() -> list[str]:
    return ["hello", "world", "minhash", "one", "two", "three", "four",
            "five", "six", "seven", "eight", "nine", "ten"]
