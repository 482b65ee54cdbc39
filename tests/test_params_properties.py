"""Hypothesis properties of the band / row optimizer."""
from __future__ import annotations

import pytest

hyp = pytest.importorskip("hypothesis")

import hypothesis.strategies as st  # type: ignore  # noqa: E402
from hypothesis import given, settings  # type: ignore  # noqa: E402

from minhashlsh.core.params import optimal_params  # noqa: E402


@settings(max_examples=40, deadline=None)
@given(num_hash=st.integers(1, 96), threshold=st.floats(0.01, 1.0))
def test_params_feasible(num_hash: int, threshold: float) -> None:
    r, b = optimal_params(num_hash, threshold)
    assert r >= 1 and b >= 1
    assert r * b <= num_hash
