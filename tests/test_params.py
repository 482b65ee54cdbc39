"""Band / row optimizer tests."""
from __future__ import annotations

import math

import numpy as np
import pytest

from minhashlsh.core import params
from minhashlsh.core.errors import InvalidConfiguration
from minhashlsh.core.params import (
    collision_probability,
    false_negative_mass,
    false_positive_mass,
    optimal_params,
)


@pytest.mark.parametrize("num_hash", [8, 32])
@pytest.mark.parametrize("threshold", [0.3, 0.5, 0.8])
def test_params_minimise_error(num_hash: int, threshold: float) -> None:
    r, b = optimal_params(num_hash, threshold)

    def error(rr: int, bb: int) -> float:
        return false_positive_mass(threshold, rr, bb) + false_negative_mass(threshold, rr, bb)

    best = error(r, b)
    for bb in range(1, num_hash + 1):
        for rr in range(1, num_hash // bb + 1):
            assert best <= error(rr, bb) + 1e-9


@pytest.mark.parametrize(
    "num_hash,threshold", [(128, 0.5), (256, 0.6), (256, 0.8), (128, 0.9)]
)
def test_scurve_midpoint_near_threshold(num_hash: int, threshold: float) -> None:
    r, b = optimal_params(num_hash, threshold)
    # (1/b)^(1/r) approximates where the S-curve is steepest.
    assert abs((1 / b) ** (1 / r) - threshold) < 0.2


def test_threshold_one_prefers_single_band() -> None:
    assert optimal_params(16, 1.0) == (16, 1)


def test_near_tied_rows_prefer_larger_r(monkeypatch) -> None:
    # Error grows with r by far less than the tie tolerance, so every r ties.
    def flat_curve(s, r, b):
        noise = 1e-14 * np.asarray(r, dtype=float) / 16
        return np.broadcast_to(noise, np.broadcast(s, r).shape)

    monkeypatch.setattr(params, "collision_probability", flat_curve)
    assert optimal_params.__wrapped__(16, 0.75) == (16, 1)


def test_weights_shift_the_tradeoff() -> None:
    r_fp, b_fp = optimal_params(128, 0.5, 0.9, 0.1)
    r_fn, b_fn = optimal_params(128, 0.5, 0.1, 0.9)
    # Penalising false positives pushes the S-curve right.
    assert (1 / b_fp) ** (1 / r_fp) >= (1 / b_fn) ** (1 / r_fn)


def test_equal_weights_match_plain_sum() -> None:
    assert optimal_params(64, 0.7) == optimal_params(64, 0.7, 1.0, 1.0)


@pytest.mark.parametrize("threshold", [0.0, -0.1, 1.5, float("nan")])
def test_invalid_threshold(threshold: float) -> None:
    with pytest.raises(InvalidConfiguration):
        optimal_params(128, threshold)


def test_invalid_num_hash_and_weights() -> None:
    with pytest.raises(InvalidConfiguration):
        optimal_params(0, 0.5)
    with pytest.raises(InvalidConfiguration):
        optimal_params(64, 0.5, 0.0, 1.0)


def test_collision_probability_bounds() -> None:
    assert collision_probability(0.0, 4, 8) == 0.0
    assert collision_probability(1.0, 4, 8) == 1.0
    assert math.isclose(collision_probability(0.5, 1, 1), 0.5)


def test_error_masses_cover_unit_interval() -> None:
    # With r = b = 1, f(s) = s: FP mass = t^2 / 2 and FN mass = (1 - t)^2 / 2.
    assert math.isclose(false_positive_mass(0.4, 1, 1), 0.08, abs_tol=1e-6)
    assert math.isclose(false_negative_mass(0.4, 1, 1), 0.18, abs_tol=1e-6)
